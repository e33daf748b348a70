"""Tests for list-item grouping."""

from __future__ import annotations

from richtext2html.grouper import group_blocks
from richtext2html.links import DocumentLink, WebLink, normalize_link_resolver
from richtext2html.parser import Block, BlockGroup, BlockType


def li(text: str) -> Block:
    return Block(type=BlockType.LIST_ITEM, text=text)


def oli(text: str) -> Block:
    return Block(type=BlockType.ORDERED_LIST_ITEM, text=text)


def para(text: str) -> Block:
    return Block(type=BlockType.PARAGRAPH, text=text)


NO_LINKS = normalize_link_resolver(None)


class TestGrouping:
    def test_runs_are_merged_in_order(self) -> None:
        a, b, c, d = li("a"), li("b"), para("c"), li("d")
        nodes = group_blocks([a, b, c, d], NO_LINKS)
        assert len(nodes) == 3
        assert nodes[0] == BlockGroup(type=BlockType.GROUP_LIST_ITEM, blocks=(a, b))
        assert nodes[1] is c
        assert nodes[2] == BlockGroup(type=BlockType.GROUP_LIST_ITEM, blocks=(d,))
        leaf_count = sum(len(n.blocks) if isinstance(n, BlockGroup) else 1 for n in nodes)
        assert leaf_count == 4

    def test_kind_change_closes_group(self) -> None:
        nodes = group_blocks([li("a"), oli("b"), oli("c"), li("d")], NO_LINKS)
        assert [n.type for n in nodes] == [
            BlockType.GROUP_LIST_ITEM,
            BlockType.GROUP_ORDERED_LIST_ITEM,
            BlockType.GROUP_LIST_ITEM,
        ]
        assert [b.text for b in nodes[1].blocks] == ["b", "c"]

    def test_non_list_blocks_pass_through(self) -> None:
        blocks = [para("x"), Block(type=BlockType.HEADING2, text="y"), para("z")]
        assert group_blocks(blocks, NO_LINKS) == blocks

    def test_raw_string_kinds_group(self) -> None:
        nodes = group_blocks([Block(type="o-list-item", text="a")], NO_LINKS)
        assert nodes[0].type == BlockType.GROUP_ORDERED_LIST_ITEM

    def test_empty(self) -> None:
        assert group_blocks([], NO_LINKS) == []


class TestImageLinks:
    def test_image_link_resolved_once(self) -> None:
        calls = []

        def resolver(link, is_broken):
            calls.append(link.id)
            return f"/doc/{link.id}"

        image = Block(type=BlockType.IMAGE, url="x.png", link_to=DocumentLink(id="9"))
        nodes = group_blocks([image, para("after")], resolver)
        assert nodes[0].link_url == "/doc/9"
        assert calls == ["9"]
        # the source block is left untouched
        assert image.link_url is None

    def test_web_link_needs_no_resolver(self) -> None:
        image = Block(type=BlockType.IMAGE, url="x.png", link_to=WebLink("https://example.com"))
        nodes = group_blocks([image], NO_LINKS)
        assert nodes[0].link_url == "https://example.com"

    def test_unresolvable_image_link_keeps_image(self, caplog) -> None:
        image = Block(type=BlockType.IMAGE, url="x.png", link_to=DocumentLink(id="9"))
        nodes = group_blocks([image], NO_LINKS)
        assert nodes[0] is image
        assert "could not be resolved" in caplog.text
