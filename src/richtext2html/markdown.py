"""Markdown import.

Uses mistune v3 in AST mode and flattens its token tree into rich-text
blocks: every block gets a plain ``text`` and the inline formatting becomes
offset :class:`~richtext2html.parser.Span` annotations over that text.
"""

from __future__ import annotations

import logging
from typing import Any

import mistune

from richtext2html.links import WebLink
from richtext2html.parser import Block, BlockType, Span, SpanType, utf16_length

logger = logging.getLogger(__name__)


class _InlineBuffer:
    """Accumulates flattened text and the spans laid over it.

    ``length`` counts UTF-16 code units so span offsets match block JSON.
    """

    def __init__(self) -> None:
        self.parts: list[str] = []
        self.spans: list[Span] = []
        self.length = 0

    def add(self, text: str) -> None:
        self.parts.append(text)
        self.length += utf16_length(text)

    @property
    def text(self) -> str:
        return "".join(self.parts)


class MarkdownImporter:
    """Parse Markdown text into a tuple of rich-text blocks."""

    def __init__(self) -> None:
        self._md = mistune.create_markdown(
            renderer=None,  # AST mode
            plugins=["url"],
        )

    # -- public API ---------------------------------------------------------

    def parse(self, markdown_text: str) -> tuple[Block, ...]:
        tokens: list[dict[str, Any]] = self._md(markdown_text)  # type: ignore[assignment]
        return tuple(self._convert_blocks(tokens))

    # -- block conversion ---------------------------------------------------

    def _convert_blocks(self, tokens: list[dict[str, Any]]) -> list[Block]:
        blocks: list[Block] = []
        for tok in tokens:
            ttype = tok.get("type", "")
            handler = getattr(self, f"_handle_{ttype}", None)
            if handler is None:
                logger.debug("Skipping unsupported Markdown token %r", ttype)
                continue
            blocks.extend(handler(tok))
        return blocks

    def _handle_heading(self, tok: dict) -> list[Block]:
        level = max(1, min(6, tok.get("attrs", {}).get("level", 1)))
        buf = self._flatten(tok.get("children") or [])
        return [Block(type=BlockType(f"heading{level}"), text=buf.text, spans=tuple(buf.spans))]

    def _handle_paragraph(self, tok: dict) -> list[Block]:
        children = tok.get("children") or []
        image = self._standalone_image(children)
        if image is not None:
            return [image]
        buf = self._flatten(children)
        return [Block(type=BlockType.PARAGRAPH, text=buf.text, spans=tuple(buf.spans))]

    def _handle_block_code(self, tok: dict) -> list[Block]:
        raw = tok.get("raw", "")
        return [Block(type=BlockType.PREFORMATTED, text=raw.rstrip("\n"))]

    def _handle_block_quote(self, tok: dict) -> list[Block]:
        return self._convert_blocks(tok.get("children") or [])

    def _handle_list(self, tok: dict) -> list[Block]:
        ordered = tok.get("attrs", {}).get("ordered", False)
        kind = BlockType.ORDERED_LIST_ITEM if ordered else BlockType.LIST_ITEM
        blocks: list[Block] = []
        for item in tok.get("children") or []:
            blocks.extend(self._list_item_blocks(item, kind))
        return blocks

    def _list_item_blocks(self, item: dict, kind: BlockType) -> list[Block]:
        buf = _InlineBuffer()
        nested: list[Block] = []
        for child in item.get("children") or []:
            ctype = child.get("type")
            if ctype in ("block_text", "paragraph"):
                if buf.length:
                    buf.add("\n")
                self._walk(child.get("children") or [], buf)
            elif ctype == "list":
                nested.extend(self._handle_list(child))
            else:
                nested.extend(self._convert_blocks([child]))
        return [Block(type=kind, text=buf.text, spans=tuple(buf.spans))] + nested

    # -- inline flattening --------------------------------------------------

    def _flatten(self, children: list[dict[str, Any]]) -> _InlineBuffer:
        buf = _InlineBuffer()
        self._walk(children, buf)
        return buf

    def _walk(self, children: list[dict[str, Any]], buf: _InlineBuffer) -> None:
        for tok in children:
            ttype = tok.get("type", "")
            if ttype in ("text", "codespan", "inline_html"):
                buf.add(tok.get("raw", ""))
            elif ttype == "softbreak":
                buf.add(" ")
            elif ttype == "linebreak":
                buf.add("\n")
            elif ttype == "strong":
                self._wrap(tok, buf, SpanType.STRONG)
            elif ttype == "emphasis":
                self._wrap(tok, buf, SpanType.EM)
            elif ttype == "link":
                url = tok.get("attrs", {}).get("url", "")
                self._wrap(tok, buf, SpanType.HYPERLINK, WebLink(url_value=url))
            elif ttype == "image":
                buf.add(self._plain_text(tok.get("children") or []))
            else:
                self._walk(tok.get("children") or [], buf)

    def _wrap(self, tok: dict, buf: _InlineBuffer, kind: SpanType, data: Any = None) -> None:
        # Reserve the slot so that an outer span precedes its inner spans
        slot = len(buf.spans)
        start = buf.length
        self._walk(tok.get("children") or [], buf)
        buf.spans.insert(slot, Span(start=start, end=buf.length, type=kind, data=data))

    # -- helpers ------------------------------------------------------------

    def _standalone_image(self, children: list[dict[str, Any]]):
        meaningful = [
            c for c in children
            if not (c.get("type") == "text" and not c.get("raw", "").strip())
        ]
        if len(meaningful) != 1 or meaningful[0].get("type") != "image":
            return None
        tok = meaningful[0]
        return Block(
            type=BlockType.IMAGE,
            url=tok.get("attrs", {}).get("url", ""),
            alt=self._plain_text(tok.get("children") or []),
        )

    def _plain_text(self, children: list[dict[str, Any]]) -> str:
        buf = _InlineBuffer()
        for tok in children:
            if "raw" in tok:
                buf.add(tok["raw"])
            else:
                buf.add(self._plain_text(tok.get("children") or []))
        return buf.text
