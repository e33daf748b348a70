"""Block grouping: consecutive list items become one list container."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Union

from richtext2html.links import LinkResolver
from richtext2html.parser import (
    LIST_ITEM_TYPES,
    Block,
    BlockGroup,
    BlockType,
    coerce_kind,
    kind_name,
)

logger = logging.getLogger(__name__)

TopLevelNode = Union[Block, BlockGroup]


def group_blocks(
    blocks: Iterable[Block], link_resolver: LinkResolver
) -> list[TopLevelNode]:
    """Return *blocks* with runs of same-kind list items merged.

    ``list-item`` runs become ``group-list-item`` nodes and ``o-list-item``
    runs become ``group-o-list-item`` nodes.  Order is preserved.  Linked
    images come back as copies carrying the resolved ``link_url``.
    """
    nodes: list[TopLevelNode] = []
    run: list[Block] = []
    run_kind = ""

    def flush() -> None:
        nonlocal run, run_kind
        if run:
            group_kind = coerce_kind(f"group-{run_kind}", BlockType)
            nodes.append(BlockGroup(type=group_kind, blocks=tuple(run)))
        run = []
        run_kind = ""

    for block in blocks:
        kind = kind_name(block.type)
        if kind == BlockType.IMAGE.value and block.link_to is not None:
            block = _resolve_image_link(block, link_resolver)

        if kind not in LIST_ITEM_TYPES:
            flush()
            nodes.append(block)
        elif kind != run_kind:
            flush()
            run = [block]
            run_kind = kind
        else:
            run.append(block)
    flush()
    return nodes


def _resolve_image_link(block: Block, link_resolver: LinkResolver) -> Block:
    url = block.link_to.url(link_resolver)
    if not url:
        logger.warning("Image link %r could not be resolved", block.link_to)
        return block
    return replace(block, link_url=url)
