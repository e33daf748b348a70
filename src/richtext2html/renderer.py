"""Rich-text document renderer.

Turns the blocks produced by :mod:`richtext2html.parser` into HTML or plain
text.  Rendering is a pure function of the blocks, the link resolver and the
optional custom serializer: list items are grouped first, each leaf block's
text goes through the span resolver, and every node is serialized bottom-up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from richtext2html.grouper import TopLevelNode, group_blocks
from richtext2html.links import LinkResolver, normalize_link_resolver
from richtext2html.markup import MarkupManager
from richtext2html.parser import (
    HEADING_TYPES,
    Block,
    BlockGroup,
    BlockType,
    ImageView,
    kind_name,
)
from richtext2html.serializer import HtmlSerializer, serialize
from richtext2html.spans import insert_spans


# ---------------------------------------------------------------------------
# HtmlRenderer
# ---------------------------------------------------------------------------

class HtmlRenderer:
    """Render a sequence of :class:`~richtext2html.parser.Block` to HTML."""

    def __init__(self, markup: Optional[MarkupManager] = None) -> None:
        self.markup: MarkupManager = markup or MarkupManager()

    # ======================================================================
    # Public API
    # ======================================================================

    def render(
        self,
        blocks: Iterable[Block],
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
    ) -> str:
        """Return the HTML of *blocks*.

        *link_resolver* is a ``(link, is_broken) -> url`` function or a
        legacy context object exposing ``link_resolver``.
        """
        resolver = normalize_link_resolver(link_resolver)
        html: list[str] = []
        for node in group_blocks(blocks, resolver):
            content = self._node_content(node, resolver, html_serializer)
            html.append(serialize(node, content, html_serializer, self.markup))
        return "".join(html)

    def render_text(self, blocks: Iterable[Block]) -> str:
        """Return the raw text of every block that has some, space-joined."""
        return " ".join(block.text for block in blocks if block.text)

    # ======================================================================
    # Node content
    # ======================================================================

    def _node_content(
        self,
        node: TopLevelNode,
        resolver: LinkResolver,
        html_serializer: Optional[HtmlSerializer],
    ) -> str:
        if isinstance(node, BlockGroup):
            return "".join(
                serialize(
                    item,
                    self._node_content(item, resolver, html_serializer),
                    html_serializer,
                    self.markup,
                )
                for item in node.blocks
            )
        return insert_spans(
            node.text, node.spans, resolver, html_serializer, self.markup
        )


# ---------------------------------------------------------------------------
# StructuredText
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StructuredText:
    """An immutable rich-text fragment with lookup helpers.

    Usage::

        st = StructuredText(DocumentParser().parse(payload))
        st.title()
        st.as_html(link_resolver)
    """

    blocks: tuple[Block, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", tuple(self.blocks))

    # -- queries ------------------------------------------------------------

    def title(self) -> Optional[Block]:
        """Return the first heading block of any level."""
        for block in self.blocks:
            if kind_name(block.type) in HEADING_TYPES:
                return block
        return None

    def first_paragraph(self) -> Optional[Block]:
        for block in self.blocks:
            if kind_name(block.type) == BlockType.PARAGRAPH.value:
                return block
        return None

    def paragraphs(self) -> list[Block]:
        return [
            block for block in self.blocks
            if kind_name(block.type) == BlockType.PARAGRAPH.value
        ]

    def paragraph(self, n: int) -> Optional[Block]:
        """Return the *n*-th paragraph (0-based), or ``None``."""
        paragraphs = self.paragraphs()
        if 0 <= n < len(paragraphs):
            return paragraphs[n]
        return None

    def first_image(self) -> Optional[ImageView]:
        for block in self.blocks:
            if kind_name(block.type) == BlockType.IMAGE.value:
                return ImageView(
                    url=block.url,
                    width=block.width,
                    height=block.height,
                    alt=block.alt,
                )
        return None

    # -- output -------------------------------------------------------------

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return HtmlRenderer(markup).render(self.blocks, link_resolver, html_serializer)

    def as_text(self, link_resolver: Any = None) -> str:
        return HtmlRenderer().render_text(self.blocks)
