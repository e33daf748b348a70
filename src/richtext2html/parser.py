"""Rich-text document parser.

Turns the block list delivered by the content API (already decoded from
JSON) into immutable :class:`Block` / :class:`Span` values that the renderer
consumes.  Block kinds this package does not know about are kept as-is so
that rendering can degrade gracefully instead of failing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

from richtext2html.escaping import escape_attribute
from richtext2html.links import LinkTarget, parse_link

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Node definitions
# ---------------------------------------------------------------------------

class BlockType(str, Enum):
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    HEADING4 = "heading4"
    HEADING5 = "heading5"
    HEADING6 = "heading6"
    PARAGRAPH = "paragraph"
    PREFORMATTED = "preformatted"
    LIST_ITEM = "list-item"
    ORDERED_LIST_ITEM = "o-list-item"
    IMAGE = "image"
    EMBED = "embed"
    # Synthetic, produced by the grouper only
    GROUP_LIST_ITEM = "group-list-item"
    GROUP_ORDERED_LIST_ITEM = "group-o-list-item"


class SpanType(str, Enum):
    STRONG = "strong"
    EM = "em"
    HYPERLINK = "hyperlink"
    LABEL = "label"


# A kind is a known enum member or the raw string sent by the server.
Kind = Union[BlockType, SpanType, str]


def kind_name(kind: Kind) -> str:
    """Return the wire name of *kind* (``"heading1"``, ``"strong"``, ...)."""
    if isinstance(kind, Enum):
        return kind.value
    return str(kind)


HEADING_TYPES = frozenset(f"heading{level}" for level in range(1, 7))

LIST_ITEM_TYPES = frozenset(
    (BlockType.LIST_ITEM.value, BlockType.ORDERED_LIST_ITEM.value)
)


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    type: Kind
    data: Any = None
    # Resolved hyperlink destination
    url: Optional[str] = None

    @property
    def length(self) -> int:
        return self.end - self.start


def utf16_length(text: str) -> int:
    """Length of *text* in UTF-16 code units, the unit of span offsets."""
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True)
class EmbedData:
    url: str = ""
    embed_type: str = ""
    provider_name: str = ""
    html: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Block:
    type: Kind
    text: Optional[str] = None
    spans: tuple[Span, ...] = ()
    label: Optional[str] = None
    # Image
    url: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    alt: str = ""
    link_to: Optional[LinkTarget] = None
    link_url: Optional[str] = None
    # Embed
    embed: Optional[EmbedData] = None


@dataclass(frozen=True)
class BlockGroup:
    """A run of consecutive list items of the same kind."""

    type: Kind
    blocks: tuple[Block, ...] = ()
    label: Optional[str] = None


@dataclass(frozen=True)
class ImageView:
    """One rendition of an image: url, dimensions and alt text."""

    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    alt: str = ""

    def ratio(self) -> Optional[float]:
        if not self.width or not self.height:
            return None
        return self.width / self.height

    def as_html(self) -> str:
        return (
            f'<img src="{escape_attribute(self.url)}"'
            f' width="{self.width if self.width is not None else ""}"'
            f' height="{self.height if self.height is not None else ""}"'
            f' alt="{escape_attribute(self.alt or "")}">'
        )

    def as_text(self) -> str:
        return ""


def coerce_kind(raw: Any, kinds: type[Enum]) -> Kind:
    """Return the enum member for *raw*, or *raw* itself when unknown."""
    try:
        return kinds(raw)
    except ValueError:
        return str(raw)


class DocumentError(ValueError):
    """Raised when the upstream document does not have the expected shape."""


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class DocumentParser:
    """Parse decoded rich-text JSON into a tuple of :class:`Block`."""

    # -- public API ---------------------------------------------------------

    def parse(self, data: Any) -> tuple[Block, ...]:
        """Return the blocks of *data*.

        *data* is either the raw block list or a ``StructuredText`` field
        (``{"type": "StructuredText", "value": [...]}``).
        """
        if isinstance(data, Mapping):
            if data.get("type") != "StructuredText":
                raise DocumentError(
                    f"Expected a StructuredText field, got {data.get('type')!r}"
                )
            data = data.get("value")
        if not isinstance(data, list):
            raise DocumentError(
                f"Expected a list of blocks, got {type(data).__name__}"
            )
        blocks: list[Block] = []
        for idx, raw in enumerate(data):
            if not isinstance(raw, Mapping):
                raise DocumentError(f"Block #{idx} is not an object: {raw!r}")
            blocks.append(self.parse_block(raw))
        return tuple(blocks)

    def parse_block(self, raw: Mapping[str, Any]) -> Block:
        kind = coerce_kind(raw.get("type", ""), BlockType)
        if isinstance(kind, BlockType):
            handler = getattr(self, f"_handle_{kind.name.lower()}", None)
            if handler is not None:
                return handler(raw, kind)
        else:
            logger.debug("Unknown block type %r kept for fallback rendering", kind)
        return self._handle_text_block(raw, kind)

    def parse_span(self, raw: Mapping[str, Any]) -> Span:
        kind = coerce_kind(raw.get("type", ""), SpanType)
        data = raw.get("data")
        if kind == SpanType.HYPERLINK:
            data = parse_link(data) if isinstance(data, Mapping) else None
        return Span(
            start=_as_int(raw.get("start")),
            end=_as_int(raw.get("end")),
            type=kind,
            data=data,
        )

    # -- block handlers -----------------------------------------------------

    def _handle_text_block(self, raw: Mapping[str, Any], kind: Kind) -> Block:
        spans = raw.get("spans") or []
        return Block(
            type=kind,
            text=raw.get("text") or "",
            spans=tuple(self.parse_span(s) for s in spans if isinstance(s, Mapping)),
            label=raw.get("label") or None,
        )

    def _handle_image(self, raw: Mapping[str, Any], kind: Kind) -> Block:
        dims = raw.get("dimensions") or {}
        link_field = raw.get("linkTo")
        return Block(
            type=kind,
            label=raw.get("label") or None,
            url=raw.get("url") or "",
            width=dims.get("width"),
            height=dims.get("height"),
            alt=raw.get("alt") or "",
            link_to=parse_link(link_field) if isinstance(link_field, Mapping) else None,
        )

    def _handle_embed(self, raw: Mapping[str, Any], kind: Kind) -> Block:
        oembed = raw.get("oembed") or {}
        return Block(
            type=kind,
            label=raw.get("label") or None,
            embed=EmbedData(
                url=oembed.get("embed_url") or "",
                embed_type=oembed.get("type") or "",
                provider_name=oembed.get("provider_name") or "",
                html=oembed.get("html") or "",
                raw=dict(oembed),
            ),
        )


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
