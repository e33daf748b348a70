"""richtext2html - render annotated rich-text documents to HTML."""

from __future__ import annotations

__version__ = "0.1.0"

from richtext2html.converter import Converter
from richtext2html.fragments import (
    EmbedField,
    Group,
    GroupItem,
    ImageField,
    LinkFragment,
    Separator,
    Slice,
    SliceZone,
    parse_fragment,
    parse_fragments,
)
from richtext2html.parser import (
    Block,
    BlockGroup,
    BlockType,
    DocumentError,
    DocumentParser,
    ImageView,
    Span,
    SpanType,
)
from richtext2html.renderer import HtmlRenderer, StructuredText
from richtext2html.serializer import serialize
from richtext2html.spans import insert_spans

__all__ = [
    "Block",
    "BlockGroup",
    "BlockType",
    "Converter",
    "DocumentError",
    "DocumentParser",
    "EmbedField",
    "Group",
    "GroupItem",
    "HtmlRenderer",
    "ImageField",
    "ImageView",
    "LinkFragment",
    "Separator",
    "Slice",
    "SliceZone",
    "Span",
    "SpanType",
    "StructuredText",
    "__version__",
    "insert_spans",
    "parse_fragment",
    "parse_fragments",
    "serialize",
]
