"""Element serializer.

Converts one block, span or block group plus its already-rendered inner HTML
into an HTML string.  A caller-supplied *html serializer* gets the first
word for every element; when it returns nothing the default markup of the
active :class:`~richtext2html.markup.MarkupManager` preset is used.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union

from richtext2html.escaping import escape_attribute
from richtext2html.markup import MarkupManager
from richtext2html.parser import Block, BlockGroup, BlockType, Span, SpanType, kind_name

logger = logging.getLogger(__name__)

Element = Union[Block, BlockGroup, Span]
HtmlSerializer = Callable[[Any, str], Optional[str]]

_DEFAULT_MARKUP = MarkupManager()


def serialize(
    element: Element,
    content: str,
    html_serializer: Optional[HtmlSerializer] = None,
    markup: Optional[MarkupManager] = None,
) -> str:
    """Return the HTML for *element* wrapping *content*."""
    if html_serializer is not None:
        custom = html_serializer(element, content)
        if custom:
            return custom

    markup = markup or _DEFAULT_MARKUP
    kind = kind_name(element.type)

    tag = markup.tag_for(kind)
    if tag:
        label = getattr(element, "label", None)
        class_code = f' class="{escape_attribute(label)}"' if label else ""
        return f"<{tag}{class_code}>{content}</{tag}>"

    if kind == BlockType.IMAGE.value and isinstance(element, Block):
        return _serialize_image(element, markup)
    if kind == BlockType.EMBED.value and isinstance(element, Block):
        return _serialize_embed(element)
    if kind == SpanType.HYPERLINK.value:
        return f'<a href="{escape_attribute(getattr(element, "url", None) or "")}">{content}</a>'
    if kind == SpanType.LABEL.value:
        data = getattr(element, "data", None)
        if not isinstance(data, Mapping):
            data = {}
        return f'<span class="{escape_attribute(data.get("label") or "")}">{content}</span>'

    logger.warning("Element type %r not implemented, rendering content only", kind)
    return markup.spec.unknown_template.format(kind=kind) + content


# ---------------------------------------------------------------------------
# Bespoke element markup
# ---------------------------------------------------------------------------

def _serialize_image(block: Block, markup: MarkupManager) -> str:
    spec = markup.spec
    classes = spec.image_block_class
    if block.label:
        classes += f" {block.label}"
    img = (
        f'<img src="{escape_attribute(block.url)}"'
        f' alt="{escape_attribute(block.alt or "")}"{spec.void_close}'
    )
    if block.link_url:
        img = f'<a href="{escape_attribute(block.link_url)}">{img}</a>'
    return f'<p class="{escape_attribute(classes)}">{img}</p>'


def _serialize_embed(block: Block) -> str:
    embed = block.embed
    if embed is None:
        return "<div></div>"
    class_code = f' class="{escape_attribute(block.label)}"' if block.label else ""
    return (
        f'<div data-oembed="{escape_attribute(embed.url)}"'
        f' data-oembed-type="{escape_attribute(embed.embed_type)}"'
        f' data-oembed-provider="{escape_attribute(embed.provider_name)}"'
        f"{class_code}>{embed.html}</div>"
    )
