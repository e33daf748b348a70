"""Document fragments that compose with rich text.

A document field is either rich text, an image with its renditions, an
oEmbed, a link, a separator, a *group* (a repeatable list of named field
maps) or a *slice zone*: an ordered list of labelled slices, each wrapping
one of the other fragments.  Scalar fields (colors, numbers, dates,
geopoints) are not handled here.

Every fragment exposes ``as_html(link_resolver, html_serializer, markup)``
and ``as_text(link_resolver)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from richtext2html.escaping import escape_attribute
from richtext2html.links import LinkTarget, normalize_link_resolver, parse_link
from richtext2html.markup import MarkupManager
from richtext2html.parser import Block, DocumentParser, ImageView
from richtext2html.renderer import StructuredText
from richtext2html.serializer import HtmlSerializer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Leaf fragments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImageField:
    """An image with its main view and named alternative views."""

    main: ImageView
    views: Mapping[str, ImageView] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return self.main.url

    def get_view(self, name: str) -> Optional[ImageView]:
        if name == "main":
            return self.main
        return self.views.get(name)

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return self.main.as_html()

    def as_text(self, link_resolver: Any = None) -> str:
        return ""


@dataclass(frozen=True)
class EmbedField:
    """An oEmbed field; ``raw`` keeps the provider payload as received."""

    url: str = ""
    html: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict)

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return self.html

    def as_text(self, link_resolver: Any = None) -> str:
        return ""


@dataclass(frozen=True)
class Separator:
    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return "<hr/>"

    def as_text(self, link_resolver: Any = None) -> str:
        return "----"


@dataclass(frozen=True)
class LinkFragment:
    """A link field used as a fragment of its own."""

    target: LinkTarget

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return self.target.as_html(normalize_link_resolver(link_resolver))

    def as_text(self, link_resolver: Any = None) -> str:
        return self.target.url(normalize_link_resolver(link_resolver)) or ""


Fragment = Union[
    StructuredText, ImageField, EmbedField, Separator, LinkFragment, "Group", "SliceZone"
]


# ---------------------------------------------------------------------------
# Lookups shared by the composite fragments
# ---------------------------------------------------------------------------

def _first_image(fragment: Any) -> Optional[ImageView]:
    if isinstance(fragment, ImageField):
        return fragment.main
    if isinstance(fragment, (StructuredText, Group, GroupItem, SliceZone)):
        return fragment.first_image()
    return None


def _first_title(fragment: Any) -> Optional[Block]:
    if isinstance(fragment, StructuredText):
        return fragment.title()
    if isinstance(fragment, (Group, GroupItem, SliceZone)):
        return fragment.first_title()
    return None


def _first_paragraph(fragment: Any) -> Optional[Block]:
    if isinstance(fragment, (StructuredText, Group, GroupItem, SliceZone)):
        return fragment.first_paragraph()
    return None


def _first(fragments, lookup):
    for fragment in fragments:
        found = lookup(fragment)
        if found is not None:
            return found
    return None


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GroupItem:
    """One entry of a group: field name to fragment, in document order."""

    fields: Mapping[str, Fragment] = field(default_factory=dict)

    def get(self, name: str) -> Optional[Fragment]:
        return self.fields.get(name)

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return "".join(
            f'<section data-field="{escape_attribute(name)}">'
            f"{fragment.as_html(link_resolver, html_serializer, markup)}</section>"
            for name, fragment in self.fields.items()
        )

    def as_text(self, link_resolver: Any = None) -> str:
        texts = (fragment.as_text(link_resolver) for fragment in self.fields.values())
        return " ".join(text for text in texts if text)

    def first_image(self) -> Optional[ImageView]:
        return _first(self.fields.values(), _first_image)

    def first_title(self) -> Optional[Block]:
        return _first(self.fields.values(), _first_title)

    def first_paragraph(self) -> Optional[Block]:
        return _first(self.fields.values(), _first_paragraph)


@dataclass(frozen=True)
class Group:
    """A repeatable group of field maps."""

    items: tuple[GroupItem, ...] = ()

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return "".join(
            item.as_html(link_resolver, html_serializer, markup) for item in self.items
        )

    def as_text(self, link_resolver: Any = None) -> str:
        return "".join(item.as_text(link_resolver) + "\n" for item in self.items)

    def first_image(self) -> Optional[ImageView]:
        return _first(self.items, _first_image)

    def first_title(self) -> Optional[Block]:
        return _first(self.items, _first_title)

    def first_paragraph(self) -> Optional[Block]:
        return _first(self.items, _first_paragraph)


# ---------------------------------------------------------------------------
# Slices
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Slice:
    slice_type: str
    label: Optional[str]
    value: Fragment

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        classes = ["slice"]
        if self.label:
            classes.append(self.label)
        return (
            f'<div data-slicetype="{escape_attribute(self.slice_type)}"'
            f' class="{escape_attribute(" ".join(classes))}">'
            f"{self.value.as_html(link_resolver, html_serializer, markup)}</div>"
        )

    def as_text(self, link_resolver: Any = None) -> str:
        return self.value.as_text(link_resolver)

    def first_image(self) -> Optional[ImageView]:
        return _first_image(self.value)

    def first_title(self) -> Optional[Block]:
        return _first_title(self.value)

    def first_paragraph(self) -> Optional[Block]:
        return _first_paragraph(self.value)


@dataclass(frozen=True)
class SliceZone:
    slices: tuple[Slice, ...] = ()

    def as_html(
        self,
        link_resolver: Any = None,
        html_serializer: Optional[HtmlSerializer] = None,
        markup: Optional[MarkupManager] = None,
    ) -> str:
        return "".join(
            s.as_html(link_resolver, html_serializer, markup) for s in self.slices
        )

    def as_text(self, link_resolver: Any = None) -> str:
        return "".join(s.as_text(link_resolver) + "\n" for s in self.slices)

    def first_image(self) -> Optional[ImageView]:
        return _first(self.slices, Slice.first_image)

    def first_title(self) -> Optional[Block]:
        return _first(self.slices, Slice.first_title)

    def first_paragraph(self) -> Optional[Block]:
        return _first(self.slices, Slice.first_paragraph)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _image_view(raw: Mapping[str, Any]) -> ImageView:
    dims = raw.get("dimensions") or {}
    return ImageView(
        url=raw.get("url", ""),
        width=dims.get("width"),
        height=dims.get("height"),
        alt=raw.get("alt") or "",
    )


def _parse_image(value: Mapping[str, Any]) -> ImageField:
    views = {
        name: _image_view(view)
        for name, view in (value.get("views") or {}).items()
    }
    return ImageField(main=_image_view(value.get("main") or {}), views=views)


def _parse_embed(value: Mapping[str, Any]) -> EmbedField:
    oembed = value.get("oembed") or {}
    return EmbedField(
        url=oembed.get("embed_url", ""),
        html=oembed.get("html") or "",
        raw=value,
    )


def _parse_group(value: list) -> Group:
    items: list[GroupItem] = []
    for raw in value:
        if not isinstance(raw, Mapping):
            continue
        fields = {}
        for name, field_data in raw.items():
            fragment = parse_fragment(field_data) if isinstance(field_data, Mapping) else None
            if fragment is not None:
                fields[name] = fragment
        items.append(GroupItem(fields))
    return Group(tuple(items))


def _parse_slice_zone(value: list) -> SliceZone:
    slices: list[Slice] = []
    for raw in value:
        if not isinstance(raw, Mapping):
            continue
        slice_type = raw.get("slice_type")
        content = raw.get("value")
        fragment = parse_fragment(content) if isinstance(content, Mapping) else None
        if slice_type and fragment is not None:
            slices.append(Slice(slice_type, raw.get("slice_label") or None, fragment))
    return SliceZone(tuple(slices))


def parse_fragment(field_data: Mapping[str, Any]) -> Optional[Fragment]:
    """Build a fragment from a ``{"type": ..., "value": ...}`` field.

    Unsupported field types are logged and give ``None``.
    """
    ftype = field_data.get("type") or ""
    value = field_data.get("value")
    if ftype == "StructuredText":
        return StructuredText(DocumentParser().parse(value or []))
    if ftype == "Image" and isinstance(value, Mapping):
        return _parse_image(value)
    if ftype == "Embed" and isinstance(value, Mapping):
        return _parse_embed(value)
    if ftype == "Group" and isinstance(value, list):
        return _parse_group(value)
    if ftype == "SliceZone" and isinstance(value, list):
        return _parse_slice_zone(value)
    if ftype == "Separator":
        return Separator()
    if ftype.startswith("Link."):
        target = parse_link(field_data)
        return LinkFragment(target) if target is not None else None
    logger.warning("Fragment type not supported: %r", ftype)
    return None


def parse_fragments(document_fields: Mapping[str, Any]) -> dict[str, Any]:
    """Map a document's field dict to fragments.

    A field holding a list of fields becomes a list of fragments.  Fields
    of unsupported types are left out.
    """
    result: dict[str, Any] = {}
    for name, field_data in document_fields.items():
        if isinstance(field_data, list):
            result[name] = [
                fragment
                for fragment in (
                    parse_fragment(item) for item in field_data if isinstance(item, Mapping)
                )
                if fragment is not None
            ]
        elif isinstance(field_data, Mapping):
            fragment = parse_fragment(field_data)
            if fragment is not None:
                result[name] = fragment
    return result
