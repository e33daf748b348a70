"""Link targets and link-resolver plumbing.

A link target is where a hyperlink span or a linked image points to: another
document of the repository, a web URL, an uploaded file or an image.  Only
document links need the caller's *link resolver* to become a URL; the other
kinds carry their URL directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

from richtext2html.escaping import escape_attribute, html_escape

logger = logging.getLogger(__name__)

LinkResolver = Callable[["DocumentLink", bool], Optional[str]]


# ---------------------------------------------------------------------------
# Link targets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DocumentLink:
    """A link to another document of the same repository."""

    id: str
    uid: Optional[str] = None
    type: str = ""
    tags: tuple[str, ...] = ()
    slug: Optional[str] = None
    lang: Optional[str] = None
    is_broken: bool = False
    data: Mapping[str, Any] = field(default_factory=dict)

    def url(self, link_resolver: Optional[LinkResolver] = None) -> Optional[str]:
        if link_resolver is None:
            return None
        return link_resolver(self, self.is_broken)

    def as_html(self, link_resolver: Optional[LinkResolver] = None) -> str:
        href = self.url(link_resolver) or ""
        return f'<a href="{escape_attribute(href)}">{html_escape(href)}</a>'


@dataclass(frozen=True)
class WebLink:
    url_value: str
    target: Optional[str] = None

    def url(self, link_resolver: Optional[LinkResolver] = None) -> Optional[str]:
        return self.url_value or None

    def as_html(self, link_resolver: Optional[LinkResolver] = None) -> str:
        return (
            f'<a href="{escape_attribute(self.url_value)}">'
            f"{html_escape(self.url_value)}</a>"
        )


@dataclass(frozen=True)
class FileLink:
    url_value: str
    name: str = ""
    kind: str = ""
    size: Optional[int] = None

    def url(self, link_resolver: Optional[LinkResolver] = None) -> Optional[str]:
        return self.url_value or None

    def as_html(self, link_resolver: Optional[LinkResolver] = None) -> str:
        return (
            f'<a href="{escape_attribute(self.url_value)}">'
            f"{html_escape(self.name or self.url_value)}</a>"
        )


@dataclass(frozen=True)
class ImageLink:
    url_value: str
    alt: str = ""
    name: str = ""

    def url(self, link_resolver: Optional[LinkResolver] = None) -> Optional[str]:
        return self.url_value or None

    def as_html(self, link_resolver: Optional[LinkResolver] = None) -> str:
        src = escape_attribute(self.url_value)
        return f'<a href="{src}"><img src="{src}" alt="{escape_attribute(self.alt)}"></a>'


LinkTarget = Union[DocumentLink, WebLink, FileLink, ImageLink]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _parse_document_link(value: Mapping[str, Any]) -> DocumentLink:
    doc = value.get("document") or {}
    return DocumentLink(
        id=str(doc.get("id", "")),
        uid=doc.get("uid"),
        type=doc.get("type", ""),
        tags=tuple(doc.get("tags") or ()),
        slug=doc.get("slug"),
        lang=doc.get("lang"),
        is_broken=bool(value.get("isBroken", False)),
        data=dict(doc.get("data") or {}),
    )


def _parse_web_link(value: Mapping[str, Any]) -> WebLink:
    return WebLink(url_value=value.get("url", ""), target=value.get("target"))


def _parse_file_link(value: Mapping[str, Any]) -> FileLink:
    f = value.get("file") or {}
    size = f.get("size")
    return FileLink(
        url_value=f.get("url", ""),
        name=f.get("name", ""),
        kind=f.get("kind", ""),
        size=int(size) if size not in (None, "") else None,
    )


def _parse_image_link(value: Mapping[str, Any]) -> ImageLink:
    img = value.get("image") or {}
    return ImageLink(
        url_value=img.get("url", ""),
        alt=img.get("alt") or "",
        name=img.get("name") or "",
    )


_LINK_PARSERS = {
    "Link.document": _parse_document_link,
    "Link.web": _parse_web_link,
    "Link.file": _parse_file_link,
    "Link.image": _parse_image_link,
}


def parse_link(field_data: Mapping[str, Any]) -> Optional[LinkTarget]:
    """Build a link target from a ``{"type": "Link.*", "value": {...}}`` field.

    Returns ``None`` (and logs) for anything that is not a supported link.
    """
    ftype = field_data.get("type")
    parser = _LINK_PARSERS.get(ftype)
    value = field_data.get("value")
    if parser is None or not isinstance(value, Mapping):
        logger.warning("Link type not supported: %r", ftype)
        return None
    return parser(value)


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------

def _resolve_nothing(link: DocumentLink, is_broken: bool) -> Optional[str]:
    return None


def normalize_link_resolver(resolver: Any) -> LinkResolver:
    """Return a plain ``(link, is_broken) -> url`` function.

    Accepts a function, a legacy context object exposing a ``link_resolver``
    method, or ``None``.
    """
    if resolver is None:
        return _resolve_nothing
    if callable(resolver):
        return resolver
    legacy = getattr(resolver, "link_resolver", None)
    if callable(legacy):
        def resolve(link: DocumentLink, is_broken: bool) -> Optional[str]:
            return legacy(link, is_broken)
        return resolve
    raise TypeError(
        f"link resolver must be callable or expose link_resolver(), got {type(resolver).__name__}"
    )


def path_link_resolver(link: DocumentLink, is_broken: bool) -> str:
    """Resolve document links to ``/<type>/<uid or id>``."""
    if is_broken:
        return "#broken"
    return f"/{link.type}/{link.uid or link.id}"
