"""HTML escaping helpers for text content and attribute values."""

from __future__ import annotations


def html_escape(text: str, line_break: str = "<br>") -> str:
    """Escape ``&``, ``<`` and ``>`` and turn newlines into *line_break*."""
    if not text:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\n", line_break)
    )


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute."""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )
