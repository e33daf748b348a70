"""HTML markup presets.

A preset maps element kinds (heading1, paragraph, strong, ...) to the tag
names and small syntax choices the serializer uses when no custom serializer
takes over.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Optional


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class MarkupSpec:
    """Concrete markup choices for one preset."""

    tags: dict[str, str] = field(default_factory=dict)
    line_break: str = "<br>"
    # Terminator of void elements such as <img>
    void_close: str = ">"
    image_block_class: str = "block-img"
    unknown_template: str = (
        "<!-- Warning: {kind} not implemented. Upgrade the Developer Kit. -->"
    )

    def derive(self, **overrides) -> MarkupSpec:
        """Return a copy with selected fields overridden."""
        clone = deepcopy(self)
        for k, v in overrides.items():
            if hasattr(clone, k):
                setattr(clone, k, v)
        return clone


# ---------------------------------------------------------------------------
# Preset definitions
# ---------------------------------------------------------------------------

def _build_default_markup() -> MarkupSpec:
    """Build the **default** preset (HTML5)."""
    tags = {f"heading{level}": f"h{level}" for level in range(1, 7)}
    tags.update(
        {
            "paragraph": "p",
            "preformatted": "pre",
            "list-item": "li",
            "o-list-item": "li",
            "group-list-item": "ul",
            "group-o-list-item": "ol",
            "strong": "strong",
            "em": "em",
        }
    )
    return MarkupSpec(tags=tags)


def _build_xhtml_markup() -> MarkupSpec:
    """Build the **xhtml** preset -- self-closing void elements."""
    return _build_default_markup().derive(line_break="<br />", void_close=" />")


_PRESET_BUILDERS = {
    "default": _build_default_markup,
    "xhtml": _build_xhtml_markup,
}


# ---------------------------------------------------------------------------
# MarkupManager
# ---------------------------------------------------------------------------

class MarkupManager:
    """Manages markup presets.

    Usage::

        mm = MarkupManager("xhtml")
        mm.tag_for("heading2")   # "h2"
        mm.spec.line_break       # "<br />"
    """

    PRESETS = list(_PRESET_BUILDERS.keys())

    def __init__(self, preset: str = "default") -> None:
        if preset not in _PRESET_BUILDERS:
            raise ValueError(
                f"Unknown preset {preset!r}. Choose from: {', '.join(_PRESET_BUILDERS)}"
            )
        self.preset = preset
        self.spec: MarkupSpec = _PRESET_BUILDERS[preset]()

    def tag_for(self, kind: str) -> Optional[str]:
        """Return the wrapping tag for *kind*, or ``None`` if it has none."""
        return self.spec.tags.get(kind)

    def list_tags(self) -> list[str]:
        """Return all element kinds with a default tag in this preset."""
        return sorted(self.spec.tags.keys())
