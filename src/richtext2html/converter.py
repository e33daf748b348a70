"""High-level rich-text conversion orchestrator.

Ties together the parsers, markup presets and renderer into a single public
API for converting rich-text JSON (or Markdown) to HTML or plain text.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from richtext2html.fragments import Fragment, parse_fragment
from richtext2html.links import path_link_resolver
from richtext2html.markdown import MarkdownImporter
from richtext2html.markup import MarkupManager
from richtext2html.parser import Block, DocumentError, DocumentParser
from richtext2html.renderer import HtmlRenderer, StructuredText
from richtext2html.serializer import HtmlSerializer

MARKDOWN_SUFFIXES = (".md", ".markdown")
OUTPUT_FORMATS = ("html", "text")


class Converter:
    """Convert rich-text content to HTML or text.

    Usage::

        converter = Converter(preset="xhtml")
        converter.convert_file("body.json", "body.html")

        # or from decoded JSON
        html = converter.convert_json([{"type": "paragraph", "text": "Hi", "spans": []}])
    """

    PRESETS = MarkupManager.PRESETS

    def __init__(self, preset: str = "default", link_resolver: Any = None) -> None:
        self.markup = MarkupManager(preset)
        self.parser = DocumentParser()
        self.importer = MarkdownImporter()
        self.renderer = HtmlRenderer(self.markup)
        self.link_resolver = link_resolver or path_link_resolver

    def load_json(self, data: Any) -> tuple[Block, ...]:
        """Parse decoded JSON, or a JSON string, into blocks."""
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        return self.parser.parse(data)

    def load_fragment(self, data: Any) -> Fragment:
        """Parse decoded JSON, or a JSON string, into a fragment.

        A block list or a ``StructuredText`` field gives rich text; any other
        typed field (``SliceZone``, ``Group``, ``Image``...) goes through
        :func:`~richtext2html.fragments.parse_fragment`.
        """
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        ftype = data.get("type") if isinstance(data, Mapping) else None
        if ftype is None or ftype == "StructuredText":
            return StructuredText(self.parser.parse(data))
        fragment = parse_fragment(data)
        if fragment is None:
            raise DocumentError(f"Unsupported fragment type: {ftype!r}")
        return fragment

    def convert_json(
        self, data: Any, html_serializer: Optional[HtmlSerializer] = None
    ) -> str:
        """Convert rich-text JSON to HTML."""
        return self.load_fragment(data).as_html(
            self.link_resolver, html_serializer, self.markup
        )

    def convert_markdown(
        self, markdown_text: str, html_serializer: Optional[HtmlSerializer] = None
    ) -> str:
        """Convert Markdown to HTML through the rich-text model."""
        return self.renderer.render(
            self.importer.parse(markdown_text), self.link_resolver, html_serializer
        )

    def convert_text(self, data: Any) -> str:
        """Return the plain text of rich-text JSON."""
        return self.load_fragment(data).as_text(self.link_resolver)

    def convert_file(
        self,
        input_path: str | Path,
        output_path: str | Path,
        *,
        encoding: str = "utf-8",
        output_format: str = "html",
    ) -> None:
        """Read a ``.json`` or ``.md`` file and write the converted output.

        Args:
            input_path: Rich-text JSON file, or Markdown by suffix.
            output_path: Destination file.
            encoding: Text encoding of the source file.
            output_format: ``"html"`` or ``"text"``.
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format {output_format!r}. Choose from: {', '.join(OUTPUT_FORMATS)}"
            )
        input_path = Path(input_path)
        output_path = Path(output_path)

        source = input_path.read_text(encoding=encoding)
        if input_path.suffix.lower() in MARKDOWN_SUFFIXES:
            fragment: Fragment = StructuredText(self.importer.parse(source))
        else:
            fragment = self.load_fragment(source)

        if output_format == "text":
            result = fragment.as_text(self.link_resolver)
        else:
            result = fragment.as_html(self.link_resolver, markup=self.markup)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result, encoding="utf-8")
