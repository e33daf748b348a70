"""Command-line interface for richtext2html.

Usage::

    richtext2html body.json                    # writes body.html
    richtext2html body.json -o out.html        # explicit output path
    richtext2html body.json --format text      # plain text, writes body.txt
    richtext2html notes.md --preset xhtml      # Markdown input, XHTML output
    richtext2html --list-presets               # list available presets
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from richtext2html import __version__
from richtext2html.converter import OUTPUT_FORMATS, Converter
from richtext2html.markup import MarkupManager
from richtext2html.parser import DocumentError

_SUFFIX_FOR_FORMAT = {"html": ".html", "text": ".txt"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="richtext2html",
        description="Convert rich-text JSON (or Markdown) to HTML or plain text.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Path to the rich-text JSON (.json) or Markdown (.md) file.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file path. Defaults to <input>.html or <input>.txt.",
    )
    parser.add_argument(
        "-p", "--preset",
        default="default",
        choices=MarkupManager.PRESETS,
        help="Markup preset (default: %(default)s).",
    )
    parser.add_argument(
        "-f", "--format",
        default="html",
        choices=OUTPUT_FORMATS,
        help="Output format (default: %(default)s).",
    )
    parser.add_argument(
        "-e", "--encoding",
        default="utf-8",
        help="Input file encoding (default: %(default)s).",
    )
    parser.add_argument(
        "--list-presets",
        action="store_true",
        help="List available markup presets and exit.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print progress information and debug logs.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        print("Available markup presets:")
        for preset in MarkupManager.PRESETS:
            print(f"  - {preset}")
        return 0

    if not args.input:
        parser.error("the following argument is required: input")

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        return 1

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = input_path.with_suffix(_SUFFIX_FOR_FORMAT[args.format])

    if args.verbose:
        print(f"Input:  {input_path}")
        print(f"Output: {output_path}")
        print(f"Preset: {args.preset}")
        print(f"Format: {args.format}")

    try:
        converter = Converter(preset=args.preset)
        converter.convert_file(
            input_path,
            output_path,
            encoding=args.encoding,
            output_format=args.format,
        )
    except (DocumentError, json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Done. {output_path.stat().st_size} bytes written.")
    else:
        print(f"Converted: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
