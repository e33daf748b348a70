"""Span resolution: flat text plus offset annotations to nested HTML.

Spans may overlap arbitrarily and arrive in any order.  The text is scanned
once from left to right over every offset where a span opens or closes;
an explicit stack holds the elements that are currently open, each one
accumulating its own inner HTML until it is closed and serialized into its
parent (or into the output when the stack is empty).
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Optional

from richtext2html.escaping import html_escape
from richtext2html.links import normalize_link_resolver
from richtext2html.markup import MarkupManager
from richtext2html.parser import Span, SpanType, kind_name
from richtext2html.serializer import HtmlSerializer, serialize

logger = logging.getLogger(__name__)

_DEFAULT_MARKUP = MarkupManager()


@dataclass
class _Pending:
    index: int
    span: Span
    start: int
    end: int


@dataclass
class _OpenElement:
    span: Span
    parts: list[str] = field(default_factory=list)


def insert_spans(
    text: Optional[str],
    spans: Iterable[Span],
    link_resolver: Any = None,
    html_serializer: Optional[HtmlSerializer] = None,
    markup: Optional[MarkupManager] = None,
) -> str:
    """Return *text* escaped, with the markup of *spans* inserted.

    Same-offset spans open longest first so that a containing span is the
    outer element; spans of equal length keep their input order.  When a
    span ends, the most recently opened element still on the stack is
    closed, so crossing spans are cut short instead of producing crossing
    tags.  Hyperlink spans whose target cannot be resolved are skipped.
    """
    markup = markup or _DEFAULT_MARKUP
    line_break = markup.spec.line_break
    text = text or ""
    spans = list(spans or ())
    if not spans:
        return html_escape(text, line_break)

    resolver = normalize_link_resolver(link_resolver)
    length = len(text)
    units, to_index = _utf16_offsets(text)

    opens_at: dict[int, list[_Pending]] = defaultdict(list)
    closes_at: dict[int, list[_Pending]] = defaultdict(list)
    for idx, span in enumerate(spans):
        start = min(max(span.start, 0), units)
        end = min(max(span.end, start), units)
        start, end = to_index(start), to_index(end)
        pending = _Pending(index=idx, span=span, start=start, end=end)
        opens_at[start].append(pending)
        if end > start:
            closes_at[end].append(pending)

    output: list[str] = []
    stack: list[_OpenElement] = []
    opened: set[int] = set()

    def emit(html: str) -> None:
        if stack:
            stack[-1].parts.append(html)
        else:
            output.append(html)

    def close_top() -> None:
        element = stack.pop()
        emit(serialize(element.span, "".join(element.parts), html_serializer, markup))

    boundaries = sorted(set(opens_at) | set(closes_at) | {0, length})
    for i, pos in enumerate(boundaries):
        for pending in closes_at.get(pos, ()):
            if pending.index in opened and stack:
                close_top()

        # sorted() is stable, equal lengths keep input order
        for pending in sorted(
            opens_at.get(pos, ()), key=lambda p: p.span.length, reverse=True
        ):
            span = pending.span
            if kind_name(span.type) == SpanType.HYPERLINK.value:
                span = _resolve_hyperlink(span, resolver)
                if span is None:
                    continue
            opened.add(pending.index)
            if pending.start == pending.end:
                emit(serialize(span, "", html_serializer, markup))
            else:
                stack.append(_OpenElement(span=span))

        if i + 1 < len(boundaries):
            emit(html_escape(text[pos:boundaries[i + 1]], line_break))

    while stack:
        close_top()

    return "".join(output)


def _utf16_offsets(text: str) -> tuple[int, Callable[[int], int]]:
    """Return the UTF-16 length of *text* and a UTF-16 offset to index map.

    An offset inside a surrogate pair maps to the index after the character.
    """
    bounds = [0]
    for ch in text:
        bounds.append(bounds[-1] + (2 if ord(ch) > 0xFFFF else 1))
    if bounds[-1] == len(text):
        return len(text), lambda offset: offset
    return bounds[-1], lambda offset: bisect_left(bounds, offset)


def _resolve_hyperlink(span: Span, link_resolver) -> Optional[Span]:
    target = span.data
    url = None
    if target is not None and hasattr(target, "url"):
        url = target.url(link_resolver)
    elif span.url:
        url = span.url
    if not url:
        logger.error(
            "Impossible to resolve hyperlink span [%d, %d) with data %r",
            span.start, span.end, span.data,
        )
        return None
    return replace(span, url=url)
