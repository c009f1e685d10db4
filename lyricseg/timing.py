"""Proportional distribution of a span's duration over its units."""
from __future__ import annotations

import re
from typing import Iterable, List, Tuple

from .exceptions import InvalidSpanError
from .types import TimedSpan

__all__ = ["count_non_whitespace", "validate_span", "per_character_duration", "interpolate"]

_WHITESPACE_RE = re.compile(r"\s+")


def count_non_whitespace(text: str) -> int:
    return len(_WHITESPACE_RE.sub("", text))


def validate_span(span: TimedSpan) -> None:
    """
    Checks the timing and text preconditions of ``span``.

    Raises:
        InvalidSpanError: If the text is empty or has no non-whitespace
                          characters, or if ``end`` precedes ``begin``.
    """
    if not span.text:
        raise InvalidSpanError(f"Span {span.span_id!r} has empty text.")
    if span.end < span.begin:
        raise InvalidSpanError(
            f"Span {span.text!r} ends at {span.end} before it begins at {span.begin}."
        )
    if count_non_whitespace(span.text) == 0:
        raise InvalidSpanError(f"Span {span.text!r} has no non-whitespace characters.")


def per_character_duration(span: TimedSpan, precision: int = 3) -> float:
    """Seconds per non-whitespace character, rounded to ``precision`` decimals."""
    validate_span(span)
    return round((span.end - span.begin) / count_non_whitespace(span.text), precision)


def interpolate(span: TimedSpan, texts: Iterable[str], precision: int = 3) -> List[Tuple[float, float]]:
    """
    Assigns ``(begin, end)`` to each unit text of ``span``.

    Units are laid end to end starting at ``span.begin``. Each unit lasts the
    per-character duration times its length; the last unit's end is pinned
    to ``span.end`` to absorb rounding drift. A per-character duration that
    was rounded up can overshoot the span, so ends are clamped to
    ``span.end`` and the trailing units collapse to zero length.
    """
    per_char = per_character_duration(span, precision)
    texts = list(texts)
    timings: List[Tuple[float, float]] = []
    begin = span.begin
    for text in texts:
        end = min(round(begin + per_char * len(text), precision), span.end)
        timings.append((begin, end))
        begin = end
    if timings:
        timings[-1] = (timings[-1][0], span.end)
    return timings
