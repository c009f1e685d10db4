"""Builds the evaluation window for each token of a span.

Everything here is a pure function of the span's token list, the span text
and the column of the last registered break. Columns follow the tokenizer's
1-based ``word_position`` convention unless noted otherwise.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .types import FeatureToken, MatchContext

__all__ = [
    "BracketRange",
    "bracket_ranges",
    "is_in_brackets",
    "closes_bracket",
    "next_space_distance",
    "build_context",
]

_QUOTE_RE = re.compile(r"[\"'][^\"']*[\"']|`[^`]*`")
_BRACKET_RE = re.compile(r"[\[(（「『【〝❝“][^\])）」』】〟❞”]*[\])）」』】〟❞”]")


@dataclass(frozen=True)
class BracketRange:
    """
    The content of one bracket or quote pair.

    ``begin`` and ``end`` are 0-based offsets of the content (the delimiters
    excluded), so that ``text[begin:end] == content``.
    """
    begin: int
    end: int
    content: str


def bracket_ranges(text: str) -> List[BracketRange]:
    """
    Precomputes the bracket and quote ranges of ``text``.

    Pairs do not nest: each regular expression consumes up to the first
    closing delimiter. Bracket ranges come first, then quote ranges, each
    in text order.
    """
    ranges: List[BracketRange] = []
    for regex in (_BRACKET_RE, _QUOTE_RE):
        for match in regex.finditer(text):
            begin = match.start() + 1
            end = begin + len(match.group(0)) - 2
            ranges.append(BracketRange(begin, end, text[begin:end]))
    return ranges


def is_in_brackets(
    token: FeatureToken,
    ranges: Sequence[BracketRange],
    max_content_length: Optional[int] = None,
) -> bool:
    """
    True when the token starts strictly inside one of ``ranges``.

    With ``max_content_length`` set, ranges whose content is longer than the
    threshold are ignored.
    """
    for r in ranges:
        if max_content_length is not None and len(r.content) > max_content_length:
            continue
        if r.begin < token.word_position < r.end:
            return True
    return False


def closes_bracket(token: FeatureToken, ranges: Sequence[BracketRange]) -> bool:
    """True when the token starts at the closing delimiter of a range."""
    return any(r.end + 1 == token.word_position for r in ranges)


def next_space_distance(text: str, token: FeatureToken) -> Optional[int]:
    """
    Characters between the end of ``token`` and the next ``" "`` in ``text``.

    Returns ``None`` when no space follows the token.
    """
    token_end = token.word_position - 1 + len(token.surface_form)
    idx = text.find(" ", token_end)
    if idx < 0:
        return None
    return idx - token_end


def build_context(
    tokens: Sequence[FeatureToken],
    position: int,
    text: str,
    last_break_column: Optional[int] = None,
) -> MatchContext:
    """
    Assembles the :class:`MatchContext` for ``tokens[position]``.

    Args:
        tokens: The aligned token list of one span.
        position: 0-based index of the token under evaluation.
        text: The span text the tokens were produced from.
        last_break_column: Column of the last break registered in this span,
            or ``None`` when no break has been registered yet.

    Returns:
        The evaluation window for the token.

    Raises:
        IndexError: If ``position`` is outside ``tokens``.
    """
    if not 0 <= position < len(tokens):
        raise IndexError(f"Token position {position} out of range for {len(tokens)} tokens.")

    current = tokens[position]
    before = tokens[position - 1] if position > 0 else None
    after = tokens[position + 1] if position + 1 < len(tokens) else None
    first, last = tokens[0], tokens[-1]

    past_since_last_break = None
    if last_break_column is not None:
        past_since_last_break = current.word_position - last_break_column

    return MatchContext(
        before=before,
        current=current,
        after=after,
        past_since_last_break=past_since_last_break,
        past_from_line_start=current.word_position - first.word_position,
        remaining_to_next_space=next_space_distance(text, current),
        remaining_to_line_end=last.end_position - current.end_position,
        is_last_of_span=position == len(tokens) - 1,
        next_is_last_of_span=position + 2 >= len(tokens),
    )
