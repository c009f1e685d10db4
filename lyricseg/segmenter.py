"""Rule-driven segmentation of timed spans into display units.

For every token of a span the segmenter builds the context window, asks the
break and whitespace tables for their first matching rule, and folds the
decisions into a list of units. Two details shape the fold:

- A ``BEFORE`` break belongs to the boundary in front of the current token,
  so it is written onto the most recently emitted unit rather than the
  current one. Units are therefore kept in a mutable draft list until the
  span is finished, and only frozen into :class:`SegmentationUnit` records
  once their timings are known.
- Pure whitespace tokens take part in rule evaluation (they are often the
  ``before``/``after`` neighbour that makes a rule fire) but never become
  units themselves.

Timing is interpolated after the fold, once every unit's text is fixed.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
from tqdm import tqdm

from .alignment import align_tokens, prepare_text
from .config import Config
from .context import bracket_ranges, build_context, closes_bracket, is_in_brackets
from .matcher import find_matching_rule
from .rules import PATTERNS
from .timing import interpolate, validate_span
from .types import FeatureToken, InsertPolicy, Line, SegmentationUnit, TimedSpan, TokenTrace

logger = logging.getLogger(__name__)

TraceCallback = Callable[[TokenTrace], None]

__all__ = ["Segmenter", "segment_span", "segment", "TraceCallback"]


@dataclass
class _DraftUnit:
    text: str
    has_new_line: bool = False
    has_whitespace: bool = False


class Segmenter:
    """
    Segments one span.

    The only state carried between tokens is the column of the last
    registered break, which feeds ``past_since_last_break``. It is local to
    the instance, so separate spans can be segmented independently.
    """

    def __init__(
        self,
        span: TimedSpan,
        tokens: Sequence[FeatureToken],
        cfg: Config,
        *,
        span_index: int = 0,
        trace: Optional[TraceCallback] = None,
    ):
        self.span = span
        self.tokens = list(tokens)
        self.cfg = cfg
        self.span_index = span_index
        self.trace = trace
        self.text = prepare_text(span.text)
        self.ranges = bracket_ranges(self.text)
        self.last_break_column: Optional[int] = None

    def _closing_bracket_break(self, token: FeatureToken, after: Optional[FeatureToken]) -> bool:
        if not self.cfg.break_after_closing_bracket or after is None:
            return False
        if not PATTERNS["not_alphabet_or_number"].search(after.surface_form):
            return False
        return closes_bracket(token, self.ranges)

    def _emit_trace(self, record: TokenTrace) -> None:
        if self.trace is not None:
            self.trace(record)
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "span=%d token=%d %r break=%s whitespace=%s in_brackets=%s closing=%s "
                "past=%s/%s remaining=%s/%s new_line=%s space=%s",
                record.span_index + 1,
                record.token_index,
                record.token.surface_form,
                record.break_rule,
                record.whitespace_rule,
                record.in_brackets,
                record.closing_bracket_break,
                record.context.past_since_last_break,
                record.context.past_from_line_start,
                record.context.remaining_to_next_space,
                record.context.remaining_to_line_end,
                record.has_new_line,
                record.has_whitespace,
            )

    def _fold(self) -> List[_DraftUnit]:
        drafts: List[_DraftUnit] = []

        def flag_previous() -> None:
            # A BEFORE flip with nothing emitted yet has nowhere to land.
            if drafts:
                drafts[-1].has_new_line = True

        for idx, token in enumerate(self.tokens):
            ctx = build_context(self.tokens, idx, self.text, self.last_break_column)
            break_rule = find_matching_rule(self.cfg.break_rules, ctx)
            whitespace_rule = find_matching_rule(self.cfg.whitespace_rules, ctx)
            in_brackets = is_in_brackets(token, self.ranges, self.cfg.max_bracket_content_length)
            closing_break = self._closing_bracket_break(token, ctx.after)

            has_break = break_rule is not None or closing_break
            is_before = break_rule is not None and break_rule.insert is InsertPolicy.BEFORE

            if has_break:
                self.last_break_column = token.word_position if is_before else token.end_position

            if is_before and not in_brackets:
                flag_previous()

            if token.is_whitespace:
                if has_break:
                    flag_previous()
                has_new_line = has_whitespace = False
            else:
                has_new_line = has_break and not is_before and not in_brackets
                has_whitespace = whitespace_rule is not None and not (
                    in_brackets and self.cfg.suppress_whitespace_in_brackets
                )
                drafts.append(_DraftUnit(token.surface_form, has_new_line, has_whitespace))

            self._emit_trace(
                TokenTrace(
                    span_index=self.span_index,
                    token_index=idx,
                    token=token,
                    context=ctx,
                    break_rule=break_rule.name if break_rule is not None else None,
                    whitespace_rule=whitespace_rule.name if whitespace_rule is not None else None,
                    in_brackets=in_brackets,
                    closing_bracket_break=closing_break,
                    has_new_line=has_new_line,
                    has_whitespace=has_whitespace,
                )
            )

        return drafts

    def run(self) -> List[SegmentationUnit]:
        """
        Segments the span.

        Returns:
            The units of the span in token order. A span without tokens
            yields an empty list.

        Raises:
            InvalidSpanError: If the span's timing or text is malformed.
                              Raised before any token is processed.
        """
        validate_span(self.span)
        self.last_break_column = None

        drafts = self._fold()
        timings = interpolate(self.span, (d.text for d in drafts), self.cfg.time_precision)
        units = [
            SegmentationUnit(
                text=d.text,
                begin=begin,
                end=end,
                has_new_line=d.has_new_line,
                has_whitespace=d.has_whitespace,
            )
            for d, (begin, end) in zip(drafts, timings)
        ]
        logger.debug(
            "Span %d: %d tokens -> %d units, %d breaks.",
            self.span_index + 1, len(self.tokens), len(units), sum(u.has_new_line for u in units),
        )
        return units


def segment_span(
    span: TimedSpan,
    tokens: Sequence[FeatureToken],
    cfg: Optional[Config] = None,
    *,
    position: int = 1,
    trace: Optional[TraceCallback] = None,
) -> Line:
    """Segments a single span whose tokens are already aligned."""
    cfg = cfg or Config()
    segmenter = Segmenter(span, tokens, cfg, span_index=position - 1, trace=trace)
    return Line(position=position, span=span, units=tuple(segmenter.run()))


def segment(
    spans: Sequence[TimedSpan],
    token_lists: Sequence[Sequence[FeatureToken]],
    cfg: Optional[Config] = None,
    trace: Optional[TraceCallback] = None,
) -> List[Line]:
    """
    Aligns tokens onto spans and segments every span.

    Args:
        spans: The timed spans of one paragraph, in order.
        token_lists: One tokenizer result per span.
        cfg: Engine settings; defaults to the built-in rule tables.
        trace: Optional callback receiving one :class:`TokenTrace` per token.

    Returns:
        One :class:`Line` per span, with 1-based positions.

    Raises:
        ValueError: If ``token_lists`` and ``spans`` differ in length.
        InvalidSpanError: If any span's timing or text is malformed.
    """
    cfg = cfg or Config()
    if not spans:
        return []

    for span in spans:
        validate_span(span)

    aligned = align_tokens(spans, token_lists)
    lines: List[Line] = []
    for idx, span in enumerate(tqdm(spans, desc="Segmenting spans", disable=not cfg.show_progress)):
        lines.append(segment_span(span, aligned[idx], cfg, position=idx + 1, trace=trace))
    return lines
