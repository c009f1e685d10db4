from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

__all__ = [
    "FieldName",
    "InsertPolicy",
    "TimedSpan",
    "FeatureToken",
    "MatchContext",
    "SegmentationUnit",
    "Line",
    "TokenTrace",
]


class FieldName(str, Enum):
    """The closed set of IPADIC feature slots a rule predicate can inspect."""

    SURFACE_FORM = "surface_form"
    POS = "pos"
    POS_DETAIL_1 = "pos_detail_1"
    POS_DETAIL_2 = "pos_detail_2"
    POS_DETAIL_3 = "pos_detail_3"
    CONJUGATED_TYPE = "conjugated_type"
    CONJUGATED_FORM = "conjugated_form"
    BASIC_FORM = "basic_form"
    READING = "reading"
    PRONUNCIATION = "pronunciation"
    WORD_TYPE = "word_type"


class InsertPolicy(str, Enum):
    """Where a matched rule attaches its flag."""

    CURRENT = "current"
    BEFORE = "before"


@dataclass(frozen=True)
class TimedSpan:
    """
    A single timed chunk of source text, e.g. one sung lyric line.

    Attributes:
        text: The raw text of the span.
        begin: Start time in seconds.
        end: End time in seconds.
        span_id: Opaque identifier supplied by the host, if any.
    """
    text: str
    begin: float
    end: float
    span_id: Optional[str] = None


@dataclass(frozen=True)
class FeatureToken:
    """
    One morphological unit produced by the external tokenizer.

    ``word_position`` is the 1-based column of the token's first character
    within the text that was handed to the tokenizer, which is the convention
    used by the IPADIC analyzers.

    Attributes:
        surface_form: The token text exactly as it appears in the input.
        word_position: 1-based character offset of ``surface_form``.
        fields: Feature slots keyed by :class:`FieldName`. Missing slots are
            treated as "no match" by every predicate.
    """
    surface_form: str
    word_position: int
    fields: Mapping[FieldName, Optional[str]] = field(default_factory=dict)

    def get(self, name: FieldName) -> Optional[str]:
        """Return the value stored for ``name``, reading the surface form directly."""
        if name is FieldName.SURFACE_FORM:
            return self.surface_form
        return self.fields.get(name)

    @property
    def end_position(self) -> int:
        """Column just past the token's last character (same base as ``word_position``)."""
        return self.word_position + len(self.surface_form)

    @property
    def is_whitespace(self) -> bool:
        return bool(self.surface_form) and self.surface_form.isspace()


@dataclass(frozen=True)
class MatchContext:
    """
    The evaluation window around one token.

    Built fresh for every token by :func:`lyricseg.context.build_context`.
    Token references are positional views into the span's token list.

    Attributes:
        before: The preceding token, or ``None`` at the start of the span.
        current: The token under evaluation.
        after: The following token, or ``None`` at the end of the span.
        past_since_last_break: Characters between the last registered break
            and the current token, or ``None`` when no break was registered yet.
        past_from_line_start: Characters between the span's first token and
            the current token.
        remaining_to_next_space: Characters between the end of the current
            token and the next space in the span text, or ``None`` when there
            is no such space.
        remaining_to_line_end: Characters between the end of the current token
            and the end of the span's final token.
        is_last_of_span: True for the span's final token.
        next_is_last_of_span: True when ``after`` is the span's final token
            (or when there is no ``after`` token at all).
    """
    before: Optional[FeatureToken]
    current: FeatureToken
    after: Optional[FeatureToken]
    past_since_last_break: Optional[int]
    past_from_line_start: int
    remaining_to_next_space: Optional[int]
    remaining_to_line_end: int
    is_last_of_span: bool
    next_is_last_of_span: bool


@dataclass(frozen=True)
class SegmentationUnit:
    """
    One emitted sub-word segment with its own timing and placement flags.

    Attributes:
        text: The surface text of the unit.
        begin: Interpolated start time in seconds.
        end: Interpolated end time in seconds.
        has_new_line: Insert a line break after this unit.
        has_whitespace: Insert a visible space after this unit.
    """
    text: str
    begin: float
    end: float
    has_new_line: bool = False
    has_whitespace: bool = False


@dataclass(frozen=True)
class Line:
    """The ordered units produced for one originating span."""
    position: int
    span: TimedSpan
    units: tuple[SegmentationUnit, ...] = ()

    @property
    def text(self) -> str:
        return self.span.text


@dataclass(frozen=True)
class TokenTrace:
    """Per-token diagnostic record delivered to tracing callbacks."""
    span_index: int
    token_index: int
    token: FeatureToken
    context: MatchContext
    break_rule: Optional[str]
    whitespace_rule: Optional[str]
    in_brackets: bool
    closing_bracket_break: bool
    has_new_line: bool
    has_whitespace: bool
