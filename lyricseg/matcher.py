"""First-match rule evaluation against a :class:`MatchContext`.

Evaluation is a pure function of the rule table and the context. Missing
tokens and missing feature slots make the affected matchers fail; they never
raise.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .rules import PATTERNS, FieldMatcher, LengthBound, LengthConstraints, Predicate, Rule
from .types import FeatureToken, InsertPolicy, MatchContext

__all__ = [
    "field_matches",
    "group_matches",
    "current_length_passes",
    "after_length_passes",
    "rule_matches",
    "find_matching_rule",
]


def field_matches(matcher: FieldMatcher, value: Optional[str]) -> bool:
    if not isinstance(value, str) or not value:
        return False
    return matcher.matches(value)


def group_matches(group: Optional[Predicate], token: Optional[FeatureToken]) -> bool:
    """
    Conjunction across fields, disjunction within a field's matcher list.

    An absent group is vacuously satisfied; a present group against an absent
    token is not.
    """
    if group is None:
        return True
    if token is None:
        return False
    for field_name, matchers in group.items():
        value = token.get(field_name)
        if not any(field_matches(m, value) for m in matchers):
            return False
    return True


def _past_measure(bound: LengthBound, ctx: MatchContext) -> int:
    if bound.for_first_token or ctx.past_since_last_break is None:
        return ctx.past_from_line_start
    return ctx.past_since_last_break


def _remaining_measure(bound: LengthBound, ctx: MatchContext) -> int:
    if bound.for_last_token or ctx.remaining_to_next_space is None:
        return ctx.remaining_to_line_end
    return ctx.remaining_to_next_space


def current_length_passes(length: Optional[LengthConstraints], ctx: MatchContext) -> bool:
    """Checks the ``current``, ``past`` and ``remaining`` bounds of a rule."""
    if length is None:
        return True
    if length.current is not None:
        if not length.current.gate_accepts(ctx.next_is_last_of_span):
            return False
        if not length.current.accepts(len(ctx.current.surface_form)):
            return False
    if length.past is not None:
        if not length.past.gate_accepts(ctx.next_is_last_of_span):
            return False
        if not length.past.accepts(_past_measure(length.past, ctx)):
            return False
    if length.remaining is not None:
        if not length.remaining.gate_accepts(ctx.next_is_last_of_span):
            return False
        if not length.remaining.accepts(_remaining_measure(length.remaining, ctx)):
            return False
    return True


def after_length_passes(length: Optional[LengthConstraints], ctx: MatchContext) -> bool:
    """Checks the ``after`` bound; the length part only applies when an after token exists."""
    if length is None or length.after is None:
        return True
    bound = length.after
    if not bound.gate_accepts(ctx.next_is_last_of_span):
        return False
    if ctx.after is not None and not bound.accepts(len(ctx.after.surface_form)):
        return False
    return True


def rule_matches(rule: Rule, ctx: MatchContext) -> bool:
    return (
        group_matches(rule.before, ctx.before)
        and group_matches(rule.current, ctx.current)
        and current_length_passes(rule.length, ctx)
        and group_matches(rule.after, ctx.after)
        and after_length_passes(rule.length, ctx)
    )


def find_matching_rule(rules: Sequence[Rule], ctx: MatchContext) -> Optional[Rule]:
    """
    Returns the first rule of ``rules`` that fully matches ``ctx``.

    Two suppressors apply on top of plain first-match evaluation:

    - when the following token is a closing bracket or quote, nothing matches;
    - on the span's last token only a ``BEFORE`` rule may match. A ``CURRENT``
      winner is discarded rather than falling through to later rules.

    Args:
        rules: The ordered rule table.
        ctx: The evaluation window of one token.

    Returns:
        The matched rule, or ``None``.
    """
    if ctx.after is not None and PATTERNS["close_parentheses"].search(ctx.after.surface_form):
        return None

    matched = next((rule for rule in rules if rule_matches(rule, ctx)), None)
    if matched is None:
        return None
    if ctx.is_last_of_span and matched.insert is not InsertPolicy.BEFORE:
        return None
    return matched
