"""Rule-table data types and the YAML/dict rule schema.

A rule is a bundle of up to three predicate groups (``before``, ``current``,
``after``), each mapping a :class:`~lyricseg.types.FieldName` to a list of
field matchers, plus optional length constraints and an insert policy. Rule
tables are ordered: :mod:`lyricseg.matcher` returns the first rule whose
groups all hold.

Rule tables can be written in Python with the helper constructors below
(``regex``, ``pattern``, ``one_of``, ``none_of``) or loaded from plain
dictionaries, which is how :func:`lyricseg.config.load_rule_tables` reads
YAML files.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import RuleConfigError
from .types import FieldName, InsertPolicy

__all__ = [
    "PATTERNS",
    "RegexMatcher",
    "LiteralSetMatcher",
    "FieldMatcher",
    "LengthBound",
    "LengthConstraints",
    "Rule",
    "regex",
    "pattern",
    "one_of",
    "none_of",
    "rule_from_dict",
    "rules_from_list",
    "rule_to_dict",
    "rules_to_list",
]

PATTERNS: Dict[str, re.Pattern] = {
    "whitespace": re.compile(r"^\s+$"),
    "alphabet_or_number": re.compile(r"^(.*[a-zA-Z1-9]).*$"),
    "not_alphabet_or_number": re.compile(r"^(?!.*[a-zA-Z1-9]).*$"),
    "upper_alphabet": re.compile(r"^(.*[A-Z]).*$"),
    "alphabet": re.compile(r"^(.*[a-zA-Z]).*$"),
    "nominative": re.compile(r"^(?=\b(I|You|We|He|She|They)\b).*$"),
    "period": re.compile(r"^(.*[.,、。]).*$"),
    "not_period": re.compile(r"^(?!.*[.,、。]).*$"),
    "mark": re.compile(r"^(.*[!?！？]).*$"),
    "not_mark": re.compile(r"^(?!.*[!?！？]).*$"),
    "not_close_apostrophe": re.compile(r"^(?!.*['\"`](\s|$)).*$"),
    "open_parentheses": re.compile(r"^(.*[\[(（「『【〝❝“]).*$"),
    "close_parentheses": re.compile(r"^(.*[\])）」』】〟❞”]).*$"),
    "hiragana": re.compile(r"^(.*[\u3040-\u309F]).*$"),
    "katakana": re.compile(r"^(.*[\u30A0-\u30FF]).*$"),
    "kanji": re.compile(r"^(.*[\u4E00-\u9FFF]).*$"),
    "long_note": re.compile(r"^(.*[ー～]).*$"),
    "not_long_note": re.compile(r"^(?!.*[ー～]).*$"),
}


@dataclass(frozen=True)
class RegexMatcher:
    """Succeeds when the pattern is found anywhere in the field value."""
    pattern: re.Pattern

    def matches(self, value: str) -> bool:
        return self.pattern.search(value) is not None


@dataclass(frozen=True)
class LiteralSetMatcher:
    """
    Succeeds when the field value is (or, with ``negate``, is not) one of
    ``values``.
    """
    values: frozenset
    negate: bool = False

    def matches(self, value: str) -> bool:
        if self.negate:
            return value not in self.values
        return value in self.values


FieldMatcher = Union[RegexMatcher, LiteralSetMatcher]
Predicate = Mapping[FieldName, Tuple[FieldMatcher, ...]]


def regex(expression: str) -> RegexMatcher:
    return RegexMatcher(re.compile(expression))


def pattern(name: str) -> RegexMatcher:
    """Return a matcher for one of the named :data:`PATTERNS`."""
    try:
        return RegexMatcher(PATTERNS[name])
    except KeyError:
        raise RuleConfigError(f"Unknown named pattern: {name!r}")


def one_of(*values: str) -> LiteralSetMatcher:
    return LiteralSetMatcher(frozenset(values))


def none_of(*values: str) -> LiteralSetMatcher:
    return LiteralSetMatcher(frozenset(values), negate=True)


@dataclass(frozen=True)
class LengthBound:
    """
    A numeric range check against one derived length.

    Attributes:
        larger_than: Lower bound on the measured length.
        shorter_than: Upper bound on the measured length.
        inclusive: When true (the default) the bounds accept equality
            (``>=`` / ``<=``); otherwise they are strict.
        next_is_last_of_span: When set, the context's "next token is the last
            of its span" flag must equal this value.
        for_first_token: For ``past`` bounds, always measure from the span's
            first token instead of the last registered break.
        for_last_token: For ``remaining`` bounds, always measure to the end
            of the span instead of to the next space.
    """
    larger_than: Optional[int] = None
    shorter_than: Optional[int] = None
    inclusive: bool = True
    next_is_last_of_span: Optional[bool] = None
    for_first_token: bool = False
    for_last_token: bool = False

    def accepts(self, value: int) -> bool:
        if self.larger_than is not None:
            if self.inclusive and value < self.larger_than:
                return False
            if not self.inclusive and value <= self.larger_than:
                return False
        if self.shorter_than is not None:
            if self.inclusive and value > self.shorter_than:
                return False
            if not self.inclusive and value >= self.shorter_than:
                return False
        return True

    def gate_accepts(self, next_is_last_of_span: bool) -> bool:
        if self.next_is_last_of_span is None:
            return True
        return self.next_is_last_of_span == next_is_last_of_span


@dataclass(frozen=True)
class LengthConstraints:
    """
    Length checks attached to a rule.

    ``current``, ``past`` and ``remaining`` gate the ``current`` predicate
    group; ``after`` gates the ``after`` group.
    """
    current: Optional[LengthBound] = None
    past: Optional[LengthBound] = None
    remaining: Optional[LengthBound] = None
    after: Optional[LengthBound] = None


@dataclass(frozen=True)
class Rule:
    """
    A context-sensitive predicate bundle.

    Absent predicate groups are vacuously satisfied. Within a group every
    field must have at least one succeeding matcher.
    """
    name: str = ""
    before: Optional[Predicate] = None
    current: Optional[Predicate] = None
    after: Optional[Predicate] = None
    length: Optional[LengthConstraints] = None
    insert: InsertPolicy = InsertPolicy.CURRENT


# --- dict / YAML schema ---------------------------------------------------

_GROUPS = ("before", "current", "after")
_LENGTH_SECTIONS = ("current", "past", "remaining", "after")
_BOUND_KEYS = {
    "larger_than",
    "shorter_than",
    "inclusive",
    "next_is_last_of_span",
    "for_first_token",
    "for_last_token",
}
_RULE_KEYS = {"name", "length", "insert", *_GROUPS}


def _parse_matcher(raw: Any, where: str) -> FieldMatcher:
    if not isinstance(raw, dict) or len(raw) != 1:
        raise RuleConfigError(f"{where}: a matcher must be a mapping with exactly one key, got {raw!r}")
    kind, value = next(iter(raw.items()))
    if kind == "regex":
        try:
            return regex(str(value))
        except re.error as e:
            raise RuleConfigError(f"{where}: invalid regular expression {value!r}: {e}")
    if kind == "pattern":
        try:
            return pattern(str(value))
        except RuleConfigError as e:
            raise RuleConfigError(f"{where}: {e}")
    if kind in ("in", "not_in"):
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise RuleConfigError(f"{where}: '{kind}' expects a list of strings")
        values = [str(v) for v in value]
        return none_of(*values) if kind == "not_in" else one_of(*values)
    raise RuleConfigError(f"{where}: unknown matcher kind {kind!r}")


def _parse_group(raw: Any, where: str) -> Predicate:
    if not isinstance(raw, dict):
        raise RuleConfigError(f"{where}: predicate group must be a mapping")
    group: Dict[FieldName, Tuple[FieldMatcher, ...]] = {}
    for key, matchers in raw.items():
        try:
            field_name = FieldName(key)
        except ValueError:
            raise RuleConfigError(f"{where}: unknown field name {key!r}")
        if not isinstance(matchers, list) or not matchers:
            raise RuleConfigError(f"{where}.{key}: expected a non-empty list of matchers")
        group[field_name] = tuple(
            _parse_matcher(m, f"{where}.{key}[{i}]") for i, m in enumerate(matchers)
        )
    return group


def _parse_bound(raw: Any, where: str) -> LengthBound:
    if not isinstance(raw, dict):
        raise RuleConfigError(f"{where}: length bound must be a mapping")
    unknown = set(raw) - _BOUND_KEYS
    if unknown:
        raise RuleConfigError(f"{where}: unknown length keys {sorted(unknown)}")
    try:
        return LengthBound(
            larger_than=int(raw["larger_than"]) if raw.get("larger_than") is not None else None,
            shorter_than=int(raw["shorter_than"]) if raw.get("shorter_than") is not None else None,
            inclusive=bool(raw.get("inclusive", True)),
            next_is_last_of_span=(
                bool(raw["next_is_last_of_span"]) if raw.get("next_is_last_of_span") is not None else None
            ),
            for_first_token=bool(raw.get("for_first_token", False)),
            for_last_token=bool(raw.get("for_last_token", False)),
        )
    except (TypeError, ValueError) as e:
        raise RuleConfigError(f"{where}: {e}")


def _parse_length(raw: Any, where: str) -> LengthConstraints:
    if not isinstance(raw, dict):
        raise RuleConfigError(f"{where}: length must be a mapping")
    unknown = set(raw) - set(_LENGTH_SECTIONS)
    if unknown:
        raise RuleConfigError(f"{where}: unknown length sections {sorted(unknown)}")
    return LengthConstraints(
        **{section: _parse_bound(raw[section], f"{where}.{section}") for section in raw}
    )


def rule_from_dict(data: Mapping[str, Any], index: int = 0, table: str = "rules") -> Rule:
    """
    Build a :class:`Rule` from its dictionary form.

    Args:
        data: The rule mapping, as read from YAML or JSON.
        index: Position of the rule in its table, used for default names and
            error messages.
        table: Name of the enclosing table, used in error messages.

    Returns:
        The parsed rule.

    Raises:
        RuleConfigError: If any part of the rule is malformed.
    """
    if not isinstance(data, Mapping):
        raise RuleConfigError(f"{table}[{index}]: rule must be a mapping")
    name = str(data.get("name") or f"{table}-{index + 1}")
    where = f"{table}[{index}] ({name})"

    unknown = set(data) - _RULE_KEYS
    if unknown:
        raise RuleConfigError(f"{where}: unknown rule keys {sorted(unknown)}")

    groups = {g: _parse_group(data[g], f"{where}.{g}") for g in _GROUPS if data.get(g) is not None}
    length = _parse_length(data["length"], f"{where}.length") if data.get("length") is not None else None

    try:
        insert = InsertPolicy(data.get("insert", InsertPolicy.CURRENT.value))
    except ValueError:
        raise RuleConfigError(f"{where}: insert must be 'current' or 'before', got {data.get('insert')!r}")

    return Rule(name=name, length=length, insert=insert, **groups)


def rules_from_list(items: Sequence[Any], table: str = "rules") -> Tuple[Rule, ...]:
    if not isinstance(items, (list, tuple)):
        raise RuleConfigError(f"{table}: expected a list of rules")
    return tuple(rule_from_dict(item, i, table) for i, item in enumerate(items))


def _matcher_to_dict(matcher: FieldMatcher) -> Dict[str, Any]:
    if isinstance(matcher, RegexMatcher):
        for name, compiled in PATTERNS.items():
            if compiled is matcher.pattern:
                return {"pattern": name}
        return {"regex": matcher.pattern.pattern}
    return {("not_in" if matcher.negate else "in"): sorted(matcher.values)}


def rule_to_dict(rule: Rule) -> Dict[str, Any]:
    """Serialize ``rule`` into the dictionary schema accepted by :func:`rule_from_dict`."""
    out: Dict[str, Any] = {"name": rule.name}
    for g in _GROUPS:
        group = getattr(rule, g)
        if group is not None:
            out[g] = {f.value: [_matcher_to_dict(m) for m in ms] for f, ms in group.items()}
    if rule.length is not None:
        length: Dict[str, Any] = {}
        for section in _LENGTH_SECTIONS:
            bound: Optional[LengthBound] = getattr(rule.length, section)
            if bound is None:
                continue
            entry: Dict[str, Any] = {}
            if bound.larger_than is not None:
                entry["larger_than"] = bound.larger_than
            if bound.shorter_than is not None:
                entry["shorter_than"] = bound.shorter_than
            if not bound.inclusive:
                entry["inclusive"] = False
            if bound.next_is_last_of_span is not None:
                entry["next_is_last_of_span"] = bound.next_is_last_of_span
            if bound.for_first_token:
                entry["for_first_token"] = True
            if bound.for_last_token:
                entry["for_last_token"] = True
            length[section] = entry
        out["length"] = length
    if rule.insert is not InsertPolicy.CURRENT:
        out["insert"] = rule.insert.value
    return out


def rules_to_list(rules: Sequence[Rule]) -> List[Dict[str, Any]]:
    return [rule_to_dict(rule) for rule in rules]
