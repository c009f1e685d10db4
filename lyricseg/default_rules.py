"""Default break and whitespace rule tables.

The tables are tuned for IPADIC feature strings (as produced by MeCab or
kuromoji) on mixed Japanese/English lyrics. Order matters: the first rule
that matches a token wins.
"""
from __future__ import annotations

from typing import Tuple

from .rules import LengthBound, LengthConstraints, Rule, none_of, one_of, pattern
from .types import FieldName, InsertPolicy

__all__ = ["DEFAULT_BREAK_RULES", "DEFAULT_WHITESPACE_RULES"]

SURFACE = FieldName.SURFACE_FORM
POS = FieldName.POS
POS1 = FieldName.POS_DETAIL_1
POS2 = FieldName.POS_DETAIL_2
CTYPE = FieldName.CONJUGATED_TYPE
CFORM = FieldName.CONJUGATED_FORM

BEFORE = InsertPolicy.BEFORE

WHITESPACE = pattern("whitespace")
ALNUM = pattern("alphabet_or_number")
NOT_ALNUM = pattern("not_alphabet_or_number")
UPPER = pattern("upper_alphabet")
ALPHABET = pattern("alphabet")
NOMINATIVE = pattern("nominative")
PERIOD = pattern("period")
NOT_PERIOD = pattern("not_period")
MARK = pattern("mark")
NOT_MARK = pattern("not_mark")
NOT_CLOSE_APOSTROPHE = pattern("not_close_apostrophe")
OPEN_PAREN = pattern("open_parentheses")
CLOSE_PAREN = pattern("close_parentheses")
HIRAGANA = pattern("hiragana")
KATAKANA = pattern("katakana")
KANJI = pattern("kanji")
NOT_LONG_NOTE = pattern("not_long_note")


def _remaining(**kwargs) -> LengthConstraints:
    return LengthConstraints(remaining=LengthBound(**kwargs))


DEFAULT_BREAK_RULES: Tuple[Rule, ...] = (
    # --- script changes, brackets and spacing -----------------------------
    Rule(
        name="space-then-capital-or-open-bracket",
        before={SURFACE: (WHITESPACE,)},
        current={SURFACE: (UPPER, OPEN_PAREN)},
        insert=BEFORE,
    ),
    Rule(name="before-open-bracket", after={SURFACE: (OPEN_PAREN,)}),
    Rule(name="close-bracket", current={SURFACE: (CLOSE_PAREN,)}),
    Rule(
        name="space-before-english-subject",
        before={SURFACE: (ALNUM,)},
        current={SURFACE: (WHITESPACE,)},
        after={SURFACE: (NOMINATIVE,)},
        insert=BEFORE,
    ),
    Rule(
        name="space-latin-to-japanese",
        before={SURFACE: (ALNUM,)},
        current={SURFACE: (WHITESPACE,)},
        after={SURFACE: (NOT_ALNUM,)},
        length=_remaining(larger_than=5),
        insert=BEFORE,
    ),
    Rule(
        name="space-japanese-to-latin",
        before={SURFACE: (NOT_ALNUM,)},
        current={SURFACE: (WHITESPACE,)},
        after={SURFACE: (ALNUM,)},
        insert=BEFORE,
    ),
    Rule(
        name="latin-to-japanese",
        current={SURFACE: (ALPHABET,)},
        after={SURFACE: (HIRAGANA, KATAKANA, KANJI)},
        length=_remaining(next_is_last_of_span=False),
    ),
    Rule(
        name="japanese-to-latin",
        current={SURFACE: (HIRAGANA, KATAKANA, KANJI)},
        after={SURFACE: (ALPHABET,)},
        length=_remaining(next_is_last_of_span=False),
    ),
    Rule(
        name="katakana-to-hiragana-or-kanji",
        current={SURFACE: (KATAKANA,)},
        after={SURFACE: (HIRAGANA, KANJI), POS1: (none_of("格助詞"),)},
        length=LengthConstraints(past=LengthBound(larger_than=5), remaining=LengthBound(larger_than=5)),
    ),
    Rule(
        name="hiragana-or-kanji-to-katakana",
        current={SURFACE: (HIRAGANA, KANJI)},
        after={SURFACE: (KATAKANA,)},
        length=LengthConstraints(past=LengthBound(larger_than=5), remaining=LengthBound(larger_than=5)),
    ),
    Rule(
        name="space-between-japanese",
        before={SURFACE: (NOT_ALNUM,)},
        current={SURFACE: (WHITESPACE,)},
        after={SURFACE: (NOT_ALNUM,)},
        insert=BEFORE,
    ),
    # --- punctuation --------------------------------------------------------
    Rule(name="period", current={SURFACE: (PERIOD,)}, after={SURFACE: (NOT_PERIOD,)}),
    Rule(name="exclamation-or-question", current={SURFACE: (MARK,)}, after={SURFACE: (NOT_MARK,)}),
    Rule(name="comma", current={POS1: (one_of("読点"),)}),
    # --- nouns and particles ----------------------------------------------
    Rule(
        name="common-noun-between-proper-nouns",
        before={POS: (one_of("名詞"),), POS1: (one_of("固有名詞"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("一般"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("固有名詞"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="case-particle-before-noun",
        before={POS: (one_of("名詞"),), POS1: (none_of("接尾"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        after={POS: (one_of("名詞"),), POS1: (none_of("サ変接続"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="adverbial-particle-after-suffix-or-stem",
        before={POS: (one_of("名詞"),), POS1: (one_of("接尾", "形容動詞語幹"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞", "副詞化"),)},
        after={POS: (one_of("名詞"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="case-particle-after-suffix-before-verb",
        before={POS: (one_of("名詞"),), POS1: (one_of("接尾"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="attributive-no-before-adverbial-noun",
        before={POS: (one_of("名詞"),), POS1: (one_of("一般"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("連体化"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("副詞可能"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="counter-suffix",
        before={POS: (one_of("名詞"),), POS1: (one_of("一般", "固有名詞", "数"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("接尾"),), POS2: (one_of("助数詞"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("接尾"),), POS2: (none_of("一般"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="noun-suffix-before-noun",
        before={POS: (one_of("名詞"),), POS1: (one_of("一般", "固有名詞"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("接尾"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("一般", "固有名詞"),), SURFACE: (NOT_MARK,)},
        length=_remaining(next_is_last_of_span=True),
    ),
    Rule(
        name="noun-after-no-before-suffix",
        before={POS: (one_of("助詞"),), POS1: (one_of("連体化"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("一般"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("接尾"),), SURFACE: (NOT_MARK,)},
        length=_remaining(larger_than=4),
    ),
    Rule(
        name="verb-after-case-particle-before-last",
        before={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        current={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
        length=_remaining(next_is_last_of_span=True, larger_than=4),
    ),
    Rule(
        name="adjective-after-case-particle",
        before={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        current={POS: (one_of("形容詞"),), POS1: (one_of("自立"),)},
        after={POS: (one_of("名詞"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="case-particle-before-ta-stem",
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),), CFORM: (one_of("連用タ接続"),)},
        length=_remaining(larger_than=4),
    ),
    Rule(
        name="quotative-particle",
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),), POS2: (one_of("引用"),)},
        after={POS: (one_of("動詞", "助詞"),), POS1: (none_of("係助詞"),)},
    ),
    Rule(
        name="conjunctive-or-final-particle-before-noun",
        current={POS: (one_of("助詞"),), POS1: (one_of("接続助詞", "終助詞"),)},
        after={POS: (one_of("名詞"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="noun-after-no-before-verb",
        before={POS: (one_of("助詞"),), POS1: (one_of("連体化"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("一般"),), SURFACE: (NOT_LONG_NOTE,)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="attributive-no-before-suru-noun",
        before={POS: (one_of("名詞"),), POS1: (none_of("接尾"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("連体化"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("サ変接続"),)},
    ),
    Rule(
        name="adverbial-particle-before-noun",
        before={POS: (one_of("名詞"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("副助詞"),)},
        after={POS: (one_of("名詞"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="adverbial-particle-before-verb",
        before={POS: (one_of("名詞"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("副助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),), CFORM: (none_of("連用形"),)},
    ),
    Rule(
        name="case-particle-after-proper-noun",
        before={POS: (one_of("名詞"),), POS1: (one_of("固有名詞"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="dependent-adverbial-noun-before-adverb",
        current={POS: (one_of("名詞"),), POS1: (one_of("非自立"),), POS2: (one_of("副詞可能"),)},
        after={POS: (one_of("副詞"),)},
    ),
    Rule(
        name="noun-after-adverb-or-adnominal",
        before={POS: (one_of("副詞", "連体詞"),)},
        current={POS: (one_of("名詞"),), POS1: (none_of("数"),)},
        after={POS: (one_of("名詞"),), POS1: (none_of("接尾"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="adverb-before-verb",
        current={POS: (one_of("副詞"),), POS1: (none_of("助詞類接続"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    # --- verbs, auxiliaries and adjectives --------------------------------
    Rule(
        name="verb-after-adverbial-particle",
        before={POS: (one_of("助詞"),), POS1: (one_of("副助詞"),)},
        current={POS: (one_of("動詞"),)},
        after={POS: (one_of("助詞"),), POS1: (one_of("接続助詞"),)},
        insert=BEFORE,
    ),
    Rule(
        name="verb-before-independent-noun",
        before={POS: (one_of("助詞"),), POS1: (none_of("格助詞"),)},
        current={POS: (one_of("動詞"),), POS1: (one_of("自立"),), CTYPE: (none_of("五段・タ行"),)},
        after={POS: (one_of("名詞"),), POS1: (none_of("非自立", "接尾"),), SURFACE: (NOT_LONG_NOTE,)},
        length=LengthConstraints(after=LengthBound(next_is_last_of_span=False)),
    ),
    Rule(
        name="verb-after-case-particle-before-noun",
        before={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        current={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
        after={
            SURFACE: (NOT_CLOSE_APOSTROPHE,),
            POS: (one_of("名詞"),),
            POS1: (none_of("非自立", "副詞可能"),),
        },
    ),
    Rule(
        name="case-particle-between-conjunctive-and-verb",
        before={POS: (one_of("助詞"),), POS1: (one_of("接続助詞"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="binding-particle-before-verb",
        before={POS1: (none_of("空白"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("係助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),), CFORM: (none_of("連用形", "未然ウ接続"),)},
    ),
    Rule(
        name="binding-particle-before-noun-or-adverb",
        current={POS: (one_of("助詞"),), POS1: (one_of("係助詞"),)},
        after={POS: (one_of("名詞", "副詞"),)},
        length=LengthConstraints(past=LengthBound(larger_than=3), after=LengthBound(next_is_last_of_span=False)),
    ),
    Rule(
        name="case-particle-before-adnominal",
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        after={POS: (one_of("連体詞"),)},
    ),
    Rule(
        name="case-particle-after-auxiliary",
        before={POS: (one_of("助動詞"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("格助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="noun-after-auxiliary",
        before={POS: (one_of("助動詞"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("一般"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("一般"),), SURFACE: (NOT_MARK,)},
        length=LengthConstraints(after=LengthBound(next_is_last_of_span=False)),
    ),
    Rule(
        name="auxiliary-before-noun",
        current={POS: (one_of("助動詞"),), CFORM: (none_of("体言接続"),)},
        after={POS: (one_of("名詞"),), POS1: (none_of("非自立", "副詞可能"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="conditional-auxiliary-before-verb",
        current={POS: (one_of("助動詞"),), CFORM: (one_of("仮定形"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="auxiliary-before-adnominal",
        current={POS: (one_of("助動詞"),)},
        after={POS: (one_of("連体詞"),)},
    ),
    Rule(
        name="conjunctive-particle-before-adjectival-noun",
        before={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("接続助詞"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("形容動詞語幹"),), SURFACE: (NOT_MARK,)},
    ),
    Rule(
        name="dependent-noun-between-verbs",
        before={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("非自立"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="conjunctive-particle-between-verbs",
        before={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
        current={POS: (one_of("助詞"),), POS1: (one_of("接続助詞"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="verb-before-pronoun",
        current={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
        after={POS: (one_of("名詞"),), POS1: (one_of("代名詞"),), SURFACE: (NOT_MARK,)},
        length=_remaining(next_is_last_of_span=False),
    ),
    Rule(
        name="adjective-before-noun",
        current={POS: (one_of("形容詞"),), POS1: (one_of("自立"),)},
        after={POS: (one_of("名詞"),), POS1: (none_of("接尾"),), SURFACE: (NOT_MARK,)},
        length=_remaining(larger_than=10),
    ),
    Rule(
        name="dependent-noun-after-adjective",
        before={POS: (one_of("形容詞"),), POS1: (one_of("自立"),)},
        current={POS: (one_of("名詞"),), POS1: (one_of("非自立"),)},
        after={POS: (one_of("動詞"),), POS1: (one_of("自立"),)},
    ),
    Rule(
        name="adjective-before-adjective",
        current={POS: (one_of("形容詞"),), POS1: (one_of("自立"),)},
        after={POS: (one_of("形容詞"),), POS1: (one_of("自立"),)},
    ),
)

DEFAULT_WHITESPACE_RULES: Tuple[Rule, ...] = (
    Rule(name="before-space", after={SURFACE: (WHITESPACE,)}),
)
