"""Shared fixtures: hand-written IPADIC analyses so the suite runs without MeCab."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import pytest


def _ensure_project_root_on_path() -> None:
    project_root = Path(__file__).resolve().parents[1]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


_ensure_project_root_on_path()

from lyricseg.tokenizer import IPADIC_FIELDS  # noqa: E402
from lyricseg.types import FeatureToken, FieldName, TimedSpan  # noqa: E402

TokenFactory = Callable[..., FeatureToken]

PROPER_NOUN = "名詞,固有名詞,組織,*,*,*,*"
SPACE = "記号,空白,*,*,*,*,*"


def ipadic_token(surface: str, word_position: int, features: str = "") -> FeatureToken:
    """Builds a token from an IPADIC feature CSV; trailing slots default to ``*``."""
    values = features.split(",") if features else []
    values += ["*"] * (len(IPADIC_FIELDS) - len(values))
    fields = dict(zip(IPADIC_FIELDS, values))
    fields[FieldName.WORD_TYPE] = "KNOWN"
    return FeatureToken(surface_form=surface, word_position=word_position, fields=fields)


def _tokens(rows: Sequence[Tuple[str, str]]) -> List[FeatureToken]:
    """Lays ``(surface, features)`` rows end to end starting at column 1."""
    out = []
    column = 1
    for surface, features in rows:
        out.append(ipadic_token(surface, column, features))
        column += len(surface)
    return out


@pytest.fixture
def make_token() -> TokenFactory:
    return ipadic_token


@pytest.fixture
def make_tokens():
    return _tokens


@pytest.fixture
def flower_lyric() -> Tuple[TimedSpan, List[FeatureToken]]:
    span = TimedSpan(text="あの花が咲いたのは、そこに種が落ちたからで", begin=1.0, end=5.0)
    tokens = _tokens([
        ("あの", "連体詞,*,*,*,*,*,あの,アノ,アノ"),
        ("花", "名詞,一般,*,*,*,*,花,ハナ,ハナ"),
        ("が", "助詞,格助詞,一般,*,*,*,が,ガ,ガ"),
        ("咲い", "動詞,自立,*,*,五段・カ行イ音便,連用タ接続,咲く,サイ,サイ"),
        ("た", "助動詞,*,*,*,特殊・タ,基本形,た,タ,タ"),
        ("の", "名詞,非自立,一般,*,*,*,の,ノ,ノ"),
        ("は", "助詞,係助詞,*,*,*,*,は,ハ,ワ"),
        ("、", "記号,読点,*,*,*,*,、,、,、"),
        ("そこ", "名詞,代名詞,一般,*,*,*,そこ,ソコ,ソコ"),
        ("に", "助詞,格助詞,一般,*,*,*,に,ニ,ニ"),
        ("種", "名詞,一般,*,*,*,*,種,タネ,タネ"),
        ("が", "助詞,格助詞,一般,*,*,*,が,ガ,ガ"),
        ("落ち", "動詞,自立,*,*,一段,連用形,落ちる,オチ,オチ"),
        ("た", "助動詞,*,*,*,特殊・タ,基本形,た,タ,タ"),
        ("から", "助詞,接続助詞,*,*,*,*,から,カラ,カラ"),
        ("で", "助詞,格助詞,一般,*,*,*,で,デ,デ"),
    ])
    return span, tokens


@pytest.fixture
def english_lyric() -> Tuple[TimedSpan, List[FeatureToken]]:
    span = TimedSpan(text="Oh, I can't help falling in love with you", begin=22.0, end=25.0)
    rows = [
        ("Oh", PROPER_NOUN),
        (",", "名詞,サ変接続,*,*,*,*,*"),
        (" ", SPACE),
        ("I", PROPER_NOUN),
        (" ", SPACE),
        ("can", PROPER_NOUN),
        ("'", "名詞,サ変接続,*,*,*,*,*"),
        ("t", PROPER_NOUN),
    ]
    for word in ("help", "falling", "in", "love", "with", "you"):
        rows += [(" ", SPACE), (word, PROPER_NOUN)]
    return span, _tokens(rows)


@pytest.fixture
def aside_lyric() -> Tuple[TimedSpan, List[FeatureToken]]:
    span = TimedSpan(text="(あなただけ、あなただけ)", begin=0.0, end=2.2)
    tokens = _tokens([
        ("(", "記号,括弧開,*,*,*,*,(,(,("),
        ("あなた", "名詞,代名詞,一般,*,*,*,あなた,アナタ,アナタ"),
        ("だけ", "助詞,副助詞,*,*,*,*,だけ,ダケ,ダケ"),
        ("、", "記号,読点,*,*,*,*,、,、,、"),
        ("あなた", "名詞,代名詞,一般,*,*,*,あなた,アナタ,アナタ"),
        ("だけ", "助詞,副助詞,*,*,*,*,だけ,ダケ,ダケ"),
        (")", "記号,括弧閉,*,*,*,*,),),)"),
    ])
    return span, tokens
