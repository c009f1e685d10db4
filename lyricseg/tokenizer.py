"""MeCab/IPADIC adapter producing :class:`FeatureToken` lists.

The engine itself never calls a morphological analyzer; this adapter is the
bundled way of producing its input. MeCab is an optional dependency
(``pip install lyricseg[mecab]``).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from .alignment import prepare_text
from .types import FeatureToken, FieldName, TimedSpan

logger = logging.getLogger(__name__)

__all__ = ["IPADIC_FIELDS", "MecabTokenizer", "tokenize_spans"]

# Column order of the IPADIC feature CSV.
IPADIC_FIELDS = (
    FieldName.POS,
    FieldName.POS_DETAIL_1,
    FieldName.POS_DETAIL_2,
    FieldName.POS_DETAIL_3,
    FieldName.CONJUGATED_TYPE,
    FieldName.CONJUGATED_FORM,
    FieldName.BASIC_FORM,
    FieldName.READING,
    FieldName.PRONUNCIATION,
)

_BOS_EOS_STATS = (2, 3)
_UNKNOWN_STAT = 1


def _whitespace_token(surface: str, word_position: int) -> FeatureToken:
    return FeatureToken(
        surface_form=surface,
        word_position=word_position,
        fields={
            FieldName.POS: "記号",
            FieldName.POS_DETAIL_1: "空白",
            FieldName.POS_DETAIL_2: "*",
            FieldName.POS_DETAIL_3: "*",
            FieldName.CONJUGATED_TYPE: "*",
            FieldName.CONJUGATED_FORM: "*",
            FieldName.BASIC_FORM: surface,
            FieldName.WORD_TYPE: "KNOWN",
        },
    )


class MecabTokenizer:
    """
    Tokenizes text with a single, reused ``MeCab.Tagger``.

    Args:
        tagger: An object with a ``parseToNode`` method. When omitted, a
            tagger is built from the ``ipadic`` package's dictionary.
        tagger_args: Extra arguments for ``MeCab.Tagger``. Defaults to
            ``ipadic.MECAB_ARGS``.

    Raises:
        RuntimeError: If no tagger is given and mecab-python3 or ipadic is
                      not installed.
    """

    def __init__(self, tagger: Any = None, tagger_args: Optional[str] = None):
        if tagger is None:
            tagger = self._build_tagger(tagger_args)
        self.tagger = tagger

    @staticmethod
    def _build_tagger(tagger_args: Optional[str]) -> Any:
        try:
            import MeCab
        except ImportError:
            raise RuntimeError("MeCab is not installed. Install with: pip install 'lyricseg[mecab]'")
        if tagger_args is None:
            try:
                import ipadic
            except ImportError:
                raise RuntimeError("The ipadic dictionary is not installed. Install with: pip install ipadic")
            tagger_args = ipadic.MECAB_ARGS
        logger.debug("Initialising MeCab with arguments %r", tagger_args)
        return MeCab.Tagger(tagger_args)

    def _nodes(self, text: str) -> List[Dict[str, Any]]:
        nodes = []
        node = self.tagger.parseToNode(text)
        while node:
            if node.stat not in _BOS_EOS_STATS and node.surface:
                nodes.append({"surface": node.surface, "feature": node.feature, "stat": node.stat})
            node = node.next
        return nodes

    def tokenize(self, text: str) -> List[FeatureToken]:
        """
        Analyzes ``text`` into feature tokens.

        MeCab drops ASCII whitespace between morphemes; those gaps are put
        back as whitespace tokens so that surface forms reconstruct ``text``.
        Word positions are 1-based.
        """
        tokens: List[FeatureToken] = []
        cursor = 0
        for node in self._nodes(text):
            surface = node["surface"]
            idx = text.find(surface, cursor)
            if idx < 0:
                logger.warning("MeCab surface %r not found in %r after column %d.", surface, text, cursor + 1)
                idx = cursor
            if idx > cursor:
                tokens.append(_whitespace_token(text[cursor:idx], cursor + 1))

            values = node["feature"].split(",")
            fields: Dict[FieldName, Optional[str]] = {
                name: value for name, value in zip(IPADIC_FIELDS, values)
            }
            fields[FieldName.WORD_TYPE] = "UNKNOWN" if node["stat"] == _UNKNOWN_STAT else "KNOWN"
            tokens.append(FeatureToken(surface_form=surface, word_position=idx + 1, fields=fields))
            cursor = idx + len(surface)

        if cursor < len(text):
            tokens.append(_whitespace_token(text[cursor:], cursor + 1))
        return tokens


def tokenize_spans(spans: Sequence[TimedSpan], tokenizer: MecabTokenizer) -> List[List[FeatureToken]]:
    """Tokenizes each span after the bracket substitution; one list per span."""
    return [tokenizer.tokenize(prepare_text(span.text)) for span in spans]
