"""Re-groups tokenizer output onto the timed spans it came from.

The tokenizer is called once per span, but its output does not always
reconstruct the span text exactly (the pre-tokenization bracket substitution
is one source of drift). Alignment therefore treats the per-span token lists
as one flat stream and re-synchronises on exact text matches.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

from .types import FeatureToken, TimedSpan

logger = logging.getLogger(__name__)

__all__ = ["prepare_text", "align_tokens"]


def prepare_text(text: str) -> str:
    """Apply the substitution performed on span text before tokenizing."""
    return text.replace(")(", ") (")


def _joined(tokens: Sequence[FeatureToken]) -> str:
    return "".join(t.surface_form for t in tokens)


def align_tokens(
    spans: Sequence[TimedSpan],
    token_lists: Sequence[Sequence[FeatureToken]],
) -> List[List[FeatureToken]]:
    """
    Maps per-span token lists back onto their originating spans.

    Tokens are consumed in order. The target span never lags behind the span
    whose list a token came from. Before a token is appended to a non-empty
    accumulation, the accumulation is compared with the target span's
    (substituted) text; when it already reconstructs that text, the token
    moves on to the next span in line. A token with no next span to move to
    is dropped with a warning.

    Args:
        spans: The timed spans, in order.
        token_lists: One token list per span, as produced by the tokenizer.

    Returns:
        A list with one token list per span. A span may end up with no
        tokens; downstream components turn it into an empty line.

    Raises:
        ValueError: If the number of token lists does not match the number
                    of spans.
    """
    if len(token_lists) != len(spans):
        raise ValueError(
            f"Expected one token list per span, got {len(token_lists)} lists for {len(spans)} spans."
        )

    groups: List[List[FeatureToken]] = [[] for _ in spans]
    expected = [prepare_text(span.text) for span in spans]
    target = 0

    for source_idx, tokens in enumerate(token_lists):
        target = max(target, source_idx)
        for token in tokens:
            if groups[target] and _joined(groups[target]) == expected[target]:
                if target + 1 >= len(spans):
                    logger.warning(
                        "Dropping token %r at column %d: span %d is complete and no span follows.",
                        token.surface_form, token.word_position, target + 1,
                    )
                    continue
                target += 1
                logger.warning(
                    "Token %r from span %d re-synchronised onto span %d.",
                    token.surface_form, source_idx + 1, target + 1,
                )
            groups[target].append(token)

    for idx, group in enumerate(groups):
        if _joined(group) != expected[idx]:
            logger.debug(
                "Span %d tokens reconstruct %r instead of %r.", idx + 1, _joined(group), expected[idx]
            )

    return groups
