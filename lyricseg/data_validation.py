from __future__ import annotations
import re
from typing import Any, Dict, List, Sequence

from .alignment import prepare_text
from .layout import plain_text
from .types import Line

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Collapses whitespace runs to single spaces and trims the ends."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def validate(lines: Sequence[Line]) -> Dict[str, Any]:
    """
    Performs sanity checks on segmented lines.

    The checks mirror the guarantees of the segmenter:
    -   Units never end before they begin.
    -   Units are laid end to end with no gaps or overlaps.
    -   The first unit starts at the span's begin and the last one ends at
        the span's end.
    -   The units reproduce the span text.
    -   No unit is empty.

    Args:
        lines: The lines returned by :func:`lyricseg.segmenter.segment`.

    Returns:
        A dictionary summarizing the validation results, containing the total
        `issue_count` and a list of `issues`, where each issue is a
        dictionary detailing the problem.
    """
    issues: List[Dict[str, Any]] = []

    for line in lines:
        units = line.units
        for i, u in enumerate(units):
            if not u.text:
                issues.append({
                    "type": "empty_unit_error",
                    "line": line.position,
                    "idx": i,
                    "message": f"Line {line.position} has an empty unit at index {i}."
                })
            if u.end < u.begin:
                issues.append({
                    "type": "time_order_error",
                    "line": line.position,
                    "idx": i,
                    "message": f"Unit '{u.text}' has end time {u.end} before start time {u.begin}."
                })
            if i > 0 and units[i - 1].end != u.begin:
                issues.append({
                    "type": "timing_gap_error",
                    "line": line.position,
                    "idx": i,
                    "message": f"Unit '{u.text}' begins at {u.begin} but the previous unit ends at {units[i - 1].end}."
                })

        if not units:
            continue

        if units[0].begin != line.span.begin or units[-1].end != line.span.end:
            issues.append({
                "type": "span_boundary_error",
                "line": line.position,
                "message": (
                    f"Line {line.position} covers {units[0].begin}-{units[-1].end} "
                    f"but its span covers {line.span.begin}-{line.span.end}."
                )
            })

        produced = plain_text(units)
        expected = normalize_text(prepare_text(line.span.text))
        if produced != expected:
            issues.append({
                "type": "text_mismatch_error",
                "line": line.position,
                "message": f"Line {line.position} renders as {produced!r}, expected {expected!r}."
            })

    return {"issue_count": len(issues), "issues": issues}
