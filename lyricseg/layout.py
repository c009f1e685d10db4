"""Host-side helpers turning segmented units into display text and rows."""
from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple

from .types import Line, SegmentationUnit

__all__ = ["render_line", "plain_text", "split_rows", "grid_positions", "render_lines"]


def render_line(units: Sequence[SegmentationUnit]) -> str:
    """
    Joins unit texts, placing a newline after each ``has_new_line`` unit and a
    space after each ``has_whitespace`` unit. A newline takes precedence over
    a space, and nothing is appended after the final unit.
    """
    parts: List[str] = []
    for i, unit in enumerate(units):
        parts.append(unit.text)
        if i == len(units) - 1:
            break
        if unit.has_new_line:
            parts.append("\n")
        elif unit.has_whitespace:
            parts.append(" ")
    return "".join(parts)


def plain_text(units: Sequence[SegmentationUnit]) -> str:
    """Joins unit texts with a single space wherever ``has_whitespace`` is set."""
    parts: List[str] = []
    for i, unit in enumerate(units):
        parts.append(unit.text)
        if unit.has_whitespace and i < len(units) - 1:
            parts.append(" ")
    return "".join(parts)


def split_rows(units: Sequence[SegmentationUnit]) -> List[List[SegmentationUnit]]:
    rows: List[List[SegmentationUnit]] = []
    row: List[SegmentationUnit] = []
    for unit in units:
        row.append(unit)
        if unit.has_new_line:
            rows.append(row)
            row = []
    if row:
        rows.append(row)
    return rows


def grid_positions(units: Sequence[SegmentationUnit]) -> List[Tuple[int, int, SegmentationUnit]]:
    """Returns ``(row, column, unit)`` triples, both 1-based."""
    return [
        (row_idx, col_idx, unit)
        for row_idx, row in enumerate(split_rows(units), start=1)
        for col_idx, unit in enumerate(row, start=1)
    ]


def render_lines(lines: Iterable[Line]) -> str:
    """Renders each line and separates lines with a blank line."""
    return "\n\n".join(render_line(line.units) for line in lines)
