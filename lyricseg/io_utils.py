"""Provides utility functions for loading and saving engine data as JSON.

Three documents are supported, each keyed by a single top-level name:

- ``{"spans": [{"text", "begin", "end", "span_id"?}, ...]}``
- ``{"tokens": [[{"surface_form", "word_position", <feature slots>...}, ...], ...]}``
  with one inner list per span
- ``{"lines": [{"position", "span", "units": [...]}, ...]}``

Loaders ignore unknown keys so documents produced by newer versions (or by
other tools) still load.
"""
import json
from dataclasses import asdict
from typing import Any, Dict, List, Sequence

from .types import FeatureToken, FieldName, Line, SegmentationUnit, TimedSpan

_FEATURE_KEYS = {f.value for f in FieldName} - {FieldName.SURFACE_FORM.value}


def _load_json(path: str, what: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"{what} file not found at: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from {path}: {e}")


def _items(data: Any, key: str, path: str) -> List[Any]:
    items = data.get(key) if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise TypeError(f"Expected a '{key}' key with a list of objects in {path}")
    return items


def span_from_dict(data: Dict[str, Any]) -> TimedSpan:
    span_id = data.get("span_id")
    return TimedSpan(
        text=str(data["text"]),
        begin=float(data["begin"]),
        end=float(data["end"]),
        span_id=str(span_id) if span_id is not None else None,
    )


def token_from_dict(data: Dict[str, Any]) -> FeatureToken:
    fields = {FieldName(k): v for k, v in data.items() if k in _FEATURE_KEYS and v is not None}
    return FeatureToken(
        surface_form=str(data["surface_form"]),
        word_position=int(data["word_position"]),
        fields=fields,
    )


def token_to_dict(token: FeatureToken) -> Dict[str, Any]:
    out: Dict[str, Any] = {"surface_form": token.surface_form, "word_position": token.word_position}
    for name in FieldName:
        if name is FieldName.SURFACE_FORM:
            continue
        value = token.fields.get(name)
        if value is not None:
            out[name.value] = value
    return out


def load_spans(path: str) -> List[TimedSpan]:
    """
    Loads timed spans from a JSON file.

    Args:
        path: The path to the input JSON file.

    Returns:
        A list of `TimedSpan` instances in file order.

    Raises:
        FileNotFoundError: If the file at the specified path does not exist.
        ValueError: If the file is not valid JSON.
        TypeError: If the "spans" key is missing or not a list, or an item is
                   not a dictionary.
        KeyError: If a span lacks ``text``, ``begin`` or ``end``.
    """
    data = _load_json(path, "Span")
    out = []
    for i, item in enumerate(_items(data, "spans", path)):
        if not isinstance(item, dict):
            raise TypeError(f"Span item at index {i} in {path} is not a dictionary.")
        try:
            out.append(span_from_dict(item))
        except KeyError as e:
            raise KeyError(f"Span item at index {i} in {path} is missing {e}")
    return out


def load_token_lists(path: str) -> List[List[FeatureToken]]:
    """
    Loads per-span token lists from a JSON file.

    Raises:
        FileNotFoundError: If the file at the specified path does not exist.
        ValueError: If the file is not valid JSON.
        TypeError: If the structure is not a list of lists of dictionaries.
        KeyError: If a token lacks ``surface_form`` or ``word_position``.
    """
    data = _load_json(path, "Token")
    out = []
    for i, tokens in enumerate(_items(data, "tokens", path)):
        if not isinstance(tokens, list):
            raise TypeError(f"Token list at index {i} in {path} is not a list.")
        group = []
        for j, t_dict in enumerate(tokens):
            if not isinstance(t_dict, dict):
                raise TypeError(f"Token item {j} of list {i} in {path} is not a dictionary.")
            try:
                group.append(token_from_dict(t_dict))
            except KeyError as e:
                raise KeyError(f"Token item {j} of list {i} in {path} is missing {e}")
        out.append(group)
    return out


def save_token_lists(path: str, token_lists: Sequence[Sequence[FeatureToken]]) -> None:
    data = {"tokens": [[token_to_dict(t) for t in tokens] for tokens in token_lists]}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def line_to_dict(line: Line) -> Dict[str, Any]:
    return {
        "position": line.position,
        "span": asdict(line.span),
        "units": [asdict(u) for u in line.units],
    }


def load_lines(path: str) -> List[Line]:
    """Loads lines previously written by :func:`save_lines`."""
    data = _load_json(path, "Lines")
    out = []
    for i, item in enumerate(_items(data, "lines", path)):
        if not isinstance(item, dict):
            raise TypeError(f"Line item at index {i} in {path} is not a dictionary.")
        units = tuple(
            SegmentationUnit(
                text=str(u["text"]),
                begin=float(u["begin"]),
                end=float(u["end"]),
                has_new_line=bool(u.get("has_new_line", False)),
                has_whitespace=bool(u.get("has_whitespace", False)),
            )
            for u in item.get("units", [])
        )
        out.append(Line(position=int(item["position"]), span=span_from_dict(item["span"]), units=units))
    return out


def save_lines(path: str, lines: Sequence[Line]) -> None:
    """
    Saves segmented lines to a JSON file.

    The root of the JSON is a dictionary with a single key, "lines". The
    output is indented and keeps non-ASCII characters readable.

    Args:
        path: The destination path for the output JSON file.
        lines: The lines to save.
    """
    data = {"lines": [line_to_dict(line) for line in lines]}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
