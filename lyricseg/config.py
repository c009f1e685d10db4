"""Loads engine settings and rule tables from YAML.

The `Config` dataclass carries the two ordered rule tables and the handful of
policy switches the engine exposes. `load_config` reads a `config.yaml` file
and, when `paths.rules` points at a rule file, replaces the built-in tables
with the ones defined there.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml

from .default_rules import DEFAULT_BREAK_RULES, DEFAULT_WHITESPACE_RULES
from .rules import Rule, rules_from_list, rules_to_list

@dataclass
class Config:
    """
    Settings for one segmentation run.

    Attributes:
        break_rules: Ordered table deciding where line breaks go.
        whitespace_rules: Ordered table deciding where visible spaces go.
        max_bracket_content_length: When set, only bracket or quote ranges
            whose content is at most this many characters suppress breaks.
            ``None`` lets every range suppress them.
        suppress_whitespace_in_brackets: Also drop whitespace flags for tokens
            inside a bracket or quote range.
        break_after_closing_bracket: Register a break after a closing bracket
            that is followed by non-alphanumeric text.
        time_precision: Decimal places kept when interpolating unit timings.
        show_progress: Display a tqdm progress bar over the spans.
        paths: Relative paths to auxiliary files (currently only ``rules``).
    """
    break_rules: Tuple[Rule, ...] = DEFAULT_BREAK_RULES
    whitespace_rules: Tuple[Rule, ...] = DEFAULT_WHITESPACE_RULES
    max_bracket_content_length: Optional[int] = None
    suppress_whitespace_in_brackets: bool = False
    break_after_closing_bracket: bool = True
    time_precision: int = 3
    show_progress: bool = False
    paths: Dict[str, str] = field(default_factory=dict)

def _read_yaml(path: Path, what: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"{what} file not found at: {path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file at {path}: {e}")

    if y is None:
        return {}
    if not isinstance(y, dict):
        raise TypeError(f"{what} file {path} must be a dictionary.")
    return y

def load_rule_tables(path: str) -> Tuple[Optional[Tuple[Rule, ...]], Optional[Tuple[Rule, ...]]]:
    """
    Reads the ``break_rules`` and ``whitespace_rules`` tables from a YAML file.

    A table missing from the file is returned as ``None`` so the caller can
    keep its default.

    Raises:
        FileNotFoundError: If the rule file does not exist.
        ValueError: If the YAML is malformed or a rule is invalid
                    (:class:`~lyricseg.exceptions.RuleConfigError`).
        TypeError: If the root of the YAML file is not a dictionary.
    """
    y = _read_yaml(Path(path), "Rule")
    break_rules = rules_from_list(y["break_rules"], "break_rules") if "break_rules" in y else None
    whitespace_rules = (
        rules_from_list(y["whitespace_rules"], "whitespace_rules") if "whitespace_rules" in y else None
    )
    return break_rules, whitespace_rules

def save_rule_tables(path: str, break_rules, whitespace_rules) -> None:
    """Writes both tables in the YAML schema read by :func:`load_rule_tables`."""
    data = {
        "break_rules": rules_to_list(break_rules),
        "whitespace_rules": rules_to_list(whitespace_rules),
    }
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)

def load_config(path: str = "config.yaml") -> Config:
    """
    Loads a `config.yaml` file into a `Config` object.

    Rule tables default to the built-in ones. When ``paths.rules`` is set, the
    rule file is resolved relative to the config file; if it exists, the
    tables it defines replace the defaults, otherwise a warning is printed and
    the defaults are kept.

    Args:
        path: The path to the main `config.yaml` file.

    Returns:
        A fully populated `Config` object.

    Raises:
        FileNotFoundError: If the specified `config.yaml` file cannot be found.
        ValueError: If there is an error parsing the YAML file or a rule table.
        TypeError: If the root of the YAML file is not a dictionary.
    """
    y = _read_yaml(Path(path), "Configuration")

    raw_paths = y.get("paths") or {}
    if not isinstance(raw_paths, dict):
        raise TypeError(f"The 'paths' key in {path} must be a dictionary, got {type(raw_paths).__name__}.")
    paths = {str(k): str(v) for k, v in raw_paths.items()}
    break_rules, whitespace_rules = DEFAULT_BREAK_RULES, DEFAULT_WHITESPACE_RULES

    rules_path_str = paths.get("rules")
    if rules_path_str:
        full_rules_path = Path(path).parent / rules_path_str
        if full_rules_path.exists():
            loaded_break, loaded_whitespace = load_rule_tables(str(full_rules_path))
            break_rules = loaded_break if loaded_break is not None else break_rules
            whitespace_rules = loaded_whitespace if loaded_whitespace is not None else whitespace_rules
        else:
            print(f"Warning: Could not load rules file from {full_rules_path}. Using built-in rule tables.")

    max_bracket = y.get("max_bracket_content_length")

    return Config(
        break_rules=break_rules,
        whitespace_rules=whitespace_rules,
        max_bracket_content_length=int(max_bracket) if max_bracket is not None else None,
        suppress_whitespace_in_brackets=bool(y.get("suppress_whitespace_in_brackets", False)),
        break_after_closing_bracket=bool(y.get("break_after_closing_bracket", True)),
        time_precision=int(y.get("time_precision", 3)),
        show_progress=bool(y.get("show_progress", False)),
        paths=paths,
    )
