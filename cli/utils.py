"""Shared CLI utility functions for Prompt Library commands.

Updates:
  v0.1.1 - 2026-10-04 - Add NAME=VALUE variable parsing for render and log commands.
  v0.1.0 - 2026-09-28 - Extract stdout logging, path descriptions, and score formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Iterable
    from logging import Logger


def print_and_log(logger: Logger, level: int, message: str) -> None:
    """Log *message* at *level* and mirror it to stdout."""
    logger.log(level, message)
    print(message)


def print_json(payload: Any) -> None:
    """Write *payload* to stdout as indented JSON."""
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def describe_path(
    path_value: object,
    *,
    expect_directory: bool,
    allow_missing_file: bool = False,
) -> str:
    """Return a human-friendly description of *path_value* suitability."""
    if path_value is None:
        return "not set"
    try:
        path = Path(str(path_value))
    except TypeError:
        return "not set"

    resolved = path.expanduser()
    if resolved.exists():
        if expect_directory and not resolved.is_dir():
            return f"{resolved} (exists but is not a directory)"
        if not expect_directory and resolved.is_dir():
            return f"{resolved} (exists but is a directory)"
        return f"{resolved} (exists)"

    message = f"{resolved} (missing)"
    if not expect_directory and allow_missing_file:
        message = f"{resolved} (missing - created on demand)"
    parent = resolved.parent
    if not parent.exists():
        message += f", parent missing: {parent}"
    return message


def parse_assignments(values: Iterable[str]) -> dict[str, str]:
    """Return a mapping from ``NAME=VALUE`` strings; later duplicates win."""
    parsed: dict[str, str] = {}
    for raw in values:
        name, separator, value = raw.partition("=")
        name = name.strip()
        if not separator or not name:
            raise ValueError(f"Expected NAME=VALUE, got {raw!r}")
        parsed[name] = value
    return parsed


def format_score(score_avg: float, score_count: int) -> str:
    """Return display text for a prompt score."""
    if score_count <= 0:
        return "unrated"
    return f"{score_avg:.2f} ({score_count})"
