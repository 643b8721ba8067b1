"""Shared repository helpers, dataclasses, and error hierarchy.

Updates:
  v0.2.1 - 2026-10-18 - Treat value binding overflows as repository errors.
  v0.2.0 - 2026-09-28 - Add transaction helper with immediate write locks.
  v0.1.0 - 2026-09-14 - Extract logger, helpers, and exceptions for the repository package.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import closing, contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger("prompt_library.repository")


@dataclass(slots=True, frozen=True)
class PromptCatalogueStats:
    """Aggregate record counts for maintenance views."""

    total_prompts: int
    favorite_prompts: int
    rated_prompts: int
    total_versions: int
    total_usage_logs: int
    last_updated_at: datetime | None


class RepositoryError(Exception):
    """Base exception for repository failures."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when a requested record cannot be located."""


# Binding a value SQLite cannot store raises OverflowError (integers outside 64 bits)
# or UnicodeEncodeError (lone surrogates) before sqlite3 reports anything.
SQLITE_ERRORS: tuple[type[Exception], ...] = (sqlite3.Error, OverflowError, UnicodeEncodeError)


def ensure_directory(path: Path) -> None:
    """Ensure the directory for the SQLite database exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def connect(db_path: Path) -> sqlite3.Connection:
    """Return a configured SQLite connection."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    return conn


@contextmanager
def transaction(db_path: Path, *, immediate: bool = False) -> Iterator[sqlite3.Connection]:
    """Yield a connection whose statements commit together or not at all.

    ``immediate`` takes the write lock up front so reads performed inside the
    block see the same state the writes are applied to.
    """
    with closing(connect(db_path)) as conn:
        if immediate:
            conn.execute("BEGIN IMMEDIATE;")
        with conn:
            yield conn


def json_dumps(value: Any | None) -> str | None:
    """Serialize arbitrary values to JSON strings (or None)."""
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def parse_optional_datetime(value: Any) -> datetime | None:
    """Return a timezone-aware datetime parsed from SQLite rows when possible."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed
    return None


__all__ = [
    "PromptCatalogueStats",
    "RepositoryError",
    "RepositoryNotFoundError",
    "SQLITE_ERRORS",
    "connect",
    "ensure_directory",
    "json_dumps",
    "logger",
    "parse_optional_datetime",
    "transaction",
]
