"""SQLite-backed repository for persistent prompt storage.

Updates:
  v0.3.0 - 2026-09-28 - Compose usage log store and switch writes to immediate transactions.
  v0.2.0 - 2026-09-21 - Add prompt version snapshots.
  v0.1.0 - 2026-09-14 - Modularize repository via prompt/usage/maintenance mixins.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .base import (
    PromptCatalogueStats,
    RepositoryError,
    RepositoryNotFoundError,
    ensure_directory as _ensure_directory,
    transaction as _transaction,
)
from .maintenance import RepositoryMaintenanceMixin
from .prompts import PromptStoreMixin
from .usage_logs import UsageLogStoreMixin


class PromptRepository(
    RepositoryMaintenanceMixin,
    PromptStoreMixin,
    UsageLogStoreMixin,
):
    """Compose repository mixins for SQLite-backed storage."""

    def __init__(self, db_path: str | Path) -> None:
        """Initialise repository storage and ensure the schema exists."""
        self._db_path = Path(db_path)
        _ensure_directory(self._db_path)
        try:
            with _transaction(self._db_path) as conn:
                self._ensure_schema(conn)
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to initialise SQLite schema at {self._db_path}") from exc

    @property
    def db_path(self) -> Path:
        """Return the SQLite database location."""
        return self._db_path


__all__ = [
    "PromptCatalogueStats",
    "PromptRepository",
    "RepositoryError",
    "RepositoryNotFoundError",
]
