"""Schema bootstrap and maintenance helpers for the repository.

Updates:
  v0.2.0 - 2026-09-28 - Add usage log table and catalogue statistics.
  v0.1.0 - 2026-09-14 - Extract schema management and reset helpers.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from .base import (
    PromptCatalogueStats,
    RepositoryError,
    logger,
    parse_optional_datetime as _parse_optional_datetime,
    transaction as _transaction,
)

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from pathlib import Path


class RepositoryMaintenanceMixin:
    """Tasks that create, inspect, and reset repository storage."""

    _db_path: Path

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        """Create required tables if they do not exist."""
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS prompts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                tags TEXT NOT NULL DEFAULT '[]',
                is_favorite INTEGER NOT NULL DEFAULT 0,
                score_avg REAL NOT NULL DEFAULT 0,
                score_count INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_prompts_updated_at ON prompts(updated_at);")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS prompt_versions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                prompt_id INTEGER NOT NULL,
                content TEXT NOT NULL,
                change_note TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL,
                FOREIGN KEY(prompt_id) REFERENCES prompts(id) ON DELETE CASCADE
            );
            """
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_prompt_versions_prompt_id "
            "ON prompt_versions(prompt_id);"
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS usage_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                prompt_id INTEGER NOT NULL,
                input_vars TEXT NOT NULL DEFAULT '{}',
                output_text TEXT NOT NULL,
                rating INTEGER,
                used_at TEXT NOT NULL,
                FOREIGN KEY(prompt_id) REFERENCES prompts(id) ON DELETE CASCADE
            );
            """
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_usage_logs_prompt_id ON usage_logs(prompt_id);"
        )

    def get_prompt_catalogue_stats(self) -> PromptCatalogueStats:
        """Return aggregate record counts for maintenance workflows."""
        try:
            with _transaction(self._db_path) as conn:
                prompt_row = conn.execute(
                    "SELECT COUNT(*) AS total, "
                    "COALESCE(SUM(is_favorite), 0) AS favorites, "
                    "COALESCE(SUM(CASE WHEN score_count > 0 THEN 1 ELSE 0 END), 0) AS rated, "
                    "MAX(updated_at) AS last_updated "
                    "FROM prompts;"
                ).fetchone()
                versions = conn.execute("SELECT COUNT(*) FROM prompt_versions;").fetchone()[0]
                usage = conn.execute("SELECT COUNT(*) FROM usage_logs;").fetchone()[0]
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to compute prompt statistics") from exc

        return PromptCatalogueStats(
            total_prompts=int(prompt_row["total"]),
            favorite_prompts=int(prompt_row["favorites"]),
            rated_prompts=int(prompt_row["rated"]),
            total_versions=int(versions),
            total_usage_logs=int(usage),
            last_updated_at=_parse_optional_datetime(prompt_row["last_updated"]),
        )

    def reset_all_data(self) -> None:
        """Clear all persisted prompts, versions, and usage logs."""
        try:
            with _transaction(self._db_path, immediate=True) as conn:
                conn.execute("DELETE FROM usage_logs;")
                conn.execute("DELETE FROM prompt_versions;")
                conn.execute("DELETE FROM prompts;")
            logger.info("Repository data reset", extra={"db_path": str(self._db_path)})
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to reset repository data") from exc


__all__ = ["RepositoryMaintenanceMixin"]
