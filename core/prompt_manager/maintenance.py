"""Maintenance mixin providing operational utilities for Prompt Library.

Updates:
  v0.2.0 - 2026-10-04 - Add online SQLite backups.
  v0.1.0 - 2026-09-28 - Expose catalogue statistics and repository reset.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import PromptStorageError
from ..repository import RepositoryError

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from ..repository import PromptCatalogueStats, PromptRepository

logger = logging.getLogger("prompt_library.maintenance")

__all__ = ["MaintenanceMixin"]


class MaintenanceMixin:
    """Statistics, reset, and backup helpers over the SQLite repository."""

    _repository: PromptRepository

    def get_prompt_catalogue_stats(self) -> PromptCatalogueStats:
        """Return aggregate prompt statistics for maintenance workflows."""
        try:
            return self._repository.get_prompt_catalogue_stats()
        except RepositoryError as exc:
            raise PromptStorageError("Unable to compute prompt catalogue statistics") from exc

    def reset_prompt_repository(self) -> None:
        """Clear all prompts, versions, and usage logs from SQLite storage."""
        try:
            self._repository.reset_all_data()
        except RepositoryError as exc:
            raise PromptStorageError("Unable to reset prompt repository") from exc
        logger.info("Prompt repository reset completed.")

    def backup_database(self, destination: str | Path) -> Path:
        """Copy the live SQLite database to ``destination`` and return the resolved path."""
        target = Path(destination).expanduser().resolve()
        if target == self._repository.db_path.resolve():
            raise PromptStorageError("Backup destination must differ from the live database")
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with (
                closing(sqlite3.connect(str(self._repository.db_path))) as source,
                closing(sqlite3.connect(str(target))) as copy,
            ):
                source.backup(copy)
        except sqlite3.Error as exc:
            raise PromptStorageError(f"Unable to back up database to {target}") from exc
        logger.info("Database backup written", extra={"destination": str(target)})
        return target
