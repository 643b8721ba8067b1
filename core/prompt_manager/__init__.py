"""Prompt Library package façade and orchestration layer.

The :class:`PromptManager` is a stateless service over a
:class:`~core.repository.PromptRepository`. Every public operation reads or
writes through the repository, so separate calls share nothing but the
persisted record set.

Updates:
  v0.4.1 - 2026-10-18 - Document close as a lifecycle marker over per-call connections.
  v0.4.0 - 2026-10-04 - Add maintenance mixin with statistics, reset, and backups.
  v0.3.0 - 2026-10-02 - Add version restore and prompt rendering.
  v0.2.0 - 2026-09-28 - Add usage logging, scoring, and tag index mixins.
  v0.1.0 - 2026-09-14 - Compose lifecycle, search, and versioning mixins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import (
    MalformedInputError,
    PromptLibraryError,
    PromptNotFoundError,
    PromptStorageError,
    PromptVersionNotFoundError,
)
from ..repository import PromptRepository
from ..templating import TemplateRenderer
from .lifecycle import PromptLifecycleMixin
from .maintenance import MaintenanceMixin
from .search import PromptSearchMixin
from .usage import PromptUsageMixin
from .versioning import PromptVersionMixin

if TYPE_CHECKING:  # pragma: no cover - typing only
    from pathlib import Path
    from types import TracebackType

logger = logging.getLogger("prompt_library.manager")


class PromptManager(
    PromptLifecycleMixin,
    PromptSearchMixin,
    PromptVersionMixin,
    PromptUsageMixin,
    MaintenanceMixin,
):
    """Manage prompt persistence, history, usage scoring, and listings."""

    def __init__(
        self,
        repository: PromptRepository,
        *,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        """Bind the manager to an initialised repository."""
        self._repository = repository
        self._renderer = renderer or TemplateRenderer()
        self._closed = False
        logger.debug("Prompt manager ready", extra={"db_path": str(repository.db_path)})

    @classmethod
    def from_path(cls, db_path: str | Path) -> PromptManager:
        """Create a manager backed by a new repository at ``db_path``."""
        return cls(PromptRepository(db_path))

    @property
    def repository(self) -> PromptRepository:
        """Expose the SQLite repository."""
        return self._repository

    @property
    def db_path(self) -> Path:
        """Return the SQLite database location."""
        return self._repository.db_path

    @property
    def closed(self) -> bool:
        """Return True once :meth:`close` has been called.

        The flag is a lifecycle marker only. Each operation opens and releases its
        own SQLite connection, so a closed manager can still serve calls.
        """
        return self._closed

    def close(self) -> None:
        """Mark the manager closed.

        No connection is held between calls, so there is nothing to release and
        repeated calls are no-ops.
        """
        if self._closed:
            return
        self._closed = True
        logger.debug("Prompt manager closed", extra={"db_path": str(self.db_path)})

    def __enter__(self) -> PromptManager:
        """Support use of PromptManager as a context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close resources when exiting a context manager block."""
        self.close()


__all__ = [
    "MalformedInputError",
    "PromptLibraryError",
    "PromptManager",
    "PromptNotFoundError",
    "PromptStorageError",
    "PromptVersionNotFoundError",
]
