"""Factories for constructing PromptManager instances from validated settings.

Updates:
  v0.2.0 - 2026-10-04 - Add command router builder for presentation-layer callers.
  v0.1.0 - 2026-09-14 - Build managers from settings with optional repository injection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .commands import PromptCommandRouter
from .exceptions import PromptStorageError
from .prompt_manager import PromptManager
from .repository import PromptRepository, RepositoryError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from config import PromptLibrarySettings

factory_logger = logging.getLogger("prompt_library.factory")


def build_prompt_manager(
    settings: PromptLibrarySettings,
    *,
    repository: PromptRepository | None = None,
) -> PromptManager:
    """Return a PromptManager configured from validated settings."""
    if repository is None:
        try:
            repository = PromptRepository(settings.db_path)
        except RepositoryError as exc:
            raise PromptStorageError(
                f"Unable to open prompt database at {settings.db_path}"
            ) from exc
    factory_logger.debug(
        "Prompt manager built",
        extra={"db_path": str(repository.db_path)},
    )
    return PromptManager(repository)


def build_command_router(
    settings: PromptLibrarySettings,
    *,
    manager: PromptManager | None = None,
) -> PromptCommandRouter:
    """Return a command router over ``manager`` (built from ``settings`` when omitted)."""
    resolved_manager = manager or build_prompt_manager(settings)
    return PromptCommandRouter(resolved_manager, export_indent=settings.export_indent)


__all__ = ["build_command_router", "build_prompt_manager"]
