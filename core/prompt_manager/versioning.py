"""Prompt version history helpers for Prompt Library.

Updates:
  v0.2.0 - 2026-10-02 - Restore versions through the regular update path.
  v0.1.0 - 2026-09-21 - Extract version listing APIs into mixin.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from ..exceptions import PromptStorageError, PromptVersionNotFoundError
from ..repository import RepositoryError, RepositoryNotFoundError

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from models.prompt_model import Prompt, PromptVersion

    from ..repository import PromptRepository

__all__ = ["PromptVersionMixin"]


class PromptVersionMixin:
    """Prompt version listing and restore helpers."""

    _repository: PromptRepository

    def list_prompt_versions(
        self,
        prompt_id: int,
        *,
        limit: int | None = None,
    ) -> list[PromptVersion]:
        """Return stored snapshots for the prompt, newest first.

        Unknown prompt ids yield an empty list rather than an error so callers can
        query history for a prompt that was just deleted.
        """
        try:
            return self._repository.list_prompt_versions(prompt_id, limit=limit)
        except RepositoryError as exc:
            raise PromptStorageError("Unable to load prompt versions") from exc

    def get_prompt_version(self, version_id: int) -> PromptVersion:
        """Return a stored prompt version by identifier."""
        try:
            return self._repository.get_prompt_version(version_id)
        except RepositoryNotFoundError as exc:
            raise PromptVersionNotFoundError(f"Prompt version {version_id} not found") from exc
        except RepositoryError as exc:
            raise PromptStorageError(f"Unable to load prompt version {version_id}") from exc

    def restore_prompt_version(
        self,
        version_id: int,
        *,
        change_note: str | None = None,
    ) -> Prompt:
        """Replace the live prompt content with the snapshot stored in ``version_id``.

        Restoring is an ordinary content-changing update, so the content being
        replaced is itself kept as a new version.
        """
        version = self.get_prompt_version(version_id)
        manager = cast("Any", self)
        prompt = manager.require_prompt(version.prompt_id)
        note = change_note if change_note else f"Restore version {version.id}"
        return manager.update_prompt(
            prompt.id,
            title=prompt.title,
            content=version.content,
            tags=prompt.tags,
            is_favorite=prompt.is_favorite,
            change_note=note,
        )
