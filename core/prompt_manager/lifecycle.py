"""Prompt lifecycle helpers for Prompt Library.

Updates:
  v0.2.0 - 2026-10-02 - Add bulk creation used by catalogue imports.
  v0.1.0 - 2026-09-14 - Extract prompt CRUD and upsert APIs into mixin.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import PromptNotFoundError, PromptStorageError
from ..repository import RepositoryError, RepositoryNotFoundError

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Sequence

    from models.prompt_model import Prompt, PromptDraft

    from ..repository import PromptRepository

logger = logging.getLogger("prompt_library.manager")

__all__ = ["PromptLifecycleMixin"]


class PromptLifecycleMixin:
    """Prompt CRUD orchestration over the SQLite repository."""

    _repository: PromptRepository

    def create_prompt(
        self,
        *,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        is_favorite: bool = False,
    ) -> Prompt:
        """Persist a new prompt. No version is recorded for the initial content."""
        try:
            prompt = self._repository.add(
                title=title,
                content=content,
                tags=tags,
                is_favorite=is_favorite,
            )
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to persist prompt {title!r}") from exc
        logger.debug("Prompt created", extra={"prompt_id": prompt.id})
        return prompt

    def create_prompts(self, drafts: Sequence[PromptDraft]) -> list[Prompt]:
        """Persist several prompts atomically; either all are stored or none are."""
        try:
            prompts = self._repository.add_many(drafts)
        except RepositoryError as exc:
            raise PromptStorageError("Failed to persist prompt batch") from exc
        logger.debug("Prompt batch created", extra={"count": len(prompts)})
        return prompts

    def get_prompt(self, prompt_id: int) -> Prompt | None:
        """Return the prompt with ``prompt_id`` or ``None`` when it does not exist."""
        try:
            return self._repository.get(prompt_id)
        except RepositoryNotFoundError:
            return None
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to fetch prompt {prompt_id}") from exc

    def require_prompt(self, prompt_id: int) -> Prompt:
        """Return the prompt with ``prompt_id`` or raise :class:`PromptNotFoundError`."""
        prompt = self.get_prompt(prompt_id)
        if prompt is None:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found")
        return prompt

    def update_prompt(
        self,
        prompt_id: int,
        *,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        is_favorite: bool = False,
        change_note: str | None = None,
    ) -> Prompt:
        """Overwrite a prompt, recording its previous content when the body changes."""
        try:
            prompt = self._repository.update(
                prompt_id,
                title=title,
                content=content,
                tags=tags,
                is_favorite=is_favorite,
                change_note=change_note,
            )
        except RepositoryNotFoundError as exc:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found") from exc
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to update prompt {prompt_id}") from exc
        logger.debug("Prompt updated", extra={"prompt_id": prompt_id})
        return prompt

    def upsert_prompt(
        self,
        prompt_id: int | None,
        *,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        is_favorite: bool = False,
        change_note: str | None = None,
    ) -> Prompt:
        """Create a prompt when ``prompt_id`` is ``None``; otherwise update it."""
        if prompt_id is None:
            return self.create_prompt(
                title=title,
                content=content,
                tags=tags,
                is_favorite=is_favorite,
            )
        return self.update_prompt(
            prompt_id,
            title=title,
            content=content,
            tags=tags,
            is_favorite=is_favorite,
            change_note=change_note,
        )

    def delete_prompt(self, prompt_id: int) -> None:
        """Remove a prompt together with its version history and usage logs."""
        try:
            self._repository.delete(prompt_id)
        except RepositoryNotFoundError as exc:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found") from exc
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to delete prompt {prompt_id}") from exc
        logger.info("Prompt deleted", extra={"prompt_id": prompt_id})
