"""Usage logging, scoring, and rendering helpers for Prompt Library.

Updates:
  v0.2.0 - 2026-10-02 - Render prompts against caller-supplied variables.
  v0.1.0 - 2026-09-28 - Record usage events and expose per-prompt usage history.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from ..exceptions import MalformedInputError, PromptNotFoundError, PromptStorageError
from ..repository import RepositoryError, RepositoryNotFoundError
from ..templating import TemplateRenderer

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Mapping

    from models.prompt_model import UsageLogEntry

    from ..repository import PromptRepository
    from ..templating import TemplateRenderResult

logger = logging.getLogger("prompt_library.usage")

MIN_RATING = 1
MAX_RATING = 5

__all__ = ["MAX_RATING", "MIN_RATING", "PromptUsageMixin"]


def validate_rating(rating: Any) -> int | None:
    """Return ``rating`` when it is ``None`` or an integer within the accepted range."""
    if rating is None:
        return None
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise MalformedInputError(f"Rating must be an integer, got {rating!r}")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise MalformedInputError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
        )
    return rating


class PromptUsageMixin:
    """Usage log persistence, running score updates, and template rendering."""

    _repository: PromptRepository
    _renderer: TemplateRenderer

    def log_usage(
        self,
        prompt_id: int,
        *,
        input_vars: Mapping[str, str] | None = None,
        output_text: str = "",
        rating: int | None = None,
    ) -> UsageLogEntry:
        """Record a render-and-use event; a rating folds into the prompt score."""
        checked_rating = validate_rating(rating)
        try:
            entry = self._repository.add_usage_log(
                prompt_id,
                input_vars=dict(input_vars or {}),
                output_text=output_text,
                rating=checked_rating,
            )
        except RepositoryNotFoundError as exc:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found") from exc
        except RepositoryError as exc:
            raise PromptStorageError(f"Failed to log usage for prompt {prompt_id}") from exc
        logger.debug(
            "Usage logged",
            extra={"prompt_id": prompt_id, "usage_id": entry.id, "rating": checked_rating},
        )
        return entry

    def list_usage_logs(
        self,
        prompt_id: int,
        *,
        limit: int | None = None,
    ) -> list[UsageLogEntry]:
        """Return usage history for the prompt, newest first (empty for unknown ids)."""
        try:
            return self._repository.list_usage_logs_for_prompt(prompt_id, limit=limit)
        except RepositoryError as exc:
            raise PromptStorageError(f"Unable to load usage logs for prompt {prompt_id}") from exc

    def render_prompt(
        self,
        prompt_id: int,
        values: Mapping[str, str] | None = None,
    ) -> TemplateRenderResult:
        """Render the stored prompt content against ``values``."""
        prompt = cast("Any", self).require_prompt(prompt_id)
        return self._renderer.render(prompt.content, dict(values or {}))
