"""Prompt filtering, ordering, and tag aggregation helpers for Prompt Library.

Updates:
  v0.2.0 - 2026-09-28 - Order score listings with unrated prompts last.
  v0.1.0 - 2026-09-14 - Extract substring search and tag index into mixin.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from models.prompt_model import Prompt, SortBy, TagInfo

from ..exceptions import MalformedInputError, PromptStorageError
from ..repository import RepositoryError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..repository import PromptRepository

logger = logging.getLogger("prompt_library.search")

__all__ = ["PromptSearchMixin", "build_tag_index", "sort_prompts"]


def _score_key(prompt: Prompt) -> tuple[Any, ...]:
    rated = prompt.is_rated
    return (rated, prompt.score_avg if rated else 0.0, prompt.updated_at, prompt.id)


def sort_prompts(prompts: Iterable[Prompt], sort_by: SortBy) -> list[Prompt]:
    """Return ``prompts`` ordered for display; the final tie-break is id descending."""
    if sort_by is SortBy.SCORE:
        return sorted(prompts, key=_score_key, reverse=True)
    if sort_by is SortBy.CREATED:
        return sorted(prompts, key=lambda item: (item.created_at, item.id), reverse=True)
    return sorted(prompts, key=lambda item: (item.updated_at, item.id), reverse=True)


def build_tag_index(prompts: Iterable[Prompt]) -> list[TagInfo]:
    """Count prompts per tag, folding case; the first spelling seen is kept."""
    names: dict[str, str] = {}
    counts: dict[str, int] = {}
    for prompt in prompts:
        for tag in prompt.tags:
            key = tag.casefold()
            names.setdefault(key, tag)
            counts[key] = counts.get(key, 0) + 1
    ordered = sorted(counts, key=lambda key: (-counts[key], names[key].casefold(), names[key]))
    return [TagInfo(name=names[key], count=counts[key]) for key in ordered]


class PromptSearchMixin:
    """Substring search, tag filtering, and ordering of prompt listings."""

    _repository: PromptRepository

    def _load_all_prompts(self) -> list[Prompt]:
        try:
            return self._repository.list()
        except RepositoryError as exc:
            raise PromptStorageError("Unable to load prompts") from exc

    def list_prompts(
        self,
        search: str | None = None,
        tag: str | None = None,
        sort_by: SortBy | str | None = SortBy.UPDATED,
    ) -> list[Prompt]:
        """Return prompts matching every supplied filter in the requested order.

        ``search`` matches case-insensitively against title, content, and tags.
        ``tag`` requires a case-insensitive exact tag match. Blank filters are
        ignored.
        """
        try:
            order = SortBy.from_value(sort_by)
        except ValueError as exc:
            raise MalformedInputError(f"Unsupported sort order: {sort_by!r}") from exc

        needle = (search or "").strip().casefold()
        tag_filter = (tag or "").strip()
        prompts = self._load_all_prompts()
        if needle:
            prompts = [prompt for prompt in prompts if prompt.matches_text(needle)]
        if tag_filter:
            prompts = [prompt for prompt in prompts if prompt.has_tag(tag_filter)]
        logger.debug(
            "Prompt listing computed",
            extra={"results": len(prompts), "sort_by": order.value},
        )
        return sort_prompts(prompts, order)

    def list_tags(self) -> list[TagInfo]:
        """Return tag usage counts, most used first, then by name.

        Prompts are scanned oldest first, so the earliest spelling of a tag is shown.
        """
        prompts = sorted(self._load_all_prompts(), key=lambda prompt: prompt.id)
        return build_tag_index(prompts)
