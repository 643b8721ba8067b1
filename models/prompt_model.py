"""Prompt data model definitions.

Updates: v0.3.1 - 2026-10-18 - Write timestamps in UTC regardless of input offset.
Updates: v0.3.0 - 2026-09-28 - Add usage log entries and the derived TagInfo view.
Updates: v0.2.0 - 2026-09-21 - Store version snapshots as full content bodies.
Updates: v0.1.0 - 2026-09-14 - Initial Prompt schema with serialization helpers.
"""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


def _utc_now() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(UTC)


def utc_timestamp() -> str:
    """Return the current UTC time as a fixed-width ISO-8601 string."""
    return _utc_now().isoformat(timespec="microseconds")


def _ensure_datetime(value: Any) -> datetime:
    """Parse incoming datetime values (isoformat strings or datetime)."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if value is None:
        return _utc_now()
    parsed = datetime.fromisoformat(str(value))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def format_timestamp(value: datetime) -> str:
    """Return ``value`` as a fixed-width UTC ISO-8601 string.

    Stored timestamps are compared as text, so every value is written in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def normalize_tags(tags: Iterable[Any] | None) -> list[str]:
    """Return trimmed tags with case-insensitive duplicates removed.

    The first spelling of a tag wins and the original order is preserved, so
    ``["x", "X", " y "]`` becomes ``["x", "y"]``.
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    normalized: list[str] = []
    seen: set[str] = set()
    for raw in tags:
        text = str(raw).strip()
        if not text:
            continue
        key = text.casefold()
        if key in seen:
            continue
        seen.add(key)
        normalized.append(text)
    return normalized


def _deserialize_tags(value: Any) -> list[str]:
    """Coerce stored tag payloads (JSON text or sequences) into a tag list."""
    if value is None or value in ("", "null"):
        return []
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            return normalize_tags([value])
        if isinstance(parsed, list):
            return normalize_tags(parsed)
        return normalize_tags([parsed])
    return normalize_tags(value)


def _deserialize_vars(value: Any) -> dict[str, str]:
    if value is None or value in ("", "null"):
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return {}
    if isinstance(value, Mapping):
        return {str(key): "" if item is None else str(item) for key, item in value.items()}
    return {}


class SortBy(str, Enum):
    """Orderings supported by prompt listings."""

    UPDATED = "updated"
    SCORE = "score"
    CREATED = "created"

    @classmethod
    def from_value(cls, value: str | SortBy | None) -> SortBy:
        """Return the member matching ``value`` (``None`` maps to ``UPDATED``)."""
        if value is None:
            return cls.UPDATED
        if isinstance(value, SortBy):
            return value
        return cls(str(value).strip().lower())


@dataclass(slots=True)
class Prompt:
    """A titled, tagged text template with favorite flag and derived rating."""

    id: int
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    is_favorite: bool = False
    score_avg: float = 0.0
    score_count: int = 0
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        self.tags = normalize_tags(self.tags)

    @property
    def is_rated(self) -> bool:
        """Return True once at least one rated usage has been logged."""
        return self.score_count > 0

    def has_tag(self, tag: str) -> bool:
        """Return True when ``tag`` matches one of the prompt tags, ignoring case."""
        needle = tag.strip().casefold()
        return any(existing.casefold() == needle for existing in self.tags)

    def matches_text(self, needle: str) -> bool:
        """Return True when ``needle`` (already case-folded) occurs in title, content, or tags."""
        if needle in self.title.casefold() or needle in self.content.casefold():
            return True
        return any(needle in tag.casefold() for tag in self.tags)

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase mapping exposed through the command interface."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "isFavorite": self.is_favorite,
            "scoreAvg": self.score_avg,
            "scoreCount": self.score_count,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Prompt:
        """Hydrate a Prompt from a SQLite row payload."""
        return cls(
            id=int(row["id"]),
            title=str(row["title"]),
            content=str(row["content"]),
            tags=_deserialize_tags(row["tags"]),
            is_favorite=bool(row["is_favorite"]),
            score_avg=float(row["score_avg"] or 0.0),
            score_count=int(row["score_count"] or 0),
            created_at=_ensure_datetime(row["created_at"]),
            updated_at=_ensure_datetime(row["updated_at"]),
        )


@dataclass(slots=True)
class PromptVersion:
    """Immutable snapshot of a prompt's content prior to an edit."""

    id: int
    prompt_id: int
    content: str
    change_note: str
    created_at: datetime

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase mapping exposed through the command interface."""
        return {
            "id": self.id,
            "promptId": self.prompt_id,
            "content": self.content,
            "changeNote": self.change_note,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> PromptVersion:
        """Instantiate a version from a SQLite row payload."""
        return cls(
            id=int(row["id"]),
            prompt_id=int(row["prompt_id"]),
            content=str(row["content"]),
            change_note=str(row["change_note"] or ""),
            created_at=_ensure_datetime(row["created_at"]),
        )


@dataclass(slots=True)
class UsageLogEntry:
    """Record of one render-and-use event, optionally rated."""

    id: int
    prompt_id: int
    input_vars: dict[str, str]
    output_text: str
    rating: int | None = None
    used_at: datetime = field(default_factory=_utc_now)

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase mapping exposed through the command interface."""
        return {
            "id": self.id,
            "promptId": self.prompt_id,
            "inputVars": dict(self.input_vars),
            "outputText": self.output_text,
            "rating": self.rating,
            "usedAt": format_timestamp(self.used_at),
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> UsageLogEntry:
        """Hydrate a usage log entry from a SQLite row payload."""
        rating = row["rating"]
        return cls(
            id=int(row["id"]),
            prompt_id=int(row["prompt_id"]),
            input_vars=_deserialize_vars(row["input_vars"]),
            output_text=str(row["output_text"]),
            rating=int(rating) if rating is not None else None,
            used_at=_ensure_datetime(row["used_at"]),
        )


@dataclass(slots=True)
class VersionDraft:
    """Version history entry carried by an imported prompt."""

    content: str
    change_note: str = ""
    created_at: datetime | None = None


@dataclass(slots=True)
class PromptDraft:
    """Prompt fields supplied for bulk creation, before an id is assigned."""

    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    is_favorite: bool = False
    score_avg: float = 0.0
    score_count: int = 0
    versions: list[VersionDraft] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tags = normalize_tags(self.tags)
        self.score_count = max(int(self.score_count), 0)
        if self.score_count == 0:
            self.score_avg = 0.0


@dataclass(slots=True, frozen=True)
class TagInfo:
    """Derived count of live prompts carrying a tag."""

    name: str
    count: int

    def to_payload(self) -> dict[str, Any]:
        """Return the mapping exposed through the command interface."""
        return {"name": self.name, "count": self.count}


__all__ = [
    "Prompt",
    "PromptDraft",
    "PromptVersion",
    "SortBy",
    "TagInfo",
    "UsageLogEntry",
    "VersionDraft",
    "format_timestamp",
    "normalize_tags",
    "utc_timestamp",
]
