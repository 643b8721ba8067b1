"""Export and import prompt catalogues as portable JSON documents.

Documents take the form ``{"formatVersion": 1, "exportedAt": ..., "prompts": [...]}``.
Imports also accept a bare list of prompt objects. Every imported record becomes a
new prompt with a fresh id and timestamps; carried version history is re-attached.

Updates:
  v0.3.1 - 2026-10-18 - Normalise carried timestamps to UTC and reject blank content.
  v0.3.0 - 2026-10-04 - Accept bare prompt lists and carry version history.
  v0.2.0 - 2026-10-02 - Validate documents with pydantic and import atomically.
  v0.1.0 - 2026-09-21 - Initial JSON catalogue export.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    field_validator,
)

from models.prompt_model import PromptDraft, VersionDraft, format_timestamp

from .exceptions import MalformedInputError, PromptStorageError
from .repository import RepositoryError
from .validation import SQLITE_INTEGER_MAX, Utf8Str

if TYPE_CHECKING:  # pragma: no cover - typing only
    from models.prompt_model import Prompt, PromptVersion

    from .prompt_manager import PromptManager

logger = logging.getLogger("prompt_library.catalog")

FORMAT_VERSION = 1
SUPPORTED_FORMAT_VERSIONS = frozenset({FORMAT_VERSION})


class _CatalogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CatalogVersion(_CatalogModel):
    """Version snapshot carried inside an exported prompt."""

    content: Utf8Str
    change_note: Utf8Str = Field(default="", alias="changeNote")
    created_at: datetime | None = Field(default=None, alias="createdAt")


class CatalogPrompt(_CatalogModel):
    """Prompt record as it appears in a catalogue document."""

    title: Utf8Str
    content: Utf8Str
    tags: list[Utf8Str] = Field(default_factory=list)
    is_favorite: StrictBool = Field(default=False, alias="isFavorite")
    score_avg: Annotated[float, Field(ge=0, le=5)] = Field(default=0.0, alias="scoreAvg")
    score_count: Annotated[int, Field(ge=0, le=SQLITE_INTEGER_MAX)] = Field(
        default=0,
        alias="scoreCount",
    )
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    versions: list[CatalogVersion] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _require_title(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped

    @field_validator("content")
    @classmethod
    def _require_content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value

    def to_draft(self) -> PromptDraft:
        """Return the creation payload for this record.

        Versions are listed newest first in documents and stored oldest first.
        Versions with blank content carry nothing to restore and are skipped.
        """
        return PromptDraft(
            title=self.title,
            content=self.content,
            tags=list(self.tags),
            is_favorite=self.is_favorite,
            score_avg=self.score_avg,
            score_count=self.score_count,
            versions=[
                VersionDraft(
                    content=version.content,
                    change_note=version.change_note,
                    created_at=_as_utc(version.created_at),
                )
                for version in reversed(self.versions)
                if version.content.strip()
            ],
        )


class CatalogDocument(_CatalogModel):
    """Top-level export envelope."""

    format_version: int = Field(default=FORMAT_VERSION, alias="formatVersion")
    exported_at: datetime | None = Field(default=None, alias="exportedAt")
    prompts: list[CatalogPrompt]

    @field_validator("format_version")
    @classmethod
    def _check_format_version(cls, value: int) -> int:
        if value not in SUPPORTED_FORMAT_VERSIONS:
            raise ValueError(f"unsupported formatVersion {value}")
        return value


@dataclass(slots=True, frozen=True)
class ImportResult:
    """Number of prompts created by a catalogue import."""

    imported: int

    def to_payload(self) -> dict[str, int]:
        """Return the mapping exposed through the command interface."""
        return {"imported": self.imported}


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)


def _version_to_catalog_dict(version: PromptVersion) -> dict[str, Any]:
    return {
        "content": version.content,
        "changeNote": version.change_note,
        "createdAt": format_timestamp(version.created_at),
    }


def _prompt_to_catalog_dict(prompt: Prompt, versions: list[PromptVersion]) -> dict[str, Any]:
    return {
        "title": prompt.title,
        "content": prompt.content,
        "tags": list(prompt.tags),
        "isFavorite": prompt.is_favorite,
        "scoreAvg": prompt.score_avg,
        "scoreCount": prompt.score_count,
        "createdAt": format_timestamp(prompt.created_at),
        "updatedAt": format_timestamp(prompt.updated_at),
        "versions": [_version_to_catalog_dict(version) for version in versions],
    }


def _format_validation_error(exc: ValidationError) -> str:
    details = []
    for error in exc.errors()[:5]:
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location or '<root>'}: {error.get('msg', 'invalid value')}")
    return "; ".join(details)


def parse_catalog_document(document: str | bytes) -> CatalogDocument:
    """Parse and validate ``document`` or raise :class:`MalformedInputError`."""
    try:
        payload: object = json.loads(document)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedInputError(f"Import document is not valid JSON: {exc}") from exc
    if isinstance(payload, list):
        payload = {"prompts": payload}
    if not isinstance(payload, dict):
        raise MalformedInputError("Import document must be a JSON object or list of prompts")
    try:
        return CatalogDocument.model_validate(payload)
    except ValidationError as exc:
        raise MalformedInputError(
            f"Import document is malformed: {_format_validation_error(exc)}"
        ) from exc


def export_prompt_catalog(manager: PromptManager, *, indent: int | None = 2) -> str:
    """Serialise every stored prompt (with its version history) to a JSON document."""
    try:
        prompts = manager.repository.list()
    except RepositoryError as exc:
        raise PromptStorageError("Unable to load prompts for export") from exc
    exportable = [
        _prompt_to_catalog_dict(prompt, manager.list_prompt_versions(prompt.id))
        for prompt in sorted(prompts, key=lambda item: item.id)
    ]
    payload = {
        "formatVersion": FORMAT_VERSION,
        "exportedAt": format_timestamp(datetime.now(UTC)),
        "prompts": exportable,
    }
    logger.info("Prompt catalogue exported", extra={"count": len(exportable)})
    return json.dumps(payload, ensure_ascii=False, indent=indent)


def import_prompt_catalog(manager: PromptManager, document: str | bytes) -> ImportResult:
    """Create a new prompt for every record in ``document``; all or nothing."""
    catalog = parse_catalog_document(document)
    drafts = [entry.to_draft() for entry in catalog.prompts]
    created = manager.create_prompts(drafts)
    logger.info("Prompt catalogue imported", extra={"count": len(created)})
    return ImportResult(imported=len(created))


__all__ = [
    "FORMAT_VERSION",
    "CatalogDocument",
    "CatalogPrompt",
    "CatalogVersion",
    "ImportResult",
    "export_prompt_catalog",
    "import_prompt_catalog",
    "parse_catalog_document",
]
