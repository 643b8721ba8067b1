"""Named command dispatch for presentation-layer callers.

Each command maps to exactly one :class:`~core.prompt_manager.PromptManager`
operation. Arguments arrive as camelCase keywords, are validated with pydantic
models, and results are returned as JSON-ready payloads. Failures surface as a
:class:`CommandFailure` tagged ``NotFound``, ``MalformedInput``, or
``StorageFailure``.

Updates:
  v0.2.1 - 2026-10-18 - Bound integer arguments, require UTF-8 text, and reject blank content.
  v0.2.0 - 2026-10-04 - Add restore, render, and usage history commands.
  v0.1.0 - 2026-09-28 - Initial command router with pydantic payload validation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from .catalog_transfer import export_prompt_catalog, import_prompt_catalog
from .exceptions import MalformedInputError, PromptLibraryError
from .validation import SqliteInt, Utf8Str

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .prompt_manager import PromptManager

logger = logging.getLogger("prompt_library.commands")


class _CommandModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class UpsertPromptInput(_CommandModel):
    """Create-or-update payload; a missing ``id`` creates a new prompt."""

    id: SqliteInt | None = None
    title: Utf8Str
    content: Utf8Str
    tags: list[Utf8Str] = Field(default_factory=list)
    is_favorite: StrictBool = Field(default=False, alias="isFavorite")
    change_note: Utf8Str | None = Field(default=None, alias="changeNote")

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


class LogUsageInput(_CommandModel):
    """Usage event payload; ``rating`` is optional."""

    prompt_id: SqliteInt = Field(alias="promptId")
    input_vars: dict[Utf8Str, Utf8Str] = Field(default_factory=dict, alias="inputVars")
    output_text: Utf8Str = Field(default="", alias="outputText")
    rating: StrictInt | None = None


class _ListPromptsArgs(_CommandModel):
    search: StrictStr | None = None
    tag: StrictStr | None = None
    sort_by: StrictStr | None = Field(default=None, alias="sortBy")


class _NoArgs(_CommandModel):
    pass


class _PromptIdArgs(_CommandModel):
    id: SqliteInt


class _PromptRefArgs(_CommandModel):
    prompt_id: SqliteInt = Field(alias="promptId")


class _UpsertArgs(_CommandModel):
    input: UpsertPromptInput


class _LogUsageArgs(_CommandModel):
    input: LogUsageInput


class _ImportArgs(_CommandModel):
    json_data: StrictStr = Field(alias="jsonData")


class _RestoreArgs(_CommandModel):
    version_id: SqliteInt = Field(alias="versionId")
    change_note: Utf8Str | None = Field(default=None, alias="changeNote")


class _RenderArgs(_CommandModel):
    id: SqliteInt
    values: dict[str, StrictStr] = Field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class CommandFailure:
    """Tagged failure returned in place of a command result."""

    kind: str
    message: str

    def to_payload(self) -> dict[str, str]:
        """Return the mapping exposed to callers."""
        return {"kind": self.kind, "message": self.message}


@dataclass(slots=True, frozen=True)
class CommandResponse:
    """Outcome of one dispatched command."""

    ok: bool
    data: Any = None
    error: CommandFailure | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready response envelope."""
        payload: dict[str, Any] = {"ok": self.ok, "data": self.data}
        if self.error is not None:
            payload["error"] = self.error.to_payload()
        return payload


@dataclass(frozen=True)
class _CommandSpec:
    arguments: type[_CommandModel]
    handler: Callable[[Any], Any]


def _format_validation_error(exc: ValidationError) -> str:
    details = []
    for error in exc.errors()[:5]:
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location or '<root>'}: {error.get('msg', 'invalid value')}")
    return "; ".join(details)


class PromptCommandRouter:
    """Dispatch named commands to a prompt manager."""

    def __init__(self, manager: PromptManager, *, export_indent: int | None = 2) -> None:
        self._manager = manager
        self._export_indent = export_indent
        self._commands: dict[str, _CommandSpec] = {
            "list_prompts": _CommandSpec(_ListPromptsArgs, self._list_prompts),
            "list_tags": _CommandSpec(_NoArgs, self._list_tags),
            "get_prompt": _CommandSpec(_PromptIdArgs, self._get_prompt),
            "list_prompt_versions": _CommandSpec(_PromptRefArgs, self._list_prompt_versions),
            "upsert_prompt": _CommandSpec(_UpsertArgs, self._upsert_prompt),
            "delete_prompt": _CommandSpec(_PromptIdArgs, self._delete_prompt),
            "log_prompt_usage": _CommandSpec(_LogUsageArgs, self._log_prompt_usage),
            "export_prompts_json": _CommandSpec(_NoArgs, self._export_prompts_json),
            "import_prompts_json": _CommandSpec(_ImportArgs, self._import_prompts_json),
            "restore_prompt_version": _CommandSpec(_RestoreArgs, self._restore_prompt_version),
            "render_prompt": _CommandSpec(_RenderArgs, self._render_prompt),
            "list_prompt_usage": _CommandSpec(_PromptRefArgs, self._list_prompt_usage),
        }

    @property
    def command_names(self) -> list[str]:
        """Return the supported command names in registration order."""
        return list(self._commands)

    def call(self, name: str, **arguments: Any) -> Any:
        """Run ``name`` and return its payload, raising core errors on failure."""
        spec = self._commands.get(name)
        if spec is None:
            raise MalformedInputError(f"Unknown command: {name}")
        try:
            parsed = spec.arguments.model_validate(arguments)
        except ValidationError as exc:
            raise MalformedInputError(
                f"Invalid arguments for {name}: {_format_validation_error(exc)}"
            ) from exc
        return spec.handler(parsed)

    def dispatch(self, name: str, **arguments: Any) -> CommandResponse:
        """Run ``name`` and wrap its result or failure in a :class:`CommandResponse`."""
        try:
            data = self.call(name, **arguments)
        except PromptLibraryError as exc:
            logger.warning(
                "Command failed",
                extra={"command": name, "kind": exc.kind, "error": str(exc)},
            )
            return CommandResponse(ok=False, error=CommandFailure(kind=exc.kind, message=str(exc)))
        return CommandResponse(ok=True, data=data)

    def dispatch_payload(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Dispatch using a mapping of arguments and return the response envelope."""
        return self.dispatch(name, **dict(arguments or {})).to_payload()

    # Handlers --------------------------------------------------------- #

    def _list_prompts(self, args: _ListPromptsArgs) -> list[dict[str, Any]]:
        prompts = self._manager.list_prompts(
            search=args.search,
            tag=args.tag,
            sort_by=args.sort_by,
        )
        return [prompt.to_payload() for prompt in prompts]

    def _list_tags(self, _: _NoArgs) -> list[dict[str, Any]]:
        return [tag.to_payload() for tag in self._manager.list_tags()]

    def _get_prompt(self, args: _PromptIdArgs) -> dict[str, Any] | None:
        prompt = self._manager.get_prompt(args.id)
        return prompt.to_payload() if prompt is not None else None

    def _list_prompt_versions(self, args: _PromptRefArgs) -> list[dict[str, Any]]:
        versions = self._manager.list_prompt_versions(args.prompt_id)
        return [version.to_payload() for version in versions]

    def _upsert_prompt(self, args: _UpsertArgs) -> dict[str, Any]:
        payload = args.input
        prompt = self._manager.upsert_prompt(
            payload.id,
            title=payload.title,
            content=payload.content,
            tags=payload.tags,
            is_favorite=payload.is_favorite,
            change_note=payload.change_note,
        )
        return prompt.to_payload()

    def _delete_prompt(self, args: _PromptIdArgs) -> None:
        self._manager.delete_prompt(args.id)

    def _log_prompt_usage(self, args: _LogUsageArgs) -> None:
        payload = args.input
        self._manager.log_usage(
            payload.prompt_id,
            input_vars=payload.input_vars,
            output_text=payload.output_text,
            rating=payload.rating,
        )

    def _export_prompts_json(self, _: _NoArgs) -> str:
        return export_prompt_catalog(self._manager, indent=self._export_indent)

    def _import_prompts_json(self, args: _ImportArgs) -> dict[str, int]:
        return import_prompt_catalog(self._manager, args.json_data).to_payload()

    def _restore_prompt_version(self, args: _RestoreArgs) -> dict[str, Any]:
        prompt = self._manager.restore_prompt_version(
            args.version_id,
            change_note=args.change_note,
        )
        return prompt.to_payload()

    def _render_prompt(self, args: _RenderArgs) -> dict[str, Any]:
        result = self._manager.render_prompt(args.id, args.values)
        return {
            "renderedText": result.rendered_text,
            "missingVariables": list(result.missing_variables),
            "variables": list(result.variables),
        }

    def _list_prompt_usage(self, args: _PromptRefArgs) -> list[dict[str, Any]]:
        return [entry.to_payload() for entry in self._manager.list_usage_logs(args.prompt_id)]


__all__ = [
    "CommandFailure",
    "CommandResponse",
    "LogUsageInput",
    "PromptCommandRouter",
    "UpsertPromptInput",
]
