"""Settings management utilities for Prompt Library configuration.

Updates:
  v0.2.1 - 2026-10-18 - Treat every key outside the settings model as unknown.
  v0.2.0 - 2026-10-04 - Read ``.env`` entries through python-dotenv alongside the environment.
  v0.1.1 - 2026-09-28 - Add export indentation and log level settings.
  v0.1.0 - 2026-09-14 - Initial settings model with JSON configuration file support.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

ENV_PREFIX = "PROMPT_LIBRARY_"
DEFAULT_DB_PATH = Path("data") / "prompt_library.db"
DEFAULT_EXPORT_INDENT = 2
DEFAULT_LOG_LEVEL = "INFO"

_DOTENV_FALLBACK_PATH = ".env"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_SETTINGS_KEYS = ("db_path", "export_indent", "log_level")

logger = logging.getLogger("prompt_library.settings")


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv(f"{ENV_PREFIX}ENV_FILE")
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class SettingsError(Exception):
    """Raised when Prompt Library configuration cannot be loaded or validated."""


class PromptLibrarySettings(BaseSettings):
    """Application configuration sourced from keywords, a JSON file, or the environment."""

    db_path: Path = Field(
        default=DEFAULT_DB_PATH,
        validate_default=True,
        description="SQLite database file holding prompts, versions, and usage logs.",
    )
    export_indent: int = Field(
        default=DEFAULT_EXPORT_INDENT,
        description="Indentation used when exporting the catalogue as JSON.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Root log level applied when no logging configuration file is used.",
    )

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": ENV_PREFIX,
            "case_sensitive": False,
            "extra": "ignore",
        },
    )

    @field_validator("db_path", mode="before")
    @classmethod
    def _normalise_path(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        if value is None or not str(value).strip():
            raise ValueError("a filesystem path is required")
        path = Path(str(value).strip()).expanduser()
        return path.resolve()

    @field_validator("export_indent")
    @classmethod
    def _validate_export_indent(cls, value: int) -> int:
        """Ensure the export indentation is not negative."""
        if value < 0:
            raise ValueError("export_indent must be zero or greater")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: Any) -> str:
        """Accept level names case-insensitively."""
        level = str(value or DEFAULT_LOG_LEVEL).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(db_path="...")).
            2. JSON configuration file.
            3. Environment variables, then ``.env`` entries.
        """

        def env_with_dotenv(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            dotenv_data = _read_dotenv_values()
            for field in _SETTINGS_KEYS:
                key = f"{ENV_PREFIX}{field.upper()}"
                value = os.getenv(key)
                if value is None:
                    value = dotenv_data.get(key)
                if value is None or not value.strip():
                    continue
                data[field] = value.strip()
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_dotenv),
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv(f"{ENV_PREFIX}CONFIG_JSON")
            candidates: list[Path] = []
            if explicit_path:
                candidates.append(Path(explicit_path).expanduser())
            candidates.append(Path("config") / "config.json")

            for index, path in enumerate(candidates):
                if not path.exists():
                    if explicit_path and index == 0:
                        raise SettingsError(f"Configuration file not found: {path}")
                    continue
                try:
                    raw_contents = path.read_text(encoding="utf-8")
                except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                    raise SettingsError(f"Unable to read configuration file: {path}") from exc
                try:
                    data = json.loads(raw_contents)
                except json.JSONDecodeError as exc:
                    raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
                if not isinstance(data, dict):
                    raise SettingsError(f"Configuration file {path} must contain a JSON object")
                mapping_data = cast("Mapping[object, Any]", data)
                data_dict = {str(key): value for key, value in mapping_data.items()}
                mapped = {key: data_dict[key] for key in _SETTINGS_KEYS if key in data_dict}
                ignored = sorted(set(data_dict) - set(_SETTINGS_KEYS))
                if ignored:
                    logger.warning(
                        "Ignoring unknown key(s) %s in configuration file %s",
                        ", ".join(ignored),
                        path,
                    )
                return mapped
            return {}

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> PromptLibrarySettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return PromptLibrarySettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError("Invalid Prompt Library configuration") from exc


__all__ = [
    "DEFAULT_DB_PATH",
    "DEFAULT_EXPORT_INDENT",
    "DEFAULT_LOG_LEVEL",
    "ENV_PREFIX",
    "PromptLibrarySettings",
    "SettingsError",
    "load_settings",
]
