"""Configuration helpers for Prompt Library.

Updates: v0.1.1 - 2026-09-28 - Expose default constants alongside the settings loader.
Updates: v0.1.0 - 2026-09-14 - Expose settings loader and configuration error types.
"""

from .settings import (
    DEFAULT_DB_PATH,
    DEFAULT_EXPORT_INDENT,
    DEFAULT_LOG_LEVEL,
    ENV_PREFIX,
    PromptLibrarySettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "DEFAULT_DB_PATH",
    "DEFAULT_EXPORT_INDENT",
    "DEFAULT_LOG_LEVEL",
    "ENV_PREFIX",
    "PromptLibrarySettings",
    "SettingsError",
    "load_settings",
]
