"""Printable summaries for Prompt Library configuration.

Updates:
  v0.1.0 - 2026-09-28 - Extract CLI settings summary rendering.
"""

from __future__ import annotations

import os

from config import ENV_PREFIX, PromptLibrarySettings

from .utils import describe_path


def print_settings_summary(settings: PromptLibrarySettings) -> None:
    """Emit a readable summary of resolved configuration."""
    config_json = os.getenv(f"{ENV_PREFIX}CONFIG_JSON") or "config/config.json"
    db_description = describe_path(
        settings.db_path,
        expect_directory=False,
        allow_missing_file=True,
    )
    lines = [
        "Prompt Library configuration summary",
        "------------------------------------",
        f"Database path: {db_description}",
        f"Export indent: {settings.export_indent}",
        f"Log level: {settings.log_level}",
        f"Config file: {describe_path(config_json, expect_directory=False)}",
    ]
    print("\n".join(lines))
