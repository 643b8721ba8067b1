"""Pytest configuration for shared test fixtures and environment hooks.

Updates:
  v0.2.0 - 2026-10-04 - Add command router fixture.
  v0.1.0 - 2026-09-14 - Provide tmp_path-backed repository and manager fixtures.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from core import PromptCommandRouter, PromptManager, PromptRepository

_SETTINGS_ENV_VARS = (
    "PROMPT_LIBRARY_DB_PATH",
    "PROMPT_LIBRARY_EXPORT_INDENT",
    "PROMPT_LIBRARY_LOG_LEVEL",
    "PROMPT_LIBRARY_CONFIG_JSON",
    "PROMPT_LIBRARY_ENV_FILE",
)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables from leaking into settings tests."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "prompt_library.db"


@pytest.fixture()
def repository(db_path: Path) -> PromptRepository:
    return PromptRepository(db_path)


@pytest.fixture()
def manager(repository: PromptRepository) -> Iterator[PromptManager]:
    with PromptManager(repository) as prompt_manager:
        yield prompt_manager


@pytest.fixture()
def router(manager: PromptManager) -> PromptCommandRouter:
    return PromptCommandRouter(manager)
