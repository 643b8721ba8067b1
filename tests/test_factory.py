"""Tests for building managers and command routers from settings.

Updates:
  v0.1.1 - 2026-10-04 - Cover command router export indentation.
  v0.1.0 - 2026-09-14 - Cover repository injection and unusable database paths.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from config import PromptLibrarySettings
from core import PromptStorageError, build_command_router, build_prompt_manager
from core.repository import PromptRepository


def _make_settings(tmp_path: Path, **overrides: object) -> PromptLibrarySettings:
    values: dict[str, object] = {"db_path": tmp_path / "factory.db"}
    values.update(overrides)
    return PromptLibrarySettings(**values)


def test_build_prompt_manager_opens_configured_database(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    with build_prompt_manager(settings) as manager:
        assert manager.db_path == settings.db_path
        assert settings.db_path.exists()


def test_build_prompt_manager_uses_injected_repository(tmp_path: Path) -> None:
    repository = PromptRepository(tmp_path / "injected.db")
    manager = build_prompt_manager(_make_settings(tmp_path), repository=repository)
    assert manager.repository is repository


def test_build_prompt_manager_reports_unusable_path(tmp_path: Path) -> None:
    directory = tmp_path / "directory.db"
    directory.mkdir()
    with pytest.raises(PromptStorageError):
        build_prompt_manager(_make_settings(tmp_path, db_path=directory))


def test_build_command_router_applies_export_indent(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path, export_indent=0)
    with build_prompt_manager(settings) as manager:
        manager.create_prompt(title="T", content="C")
        router = build_command_router(settings, manager=manager)
        document = router.dispatch("export_prompts_json").data
    assert document == json.dumps(json.loads(document), ensure_ascii=False, indent=0)
