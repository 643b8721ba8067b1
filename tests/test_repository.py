"""PromptRepository persistence, versioning, and atomicity tests.

Updates: v0.2.0 - 2026-10-02 - Cover bulk inserts and rollback on failure.
Updates: v0.1.0 - 2026-09-14 - Cover CRUD, snapshots, and cascading deletes.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from pathlib import Path

import pytest

from core.repository import (
    PromptRepository,
    RepositoryError,
    RepositoryNotFoundError,
)
from core.repository.base import connect
from models.prompt_model import PromptDraft, VersionDraft


def test_schema_enables_foreign_keys_and_wal(repository: PromptRepository) -> None:
    conn = connect(repository.db_path)
    try:
        assert conn.execute("PRAGMA foreign_keys;").fetchone()[0] == 1
        assert str(conn.execute("PRAGMA journal_mode;").fetchone()[0]).lower() == "wal"
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table';")
        }
    finally:
        conn.close()
    assert {"prompts", "prompt_versions", "usage_logs"} <= tables


def test_repository_creates_parent_directory(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "dir" / "library.db"
    PromptRepository(db_path)
    assert db_path.exists()


def test_add_assigns_ids_and_normalises_tags(repository: PromptRepository) -> None:
    first = repository.add(title="T", content="C1", tags=["x", "X"])
    second = repository.add(title="Other", content="C2")
    assert first.id != second.id
    assert first.tags == ["x"]
    assert first.score_count == 0
    assert first.score_avg == 0.0
    assert first.created_at == first.updated_at
    assert repository.list_prompt_versions(first.id) == []


def test_get_missing_prompt_raises_not_found(repository: PromptRepository) -> None:
    with pytest.raises(RepositoryNotFoundError):
        repository.get(999)


def test_update_snapshots_previous_content_once(repository: PromptRepository) -> None:
    prompt = repository.add(title="T", content="C1", tags=["x"])

    updated = repository.update(
        prompt.id,
        title="T",
        content="C2",
        tags=["x"],
        change_note="rewrite",
    )
    versions = repository.list_prompt_versions(prompt.id)
    assert updated.content == "C2"
    assert [version.content for version in versions] == ["C1"]
    assert versions[0].change_note == "rewrite"

    repository.update(prompt.id, title="T2", content="C2", tags=["y"], is_favorite=True)
    assert len(repository.list_prompt_versions(prompt.id)) == 1


def test_update_refreshes_updated_at_but_not_created_at(repository: PromptRepository) -> None:
    prompt = repository.add(title="T", content="C")
    updated = repository.update(prompt.id, title="Renamed", content="C")
    assert updated.created_at == prompt.created_at
    assert updated.updated_at >= prompt.updated_at
    assert updated.title == "Renamed"


def test_versions_listed_newest_first(repository: PromptRepository) -> None:
    prompt = repository.add(title="T", content="v1")
    for body in ("v2", "v3", "v4"):
        repository.update(prompt.id, title="T", content=body)
    versions = repository.list_prompt_versions(prompt.id)
    assert [version.content for version in versions] == ["v3", "v2", "v1"]
    assert [version.content for version in repository.list_prompt_versions(prompt.id, limit=1)] == [
        "v3"
    ]
    assert repository.get_prompt_version(versions[-1].id).content == "v1"


def test_update_missing_prompt_raises_not_found(repository: PromptRepository) -> None:
    with pytest.raises(RepositoryNotFoundError):
        repository.update(42, title="T", content="C")


def test_delete_cascades_to_versions_and_usage(repository: PromptRepository) -> None:
    prompt = repository.add(title="T", content="C1")
    repository.update(prompt.id, title="T", content="C2")
    repository.add_usage_log(prompt.id, input_vars={}, output_text="out", rating=5)

    repository.delete(prompt.id)

    assert repository.list() == []
    assert repository.list_prompt_versions(prompt.id) == []
    assert repository.list_usage_logs_for_prompt(prompt.id) == []
    stats = repository.get_prompt_catalogue_stats()
    assert stats.total_versions == 0
    assert stats.total_usage_logs == 0


def test_delete_missing_prompt_raises_not_found(repository: PromptRepository) -> None:
    with pytest.raises(RepositoryNotFoundError):
        repository.delete(12345)


def test_list_orders_by_updated_at_descending(repository: PromptRepository) -> None:
    first = repository.add(title="first", content="a")
    second = repository.add(title="second", content="b")
    repository.update(first.id, title="first", content="a2")
    assert [prompt.id for prompt in repository.list()] == [first.id, second.id]
    assert [prompt.id for prompt in repository.list(limit=1)] == [first.id]


def test_add_many_inserts_prompts_and_versions(repository: PromptRepository) -> None:
    older = datetime(2025, 1, 1, tzinfo=UTC)
    newer = datetime(2025, 2, 1, tzinfo=UTC)
    drafts = [
        PromptDraft(
            title="Imported",
            content="current",
            tags=["a"],
            score_avg=4.0,
            score_count=2,
            versions=[
                VersionDraft(content="oldest", change_note="first", created_at=older),
                VersionDraft(content="older", created_at=newer),
            ],
        ),
        PromptDraft(title="Second", content="body"),
    ]
    created = repository.add_many(drafts)
    assert [prompt.title for prompt in created] == ["Imported", "Second"]
    assert created[0].score_avg == 4.0
    assert created[0].score_count == 2
    versions = repository.list_prompt_versions(created[0].id)
    assert [version.content for version in versions] == ["older", "oldest"]
    assert versions[1].change_note == "first"
    assert versions[1].created_at == older


def test_add_many_is_all_or_nothing(repository: PromptRepository) -> None:
    repository.add(title="existing", content="keep")
    drafts = [
        PromptDraft(title="ok", content="fine"),
        PromptDraft(title="bad", content=None),  # type: ignore[arg-type]
    ]
    with pytest.raises(RepositoryError):
        repository.add_many(drafts)
    assert [prompt.title for prompt in repository.list()] == ["existing"]


def test_add_many_with_no_drafts_returns_empty(repository: PromptRepository) -> None:
    assert repository.add_many([]) == []


def test_usage_log_updates_running_mean(repository: PromptRepository) -> None:
    prompt = repository.add(title="T", content="C")
    repository.add_usage_log(prompt.id, input_vars={"a": "1"}, output_text="o", rating=4)
    repository.add_usage_log(prompt.id, input_vars={}, output_text="o", rating=2)
    rated = repository.get(prompt.id)
    assert rated.score_count == 2
    assert rated.score_avg == pytest.approx(3.0)

    entry = repository.add_usage_log(prompt.id, input_vars={}, output_text="o", rating=None)
    unchanged = repository.get(prompt.id)
    assert entry.rating is None
    assert unchanged.score_count == 2
    assert unchanged.score_avg == pytest.approx(3.0)


def test_usage_log_for_missing_prompt_raises_not_found(repository: PromptRepository) -> None:
    with pytest.raises(RepositoryNotFoundError):
        repository.add_usage_log(77, input_vars={}, output_text="o", rating=3)
    conn = sqlite3.connect(str(repository.db_path))
    try:
        assert conn.execute("SELECT COUNT(*) FROM usage_logs;").fetchone()[0] == 0
    finally:
        conn.close()


def test_usage_logs_listed_newest_first(repository: PromptRepository) -> None:
    prompt = repository.add(title="T", content="C")
    for index in range(3):
        repository.add_usage_log(prompt.id, input_vars={"i": str(index)}, output_text=str(index))
    entries = repository.list_usage_logs_for_prompt(prompt.id)
    assert [entry.output_text for entry in entries] == ["2", "1", "0"]
    assert entries[0].input_vars == {"i": "2"}


def test_catalogue_stats_and_reset(repository: PromptRepository) -> None:
    prompt = repository.add(title="T", content="C", is_favorite=True)
    repository.add(title="U", content="D")
    repository.update(prompt.id, title="T", content="C2", is_favorite=True)
    repository.add_usage_log(prompt.id, input_vars={}, output_text="o", rating=5)

    stats = repository.get_prompt_catalogue_stats()
    assert stats.total_prompts == 2
    assert stats.favorite_prompts == 1
    assert stats.rated_prompts == 1
    assert stats.total_versions == 1
    assert stats.total_usage_logs == 1
    assert stats.last_updated_at is not None

    repository.reset_all_data()
    cleared = repository.get_prompt_catalogue_stats()
    assert cleared.total_prompts == 0
    assert cleared.last_updated_at is None


def test_storage_failures_are_wrapped(tmp_path: Path) -> None:
    repository = PromptRepository(tmp_path / "broken.db")
    conn = sqlite3.connect(str(repository.db_path))
    try:
        conn.execute("DROP TABLE usage_logs;")
        conn.execute("DROP TABLE prompt_versions;")
        conn.execute("DROP TABLE prompts;")
        conn.commit()
    finally:
        conn.close()
    with pytest.raises(RepositoryError):
        repository.list()
    with pytest.raises(RepositoryError):
        repository.add(title="T", content="C")
