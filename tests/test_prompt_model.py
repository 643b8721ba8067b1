"""Tests for prompt model helpers, tag normalisation, and payload shapes.

Updates: v0.1.1 - 2026-10-18 - Cover UTC conversion of offset timestamps.
Updates: v0.1.0 - 2026-09-14 - Cover tag normalisation and camelCase payloads.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from models.prompt_model import (
    Prompt,
    PromptDraft,
    PromptVersion,
    SortBy,
    TagInfo,
    UsageLogEntry,
    format_timestamp,
    normalize_tags,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (["x", "X"], ["x"]),
        ([" y ", "Y", "z", "", "  "], ["y", "z"]),
        (["Beta", "alpha", "BETA", "Alpha"], ["Beta", "alpha"]),
        ("one, two ,ONE", ["one", "two"]),
        (None, []),
        ([], []),
    ],
)
def test_normalize_tags_dedupes_case_insensitively(raw: object, expected: list[str]) -> None:
    assert normalize_tags(raw) == expected  # type: ignore[arg-type]


def test_normalize_tags_never_yields_casefold_duplicates() -> None:
    tags = normalize_tags(["Straße", "STRASSE", "strasse", "Ünïcode", "ünïcode"])
    folded = [tag.casefold() for tag in tags]
    assert len(folded) == len(set(folded))
    assert tags == ["Straße", "Ünïcode"]


def test_prompt_normalises_tags_on_construction() -> None:
    prompt = Prompt(id=1, title="T", content="C1", tags=["x", "X"])
    assert prompt.tags == ["x"]


def test_prompt_tag_and_text_matching_ignore_case() -> None:
    prompt = Prompt(id=1, title="Daily Report", content="Summarise", tags=["Work"])
    assert prompt.has_tag("work")
    assert prompt.has_tag(" WORK ")
    assert not prompt.has_tag("wor")
    assert prompt.matches_text("report")
    assert prompt.matches_text("summar")
    assert prompt.matches_text("ork")
    assert not prompt.matches_text("missing")


def test_prompt_payload_uses_camel_case_keys() -> None:
    stamp = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
    prompt = Prompt(
        id=7,
        title="T",
        content="C",
        tags=["a"],
        is_favorite=True,
        score_avg=4.5,
        score_count=2,
        created_at=stamp,
        updated_at=stamp,
    )
    payload = prompt.to_payload()
    assert payload == {
        "id": 7,
        "title": "T",
        "content": "C",
        "tags": ["a"],
        "isFavorite": True,
        "scoreAvg": 4.5,
        "scoreCount": 2,
        "createdAt": "2026-01-02T03:04:05.000000+00:00",
        "updatedAt": "2026-01-02T03:04:05.000000+00:00",
    }


def test_prompt_from_row_parses_stored_values() -> None:
    row = {
        "id": 3,
        "title": "Row",
        "content": "Body",
        "tags": '["a", "A", "b"]',
        "is_favorite": 1,
        "score_avg": 3.0,
        "score_count": 1,
        "created_at": "2026-01-01T00:00:00.000000+00:00",
        "updated_at": "2026-01-02T00:00:00",
    }
    prompt = Prompt.from_row(row)
    assert prompt.tags == ["a", "b"]
    assert prompt.is_favorite is True
    assert prompt.is_rated
    assert prompt.updated_at.tzinfo is not None


def test_version_and_usage_payloads() -> None:
    stamp = datetime(2026, 5, 1, tzinfo=UTC)
    version = PromptVersion(id=1, prompt_id=2, content="old", change_note="", created_at=stamp)
    assert version.to_payload()["promptId"] == 2
    assert version.to_payload()["changeNote"] == ""

    entry = UsageLogEntry(
        id=1,
        prompt_id=2,
        input_vars={"a": "1"},
        output_text="out",
        rating=None,
        used_at=stamp,
    )
    payload = entry.to_payload()
    assert payload["inputVars"] == {"a": "1"}
    assert payload["rating"] is None
    assert payload["usedAt"].startswith("2026-05-01T00:00:00")


def test_prompt_draft_zeroes_average_without_ratings() -> None:
    draft = PromptDraft(title="T", content="C", score_avg=4.0, score_count=0)
    assert draft.score_avg == 0.0
    negative = PromptDraft(title="T", content="C", score_avg=4.0, score_count=-3)
    assert negative.score_count == 0
    assert negative.score_avg == 0.0


def test_sort_by_from_value() -> None:
    assert SortBy.from_value(None) is SortBy.UPDATED
    assert SortBy.from_value("Score") is SortBy.SCORE
    assert SortBy.from_value(SortBy.CREATED) is SortBy.CREATED
    with pytest.raises(ValueError):
        SortBy.from_value("rating")


def test_tag_info_payload() -> None:
    assert TagInfo(name="x", count=2).to_payload() == {"name": "x", "count": 2}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (
            datetime(2026, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=5))),
            "2026-01-01T04:00:00.000000+00:00",
        ),
        (datetime(2026, 1, 1, 9, 0), "2026-01-01T09:00:00.000000+00:00"),
        (datetime(2026, 1, 1, 9, 0, 0, 5, tzinfo=UTC), "2026-01-01T09:00:00.000005+00:00"),
    ],
)
def test_format_timestamp_writes_fixed_width_utc(value: datetime, expected: str) -> None:
    assert format_timestamp(value) == expected
