"""Prompt persistence, version snapshots, and list helpers.

Updates:
  v0.3.1 - 2026-10-18 - Report out-of-range ids and unencodable text as repository errors.
  v0.3.0 - 2026-10-02 - Add atomic bulk inserts for catalogue imports.
  v0.2.0 - 2026-09-21 - Snapshot previous content before content-changing updates.
  v0.1.0 - 2026-09-14 - Extract prompt CRUD helpers into mixin.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

from models.prompt_model import (
    Prompt,
    PromptVersion,
    format_timestamp,
    normalize_tags,
    utc_timestamp,
)

from .base import (
    SQLITE_ERRORS as _SQLITE_ERRORS,
    RepositoryError,
    RepositoryNotFoundError,
    json_dumps as _json_dumps,
    logger,
    transaction as _transaction,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from models.prompt_model import PromptDraft

_PROMPT_SELECT = (
    "SELECT id, title, content, tags, is_favorite, score_avg, score_count, "
    "created_at, updated_at FROM prompts"
)
_VERSION_SELECT = "SELECT id, prompt_id, content, change_note, created_at FROM prompt_versions"


class PromptStoreMixin:
    """Shared prompt and version persistence helpers."""

    _db_path: Path

    # Prompt CRUD -------------------------------------------------------- #

    def add(
        self,
        *,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        is_favorite: bool = False,
    ) -> Prompt:
        """Insert a new prompt record and return it with its assigned id."""
        timestamp = utc_timestamp()
        payload = {
            "title": title,
            "content": content,
            "tags": _json_dumps(normalize_tags(tags)),
            "is_favorite": int(is_favorite),
            "score_avg": 0.0,
            "score_count": 0,
            "created_at": timestamp,
            "updated_at": timestamp,
        }
        try:
            with _transaction(self._db_path, immediate=True) as conn:
                prompt_id = self._insert_prompt(conn, payload)
                row = self._fetch_prompt_row(conn, prompt_id)
        except _SQLITE_ERRORS as exc:
            raise RepositoryError(f"Failed to insert prompt {title!r}") from exc
        if row is None:  # pragma: no cover - defensive
            raise RepositoryError("Prompt insert succeeded but row missing")
        return Prompt.from_row(row)

    def add_many(self, drafts: Sequence[PromptDraft]) -> list[Prompt]:
        """Insert every draft (and its carried versions) in a single transaction."""
        if not drafts:
            return []
        created: list[Prompt] = []
        try:
            with _transaction(self._db_path, immediate=True) as conn:
                for draft in drafts:
                    timestamp = utc_timestamp()
                    prompt_id = self._insert_prompt(
                        conn,
                        {
                            "title": draft.title,
                            "content": draft.content,
                            "tags": _json_dumps(normalize_tags(draft.tags)),
                            "is_favorite": int(draft.is_favorite),
                            "score_avg": float(draft.score_avg),
                            "score_count": int(draft.score_count),
                            "created_at": timestamp,
                            "updated_at": timestamp,
                        },
                    )
                    for version in draft.versions:
                        self._insert_version(
                            conn,
                            prompt_id,
                            content=version.content,
                            change_note=version.change_note,
                            created_at=(
                                format_timestamp(version.created_at)
                                if version.created_at is not None
                                else timestamp
                            ),
                        )
                    row = self._fetch_prompt_row(conn, prompt_id)
                    if row is None:  # pragma: no cover - defensive
                        raise RepositoryError("Prompt insert succeeded but row missing")
                    created.append(Prompt.from_row(row))
        except _SQLITE_ERRORS as exc:
            raise RepositoryError("Failed to insert prompt batch") from exc
        return created

    def get(self, prompt_id: int) -> Prompt:
        """Fetch a prompt by id."""
        try:
            with _transaction(self._db_path) as conn:
                row = self._fetch_prompt_row(conn, prompt_id)
        except _SQLITE_ERRORS as exc:
            raise RepositoryError(f"Failed to load prompt {prompt_id}") from exc
        if row is None:
            raise RepositoryNotFoundError(f"Prompt {prompt_id} not found")
        return Prompt.from_row(row)

    def update(
        self,
        prompt_id: int,
        *,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        is_favorite: bool = False,
        change_note: str | None = None,
    ) -> Prompt:
        """Overwrite a prompt, snapshotting its previous content when the body changes."""
        timestamp = utc_timestamp()
        try:
            with _transaction(self._db_path, immediate=True) as conn:
                current = conn.execute(
                    "SELECT content FROM prompts WHERE id = ?;",
                    (int(prompt_id),),
                ).fetchone()
                if current is None:
                    raise RepositoryNotFoundError(f"Prompt {prompt_id} not found")
                previous_content = str(current["content"])
                if previous_content != content:
                    version_id = self._insert_version(
                        conn,
                        int(prompt_id),
                        content=previous_content,
                        change_note=(change_note or "").strip(),
                        created_at=timestamp,
                    )
                    logger.debug(
                        "Prompt version recorded",
                        extra={"prompt_id": prompt_id, "version_id": version_id},
                    )
                conn.execute(
                    """
                    UPDATE prompts
                    SET title = ?, content = ?, tags = ?, is_favorite = ?, updated_at = ?
                    WHERE id = ?;
                    """,
                    (
                        title,
                        content,
                        _json_dumps(normalize_tags(tags)),
                        int(is_favorite),
                        timestamp,
                        int(prompt_id),
                    ),
                )
                row = self._fetch_prompt_row(conn, int(prompt_id))
        except RepositoryNotFoundError:
            raise
        except _SQLITE_ERRORS as exc:
            raise RepositoryError(f"Failed to update prompt {prompt_id}") from exc
        if row is None:  # pragma: no cover - defensive
            raise RepositoryError(f"Failed to load prompt {prompt_id} after update")
        return Prompt.from_row(row)

    def delete(self, prompt_id: int) -> None:
        """Delete a prompt together with its versions and usage logs."""
        try:
            with _transaction(self._db_path, immediate=True) as conn:
                cursor = conn.execute("DELETE FROM prompts WHERE id = ?;", (int(prompt_id),))
                if cursor.rowcount == 0:
                    raise RepositoryNotFoundError(f"Prompt {prompt_id} not found")
        except RepositoryNotFoundError:
            raise
        except _SQLITE_ERRORS as exc:
            raise RepositoryError(f"Failed to delete prompt {prompt_id}") from exc

    def list(self, limit: int | None = None) -> list[Prompt]:
        """Return prompts ordered by most recently updated."""
        clause = "ORDER BY updated_at DESC, id DESC"
        if limit is not None:
            clause += f" LIMIT {int(limit)}"
        query = f"{_PROMPT_SELECT} {clause};"
        try:
            with _transaction(self._db_path) as conn:
                rows = conn.execute(query).fetchall()
        except _SQLITE_ERRORS as exc:
            raise RepositoryError("Failed to fetch prompt list") from exc
        return [Prompt.from_row(row) for row in rows]

    # Prompt versioning -------------------------------------------------- #

    def list_prompt_versions(
        self,
        prompt_id: int,
        *,
        limit: int | None = None,
    ) -> list[PromptVersion]:
        """Return stored versions for a prompt ordered by newest first."""
        query = f"{_VERSION_SELECT} WHERE prompt_id = ? ORDER BY created_at DESC, id DESC"
        params: list[Any] = [int(prompt_id)]
        if limit is not None:
            query += " LIMIT ?"
            params.append(int(limit))
        try:
            with _transaction(self._db_path) as conn:
                rows = conn.execute(query + ";", params).fetchall()
        except _SQLITE_ERRORS as exc:
            raise RepositoryError("Failed to load prompt versions") from exc
        return [PromptVersion.from_row(row) for row in rows]

    def get_prompt_version(self, version_id: int) -> PromptVersion:
        """Return a specific prompt version by identifier."""
        try:
            with _transaction(self._db_path) as conn:
                row = conn.execute(
                    f"{_VERSION_SELECT} WHERE id = ?;",
                    (int(version_id),),
                ).fetchone()
        except _SQLITE_ERRORS as exc:
            raise RepositoryError(f"Failed to load prompt version {version_id}") from exc
        if row is None:
            raise RepositoryNotFoundError(f"Prompt version {version_id} not found")
        return PromptVersion.from_row(row)

    # Row helpers -------------------------------------------------------- #

    def _insert_prompt(self, conn: sqlite3.Connection, payload: dict[str, Any]) -> int:
        cursor = conn.execute(
            """
            INSERT INTO prompts (
                title, content, tags, is_favorite, score_avg, score_count, created_at, updated_at
            ) VALUES (
                :title, :content, :tags, :is_favorite, :score_avg, :score_count,
                :created_at, :updated_at
            );
            """,
            payload,
        )
        if cursor.lastrowid is None:  # pragma: no cover - defensive
            raise RepositoryError("Prompt insert did not report a row id")
        return int(cursor.lastrowid)

    def _insert_version(
        self,
        conn: sqlite3.Connection,
        prompt_id: int,
        *,
        content: str,
        change_note: str,
        created_at: str,
    ) -> int:
        cursor = conn.execute(
            """
            INSERT INTO prompt_versions (prompt_id, content, change_note, created_at)
            VALUES (?, ?, ?, ?);
            """,
            (prompt_id, content, change_note, created_at),
        )
        return int(cursor.lastrowid or 0)

    def _fetch_prompt_row(self, conn: sqlite3.Connection, prompt_id: int) -> sqlite3.Row | None:
        return conn.execute(f"{_PROMPT_SELECT} WHERE id = ?;", (int(prompt_id),)).fetchone()


__all__ = ["PromptStoreMixin"]
