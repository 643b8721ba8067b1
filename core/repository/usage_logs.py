"""Usage log persistence and running score maintenance.

Updates:
  v0.1.1 - 2026-10-18 - Report out-of-range ids and unencodable text as repository errors.
  v0.1.0 - 2026-09-28 - Record usage events and fold ratings into prompt scores.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from models.prompt_model import UsageLogEntry, utc_timestamp

from .base import (
    SQLITE_ERRORS as _SQLITE_ERRORS,
    RepositoryError,
    RepositoryNotFoundError,
    json_dumps as _json_dumps,
    logger,
    transaction as _transaction,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


class UsageLogStoreMixin:
    """Usage log persistence helpers shared across repository implementations."""

    _db_path: Path

    _USAGE_COLUMNS: ClassVar[tuple[str, ...]] = (
        "id",
        "prompt_id",
        "input_vars",
        "output_text",
        "rating",
        "used_at",
    )

    def add_usage_log(
        self,
        prompt_id: int,
        *,
        input_vars: Mapping[str, str],
        output_text: str,
        rating: int | None = None,
    ) -> UsageLogEntry:
        """Persist a usage event and, when rated, update the prompt's running mean."""
        used_at = utc_timestamp()
        try:
            with _transaction(self._db_path, immediate=True) as conn:
                score_row = conn.execute(
                    "SELECT score_avg, score_count FROM prompts WHERE id = ?;",
                    (int(prompt_id),),
                ).fetchone()
                if score_row is None:
                    raise RepositoryNotFoundError(f"Prompt {prompt_id} not found")
                cursor = conn.execute(
                    """
                    INSERT INTO usage_logs (prompt_id, input_vars, output_text, rating, used_at)
                    VALUES (?, ?, ?, ?, ?);
                    """,
                    (
                        int(prompt_id),
                        _json_dumps({str(key): str(value) for key, value in input_vars.items()}),
                        output_text,
                        rating,
                        used_at,
                    ),
                )
                log_id = int(cursor.lastrowid or 0)
                if rating is not None:
                    count = int(score_row["score_count"] or 0)
                    average = float(score_row["score_avg"] or 0.0)
                    new_count = count + 1
                    new_average = (average * count + rating) / new_count
                    conn.execute(
                        "UPDATE prompts SET score_avg = ?, score_count = ? WHERE id = ?;",
                        (new_average, new_count, int(prompt_id)),
                    )
                    logger.debug(
                        "Prompt score updated",
                        extra={
                            "prompt_id": prompt_id,
                            "score_avg": new_average,
                            "score_count": new_count,
                        },
                    )
                row = conn.execute(
                    f"SELECT {', '.join(self._USAGE_COLUMNS)} FROM usage_logs WHERE id = ?;",
                    (log_id,),
                ).fetchone()
        except RepositoryNotFoundError:
            raise
        except _SQLITE_ERRORS as exc:
            raise RepositoryError(f"Failed to record usage for prompt {prompt_id}") from exc
        if row is None:  # pragma: no cover - defensive
            raise RepositoryError("Usage log insert succeeded but row missing")
        return UsageLogEntry.from_row(row)

    def list_usage_logs_for_prompt(
        self,
        prompt_id: int,
        *,
        limit: int | None = None,
    ) -> list[UsageLogEntry]:
        """Return usage history for a given prompt, newest first."""
        query = (
            f"SELECT {', '.join(self._USAGE_COLUMNS)} FROM usage_logs "
            "WHERE prompt_id = ? ORDER BY used_at DESC, id DESC"
        )
        params: list[int] = [int(prompt_id)]
        if limit is not None:
            query += " LIMIT ?"
            params.append(int(limit))
        try:
            with _transaction(self._db_path) as conn:
                rows = conn.execute(query + ";", params).fetchall()
        except _SQLITE_ERRORS as exc:
            raise RepositoryError(f"Failed to load usage logs for prompt {prompt_id}") from exc
        return [UsageLogEntry.from_row(row) for row in rows]


__all__ = ["UsageLogStoreMixin"]
