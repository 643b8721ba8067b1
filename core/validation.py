"""Reusable pydantic field types for command payloads and catalogue documents.

Values that reach SQLite must fit a signed 64-bit INTEGER and encode as UTF-8 TEXT;
these types reject anything else at validation time so callers see a
``MalformedInput`` failure instead of a driver error.

Updates: v0.1.0 - 2026-10-18 - Add SQLite-safe integer and UTF-8 string types.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, Field, StrictInt, StrictStr

SQLITE_INTEGER_MIN = -(2**63)
SQLITE_INTEGER_MAX = 2**63 - 1


def _require_utf8(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValueError("text must be valid UTF-8 (lone surrogates are not allowed)") from exc
    return value


Utf8Str = Annotated[StrictStr, AfterValidator(_require_utf8)]
SqliteInt = Annotated[StrictInt, Field(ge=SQLITE_INTEGER_MIN, le=SQLITE_INTEGER_MAX)]

__all__ = [
    "SQLITE_INTEGER_MAX",
    "SQLITE_INTEGER_MIN",
    "SqliteInt",
    "Utf8Str",
]
