"""Common exception classes for core package.

This module centralises the error taxonomy surfaced by the **core** package.
All exceptions inherit from :class:`PromptLibraryError`, allowing callers to
catch a single base class while still distinguishing the individual failure
categories reported through the command interface.

Updates:
  v0.2.0 - 2026-09-28 - Add malformed input errors for import and command payloads.
  v0.1.0 - 2026-09-14 - Created module with not-found and storage errors.
"""

from __future__ import annotations

from typing import ClassVar


class PromptLibraryError(Exception):
    """Base exception for Prompt Library failures."""

    kind: ClassVar[str] = "StorageFailure"


class PromptNotFoundError(PromptLibraryError):
    """Raised when an operation references a prompt id that does not exist."""

    kind: ClassVar[str] = "NotFound"


class PromptVersionNotFoundError(PromptNotFoundError):
    """Raised when the requested prompt version is missing."""


class MalformedInputError(PromptLibraryError):
    """Raised when an import document or command payload is structurally invalid."""

    kind: ClassVar[str] = "MalformedInput"


class PromptStorageError(PromptLibraryError):
    """Raised when the persistence layer cannot complete a read or write."""

    kind: ClassVar[str] = "StorageFailure"


__all__ = [
    "MalformedInputError",
    "PromptLibraryError",
    "PromptNotFoundError",
    "PromptStorageError",
    "PromptVersionNotFoundError",
]
