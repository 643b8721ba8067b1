"""Data models for Prompt Library.

Updates: v0.2.0 - 2026-09-28 - Export usage log and tag index models.
Updates: v0.1.0 - 2026-09-14 - Export Prompt dataclass.
"""

from .prompt_model import (
    Prompt,
    PromptVersion,
    SortBy,
    TagInfo,
    UsageLogEntry,
    normalize_tags,
)

__all__ = [
    "Prompt",
    "PromptVersion",
    "SortBy",
    "TagInfo",
    "UsageLogEntry",
    "normalize_tags",
]
