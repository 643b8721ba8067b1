"""Core service layer for Prompt Library.

Updates:
  v0.3.0 - 2026-10-04 - Export command router and catalogue transfer helpers.
  v0.2.0 - 2026-09-28 - Export templating helpers and the error taxonomy.
  v0.1.0 - 2026-09-14 - Surface PromptRepository and the initial PromptManager API.
"""

from .catalog_transfer import (
    FORMAT_VERSION,
    ImportResult,
    export_prompt_catalog,
    import_prompt_catalog,
    parse_catalog_document,
)
from .commands import CommandFailure, CommandResponse, PromptCommandRouter
from .exceptions import (
    MalformedInputError,
    PromptLibraryError,
    PromptNotFoundError,
    PromptStorageError,
    PromptVersionNotFoundError,
)
from .factory import build_command_router, build_prompt_manager
from .prompt_manager import PromptManager
from .repository import (
    PromptCatalogueStats,
    PromptRepository,
    RepositoryError,
    RepositoryNotFoundError,
)
from .templating import (
    TemplateRenderer,
    TemplateRenderResult,
    extract_variables,
    render_template,
)

__all__ = [
    "FORMAT_VERSION",
    "CommandFailure",
    "CommandResponse",
    "ImportResult",
    "MalformedInputError",
    "PromptCatalogueStats",
    "PromptCommandRouter",
    "PromptLibraryError",
    "PromptManager",
    "PromptNotFoundError",
    "PromptRepository",
    "PromptStorageError",
    "PromptVersionNotFoundError",
    "RepositoryError",
    "RepositoryNotFoundError",
    "TemplateRenderResult",
    "TemplateRenderer",
    "build_command_router",
    "build_prompt_manager",
    "export_prompt_catalog",
    "extract_variables",
    "import_prompt_catalog",
    "parse_catalog_document",
    "render_template",
]
