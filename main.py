"""Application entry point for Prompt Library.

Updates:
  v0.2.0 - 2026-10-04 - Route sub-commands through the command router and add --db-path.
  v0.1.0 - 2026-09-28 - Wire settings, logging, and CLI commands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from cli.commands import COMMAND_SPECS
from cli.parser import build_parser, parse_args
from cli.runtime import apply_log_level, setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import PromptLibraryError, build_command_router, build_prompt_manager

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence

    from config import PromptLibrarySettings
    from core import PromptManager

EXIT_OK = 0
EXIT_SETTINGS_FAILED = 2
EXIT_INIT_FAILED = 3


def _initialise_manager(
    settings: PromptLibrarySettings,
    logger: logging.Logger,
) -> PromptManager | None:
    try:
        return build_prompt_manager(settings)
    except PromptLibraryError as exc:
        logger.error("Failed to initialise services: %s", exc)
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, services, and CLI commands."""
    args = parse_args(argv)
    file_config_applied = setup_logging(args.logging_config)

    logger = logging.getLogger("prompt_library.main")
    overrides: dict[str, Any] = {}
    if args.db_path is not None:
        overrides["db_path"] = args.db_path
    try:
        settings = load_settings(**overrides)
    except SettingsError as exc:
        logger.error("Failed to load settings: %s", exc)
        return EXIT_SETTINGS_FAILED
    if not file_config_applied:
        apply_log_level(settings.log_level)

    if args.print_settings:
        print_settings_summary(settings)
        return EXIT_OK

    spec = COMMAND_SPECS.get(getattr(args, "command", None) or "")
    if spec is None:
        build_parser().print_help()
        return EXIT_OK

    manager = _initialise_manager(settings, logger)
    if manager is None:
        return EXIT_INIT_FAILED
    with manager:
        router = build_command_router(settings, manager=manager)
        return spec.handler(router, manager, args, logger)


if __name__ == "__main__":
    raise SystemExit(main())
