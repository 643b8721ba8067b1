"""CLI command handlers for Prompt Library.

Handlers run through :class:`~core.commands.PromptCommandRouter` so the terminal
exercises the same command contract as any other presentation layer.

Updates:
  v0.3.0 - 2026-10-18 - Add the save handler backed by upsert_prompt.
  v0.2.0 - 2026-10-04 - Add render, usage logging, restore, stats, and backup handlers.
  v0.1.0 - 2026-09-28 - Initial listing, export, and import handlers.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from core import CommandResponse, PromptLibraryError

from .utils import format_score, parse_assignments, print_and_log, print_json

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from core import PromptCommandRouter, PromptManager

CommandHandler = Callable[
    ["PromptCommandRouter", "PromptManager", argparse.Namespace, logging.Logger],
    int,
]

EXIT_OK = 0
EXIT_COMMAND_FAILED = 1


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler
    description: str = ""


def _report_failure(response: CommandResponse, logger: logging.Logger) -> int:
    error = response.error
    message = f"{error.kind}: {error.message}" if error else "Command failed"
    print_and_log(logger, logging.ERROR, message)
    return EXIT_COMMAND_FAILED


def _run(
    router: PromptCommandRouter,
    logger: logging.Logger,
    name: str,
    **arguments: Any,
) -> tuple[int, Any]:
    response = router.dispatch(name, **arguments)
    if not response.ok:
        return _report_failure(response, logger), None
    return EXIT_OK, response.data


def _variables(args: argparse.Namespace, logger: logging.Logger) -> dict[str, str] | None:
    try:
        return parse_assignments(getattr(args, "variables", []) or [])
    except ValueError as exc:
        print_and_log(logger, logging.ERROR, f"MalformedInput: {exc}")
        return None


def run_list(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, prompts = _run(
        router,
        logger,
        "list_prompts",
        search=args.search,
        tag=args.tag,
        sortBy=args.sort_by,
    )
    if status != EXIT_OK:
        return status
    if args.as_json:
        print_json(prompts)
        return EXIT_OK
    if not prompts:
        print("No prompts found.")
        return EXIT_OK
    for prompt in prompts:
        marker = "*" if prompt["isFavorite"] else " "
        tags = ", ".join(prompt["tags"])
        score = format_score(prompt["scoreAvg"], prompt["scoreCount"])
        line = f"{prompt['id']:>5} {marker} {prompt['title']}  [{score}]"
        print(f"{line}  ({tags})" if tags else line)
    return EXIT_OK


def _read_content(args: argparse.Namespace, logger: logging.Logger) -> tuple[int, str | None]:
    if args.content_file is None:
        return EXIT_OK, args.content
    source = Path(args.content_file).expanduser()
    try:
        return EXIT_OK, source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print_and_log(logger, logging.ERROR, f"Unable to read {source}: {exc}")
        return EXIT_COMMAND_FAILED, None


def run_save(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, content = _read_content(args, logger)
    if status != EXIT_OK:
        return status

    payload: dict[str, Any] = {}
    if args.prompt_id is not None:
        status, current = _run(router, logger, "get_prompt", id=args.prompt_id)
        if status != EXIT_OK:
            return status
        if current is None:
            print_and_log(logger, logging.ERROR, f"NotFound: Prompt {args.prompt_id} not found")
            return EXIT_COMMAND_FAILED
        payload = {
            "id": args.prompt_id,
            "title": current["title"],
            "content": current["content"],
            "tags": current["tags"],
            "isFavorite": current["isFavorite"],
        }
    if args.title is not None:
        payload["title"] = args.title
    if content is not None:
        payload["content"] = content
    if args.tags or args.clear_tags:
        payload["tags"] = list(args.tags)
    if args.favorite is not None:
        payload["isFavorite"] = args.favorite
    if args.note is not None:
        payload["changeNote"] = args.note

    status, prompt = _run(router, logger, "upsert_prompt", input=payload)
    if status != EXIT_OK:
        return status
    print_and_log(logger, logging.INFO, f"Saved prompt {prompt['id']}: {prompt['title']}")
    return EXIT_OK


def run_tags(
    router: PromptCommandRouter,
    _manager: PromptManager,
    _args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, tags = _run(router, logger, "list_tags")
    if status != EXIT_OK:
        return status
    if not tags:
        print("No tags recorded.")
        return EXIT_OK
    for tag in tags:
        print(f"{tag['count']:>5}  {tag['name']}")
    return EXIT_OK


def run_show(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, prompt = _run(router, logger, "get_prompt", id=args.prompt_id)
    if status != EXIT_OK:
        return status
    if prompt is None:
        print_and_log(logger, logging.ERROR, f"NotFound: Prompt {args.prompt_id} not found")
        return EXIT_COMMAND_FAILED
    status, rendered = _run(router, logger, "render_prompt", id=args.prompt_id)
    if status != EXIT_OK:
        return status
    prompt["variables"] = rendered["variables"]
    print_json(prompt)
    return EXIT_OK


def run_versions(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, versions = _run(router, logger, "list_prompt_versions", promptId=args.prompt_id)
    if status != EXIT_OK:
        return status
    print_json(versions)
    return EXIT_OK


def run_restore(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, prompt = _run(
        router,
        logger,
        "restore_prompt_version",
        versionId=args.version_id,
        changeNote=args.note,
    )
    if status != EXIT_OK:
        return status
    print_and_log(
        logger,
        logging.INFO,
        f"Restored version {args.version_id} into prompt {prompt['id']}",
    )
    return EXIT_OK


def run_render(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    values = _variables(args, logger)
    if values is None:
        return EXIT_COMMAND_FAILED
    status, rendered = _run(router, logger, "render_prompt", id=args.prompt_id, values=values)
    if status != EXIT_OK:
        return status
    print(rendered["renderedText"])
    if rendered["missingVariables"]:
        logger.warning(
            "Unresolved variables: %s",
            ", ".join(rendered["missingVariables"]),
        )
    return EXIT_OK


def run_log_usage(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    values = _variables(args, logger)
    if values is None:
        return EXIT_COMMAND_FAILED
    output_text = args.output_text
    if output_text is None:
        status, rendered = _run(router, logger, "render_prompt", id=args.prompt_id, values=values)
        if status != EXIT_OK:
            return status
        output_text = rendered["renderedText"]
    status, _ = _run(
        router,
        logger,
        "log_prompt_usage",
        input={
            "promptId": args.prompt_id,
            "inputVars": values,
            "outputText": output_text,
            "rating": args.rating,
        },
    )
    if status != EXIT_OK:
        return status
    print_and_log(logger, logging.INFO, f"Usage recorded for prompt {args.prompt_id}")
    return EXIT_OK


def run_usage(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, entries = _run(router, logger, "list_prompt_usage", promptId=args.prompt_id)
    if status != EXIT_OK:
        return status
    print_json(entries)
    return EXIT_OK


def run_export(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, document = _run(router, logger, "export_prompts_json")
    if status != EXIT_OK:
        return status
    if args.path is None:
        print(document)
        return EXIT_OK
    output_path = Path(args.path).expanduser()
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(document + "\n", encoding="utf-8")
    except OSError as exc:
        print_and_log(logger, logging.ERROR, f"Failed to write export: {exc}")
        return EXIT_COMMAND_FAILED
    print_and_log(logger, logging.INFO, f"Prompt catalogue exported to {output_path}")
    return EXIT_OK


def run_import(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    source = Path(args.path).expanduser()
    try:
        document = source.read_text(encoding="utf-8")
    except OSError as exc:
        print_and_log(logger, logging.ERROR, f"Unable to read {source}: {exc}")
        return EXIT_COMMAND_FAILED
    status, result = _run(router, logger, "import_prompts_json", jsonData=document)
    if status != EXIT_OK:
        return status
    print_and_log(logger, logging.INFO, f"Imported {result['imported']} prompt(s) from {source}")
    return EXIT_OK


def run_delete(
    router: PromptCommandRouter,
    _manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    status, _ = _run(router, logger, "delete_prompt", id=args.prompt_id)
    if status != EXIT_OK:
        return status
    print_and_log(logger, logging.INFO, f"Deleted prompt {args.prompt_id}")
    return EXIT_OK


def run_stats(
    _router: PromptCommandRouter,
    manager: PromptManager,
    _args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    try:
        stats = manager.get_prompt_catalogue_stats()
    except PromptLibraryError as exc:
        print_and_log(logger, logging.ERROR, f"{exc.kind}: {exc}")
        return EXIT_COMMAND_FAILED
    last_updated = stats.last_updated_at.isoformat() if stats.last_updated_at else "n/a"
    lines = [
        f"Prompts: {stats.total_prompts}",
        f"Favorites: {stats.favorite_prompts}",
        f"Rated: {stats.rated_prompts}",
        f"Versions: {stats.total_versions}",
        f"Usage logs: {stats.total_usage_logs}",
        f"Last updated: {last_updated}",
    ]
    print("\n".join(lines))
    return EXIT_OK


def run_backup(
    _router: PromptCommandRouter,
    manager: PromptManager,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    try:
        destination = manager.backup_database(args.path)
    except PromptLibraryError as exc:
        print_and_log(logger, logging.ERROR, f"{exc.kind}: {exc}")
        return EXIT_COMMAND_FAILED
    print_and_log(logger, logging.INFO, f"Database backed up to {destination}")
    return EXIT_OK


COMMAND_SPECS: dict[str, CommandSpec] = {
    "list": CommandSpec(run_list, "List prompts"),
    "save": CommandSpec(run_save, "Create or edit a prompt"),
    "tags": CommandSpec(run_tags, "Show tag counts"),
    "show": CommandSpec(run_show, "Display a prompt"),
    "versions": CommandSpec(run_versions, "List prompt versions"),
    "restore": CommandSpec(run_restore, "Restore a prompt version"),
    "render": CommandSpec(run_render, "Render a prompt"),
    "log": CommandSpec(run_log_usage, "Record prompt usage"),
    "usage": CommandSpec(run_usage, "List prompt usage"),
    "export": CommandSpec(run_export, "Export the catalogue"),
    "import": CommandSpec(run_import, "Import a catalogue"),
    "delete": CommandSpec(run_delete, "Delete a prompt"),
    "stats": CommandSpec(run_stats, "Show catalogue statistics"),
    "backup": CommandSpec(run_backup, "Back up the database"),
}


__all__ = ["COMMAND_SPECS", "CommandSpec"]
