"""Argument parser for Prompt Library CLI.

Updates:
  v0.3.0 - 2026-10-18 - Add the save command for creating and editing prompts.
  v0.2.0 - 2026-10-04 - Add render, usage logging, restore, stats, and backup commands.
  v0.1.0 - 2026-09-28 - Initial listing, export, and import sub-commands.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from models.prompt_model import SortBy

if TYPE_CHECKING:
    from collections.abc import Sequence


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the Prompt Library CLI."""
    parser = argparse.ArgumentParser(description="Prompt Library command line interface")
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--db-path",
        type=Path,
        default=None,
        help="Override the SQLite database path from settings.",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="List prompts with optional filters.")
    list_parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Case-insensitive text matched against title, content, and tags.",
    )
    list_parser.add_argument(
        "--tag",
        type=str,
        default=None,
        help="Only include prompts carrying this tag (case-insensitive).",
    )
    list_parser.add_argument(
        "--sort",
        dest="sort_by",
        choices=[member.value for member in SortBy],
        default=SortBy.UPDATED.value,
        help="Ordering of the listing (default: updated).",
    )
    list_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Emit the listing as JSON instead of a table.",
    )

    save_parser = subparsers.add_parser(
        "save",
        help="Create a prompt, or edit one when --id is given.",
    )
    save_parser.add_argument(
        "--id",
        dest="prompt_id",
        type=int,
        default=None,
        help="Prompt id to edit; omitted fields keep their current values.",
    )
    save_parser.add_argument("--title", type=str, default=None, help="Prompt title.")
    content_group = save_parser.add_mutually_exclusive_group()
    content_group.add_argument("--content", type=str, default=None, help="Prompt body.")
    content_group.add_argument(
        "--content-file",
        type=Path,
        default=None,
        help="Read the prompt body from a UTF-8 text file.",
    )
    save_parser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=[],
        help="Tag to attach (repeatable); replaces existing tags when editing.",
    )
    save_parser.add_argument(
        "--clear-tags",
        action="store_true",
        help="Remove all tags from the prompt.",
    )
    save_parser.add_argument(
        "--favorite",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Mark or unmark the prompt as a favorite.",
    )
    save_parser.add_argument(
        "--note",
        type=str,
        default=None,
        help="Change note recorded when the content changes.",
    )

    subparsers.add_parser("tags", help="Show tag usage counts.")

    show_parser = subparsers.add_parser("show", help="Display a prompt and its variables.")
    show_parser.add_argument("prompt_id", type=int, help="Prompt id.")

    versions_parser = subparsers.add_parser("versions", help="List stored versions of a prompt.")
    versions_parser.add_argument("prompt_id", type=int, help="Prompt id.")

    restore_parser = subparsers.add_parser(
        "restore",
        help="Replace a prompt's content with a stored version.",
    )
    restore_parser.add_argument("version_id", type=int, help="Version id to restore.")
    restore_parser.add_argument(
        "--note",
        type=str,
        default=None,
        help="Change note recorded with the replaced content.",
    )

    render_parser = subparsers.add_parser("render", help="Render a prompt with variable values.")
    render_parser.add_argument("prompt_id", type=int, help="Prompt id.")
    render_parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Variable value (repeatable).",
    )

    log_parser = subparsers.add_parser("log", help="Record a prompt usage, optionally rated.")
    log_parser.add_argument("prompt_id", type=int, help="Prompt id.")
    log_parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Variable value used for the render (repeatable).",
    )
    log_parser.add_argument(
        "--output",
        dest="output_text",
        type=str,
        default=None,
        help="Output text to store (defaults to the rendered prompt).",
    )
    log_parser.add_argument(
        "--rating",
        type=int,
        default=None,
        help="Rating from 1 to 5.",
    )

    usage_parser = subparsers.add_parser("usage", help="List usage history for a prompt.")
    usage_parser.add_argument("prompt_id", type=int, help="Prompt id.")

    export_parser = subparsers.add_parser(
        "export",
        help="Export the prompt catalogue to JSON.",
    )
    export_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=None,
        help="Destination file path (prints to stdout when omitted).",
    )

    import_parser = subparsers.add_parser("import", help="Import prompts from a JSON export.")
    import_parser.add_argument("path", type=Path, help="Source JSON file.")

    delete_parser = subparsers.add_parser("delete", help="Delete a prompt and its history.")
    delete_parser.add_argument("prompt_id", type=int, help="Prompt id.")

    subparsers.add_parser("stats", help="Show catalogue statistics.")

    backup_parser = subparsers.add_parser("backup", help="Copy the database to a backup file.")
    backup_parser.add_argument("path", type=Path, help="Destination database file.")

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments for the Prompt Library launcher."""
    return build_parser().parse_args(argv)
