"""Runtime boot helpers for Prompt Library CLI.

Updates:
  v0.1.1 - 2026-10-04 - Apply the configured log level after settings load.
  v0.1.0 - 2026-09-28 - Extract logging configuration helpers.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path("config/logging.conf")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(logging_conf_path: Path | None, level: str = "INFO") -> bool:
    """Configure logging using *logging_conf_path* when available.

    Returns True when a configuration file was applied.
    """
    path = logging_conf_path or DEFAULT_LOGGING_CONFIG
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
            return True
        except (OSError, KeyError, ValueError, RuntimeError):  # pragma: no cover - fallback
            logging.getLogger("prompt_library.runtime").warning(
                "Ignoring unusable logging configuration %s", path, exc_info=True
            )
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return False


def apply_log_level(level: str) -> None:
    """Set the root logger threshold to *level*."""
    logging.getLogger().setLevel(level)
