"""
Central logging configuration for icsprint.

Installs a colorized console handler on the root logger and keeps chatty
third-party libraries at WARNING unless debug logging is requested.
"""

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "icalendar")


def configure_logging(level_name: Optional[str] = "INFO", debug_mode: bool = False) -> None:
    """
    Configure root logging for a CLI run.

    Args:
        level_name: Logging level name (case-insensitive); unknown names mean INFO
        debug_mode: Force DEBUG for icsprint and third-party loggers

    Environment Variables:
        ICSPRINT_DEBUG: Set to '1', 'true', 'yes' to force debug logging
    """
    if os.getenv("ICSPRINT_DEBUG", "").strip().lower() in ("1", "true", "yes", "on"):
        debug_mode = True

    level = logging.DEBUG if debug_mode else getattr(logging, str(level_name).upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))
        root.addHandler(handler)
    root.setLevel(level)

    third_party_level = logging.DEBUG if debug_mode else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )

