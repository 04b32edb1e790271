"""Runtime logging helpers."""

from __future__ import annotations

import sys
from logging import Handler

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler

from pshelp.config import LogFormat, load_settings

LogProfile = LogFormat

_DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"
_CONFIGURED_PROFILE: LogProfile | None = None


def _build_rich_handler() -> Handler:
    return RichHandler(
        console=Console(stderr=True),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def configure_logging(*, profile: LogProfile = "text", level: str | None = None) -> None:
    """Configure process-level logging once.

    The level falls back to the ``log_level`` setting (``PSHELP_LOG_LEVEL`` or ``.env``).
    """

    global _CONFIGURED_PROFILE
    if profile == _CONFIGURED_PROFILE:
        return

    resolved_level = (level or load_settings().log_level).upper()
    logger.remove()
    if profile == "rich":
        logger.add(
            _build_rich_handler(),
            level=resolved_level,
            format="{message}",
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            level=resolved_level,
            format=_DEFAULT_FORMAT,
            backtrace=False,
            diagnose=False,
        )
    _CONFIGURED_PROFILE = profile
