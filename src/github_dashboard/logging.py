"""Loguru setup for ghdash.

Modules log through ``get_logger(__name__)``. Records from the standard
library (httpx and githubkit carry the HTTP transport) are routed into
the same sinks and tagged with their stdlib logger name.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from loguru import Logger, Record

    from github_dashboard.config import Settings

TRANSPORT_LOGGERS = ("httpx", "httpcore", "githubkit")

_CONSOLE_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - "
    "<level>{message}</level>"
)

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | {extra} | {message}"


def _default_name(record: Record) -> None:
    record["extra"].setdefault("name", record["name"])


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def effective_level(base: str, *, verbose: bool = False, quiet: bool = False) -> str:
    """``--verbose`` wins over ``--quiet``; both win over the configured level."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return base


def setup_logging(settings: Settings, *, verbose: bool = False, quiet: bool = False) -> Logger:
    """Replace loguru's sinks with the ones ``settings`` asks for.

    stderr gets the effective level. When ``logging.log_file`` is set, a
    rotating file sink records everything from DEBUG up. Transport
    loggers stay at WARNING unless running at DEBUG.
    """
    level = effective_level(settings.log_level, verbose=verbose, quiet=quiet)
    file_config = settings.logging

    handlers: list[dict[str, Any]] = [
        {
            "sink": sys.stderr,
            "level": level,
            "format": _CONSOLE_FORMAT,
            "colorize": True,
            "diagnose": False,
        }
    ]
    if file_config.log_file:
        handlers.append(
            {
                "sink": file_config.log_file,
                "level": "DEBUG",
                "format": _FILE_FORMAT,
                "rotation": file_config.rotation,
                "retention": file_config.retention,
                "compression": "gz",
                "serialize": file_config.serialize,
            }
        )
    logger.configure(handlers=handlers, patcher=_default_name)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    transport_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    return logger


def get_logger(name: str) -> Logger:
    return logger.bind(name=name)


def bind_repo(owner: str, repo: str) -> Logger:
    return logger.bind(name="github", repo=f"{owner}/{repo}")


def bind_user(username: str) -> Logger:
    return logger.bind(name="activity", user=username)


def dashboard_context(dashboard_id: str) -> AbstractContextManager[None]:
    """Tag everything logged inside the block, from any module, with the dashboard."""
    return logger.contextualize(dashboard=dashboard_id)


def reset_logging() -> None:
    """Drop every sink (tests call this between runs)."""
    logger.remove()
