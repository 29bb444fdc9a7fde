"""Logging for xdev.

Logs go to stderr: stdout carries toolchain and analyzer output, and the
build plan in plan-only mode. Only the ``xdev`` logger hierarchy is
configured, so third-party loggers (docker, urllib3) keep their defaults.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from xdev.core.config.settings import LoggingSettings, get_settings

LOGGER_NAME = "xdev"

_configured = False


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Configure the ``xdev`` logger.

    Args:
        settings: Logging settings. Uses global settings if not provided.
    """
    global _configured

    if settings is None:
        settings = get_settings().logging
    level = getattr(logging, settings.level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for old in logger.handlers[:]:
        logger.removeHandler(old)
        old.close()

    handler: logging.Handler
    if settings.use_rich:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            show_time=False,
            rich_tracebacks=True,
            markup=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings.format))
    logger.addHandler(handler)

    if settings.file:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger, configuring xdev logging on first use.

    Args:
        name: Logger name (typically __name__).
    """
    if not _configured:
        setup_logging()
    return logging.getLogger(name)
