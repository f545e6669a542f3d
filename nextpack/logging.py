"""Logging utilities for nextpack commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "nextpack"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger under the ``nextpack`` hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(*, verbose: bool = False, quiet: int = 0) -> int:
    """Map CLI verbosity flags onto a logging level; quiet wins over verbose."""
    if quiet >= 2:
        return logging.ERROR
    if quiet == 1:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: int = 0, log_file: Path | None = None
) -> logging.Logger:
    """Send nextpack logs to stderr and, optionally, to ``log_file`` at full detail."""
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # The CLI may run several times in one process (tests), so start clean.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("nextpack: %(message)s"))
    logger.addHandler(console)

    logger.setLevel(level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["configure_logging", "get_logger", "resolve_level"]
