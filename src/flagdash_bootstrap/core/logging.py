"""Logging setup for flagdash-bootstrap.

All loggers live under the ``flagdash_bootstrap`` namespace and write to
stderr, leaving stdout for the progress lines printed by CLI commands.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "flagdash_bootstrap"

_DEFAULT_FORMAT = "%(levelname)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``flagdash_bootstrap``.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Configure the package root logger.

    Safe to call more than once; the stderr handler is only installed once
    and later calls just adjust level and format.

    Args:
        debug: Enable DEBUG level with timestamps and logger names.
        verbose: Enable INFO level.
        quiet: Only show errors. Ignored when debug is set.
    """
    global _handler

    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        root.addHandler(_handler)

    _handler.setLevel(level)
    _handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if debug else _DEFAULT_FORMAT))
