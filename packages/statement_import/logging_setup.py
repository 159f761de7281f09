"""Console logging for the ``financier`` CLI.

The package logs under ``statement_import.*`` and stays silent on its own.
The CLI turns output on with :func:`configure_logging`: warnings by default,
stage progress with ``--verbose``, and whatever ``STATEMENT_IMPORT_LOG_LEVEL``
names when it is set.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "statement_import"
LEVEL_ENV_VAR = "STATEMENT_IMPORT_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class _ConsoleHandler(logging.StreamHandler):
    """The one handler the CLI installs; found again on reconfiguration."""


def resolve_level(verbose: bool = False) -> int:
    """Pick the package log level for one CLI run.

    An explicit ``STATEMENT_IMPORT_LOG_LEVEL`` (a level name or number) is the
    baseline; otherwise only warnings are shown. ``verbose`` lowers the
    baseline to INFO but never raises it, so ``DEBUG`` from the environment
    survives ``--verbose``.
    """

    level = logging.WARNING
    env_val = (os.getenv(LEVEL_ENV_VAR) or "").strip().upper()
    if env_val.isdigit():
        level = int(env_val)
    elif env_val in logging.getLevelNamesMapping():
        level = logging.getLevelNamesMapping()[env_val]
    if verbose:
        level = min(level, logging.INFO)
    return level


def configure_logging(verbose: bool = False, *, stream: IO[str] | None = None) -> int:
    """Route package logs to ``stream`` (stderr by default); return the level.

    Safe to call once per command: the console handler is created on first
    use and re-pointed at the current stream afterwards, so a later
    ``--verbose`` only changes the level.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    level = resolve_level(verbose)

    handler = next((h for h in logger.handlers if isinstance(h, _ConsoleHandler)), None)
    if handler is None:
        for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
            logger.removeHandler(h)
        handler = _ConsoleHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    handler.setStream(stream if stream is not None else sys.stderr)

    logger.setLevel(level)
    return level


def get_logger(name: str) -> logging.Logger:
    """``logging.getLogger(name)``; keeps the package quiet until configured."""

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
