"""
Logging setup for the chefhelpers CLI.

stdout belongs to the pipeline agent: it parses every ``##vso[...]``
line printed there. Log records therefore always go to stderr (or an
optional file), never to stdout.

Level precedence:
    --debug  >  --verbose  >  --quiet  >  CHEFHELPERS_LOG_LEVEL  >  WARNING
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import IO

LOG_LEVEL_VAR = "CHEFHELPERS_LOG_LEVEL"
LOG_FILE_VAR = "CHEFHELPERS_LOG_FILE"
LOG_FILE_LEVEL_VAR = "CHEFHELPERS_LOG_FILE_LEVEL"

DEFAULT_LEVEL = "WARNING"

# Console format by the most verbose level it applies to
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
]

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from the CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(LOG_LEVEL_VAR) or DEFAULT_LEVEL


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the root logger once for the whole process.

    Args:
        level: Console level name. Unknown names fall back to WARNING.
        log_file: Optional path that also receives records.
        log_file_level: Level for ``log_file``; defaults to ``level``.
        stream: Console stream; defaults to the current ``sys.stderr``.
    """
    console_level = _parse_level(level)
    fmt, datefmt = next(
        (f, d) for threshold, f, d in _CONSOLE_FORMATS if console_level <= threshold
    )

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        root.addHandler(file_handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; WARNING for anything unknown."""
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
