"""Shared logging configuration helpers."""

from __future__ import annotations

import logging
from typing import Iterable

from tqdm import tqdm

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_CHOICES: Iterable[str] = tuple(LOG_LEVELS.keys())

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


class TqdmLoggingHandler(logging.Handler):
    """Emit records through ``tqdm.write`` so they don't tear progress bars.

    Worker threads log concurrently; ``Handler.handle`` holds the handler
    lock around ``emit`` so lines are written one at a time.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record))
            self.flush()
        except Exception:
            self.handleError(record)


# Levels selected by -v/-q, from most to least verbose
_VERBOSITY_LADDER = (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR)
_DEFAULT_RUNG = 1


def add_logging_args(parser) -> None:
    """Add --log-level, -v and -q to a command parser."""
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        help="Log level for conversion messages; overrides -v/-q",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log per-image details (debug level)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Log less: -q for warnings, -qq for errors only",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Pick the log level: an explicit name wins, else step along the ladder."""
    if log_level:
        return LOG_LEVELS[log_level.lower()]

    rung = _DEFAULT_RUNG - verbose + quiet
    rung = max(0, min(len(_VERBOSITY_LADDER) - 1, rung))
    return _VERBOSITY_LADDER[rung]


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure root logging and return the active level."""
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    handler = TqdmLoggingHandler(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return level
