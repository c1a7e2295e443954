"""Logging setup for **CrawlScope**.

Crawler modules log through ``logging.getLogger("CrawlScope")``; this module
attaches the handlers:

* console output on stderr (or any stream passed to :func:`configure`),
  plus an optional rotating logfile;
* :data:`logger`, the configured instance, for code that wants an import::

      from crawlscope.logger import logger
* Optional plain-text list of visited URLs (one per line) through the
  ``CrawlScope.visited`` child logger, see :func:`enable_visited_log`.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, TextIO, Union

# --------------------------------------------------------------------------- #
# Constants & basic types                                                     #
# --------------------------------------------------------------------------- #

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "CrawlScope"
_VISITED_LOGGER_NAME: Final[str] = f"{_LOGGER_NAME}.visited"

_LevelT = Union[int, str]


# --------------------------------------------------------------------------- #
# Helper builders                                                             #
# --------------------------------------------------------------------------- #


def _console_handler(fmt: str, stream: Optional[TextIO] = None) -> logging.StreamHandler:
    # resolved per call: CliRunner and pytest swap sys.stderr
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _file_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """(Re)configure the "CrawlScope" logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Optional rotating logfile in addition to the console.
    log_format
        Format string shared by all handlers.
    replace_handlers
        Drop previously installed handlers first.
    stream
        Console stream; defaults to ``sys.stderr`` so that stdout stays free
        for the JSON report printed by ``crawlscope crawl``.
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        lg.handlers.clear()

    lg.addHandler(_console_handler(log_format, stream))

    if log_file is not None:
        lg.addHandler(_file_handler(log_file, log_format))

    lg.propagate = False
    return lg


def enable_visited_log(path: Optional[str | Path]) -> logging.Logger:
    """Append every visited URL to *path*; ``None`` switches the list off.

    The file is a debugging aid only and is never read back by the crawler.
    """
    vl = logging.getLogger(_VISITED_LOGGER_NAME)
    for handler in list(vl.handlers):
        vl.removeHandler(handler)
        handler.close()
    if path is None:
        vl.setLevel(logging.NOTSET)
        vl.propagate = True
        return vl
    handler = logging.FileHandler(str(path), mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    vl.addHandler(handler)
    vl.setLevel(logging.DEBUG)
    vl.propagate = False
    return vl


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Shortcut used by the CLI."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


# --------------------------------------------------------------------------- #
# Ready‑to‑use instance                                                       #
# --------------------------------------------------------------------------- #

logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "enable_visited_log", "init_logging"]
