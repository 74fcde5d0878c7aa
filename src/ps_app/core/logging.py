# src/ps_app/core/logging.py
from __future__ import annotations

import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PLAIN_FMT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
JSON_FMT = (
    '{"level":"%(levelname)s","time":"%(asctime)s","name":"%(name)s",'
    '"message":"%(message)s","module":"%(module)s","line":%(lineno)d}'
)


def configure_logging(
    level: int | str = logging.WARNING,
    json: bool = False,
    console_level: int | str | None = None,
    log_file: Path | None = None,
    console: Console | None = None,
) -> None:
    """
    Configure root + uvicorn loggers. Keep it minimal and production-safe.

    `console_level` narrows what reaches stdout (e.g. --quiet) while the log
    file still receives everything at `level`. Passing a Rich `console` routes
    records through a RichHandler so they render above live progress bars.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if isinstance(console_level, str):
        console_level = logging.getLevelName(console_level.upper())

    fmt = JSON_FMT if json else PLAIN_FMT

    stream: logging.Handler
    if console is not None and not json:
        stream = RichHandler(console=console, show_path=False, markup=False)
        stream.setFormatter(logging.Formatter("%(name)s | %(message)s"))
    else:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(logging.Formatter(fmt))
    stream.setLevel(console_level if console_level is not None else level)
    handlers: list[logging.Handler] = [stream]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(fmt))
        handlers.append(fh)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Uvicorn noisy loggers normalization
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)


def level_from_flags(verbose: bool, debug: bool) -> int:
    """WARNING by default, INFO with --verbose, DEBUG with --debug."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING
