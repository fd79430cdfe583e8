"""Logging setup shared by the server and the headless CLI."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s"

# Per-request lines from uvicorn drown out tick summaries at INFO
_NOISY_LOGGERS = ("uvicorn.access",)

_HANDLER_TAG = "_citysim_handler"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Route city logs to stdout (and optionally *log_file*).

    Safe to call more than once: only handlers installed here are replaced,
    so handlers added by uvicorn or pytest's caplog survive.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    for old in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(old)
        old.close()

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
