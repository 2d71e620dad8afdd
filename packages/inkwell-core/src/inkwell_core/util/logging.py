"""Logging helpers for inkwell.

Library modules only create loggers. Handlers are attached by the application
(the CLI callback) through :func:`configure_logging`.
"""

from __future__ import annotations

import logging
from pathlib import Path

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LEVELS = {
    "warning": logging.WARNING,
    "info": logging.INFO,
    "verbose": logging.DEBUG,
    "debug": logging.DEBUG,
}
# Handlers owned by configure_logging; any others on the root logger are untouched.
_installed: list[logging.Handler] = []


def configure_logging(verbosity: str = "info", log_file: Path | None = None) -> None:
    """Attach inkwell's console handler and an optional debug file handler.

    Calling again replaces the handlers installed by the previous call.

    Args:
        verbosity: Console verbosity (warning, info, verbose, debug).
        log_file: Optional path for a debug-level log file.
    """
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    console_level = _LEVELS.get(verbosity.lower(), logging.INFO)
    console = logging.StreamHandler()
    console.setLevel(console_level)
    _install(root, console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        _install(root, file_handler)

    root.setLevel(logging.DEBUG if log_file is not None else console_level)
    # Provider SDKs log every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def _install(root: logging.Logger, handler: logging.Handler) -> None:
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    _installed.append(handler)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for *name*."""
    return logging.getLogger(name)
