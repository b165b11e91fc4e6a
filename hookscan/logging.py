"""Logger hierarchy for hookscan; records go to stderr so reports stay clean on stdout."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_ROOT = "hookscan"
_CONSOLE_FORMAT = "[hookscan] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(threadName)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``hookscan`` or a ``hookscan.<name>`` child logger."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console (and optional file) handlers to the hookscan logger.

    Calling this again replaces the handlers installed by the previous call.
    ``verbose`` wins over ``quiet``.
    """
    level = _level(verbose, quiet)
    root = logging.getLogger(_ROOT)
    root.setLevel(level)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file is not None:
        # Worker threads log per-file failures; keep the thread name in the file sink.
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        root.addHandler(sink)

    return root


__all__ = ["configure_logging", "get_logger"]
