"""Logging for the lorenzsim CLI: one stderr handler, records tagged with the running command."""
from __future__ import annotations

import logging
from contextvars import ContextVar

_FORMAT = "[%(command)s] %(levelname)s: %(message)s"

_command: ContextVar[str] = ContextVar("lorenzsim_command", default="lorenzsim")


class _CommandFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.command = _command.get()
        return True


def resolve_log_level(verbose: bool, debug: bool) -> int:
    """``--debug`` wins over ``--verbose``; neither means warnings only."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(level: int) -> None:
    """Install the stderr handler on first use, then only adjust the level."""
    root = logging.getLogger()
    if not any(isinstance(f, _CommandFilter) for h in root.handlers for f in h.filters):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.addFilter(_CommandFilter())
        root.addHandler(handler)
    root.setLevel(level)
    # font and backend discovery flood DEBUG otherwise
    logging.getLogger("matplotlib").setLevel(max(level, logging.INFO))


def set_command_context(command: str) -> None:
    _command.set(command)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
