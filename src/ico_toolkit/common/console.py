"""
Console styling and logging setup for the command-line tool.

Progress goes to stdout, warnings and errors go to stderr prefixed with a
colored "Warning:" / "Error:" label when the stream is a terminal.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

_ANSI_CODES = {
    "red": "\033[31m",
    "yellow": "\033[33m",
    "green": "\033[32m",
    "bold": "\033[1m",
}
_ANSI_RESET = "\033[0m"

_LEVEL_LABELS = {
    logging.WARNING: ("Warning", "yellow"),
    logging.ERROR: ("Error", "red"),
    logging.CRITICAL: ("Error", "red"),
}

# Marker attribute so reconfiguring only removes our own handlers
_HANDLER_TAG = "_ico_toolkit_handler"

ROOT_LOGGER_NAME = "ico_toolkit"


def colors_enabled(stream: TextIO) -> bool:
    """True when stream is a terminal and NO_COLOR is unset."""
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # Closed stream
        return False


def style(text: str, color: str, *, enabled: bool = True) -> str:
    """Wrap text in an ANSI color sequence."""
    if not enabled:
        return text
    return f"{_ANSI_CODES[color]}{text}{_ANSI_RESET}"


class ConsoleFormatter(logging.Formatter):
    """
    Prefixes WARNING and ERROR records with a styled label.

    Lower levels are rendered as the bare message.
    """

    def __init__(self, use_color: bool = False):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        label = _LEVEL_LABELS.get(record.levelno)
        if label is None:
            return message
        text, color = label
        return f"{style(text, color, enabled=self.use_color)}: {message}"


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def configure_logging(
    verbose: bool = False,
    *,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach stdout/stderr handlers to the package logger.

    Args:
        verbose: Emit DEBUG records (stage timings) as well as INFO.
        stdout: Stream for progress records. Defaults to sys.stdout.
        stderr: Stream for warnings and errors. Defaults to sys.stderr.

    Returns:
        The configured package logger.
    """
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)

    out_handler = logging.StreamHandler(stdout)
    out_handler.setLevel(logging.DEBUG)
    out_handler.addFilter(_BelowLevelFilter(logging.WARNING))
    out_handler.setFormatter(ConsoleFormatter(use_color=False))

    err_handler = logging.StreamHandler(stderr)
    err_handler.setLevel(logging.WARNING)
    err_handler.setFormatter(ConsoleFormatter(use_color=colors_enabled(stderr)))

    for handler in (out_handler, err_handler):
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
