"""Logging for the playlist tool.

Loggers from get_logger() print bare messages to the console, with warnings
and errors coloured so failures stand out. Nothing touches the filesystem
until start_session() is called: it opens a per-run latest.log and a daily
rotating playlist.log in the chosen directory (./logs by default) and
attaches them to every logger handed out so far or later.
"""

import logging
import os
from logging.handlers import TimedRotatingFileHandler

DEFAULT_LOG_DIR = "logs"
LATEST_LOG_NAME = "latest.log"
DAILY_LOG_NAME = "playlist.log"

RED = "\033[31m"
YELLOW = "\033[33m"
RESET = "\033[0m"

_FILE_FMT = logging.Formatter(
    "%(asctime)s [%(name)s] %(levelname)-5s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


class ColorFormatter(logging.Formatter):
    """Message-only formatter that wraps WARNING/ERROR lines in ANSI colour."""

    COLORS = {logging.WARNING: YELLOW, logging.ERROR: RED, logging.CRITICAL: RED}

    def format(self, record):
        msg = super().format(record)
        color = self.COLORS.get(record.levelno)
        return f"{color}{msg}{RESET}" if color else msg


_loggers = {}
_file_handlers = []


def _open_file_handlers(log_dir):
    os.makedirs(log_dir, exist_ok=True)

    latest = logging.FileHandler(
        os.path.join(log_dir, LATEST_LOG_NAME), mode="w", encoding="utf-8",
    )
    daily = TimedRotatingFileHandler(
        os.path.join(log_dir, DAILY_LOG_NAME), when="midnight", backupCount=0, encoding="utf-8",
    )
    daily.namer = lambda name: name.replace(".log.", ".") + ".log"

    for handler in (latest, daily):
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(_FILE_FMT)
    return [latest, daily]


def start_session(log_dir=None):
    """Start file logging for this run and return the log directory used.

    latest.log is truncated; playlist.log keeps appending and rolls over
    at midnight.
    """
    close_session()
    log_dir = log_dir or os.path.join(os.getcwd(), DEFAULT_LOG_DIR)
    _file_handlers.extend(_open_file_handlers(log_dir))
    for logger in _loggers.values():
        for handler in _file_handlers:
            logger.addHandler(handler)
    return log_dir


def close_session():
    """Detach and close the file handlers opened by start_session()."""
    for logger in _loggers.values():
        for handler in _file_handlers:
            logger.removeHandler(handler)
    for handler in _file_handlers:
        handler.close()
    _file_handlers.clear()


def get_logger(name):
    """Return a named logger with a coloured console handler."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    if name in _loggers:
        return logger

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(ColorFormatter("%(message)s"))
    logger.addHandler(console)

    for handler in _file_handlers:
        logger.addHandler(handler)

    _loggers[name] = logger
    return logger
