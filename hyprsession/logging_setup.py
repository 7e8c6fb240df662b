"""Logging setup and utilities.

Progress messages ("Restoring kitty...", "Saved current session") are plain
INFO records, so `--silent` only has to raise the screen handler's level.
"""

import logging

from .ansi import LogStyles, make_style, should_colorize
from .debug import is_debug, set_debug

__all__ = [
    "SUCCEED",
    "LogObjects",
    "get_logger",
    "init_logger",
]

SUCCEED = {"succeed": True}
""" `extra` mapping marking a progress message as a completed step (shown in green) """


class LogObjects:
    """Reusable objects for loggers."""

    handlers: list[logging.Handler] = []


class ScreenLogFormatter(logging.Formatter):
    """A formatter adding colors based on log level.

    Respects NO_COLOR environment variable and TTY detection.
    """

    def __init__(self) -> None:
        super().__init__()
        log_format = r"%(name)12s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        if should_colorize():
            ok_pre, ok_suf = make_style(*LogStyles.SUCCESS)
            warn_pre, warn_suf = make_style(*LogStyles.WARNING)
            err_pre, err_suf = make_style(*LogStyles.ERROR)
            crit_pre, crit_suf = make_style(*LogStyles.CRITICAL)
        else:
            ok_pre = ok_suf = warn_pre = warn_suf = err_pre = err_suf = crit_pre = crit_suf = ""

        self._success = logging.Formatter(ok_pre + "✔ " + log_format + ok_suf)
        self._formatters = {
            logging.DEBUG: logging.Formatter(log_format),
            logging.INFO: logging.Formatter(log_format),
            logging.WARNING: logging.Formatter(warn_pre + log_format + warn_suf),
            logging.ERROR: logging.Formatter(err_pre + "✖ " + log_format + err_suf),
            logging.CRITICAL: logging.Formatter(crit_pre + "✖ " + log_format + crit_suf),
        }

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, "succeed", False):
            return self._success.format(record)
        return self._formatters.get(record.levelno, self._formatters[logging.INFO]).format(record)


def init_logger(filename: str | None = None, force_debug: bool = False, silent: bool = False) -> None:
    """Initialize the logging system.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
        silent: If True, only critical messages reach the screen
    """
    if force_debug:
        set_debug(True)

    LogObjects.handlers = []
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter())
    if silent:
        stream_handler.setLevel(logging.CRITICAL)
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "hyprsession", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name (str): logger's name
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.INFO)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in logger.handlers[:]:
        if handler not in LogObjects.handlers:
            logger.removeHandler(handler)
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger
