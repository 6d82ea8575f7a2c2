"""
Logging for the roulette engine.

Everything hangs off one "roulette" logger; modules ask for children
(``get_logger("wheel")`` -> "roulette.wheel"). The first call builds the
root from ``settings.logging`` and ``settings.paths``, so LOG_LEVEL,
LOG_TO_FILE, LOG_FORMATTER and LOG_FILE take effect without any setup
code. ``init_logging`` rebuilds it with explicit values.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import orjson

from casino.config import settings

ROOT_LOGGER_NAME = "roulette"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

RESET = "\033[0m"
GRAY = "\033[90m"
CYAN = "\033[96m"

LEVEL_COLORS = {
    logging.DEBUG: GRAY,
    logging.INFO: "\033[92m",
    logging.WARNING: "\033[93m",
    logging.ERROR: "\033[91m",
    logging.CRITICAL: "\033[95m",
}

# Attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _stamp(formatter: logging.Formatter, record: logging.LogRecord) -> str:
    return formatter.formatTime(record, "%Y-%m-%d %H:%M:%S")


class PlainFormatter(logging.Formatter):
    """`time | LEVEL | roulette.module | message`, used for the log file."""

    def format(self, record):
        line = f"{_stamp(self, record)} | {record.levelname:<8} | {record.name} | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ColoredFormatter(PlainFormatter):
    """Same layout as PlainFormatter with the level and logger name colored."""

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno, RESET)
        return (
            f"{GRAY}{_stamp(self, record)}{RESET} | "
            f"{color}{record.levelname:<8}{RESET} | "
            f"{CYAN}{record.name}{RESET} | {record.getMessage()}"
        )


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including any `extra=` fields."""

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_record[key] = value

        return orjson.dumps(log_record, default=str).decode()


FORMATTERS = {
    "color": ColoredFormatter,
    "plain": PlainFormatter,
    "json": JsonFormatter,
}


def _file_handler(path: Path, formatter: str) -> Optional[logging.Handler]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)
    except OSError as e:
        sys.stderr.write(f"WARNING: Could not open log file {path}: {e}; logging to console only\n")
        return None
    # Color codes have no place in a file
    handler.setFormatter(JsonFormatter() if formatter == "json" else PlainFormatter())
    return handler


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    log_file_path: Optional[Path] = None,
    formatter: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a logger, replacing any handlers it already has.

    Arguments left as None are read from settings.logging, and the file
    path from settings.paths.get_log_path().

    Args:
        name: Logger name
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_to_file: Also write to a rotating log file
        log_file_path: Log file location
        formatter: "color", "plain" or "json" for the console
    """
    level = (level or settings.logging.level).upper()
    if log_to_file is None:
        log_to_file = settings.logging.log_to_file
    formatter = formatter or settings.logging.formatter

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(getattr(logging, level, logging.INFO))

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(FORMATTERS.get(formatter, ColoredFormatter)())
    logger.addHandler(console)

    if log_to_file:
        handler = _file_handler(Path(log_file_path or settings.paths.get_log_path()), formatter)
        if handler is not None:
            logger.addHandler(handler)

    logger.propagate = False
    return logger


_app_logger: Optional[logging.Logger] = None


def get_logger(name: str = None) -> logging.Logger:
    """
    Return the package logger, or its child `name` ("ledger", "wheel", ...).
    The package logger is built from settings on first use.
    """
    global _app_logger

    if _app_logger is None:
        _app_logger = setup_logger()

    return _app_logger.getChild(name) if name else _app_logger


def init_logging(
    level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    formatter: Optional[str] = None,
    log_file_path: Optional[Path] = None,
) -> logging.Logger:
    """
    Rebuild the package logger. Arguments left as None come from settings.
    Child loggers handed out earlier pick up the new handlers.
    """
    global _app_logger
    _app_logger = setup_logger(
        level=level,
        log_to_file=log_to_file,
        log_file_path=log_file_path,
        formatter=formatter,
    )
    _app_logger.info(f"Logging initialized at {logging.getLevelName(_app_logger.level)} level")
    return _app_logger
