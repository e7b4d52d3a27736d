"""
Logging configuration for campaign-fields.

The engine only logs formula failures at DEBUG, with the formula and the
failure detail passed through ``extra``. These formatters make that data
readable in a console or machine readable as JSON lines.
"""

import logging
import sys
from typing import Any

import orjson

# Attributes of a bare LogRecord; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


def _extra(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, ``extra`` data nested under "extra"."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        extra = _extra(record)
        if extra:
            log_data["extra"] = extra
        return orjson.dumps(log_data, default=str).decode("utf-8")


class ConsoleFormatter(logging.Formatter):
    """Colored level name, with ``extra`` data appended as key=value pairs."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = f"{self.COLORS.get(original, '')}{original}{self.RESET}"
        try:
            line = super().format(record)
        finally:
            record.levelname = original
        extra = _extra(record)
        if extra:
            line += " " + " ".join(f"{k}={v!r}" for k, v in extra.items())
        return line


def setup_logging(log_level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Install a stdout handler on the root logger.

    Args:
        log_level: Logging level name. Defaults to the ``log_level`` setting.
        json_logs: Emit JSON lines. Defaults to the ``json_logs`` setting.
    """
    from campaign_fields.core.config import settings

    log_level = (log_level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.json_logs

    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            ConsoleFormatter("%(asctime)s | %(levelname)-8s | %(name)s - %(message)s")
        )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # The parser library is chatty at DEBUG
    logging.getLogger("lark").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (usually ``__name__``)."""
    return logging.getLogger(name)
