"""
Logging setup for pick-engine.

``configure_logging(config)`` is called once by each CLI command, after the
config is loaded and before any payload is read.  Library modules only ever
use ``logging.getLogger(__name__)``.

Engine modules attach per-event context through ``extra=``, for example
``logger.info("...", extra={"event_id": 1001})``.  Both formats keep it:

  text  ->  2026-10-18T15:00:00Z [INFO] pick_engine.engine.pipeline: No forecast ... | event_id=1001
  json  ->  {"ts": "...", "level": "INFO", "logger": "...", "msg": "...", "event_id": 1001}

The per-candidate trace in ``pick_engine.engine`` is DEBUG; it is shown only
when the configured level is DEBUG.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pick_engine.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

ENGINE_LOGGERS = (
    "pick_engine.engine",
    "pick_engine.ingestion",
    "pick_engine.selection",
    "pick_engine.settlement",
)

_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> dict:
    """Fields passed through ``extra=``, in insertion order."""
    return {
        key: val
        for key, val in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class _ContextFormatter(logging.Formatter):
    """Plain-text lines with ``| key=value`` context appended."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={val}" for key, val in context.items())
        return f"{line} | {pairs}"


class _JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, then context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(record_context(record))
        return json.dumps(payload, default=str)


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig") -> None:
    """Configure the root logger and the engine loggers from ``config``.

    Console output goes to stdout.  ``config.log_file`` adds a file handler
    (parent directories are created).  Every logger in ``ENGINE_LOGGERS``
    is set to the configured level.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    formatter: logging.Formatter
    if config.json_format:
        formatter = _JsonFormatter()
    else:
        formatter = _ContextFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers = [_handler(logging.StreamHandler(sys.stdout), level, formatter)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _handler(logging.FileHandler(log_path, encoding="utf-8"), level, formatter)
        )

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in ENGINE_LOGGERS:
        logging.getLogger(name).setLevel(level)
