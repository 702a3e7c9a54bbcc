"""JSON-lines logging on stderr.

stdout belongs to the MCP stdio protocol, so every logger made here writes
one JSON object per record to stderr and does not propagate to the root
logger::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "confluence_reader.tree",
     "message": "Child fetch failed; substituting error stub",
     "node_id": "123", "error": "..."}

Structured fields are passed as ``extra={"extra_fields": {...}}``.  The
default level comes from ``CONFLUENCE_READER_LOG_LEVEL`` (``INFO`` when
unset or not a level name).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import IO, Any

LOG_LEVEL_ENV = "CONFLUENCE_READER_LOG_LEVEL"


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON line.

    Always present: ``ts`` (the record's creation time, UTC), ``level``,
    ``logger``, ``message``.  ``extra_fields`` are merged in at top level;
    ``exception`` holds the formatted traceback when there is one.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(entry, default=str)


def _level_number(name: str) -> int | None:
    resolved = logging.getLevelName(name.strip().upper())
    return resolved if isinstance(resolved, int) else None


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = _level_number(level)
    if resolved is None:
        raise ValueError(f"Unknown log level {level!r}")
    return resolved


def _has_structured_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers)


def get_logger(
    name: str = "confluence_reader",
    *,
    level: int | str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Return the logger *name*, attaching a JSON stderr handler once.

    Parameters
    ----------
    name:
        Logger name.
    level:
        ``int`` or level name; an unknown name raises ``ValueError``.
        Defaults to ``CONFLUENCE_READER_LOG_LEVEL`` on first configuration,
        where an unknown name falls back to ``INFO`` with a warning.  Later
        calls change the level only when *level* is given.
    stream:
        Handler stream for first configuration.  Defaults to stderr.
    """
    logger = logging.getLogger(name)
    if not _has_structured_handler(logger):
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False
        if level is not None:
            logger.setLevel(_resolve_level(level))
        else:
            _apply_env_level(logger)
    elif level is not None:
        logger.setLevel(_resolve_level(level))
    return logger


def _apply_env_level(logger: logging.Logger) -> None:
    raw = os.environ.get(LOG_LEVEL_ENV, "INFO")
    resolved = _level_number(raw)
    logger.setLevel(resolved if resolved is not None else logging.INFO)
    if resolved is None:
        logger.warning(
            "Unknown log level in environment; using INFO",
            extra={"extra_fields": {"env": LOG_LEVEL_ENV, "value": raw}},
        )
