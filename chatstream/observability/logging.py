"""
chatstream - Structured Logging

JSON logs tagged with the stream being parsed.

Records logged while a stream is dispatched carry its ``request_id`` and
``dialect``, plus ``model`` once the parser has seen the model name.

Usage:
    from chatstream.observability.logging import get_logger

    logger = get_logger(__name__)
    logger.warning("Chunk warning", warning="deprecated model")

Output:
    {"timestamp": "2024-01-15T10:30:00+00:00", "level": "WARNING",
     "logger": "chatstream.streaming.normalizer", "message": "Chunk warning",
     "request_id": "req_xyz", "dialect": "openai", "model": "gpt-4o",
     "warning": "deprecated model"}
"""

import os
import sys
import json
import logging
from typing import Any, Dict, Optional, Union
from datetime import datetime, timezone
from dataclasses import dataclass, asdict
from contextvars import ContextVar

_stream_context: ContextVar[Optional["LogContext"]] = ContextVar("chatstream_stream", default=None)

# Attributes every LogRecord has; anything else arrived as an extra field
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


@dataclass
class LogContext:
    """Identity of the stream currently being parsed."""
    request_id: str = ""
    dialect: str = ""
    model: str = ""

    @classmethod
    def get_current(cls) -> Optional["LogContext"]:
        return _stream_context.get()

    @classmethod
    def set_current(cls, ctx: Optional["LogContext"]):
        _stream_context.set(ctx)

    @classmethod
    def clear(cls):
        _stream_context.set(None)

    @classmethod
    def set_model(cls, model: str):
        """Tag the current stream with its model name; no-op outside a stream."""
        ctx = _stream_context.get()
        if ctx is not None:
            ctx.model = model

    def to_dict(self) -> Dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value}


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object: base fields, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                entry[key] = value

        return json.dumps(entry, default=str, ensure_ascii=False)


class StructuredLogger:
    """
    Logger whose keyword arguments become record fields.

    The current LogContext is attached to every record; explicit keyword
    arguments win over context fields of the same name.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _log(self, level: int, msg: str, fields: Dict[str, Any]):
        if not self._logger.isEnabledFor(level):
            return

        ctx = LogContext.get_current()
        extra = ctx.to_dict() if ctx is not None else {}
        extra.update(fields)

        # Attribute the record to our caller, not to this wrapper
        self._logger.log(level, msg, extra=extra, stacklevel=3)

    def debug(self, msg: str, **fields):
        self._log(logging.DEBUG, msg, fields)

    def warning(self, msg: str, **fields):
        self._log(logging.WARNING, msg, fields)

    def error(self, msg: str, **fields):
        self._log(logging.ERROR, msg, fields)


_logging_configured = False


def setup_logging(level: Union[str, int] = "INFO", json_output: bool = True) -> None:
    """
    Send all logs to stdout, as JSON or plain text.

    Replaces any handlers already installed on the root logger.
    """
    global _logging_configured

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)

    _logging_configured = True


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    The first call configures logging from LOG_LEVEL and LOG_FORMAT
    (``json`` or ``text``) unless setup_logging() already ran.
    """
    if not _logging_configured:
        setup_logging(
            level=os.getenv("LOG_LEVEL", "INFO"),
            json_output=os.getenv("LOG_FORMAT", "json").lower() == "json",
        )

    return StructuredLogger(logging.getLogger(name))
