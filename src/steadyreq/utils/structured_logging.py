r"""Structured logging helpers.

The client emits leveled records whose named fields (``method``, ``url``,
``opts``, ``body``, ``attempt``, ``request``, ``error``) travel in the
record ``extra``. ``StructuredFormatter`` renders such records as one JSON
object per line and ``TextFormatter`` as one text line ending with
``key=value`` pairs; ``configure_logging`` wires a handler onto the package
logger from the ``LOG_LEVEL`` and ``APP_ENV`` environment variables.

Example:
    ```python
    import logging

    from steadyreq import new_client_with_debug
    from steadyreq.utils import configure_logging

    configure_logging(level="debug", json_output=True)
    client = new_client_with_debug(True)
    client.get("https://internal.example/health")
    ```
"""

from __future__ import annotations

__all__ = [
    "TEXT_FORMAT",
    "TIMESTAMP_FORMAT",
    "StructuredFormatter",
    "TextFormatter",
    "configure_logging",
    "log_structured",
]

import json
import logging
import os
import time
from typing import Any

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TEXT_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s %(message)s"

# Attributes every LogRecord carries; anything else came from ``extra``.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured records.

    Each record becomes a JSON object with the keys ``timestamp`` (Unix
    time in nanoseconds), ``time`` (ISO 8601, UTC), ``log_level``,
    ``logger``, ``message``, ``module``, ``function`` and ``line``,
    followed by every extra field of the record. Values that are not
    JSON serializable are rendered with ``str``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from steadyreq.utils import StructuredFormatter
        >>> record = logging.LogRecord("demo", logging.DEBUG, __file__, 1, "hello", None, None)
        >>> record.attempt = 2
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["log_level"], data["message"], data["attempt"]
        ('DEBUG', 'hello', 2)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": int(record.created * 1e9),
            "time": self.formatTime(record),
            "log_level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        data.update(_extra_fields(record))
        return json.dumps(data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{stamp}.{int(record.msecs):03d}Z"


class TextFormatter(logging.Formatter):
    """Human-readable formatter for structured records.

    The record is rendered with ``TEXT_FORMAT`` and its extra fields are
    appended as ``key=value`` pairs, values encoded as JSON.

    Example:
        ```pycon
        >>> import logging
        >>> from steadyreq.utils import TextFormatter
        >>> record = logging.LogRecord("demo", logging.DEBUG, __file__, 1, "Sending request", None, None)
        >>> record.attempt = 2
        >>> TextFormatter().format(record).endswith("DEBUG demo Sending request attempt=2")
        True

        ```
    """

    def __init__(self, fmt: str = TEXT_FORMAT, datefmt: str | None = TIMESTAMP_FORMAT) -> None:
        super().__init__(fmt, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = " ".join(
            f"{key}={json.dumps(value, default=str)}"
            for key, value in _extra_fields(record).items()
        )
        return f"{line} {fields}" if fields else line


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in vars(record).items() if key not in _RESERVED}


def log_structured(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log ``message`` with named fields attached to the record.

    Args:
        logger: The destination logger.
        level: The log level, e.g. ``logging.DEBUG``.
        message: The log message.
        **fields: Named fields, available as record attributes.

    Example:
        ```pycon
        >>> import logging
        >>> from steadyreq.utils import log_structured
        >>> log_structured(logging.getLogger("demo"), logging.DEBUG, "Sending request", attempt=1)

        ```
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra=fields, stacklevel=2)


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: str | int | None = None,
    *,
    json_output: bool | None = None,
    logger_name: str = "steadyreq",
) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Outside production (``APP_ENV`` is not ``"production"``) records are
    rendered as text by ``TextFormatter`` with millisecond timestamps and
    the default level is ``debug``. In production records are rendered as JSON by
    ``StructuredFormatter`` and the default level is ``info``. The
    ``LOG_LEVEL`` environment variable overrides the default level;
    unknown level names fall back to ``INFO``.

    Calling this function again replaces the handler it installed before.

    Args:
        level: Explicit level name or number. Takes precedence over
            ``LOG_LEVEL``.
        json_output: Force JSON (``True``) or text (``False``) output.
        logger_name: Name of the logger to configure.

    Returns:
        The configured logger.
    """
    production = os.environ.get("APP_ENV", "") == "production"
    if json_output is None:
        json_output = production
    if level is None:
        level = os.environ.get("LOG_LEVEL", "info" if production else "debug")

    handler = logging.StreamHandler()
    handler.set_name(f"{logger_name}.configured")
    if json_output:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter())

    logger = logging.getLogger(logger_name)
    for existing in list(logger.handlers):
        if existing.get_name() == handler.get_name():
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(_parse_level(level))
    return logger
