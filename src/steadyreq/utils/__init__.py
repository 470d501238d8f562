r"""Helpers for retry delays and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "TextFormatter",
    "calculate_sleep_time",
    "configure_logging",
    "log_structured",
    "parse_retry_after",
]

from steadyreq.utils.retry_after import parse_retry_after
from steadyreq.utils.sleep import calculate_sleep_time
from steadyreq.utils.structured_logging import (
    StructuredFormatter,
    TextFormatter,
    configure_logging,
    log_structured,
)
