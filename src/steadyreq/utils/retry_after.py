r"""Parsing of the ``Retry-After`` response header (RFC 9110)."""

from __future__ import annotations

__all__ = ["parse_retry_after"]

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(value: str | None) -> float | None:
    """Convert a ``Retry-After`` header value to seconds.

    Both the delay-seconds form (``"120"``) and the HTTP-date form
    (``"Wed, 21 Oct 2015 07:28:00 GMT"``) are understood. Dates in the
    past give ``0.0``.

    Args:
        value: The raw header value, or ``None`` if the header is absent.

    Returns:
        The delay in seconds, or ``None`` if the header is absent or
        cannot be parsed.

    Example:
        ```pycon
        >>> from steadyreq.utils import parse_retry_after
        >>> parse_retry_after("3")
        3.0
        >>> parse_retry_after("soon") is None
        True

        ```
    """
    if value is None:
        return None

    value = value.strip()
    if value.isdigit():
        return float(value)

    try:
        when = parsedate_to_datetime(value)
    except (ValueError, TypeError, IndexError, OverflowError):
        logger.debug(f"Ignoring unparsable Retry-After header: {value!r}")
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())
