r"""Delay calculation between two retry attempts."""

from __future__ import annotations

__all__ = ["calculate_sleep_time"]

import logging
import random
from typing import TYPE_CHECKING

from steadyreq.backoff.exponential import ExponentialBackoff
from steadyreq.utils.retry_after import parse_retry_after

if TYPE_CHECKING:
    import httpx

    from steadyreq.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(
    attempt: int,
    *,
    response: httpx.Response | None = None,
    backoff_strategy: BaseBackoffStrategy | None = None,
    jitter_factor: float = 0.0,
    max_wait_time: float | None = None,
) -> float:
    """Compute how long to wait before the next attempt.

    The base delay is the ``Retry-After`` header of ``response`` when it
    is present and valid, otherwise ``backoff_strategy.calculate(attempt)``.
    The base delay is then capped by ``max_wait_time`` and finally grows
    by a random jitter of at most ``jitter_factor`` times itself.

    Args:
        attempt: The retry index (0-indexed).
        response: The retryable response of the last attempt, if any.
        backoff_strategy: The backoff strategy. Defaults to
            ``ExponentialBackoff()``.
        jitter_factor: Upper bound of the relative jitter.
        max_wait_time: Optional cap of the base delay, in seconds.

    Returns:
        The delay in seconds.

    Example:
        ```pycon
        >>> from steadyreq.backoff import ConstantBackoff
        >>> from steadyreq.utils import calculate_sleep_time
        >>> calculate_sleep_time(0)
        1.0
        >>> calculate_sleep_time(3, max_wait_time=5.0)
        5.0
        >>> calculate_sleep_time(3, backoff_strategy=ConstantBackoff(0.2))
        0.2

        ```
    """
    delay: float | None = None
    if response is not None:
        delay = parse_retry_after(response.headers.get("Retry-After"))
        if delay is not None:
            logger.debug(f"Using Retry-After header value: {delay:.2f}s")
    if delay is None:
        delay = (backoff_strategy or ExponentialBackoff()).calculate(attempt)

    if max_wait_time is not None and delay > max_wait_time:
        logger.debug(f"Capping sleep time from {delay:.2f}s to {max_wait_time:.2f}s")
        delay = max_wait_time

    if jitter_factor > 0:
        delay += random.uniform(0, jitter_factor) * delay  # noqa: S311
    return delay
