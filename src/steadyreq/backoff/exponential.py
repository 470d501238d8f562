r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from steadyreq.backoff.base import BaseBackoffStrategy, check_delays


class ExponentialBackoff(BaseBackoffStrategy):
    """Doubling delay: ``base_delay * 2 ** attempt``, capped at
    ``max_delay``.

    Args:
        base_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound of any delay, in seconds. ``None`` disables
            the cap.

    Example:
        ```pycon
        >>> from steadyreq.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> [backoff.calculate(i) for i in range(4)]
        [1.0, 2.0, 4.0, 8.0]
        >>> backoff.calculate(10)
        30.0

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = 30.0) -> None:
        check_delays(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        delay = self.base_delay * (2**attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
