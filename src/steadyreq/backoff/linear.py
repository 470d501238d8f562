r"""Linear backoff strategy."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from steadyreq.backoff.base import BaseBackoffStrategy, check_delays


class LinearBackoff(BaseBackoffStrategy):
    """Evenly growing delay: ``base_delay * (attempt + 1)``, capped at
    ``max_delay``.

    Args:
        base_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound of any delay, in seconds.

    Example:
        ```pycon
        >>> from steadyreq.backoff import LinearBackoff
        >>> backoff = LinearBackoff(base_delay=2.0, max_delay=5.0)
        >>> [backoff.calculate(i) for i in range(4)]
        [2.0, 4.0, 5.0, 5.0]

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        check_delays(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        delay = self.base_delay * (attempt + 1)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
