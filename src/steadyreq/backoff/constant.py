r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from steadyreq.backoff.base import BaseBackoffStrategy
from steadyreq.exceptions import ConfigurationError


class ConstantBackoff(BaseBackoffStrategy):
    """Same delay before every retry.

    Args:
        delay: The delay in seconds.

    Example:
        ```pycon
        >>> from steadyreq.backoff import ConstantBackoff
        >>> ConstantBackoff(delay=0.5).calculate(7)
        0.5

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ConfigurationError(msg)
        self.delay = delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(delay={self.delay})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay
