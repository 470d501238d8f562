r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod

from steadyreq.exceptions import ConfigurationError


class BaseBackoffStrategy(ABC):
    """Computes the delay to wait before a retry.

    Subclasses only implement ``calculate``; the delay returned for a
    retry never depends on anything but the retry index.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Return the delay in seconds before a retry.

        Args:
            attempt: The retry index (0-indexed): ``0`` is the delay
                before the first retry, ``1`` before the second one, etc.

        Returns:
            The delay in seconds.
        """


def check_delays(base_delay: float, max_delay: float | None) -> None:
    """Validate the delay parameters shared by growing strategies.

    Raises:
        ConfigurationError: If ``base_delay`` is negative or ``max_delay``
            is not positive.
    """
    if base_delay < 0:
        msg = f"base_delay must be non-negative, got {base_delay}"
        raise ConfigurationError(msg)
    if max_delay is not None and max_delay <= 0:
        msg = f"max_delay must be positive if specified, got {max_delay}"
        raise ConfigurationError(msg)
