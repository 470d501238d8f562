r"""Validation of transport parameters."""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]

from steadyreq.exceptions import ConfigurationError


def validate_timeout(timeout: float) -> None:
    """Validate the per-attempt timeout.

    Args:
        timeout: The timeout in seconds. Must be > 0.

    Raises:
        ConfigurationError: If ``timeout`` is not positive.

    Example:
        ```pycon
        >>> from steadyreq.core.validation import validate_timeout
        >>> validate_timeout(2.5)
        >>> validate_timeout(0)
        Traceback (most recent call last):
        ...
        steadyreq.exceptions.ConfigurationError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ConfigurationError(msg)


def validate_retry_params(
    max_retries: int,
    jitter_factor: float = 0.0,
    max_wait_time: float | None = None,
) -> None:
    """Validate the retry parameters of a transport.

    Args:
        max_retries: Number of retries after the first attempt. Must be
            >= 0.
        jitter_factor: Relative jitter added to delays. Must be >= 0.
        max_wait_time: Optional cap of a single delay. Must be > 0 if
            provided.

    Raises:
        ConfigurationError: If a parameter is out of range.
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ConfigurationError(msg)
    if jitter_factor < 0:
        msg = f"jitter_factor must be >= 0, got {jitter_factor}"
        raise ConfigurationError(msg)
    if max_wait_time is not None and max_wait_time <= 0:
        msg = f"max_wait_time must be > 0, got {max_wait_time}"
        raise ConfigurationError(msg)
