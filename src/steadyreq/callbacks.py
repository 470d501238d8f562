r"""Attempt hooks fired before every physical send attempt.

A hook receives an ``AttemptInfo`` describing the request about to be
sent. Hooks run on the calling thread, in registration order, for the
first attempt and for every retry.

Example:
    ```pycon
    >>> from steadyreq import new_client
    >>> from steadyreq.core.config import with_request_hook
    >>> seen = []
    >>> client = new_client(with_request_hook(lambda info: seen.append(info.attempt)))
    >>> client.close()

    ```
"""

from __future__ import annotations

__all__ = ["DEFAULT_PROTOCOL", "AttemptInfo", "invoke_on_attempt"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    import httpx

# The transport speaks HTTP/1.1 only
DEFAULT_PROTOCOL = "HTTP/1.1"


@dataclass(frozen=True)
class AttemptInfo:
    """Information passed to attempt hooks.

    Attributes:
        method: The HTTP method.
        url: The full request URL, query string included.
        proto: The protocol version of the request.
        host: The target host.
        path: The target path.
        attempt: The attempt number (1-indexed). The first attempt is 1.
        max_retries: Maximum number of retries configured.
    """

    method: str
    url: str
    proto: str
    host: str
    path: str
    attempt: int
    max_retries: int


def invoke_on_attempt(
    hooks: Sequence[Callable[[AttemptInfo], None]],
    *,
    request: httpx.Request,
    attempt: int,
    max_retries: int,
) -> None:
    """Fire every hook for one attempt.

    Args:
        hooks: The hooks to fire, in order.
        request: The request about to be sent.
        attempt: The attempt number (0-indexed internally). Hooks receive
            ``attempt + 1``.
        max_retries: Maximum number of retries configured.
    """
    if not hooks:
        return
    info = AttemptInfo(
        method=request.method,
        url=str(request.url),
        proto=DEFAULT_PROTOCOL,
        host=request.url.host,
        path=request.url.path,
        attempt=attempt + 1,
        max_retries=max_retries,
    )
    for hook in hooks:
        hook(info)
