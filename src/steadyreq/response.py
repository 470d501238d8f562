r"""Normalized responses returned by the client.

``normalize_response`` is the only place where a live ``httpx.Response``
crosses into a ``Response`` value: it buffers the body and releases the
network resource whatever the outcome of the read.
"""

from __future__ import annotations

__all__ = ["Response", "normalize_response"]

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from steadyreq.exceptions import BodyReadError
from steadyreq.utils.structured_logging import log_structured


@dataclass(frozen=True)
class Response:
    """Fully buffered HTTP response.

    The status code is passed through as received: 4xx and 5xx responses
    are regular responses at this level.

    The fields cannot be reassigned, but ``headers`` is a regular mutable
    ``httpx.Headers``. It is a copy made for this response alone, so
    editing it changes neither the network response nor any other
    ``Response``.

    Attributes:
        status_code: The HTTP status code.
        headers: The response headers, copied for this response.
        body: The response body.

    Example:
        ```pycon
        >>> import httpx
        >>> from steadyreq.response import Response
        >>> response = Response(200, httpx.Headers({"Content-Type": "application/json"}), b'{"ok": true}')
        >>> response.json()
        {'ok': True}
        >>> response.headers["content-type"]
        'application/json'

        ```
    """

    status_code: int
    headers: httpx.Headers
    body: bytes

    @property
    def text(self) -> str:
        """The body decoded with the charset of ``Content-Type``, UTF-8 by
        default."""
        charset = _charset(self.headers.get("Content-Type", "")) or "utf-8"
        try:
            return self.body.decode(charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    def json(self, **kwargs: Any) -> Any:
        """Decode the body as JSON.

        Args:
            **kwargs: Passed to ``json.loads``.
        """
        return json.loads(self.body, **kwargs)


def _charset(content_type: str) -> str | None:
    for param in content_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip("\"'")
    return None


def normalize_response(
    response: httpx.Response,
    logger: logging.Logger,
    *,
    method: str | None = None,
    url: str | None = None,
) -> Response:
    """Buffer a live response into a ``Response`` value.

    The live response is closed before this function returns, even when
    reading the body fails. A failure to close is logged as an error on
    ``logger`` and does not fail the call.

    Args:
        response: The unread response returned by the transport.
        logger: Destination of the close-failure record.
        method: The request method, for error reporting.
        url: The request URL, for error reporting.

    Returns:
        The buffered response.

    Raises:
        BodyReadError: If the body cannot be read.
    """
    try:
        body = response.read()
    except (httpx.HTTPError, httpx.StreamError, OSError) as exc:
        msg = f"{method} request to {url} failed while reading the response body: {exc}"
        raise BodyReadError(msg, method=method, url=url, cause=exc) from exc
    finally:
        _release(response, logger)
    return Response(
        status_code=response.status_code,
        headers=httpx.Headers(response.headers),
        body=body,
    )


def _release(response: httpx.Response, logger: logging.Logger) -> None:
    try:
        response.close()
    except Exception as exc:  # noqa: BLE001
        log_structured(
            logger,
            logging.ERROR,
            "[Client.Send]: unable to close a response body",
            error=repr(exc),
        )
