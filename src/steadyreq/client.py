r"""HTTP client with option sets, retries and debug tracing.

The client owns one built ``Transport`` and one logger. Every verb method
funnels into ``Client.send`` which composes the request from the target
URL and a ``SendOptions`` set, dispatches it through the transport and
returns a fully buffered ``Response``.

Example:
    ```pycon
    >>> from steadyreq import SendOptions, new_client
    >>> from steadyreq.core.config import with_retry_max, with_timeout
    >>> opts = SendOptions().set_query_param({"user": "ec", "limit": "5"})
    >>> with new_client(with_timeout(5.0), with_retry_max(2)) as client:  # doctest: +SKIP
    ...     response = client.get("https://internal.example/users", opts)
    ...

    ```
"""

from __future__ import annotations

__all__ = ["Client", "new_client", "new_client_with_debug"]

import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, urlencode

import httpx

from steadyreq.exceptions import RequestConstructionError, UrlParseError
from steadyreq.options import SendOptions
from steadyreq.response import Response, normalize_response
from steadyreq.transport import Transport
from steadyreq.utils.structured_logging import configure_logging, log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

    from steadyreq.callbacks import AttemptInfo
    from steadyreq.core.config import TransportOption

DEFAULT_LOGGER_NAME = "steadyreq.client"

# RFC 9110 token characters
_METHOD_PATTERN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class Client:
    r"""Resilient HTTP client.

    The transport is built from ``options`` at construction time and is
    read-only afterwards, so one client can serve concurrent callers.

    Args:
        *options: Transport configuration functions, applied in order.
        debug: Trace every send and every physical attempt at debug level.
        logger: Destination of the client records, used as configured.
            Defaults to the ``steadyreq.client`` logger; with ``debug``
            that logger is set to ``DEBUG`` and, when no handler would
            receive its records, gets one from ``configure_logging``.

    Raises:
        ConfigurationError: If the transport configuration is invalid.

    Example:
        ```pycon
        >>> from steadyreq import Client
        >>> from steadyreq.core.config import with_retry_max
        >>> client = Client(with_retry_max(0), debug=True)
        >>> client.transport.max_retries, client.debug
        (0, True)
        >>> client.close()

        ```
    """

    def __init__(
        self,
        *options: TransportOption,
        debug: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._debug = debug
        if logger is None:
            logger = logging.getLogger(DEFAULT_LOGGER_NAME)
            if debug:
                _enable_debug_output(logger)
        self._logger = logger
        self._transport = Transport.from_options(
            options, hooks=(self._log_attempt,) if debug else ()
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def http_client(self) -> httpx.Client:
        """The underlying ``httpx.Client``."""
        return self._transport.http_client

    def close(self) -> None:
        """Close the pooled connections of the transport."""
        self._transport.close()

    def get(self, url: str, options: SendOptions | None = None) -> Response:
        """Send a GET request."""
        return self.send("GET", url, options)

    def put(
        self, url: str, options: SendOptions | None = None, body: bytes | None = None
    ) -> Response:
        """Send a PUT request."""
        return self.send("PUT", url, options, body)

    def post(
        self, url: str, options: SendOptions | None = None, body: bytes | None = None
    ) -> Response:
        """Send a POST request."""
        return self.send("POST", url, options, body)

    def patch(
        self, url: str, options: SendOptions | None = None, body: bytes | None = None
    ) -> Response:
        """Send a PATCH request."""
        return self.send("PATCH", url, options, body)

    def delete(
        self, url: str, options: SendOptions | None = None, body: bytes | None = None
    ) -> Response:
        """Send a DELETE request."""
        return self.send("DELETE", url, options, body)

    def send(
        self,
        method: str,
        url: str,
        options: SendOptions | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send a request and return the buffered response.

        Query options are merged into the query string of ``url``: option
        keys replace same-named keys of the URL and the result is encoded
        sorted by key. Header options are set on the request, replacing
        any default header of the same name. The body is kept in memory
        so that retries send the same bytes.

        Args:
            method: The HTTP method, case-insensitive.
            url: The absolute target URL.
            options: Optional query and header options.
            body: Optional request body.

        Returns:
            The buffered response. Its status code is not interpreted.

        Raises:
            UrlParseError: If ``url`` is malformed or not absolute. No
                attempt is made.
            RequestConstructionError: If the method, headers or body are
                invalid.
            TransportError: If the transport gives up.
            BodyReadError: If the response body cannot be read.
        """
        options = options if options is not None else SendOptions()
        if self._debug:
            log_structured(
                self._logger,
                logging.DEBUG,
                "[Send]: http request",
                method=method,
                url=url,
                opts={kind: dict(values) for kind, values in options.items()},
                body=_body_repr(body),
            )

        method = _normalize_method(method, url)
        target = _compose_url(url, options.queries, method=method)
        request = self._build_request(method, target, options.headers, body)
        if self._debug:
            log_structured(
                self._logger,
                logging.DEBUG,
                "[Send]: dispatching request",
                request={
                    "method": request.method,
                    "url": str(request.url),
                    "headers": dict(request.headers),
                },
            )

        raw = self._transport.send(request)
        return normalize_response(raw, self._logger, method=method, url=str(request.url))

    def _build_request(
        self,
        method: str,
        url: httpx.URL,
        headers: Mapping[str, str],
        body: bytes | None,
    ) -> httpx.Request:
        if body is not None and not isinstance(body, (bytes, bytearray)):
            msg = f"body must be bytes or None, got {type(body).__name__}"
            raise RequestConstructionError(msg, method=method, url=str(url))
        try:
            return self._transport.build_request(
                method,
                url,
                headers=dict(headers),
                content=bytes(body) if body is not None else None,
            )
        except (TypeError, ValueError, httpx.HTTPError) as exc:
            msg = f"cannot build {method} request to {url}: {exc}"
            raise RequestConstructionError(msg, method=method, url=str(url), cause=exc) from exc

    def _log_attempt(self, info: AttemptInfo) -> None:
        log_structured(
            self._logger,
            logging.DEBUG,
            "Sending request",
            request={"proto": info.proto, "host": info.host, "path": info.path},
            attempt=info.attempt,
        )


def new_client(*options: TransportOption, logger: logging.Logger | None = None) -> Client:
    """Create a client without debug tracing.

    Args:
        *options: Transport configuration functions, applied in order.
        logger: Optional destination of the client records.

    Returns:
        The client.
    """
    return Client(*options, debug=False, logger=logger)


def new_client_with_debug(
    debug_enabled: bool,
    *options: TransportOption,
    logger: logging.Logger | None = None,
) -> Client:
    """Create a client, optionally tracing every send and attempt.

    Args:
        debug_enabled: Whether debug tracing is enabled.
        *options: Transport configuration functions, applied in order.
        logger: Optional destination of the client records.

    Returns:
        The client.
    """
    return Client(*options, debug=debug_enabled, logger=logger)


def _enable_debug_output(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    if not logger.hasHandlers():
        configure_logging(logging.DEBUG, logger_name=logger.name)


def _normalize_method(method: str, url: str) -> str:
    if not isinstance(method, str) or not _METHOD_PATTERN.fullmatch(method):
        msg = f"invalid HTTP method: {method!r}"
        raise RequestConstructionError(msg, method=str(method), url=url)
    return method.upper()


def _compose_url(url: str, queries: Mapping[str, str], *, method: str) -> httpx.URL:
    try:
        target = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        msg = f"invalid URL {url!r}: {exc}"
        raise UrlParseError(msg, method=method, url=str(url), cause=exc) from exc
    if not target.scheme or not target.host:
        msg = f"URL must be absolute, got {url!r}"
        raise UrlParseError(msg, method=method, url=url)
    if not queries:
        return target

    params = [
        (key, value)
        for key, value in parse_qsl(target.query.decode("ascii"), keep_blank_values=True)
        if key not in queries
    ]
    params.extend(queries.items())
    params.sort(key=lambda item: item[0])
    return target.copy_with(query=urlencode(params).encode("ascii"))


def _body_repr(body: bytes | None) -> str | None:
    if body is None:
        return None
    if not isinstance(body, (bytes, bytearray)):
        return repr(body)
    return bytes(body).decode("utf-8", errors="replace")
