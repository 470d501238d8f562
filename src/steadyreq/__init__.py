r"""steadyreq - retrying HTTP client for trusted internal endpoints.

The client builds requests from a target URL and a composable option set
(query parameters, headers, content type), sends them through a
retry-capable ``httpx`` transport with TLS verification disabled by
default, and returns fully buffered responses.

Key Features:
    - Option sets with copy-on-write composition
    - Transport configuration through ordered configuration functions
    - Automatic retries of network errors and 429/500/502/503/504 statuses
    - Exponential backoff honoring the Retry-After header
    - Structured debug tracing of every send and every physical attempt
    - One exception hierarchy for every failure of the send pipeline

Example:
    ```pycon
    >>> from steadyreq import SendOptions, new_client_with_debug
    >>> from steadyreq.core.config import with_retry_max, with_timeout
    >>> opts = SendOptions().set_content_type("application/json")
    >>> with new_client_with_debug(True, with_timeout(5.0), with_retry_max(2)) as client:  # doctest: +SKIP
    ...     response = client.post("https://internal.example/items", opts, b'{"name": "x"}')
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "HEADER_PARAM",
    "QUERY_PARAM",
    "AttemptInfo",
    "BodyReadError",
    "Client",
    "ConfigurationError",
    "RequestConstructionError",
    "Response",
    "SendOptions",
    "SteadyRequestError",
    "TransportError",
    "UrlParseError",
    "__version__",
    "new_client",
    "new_client_with_debug",
    "set_content_type",
    "set_query_param",
    "with_retry_max",
    "with_timeout",
]

from importlib.metadata import PackageNotFoundError, version

from steadyreq.callbacks import AttemptInfo
from steadyreq.client import Client, new_client, new_client_with_debug
from steadyreq.core.config import with_retry_max, with_timeout
from steadyreq.exceptions import (
    BodyReadError,
    ConfigurationError,
    RequestConstructionError,
    SteadyRequestError,
    TransportError,
    UrlParseError,
)
from steadyreq.options import (
    HEADER_PARAM,
    QUERY_PARAM,
    SendOptions,
    set_content_type,
    set_query_param,
)
from steadyreq.response import Response

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
