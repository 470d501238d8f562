r"""Transport defaults, configuration functions and retry rules."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_MAX",
    "DEFAULT_BACKOFF_MIN",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "TransportOption",
    "should_retry_exception",
    "should_retry_response",
    "validate_retry_params",
    "validate_timeout",
    "with_backoff",
    "with_follow_redirects",
    "with_http_transport",
    "with_jitter",
    "with_max_wait_time",
    "with_request_hook",
    "with_retry_if",
    "with_retry_max",
    "with_retry_status_codes",
    "with_timeout",
    "with_tls_verify",
]

from steadyreq.core.config import (
    DEFAULT_BACKOFF_MAX,
    DEFAULT_BACKOFF_MIN,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    TransportOption,
    with_backoff,
    with_follow_redirects,
    with_http_transport,
    with_jitter,
    with_max_wait_time,
    with_request_hook,
    with_retry_if,
    with_retry_max,
    with_retry_status_codes,
    with_timeout,
    with_tls_verify,
)
from steadyreq.core.retry_logic import should_retry_exception, should_retry_response
from steadyreq.core.validation import validate_retry_params, validate_timeout
