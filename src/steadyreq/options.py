r"""Composable option sets attached to outgoing requests.

An option set maps an option kind (``queries`` or ``headers``) to a
mapping of string keys to string values. Option sets are read-only
mappings: every derivation method returns a new set.

Example:
    ```pycon
    >>> from steadyreq.options import SendOptions
    >>> opts = SendOptions().set_query_param({"user": "ec", "limit": "5"})
    >>> opts = opts.set_content_type("application/json")
    >>> dict(opts.headers)
    {'Content-Type': 'application/json'}
    >>> sorted(opts.queries)
    ['limit', 'user']

    ```
"""

from __future__ import annotations

__all__ = [
    "HEADER_PARAM",
    "QUERY_PARAM",
    "SendOptions",
    "set_content_type",
    "set_query_param",
]

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from steadyreq.exceptions import ConfigurationError

QUERY_PARAM = "queries"
HEADER_PARAM = "headers"

_EMPTY: Mapping[str, str] = MappingProxyType({})


def _validate_values(kind: str, values: Any) -> None:
    if not isinstance(values, Mapping):
        msg = f"option {kind!r} must be a mapping, got {type(values).__name__}"
        raise ConfigurationError(msg)
    for key, value in values.items():
        if not isinstance(key, str):
            msg = f"option {kind!r} has a non-string key: {key!r}"
            raise ConfigurationError(msg)
        if not isinstance(value, str):
            msg = (
                f"option {kind!r} has a non-string value for {key!r}: "
                f"{type(value).__name__}"
            )
            raise ConfigurationError(msg)


class SendOptions(Mapping[str, Mapping[str, str]]):
    """Read-only mapping of option kinds to string-keyed string values.

    Unknown option kinds are kept by the set and ignored by the client.
    Derived sets copy the top-level mapping only: value mappings that a
    derivation does not touch are shared with the source set. Use
    ``copy()`` to get an independent set.

    Args:
        options: Optional initial mapping of option kinds to values.

    Raises:
        ConfigurationError: If a kind is not a string, or a value mapping
            holds non-string keys or values.

    Example:
        ```pycon
        >>> from steadyreq.options import SendOptions
        >>> opts = SendOptions({"headers": {"X-Trace": "abc"}})
        >>> opts["headers"]["X-Trace"]
        'abc'
        >>> opts.set_content_type("text/plain")["headers"]["Content-Type"]
        'text/plain'

        ```
    """

    def __init__(self, options: Mapping[str, Mapping[str, str]] | None = None) -> None:
        data: dict[str, Mapping[str, str]] = {}
        for kind, values in (options or {}).items():
            if not isinstance(kind, str):
                msg = f"option kind must be a string, got {kind!r}"
                raise ConfigurationError(msg)
            _validate_values(kind, values)
            data[kind] = values
        self._data = data

    def __getitem__(self, kind: str) -> Mapping[str, str]:
        return self._data[kind]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self._data!r})"

    @property
    def queries(self) -> Mapping[str, str]:
        """The query parameters, or an empty mapping."""
        return self._data.get(QUERY_PARAM, _EMPTY)

    @property
    def headers(self) -> Mapping[str, str]:
        """The headers, or an empty mapping."""
        return self._data.get(HEADER_PARAM, _EMPTY)

    def set_content_type(self, value: str) -> SendOptions:
        """Return a new set with the ``Content-Type`` header set.

        Other headers are kept and the query parameters are shared with
        this set.

        Args:
            value: The content type, e.g. ``"application/json"``.

        Returns:
            The derived option set.
        """
        headers = dict(self.headers)
        headers["Content-Type"] = value
        return self._derive(HEADER_PARAM, headers)

    def set_query_param(self, params: Mapping[str, str]) -> SendOptions:
        """Return a new set whose query parameters are ``params``.

        The previous query parameters are discarded, not merged.

        Args:
            params: The query parameters.

        Returns:
            The derived option set.
        """
        return self._derive(QUERY_PARAM, params)

    def copy(self) -> SendOptions:
        """Return a copy that shares no value mapping with this set."""
        return SendOptions({kind: dict(values) for kind, values in self._data.items()})

    def _derive(self, kind: str, values: Mapping[str, str]) -> SendOptions:
        data = dict(self._data)
        data[kind] = values
        return SendOptions(data)


def set_content_type(options: SendOptions | None, value: str) -> SendOptions:
    """Set the ``Content-Type`` header on a possibly uninitialized set.

    Args:
        options: The source set, or ``None``.
        value: The content type.

    Returns:
        The derived option set.
    """
    return (options if options is not None else SendOptions()).set_content_type(value)


def set_query_param(options: SendOptions | None, params: Mapping[str, str]) -> SendOptions:
    """Replace the query parameters of a possibly uninitialized set.

    Args:
        options: The source set, or ``None``.
        params: The query parameters.

    Returns:
        The derived option set.
    """
    return (options if options is not None else SendOptions()).set_query_param(params)
