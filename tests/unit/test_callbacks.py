from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest

from steadyreq.callbacks import DEFAULT_PROTOCOL, AttemptInfo, invoke_on_attempt


@pytest.fixture
def request_() -> httpx.Request:
    return httpx.Request("DELETE", "https://api.example.com:8443/items/7?force=1")


#################################
#     Tests for AttemptInfo     #
#################################


def test_attempt_info_is_frozen() -> None:
    """Test that AttemptInfo fields cannot be reassigned."""
    info = AttemptInfo(
        method="GET",
        url="https://example.com/",
        proto=DEFAULT_PROTOCOL,
        host="example.com",
        path="/",
        attempt=1,
        max_retries=0,
    )
    with pytest.raises(AttributeError):
        info.attempt = 2


#######################################
#     Tests for invoke_on_attempt     #
#######################################


def test_invoke_on_attempt(request_: httpx.Request, mock_callback: Mock) -> None:
    """Test that hooks receive the method, URL and target of the request."""
    invoke_on_attempt([mock_callback], request=request_, attempt=0, max_retries=3)
    mock_callback.assert_called_once_with(
        AttemptInfo(
            method="DELETE",
            url="https://api.example.com:8443/items/7?force=1",
            proto="HTTP/1.1",
            host="api.example.com",
            path="/items/7",
            attempt=1,
            max_retries=3,
        )
    )


def test_invoke_on_attempt_is_one_indexed(request_: httpx.Request, mock_callback: Mock) -> None:
    """Test that hooks receive a 1-indexed attempt number."""
    invoke_on_attempt([mock_callback], request=request_, attempt=4, max_retries=4)
    assert mock_callback.call_args.args[0].attempt == 5


def test_invoke_on_attempt_order(request_: httpx.Request) -> None:
    """Test that hooks fire in registration order."""
    manager = Mock()
    invoke_on_attempt([manager.first, manager.second], request=request_, attempt=0, max_retries=0)
    assert [c[0] for c in manager.mock_calls] == ["first", "second"]


def test_invoke_on_attempt_no_hooks(request_: httpx.Request) -> None:
    """Test that an empty hook list is a no-op."""
    invoke_on_attempt([], request=request_, attempt=0, max_retries=0)


def test_invoke_on_attempt_hook_error_propagates(request_: httpx.Request) -> None:
    """Test that a failing hook stops the remaining hooks."""
    hook = Mock(side_effect=ValueError("hook failed"))
    other = Mock()
    with pytest.raises(ValueError, match=r"hook failed"):
        invoke_on_attempt([hook, other], request=request_, attempt=0, max_retries=0)
    other.assert_not_called()
    hook.assert_called_once()
