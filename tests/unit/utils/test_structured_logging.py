from __future__ import annotations

import io
import json
import logging
import sys
from typing import TYPE_CHECKING

import pytest

from steadyreq.utils import (
    StructuredFormatter,
    TextFormatter,
    configure_logging,
    log_structured,
)

if TYPE_CHECKING:
    from collections.abc import Generator

LOGGER_NAME = "tests.steadyreq.configured"


@pytest.fixture
def scratch_logger() -> Generator[logging.Logger, None, None]:
    logger = logging.getLogger(LOGGER_NAME)
    level, handlers = logger.level, list(logger.handlers)
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


def make_record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        "tests.steadyreq", logging.DEBUG, __file__, 42, "Sending request", None, None, "handler"
    )
    record.__dict__.update(extra)
    return record


def configured_handler(logger: logging.Logger) -> logging.Handler:
    handlers = [h for h in logger.handlers if h.get_name() == f"{LOGGER_NAME}.configured"]
    assert len(handlers) == 1
    return handlers[0]


#########################################
#     Tests for StructuredFormatter     #
#########################################


def test_structured_formatter_fields() -> None:
    """Test the JSON keys of a formatted record."""
    record = make_record(attempt=2, request={"proto": "HTTP/1.1", "host": "h", "path": "/"})
    data = json.loads(StructuredFormatter().format(record))

    assert data["log_level"] == "DEBUG"
    assert data["logger"] == "tests.steadyreq"
    assert data["message"] == "Sending request"
    assert data["function"] == "handler"
    assert data["line"] == 42
    assert data["timestamp"] == int(record.created * 1e9)
    assert data["time"].endswith("Z")
    assert data["attempt"] == 2
    assert data["request"] == {"proto": "HTTP/1.1", "host": "h", "path": "/"}


def test_structured_formatter_skips_reserved_attributes() -> None:
    """Test that standard record attributes are not duplicated."""
    data = json.loads(StructuredFormatter().format(make_record()))
    assert "msg" not in data
    assert "args" not in data
    assert "levelno" not in data


def test_structured_formatter_non_serializable_values() -> None:
    """Test that values JSON cannot encode are rendered with str."""
    data = json.loads(StructuredFormatter().format(make_record(body=b"raw", error=ValueError("x"))))
    assert data["body"] == "b'raw'"
    assert data["error"] == "x"


def test_structured_formatter_exception() -> None:
    """Test that exception information is formatted."""
    try:
        msg = "boom"
        raise RuntimeError(msg)
    except RuntimeError:
        record = logging.LogRecord(
            "tests", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )
    data = json.loads(StructuredFormatter().format(record))
    assert "RuntimeError: boom" in data["exception"]


####################################
#     Tests for log_structured     #
####################################


def test_log_structured_attaches_fields(
    test_logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that fields are attached to the record."""
    with caplog.at_level(logging.DEBUG, logger="tests.steadyreq"):
        log_structured(test_logger, logging.DEBUG, "[Send]: http request", method="GET", body=None)

    (record,) = caplog.records
    assert record.getMessage() == "[Send]: http request"
    assert record.method == "GET"
    assert record.body is None
    assert record.funcName == "test_log_structured_attaches_fields"


def test_log_structured_disabled_level(
    test_logger: logging.Logger, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that no record is created below the logger level."""
    with caplog.at_level(logging.WARNING, logger="tests.steadyreq"):
        log_structured(test_logger, logging.DEBUG, "hidden", attempt=1)
    assert caplog.records == []


def test_log_structured_reserved_field_raises(test_logger: logging.Logger) -> None:
    """Test that a field clashing with a record attribute raises."""
    with pytest.raises(KeyError):
        log_structured(test_logger, logging.ERROR, "clash", message="overwritten")


#######################################
#     Tests for configure_logging     #
#######################################


def test_configure_logging_development_defaults(scratch_logger: logging.Logger) -> None:
    """Test the defaults outside production."""
    logger = configure_logging(logger_name=LOGGER_NAME)
    assert logger is scratch_logger
    assert logger.level == logging.DEBUG
    assert not isinstance(configured_handler(logger).formatter, StructuredFormatter)


def test_configure_logging_production_defaults(
    scratch_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test the defaults in production."""
    monkeypatch.setenv("APP_ENV", "production")
    logger = configure_logging(logger_name=LOGGER_NAME)
    assert logger.level == logging.INFO
    assert isinstance(configured_handler(logger).formatter, StructuredFormatter)


@pytest.mark.parametrize(
    ("env_level", "expected"),
    [("warn", logging.WARNING), ("ERROR", logging.ERROR), ("debug", logging.DEBUG)],
)
def test_configure_logging_env_level(
    scratch_logger: logging.Logger,
    monkeypatch: pytest.MonkeyPatch,
    env_level: str,
    expected: int,
) -> None:
    """Test that LOG_LEVEL sets the level."""
    monkeypatch.setenv("LOG_LEVEL", env_level)
    assert configure_logging(logger_name=LOGGER_NAME).level == expected


def test_configure_logging_unknown_level(
    scratch_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that an unknown level falls back to INFO."""
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    assert configure_logging(logger_name=LOGGER_NAME).level == logging.INFO


def test_configure_logging_explicit_arguments(
    scratch_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that explicit arguments override the environment."""
    monkeypatch.setenv("LOG_LEVEL", "error")
    logger = configure_logging(logging.WARNING, json_output=True, logger_name=LOGGER_NAME)
    assert logger.level == logging.WARNING
    assert isinstance(configured_handler(logger).formatter, StructuredFormatter)


def test_configure_logging_replaces_handler(scratch_logger: logging.Logger) -> None:
    """Test that configuring again replaces the handler."""
    configure_logging(logger_name=LOGGER_NAME)
    configure_logging(json_output=True, logger_name=LOGGER_NAME)
    assert isinstance(configured_handler(scratch_logger).formatter, StructuredFormatter)


def test_configure_logging_json_output(scratch_logger: logging.Logger) -> None:
    """Test that JSON output carries the structured fields."""
    logger = configure_logging("debug", json_output=True, logger_name=LOGGER_NAME)
    stream = io.StringIO()
    configured_handler(logger).setStream(stream)

    log_structured(logger, logging.DEBUG, "Sending request", attempt=3)

    data = json.loads(stream.getvalue())
    assert data["message"] == "Sending request"
    assert data["attempt"] == 3
    assert data["log_level"] == "DEBUG"


def test_configure_logging_text_output(scratch_logger: logging.Logger) -> None:
    """Test that text output carries the structured fields."""
    logger = configure_logging("info", json_output=False, logger_name=LOGGER_NAME)
    stream = io.StringIO()
    configured_handler(logger).setStream(stream)

    logger.info("ready")
    log_structured(
        logger,
        logging.INFO,
        "Sending request",
        request={"proto": "HTTP/1.1", "host": "h", "path": "/a"},
        attempt=2,
    )

    first, second = stream.getvalue().splitlines()
    assert first.endswith(f"INFO {LOGGER_NAME} ready")
    assert isinstance(configured_handler(logger).formatter, TextFormatter)
    assert second.endswith(
        f"INFO {LOGGER_NAME} Sending request "
        'request={"proto": "HTTP/1.1", "host": "h", "path": "/a"} attempt=2'
    )


###################################
#     Tests for TextFormatter     #
###################################


def test_text_formatter_without_fields() -> None:
    """Test that a record without extra fields renders the plain line."""
    line = TextFormatter().format(make_record())
    assert line.endswith("DEBUG tests.steadyreq Sending request")


def test_text_formatter_appends_fields() -> None:
    """Test that extra fields are appended as key=value pairs."""
    line = TextFormatter().format(
        make_record(method="GET", url="https://example.com", body=None, attempt=1)
    )
    assert line.endswith(
        'Sending request method="GET" url="https://example.com" body=null attempt=1'
    )


def test_text_formatter_non_serializable_values() -> None:
    """Test that values JSON cannot encode are rendered with str."""
    line = TextFormatter().format(make_record(error=OSError("bad file descriptor")))
    assert line.endswith('error="bad file descriptor"')


def test_text_formatter_millisecond_timestamp() -> None:
    """Test that the timestamp carries milliseconds."""
    record = make_record()
    line = TextFormatter().format(record)
    assert line.split(" ")[1].endswith(f".{int(record.msecs):03d}")
