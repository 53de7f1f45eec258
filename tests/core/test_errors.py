"""Unit tests for core.errors: failure formatting and the default reporter."""

import logging

import pytest

from dbwrapper.core.errors import (
    ConnectionFailure,
    ContractViolation,
    DbWrapperError,
    StatementFailure,
    log_error_reporter,
)


def test_taxonomy() -> None:
    for cls, kind in [
        (ConnectionFailure, "connection"),
        (StatementFailure, "statement"),
        (ContractViolation, "contract"),
    ]:
        assert issubclass(cls, DbWrapperError)
        assert cls.kind == kind


def test_str_includes_operation_query_and_cause() -> None:
    failure = StatementFailure("update failed", operation="update", query="UPDATE t\n  SET a = 1")
    failure.__cause__ = RuntimeError("relation t does not exist")
    text = str(failure)
    assert "update failed" in text
    assert "operation=update" in text
    assert "query=UPDATE t SET a = 1" in text
    assert "RuntimeError: relation t does not exist" in text


def test_long_query_is_shortened() -> None:
    failure = StatementFailure("x", query="SELECT " + "a, " * 200 + "b FROM t")
    assert str(failure).endswith("...")


def test_log_error_reporter_logs_with_cause(caplog: pytest.LogCaptureFixture) -> None:
    failure = ConnectionFailure("Could not open connection", operation="open")
    failure.__cause__ = OSError("connection refused")
    with caplog.at_level(logging.ERROR, logger="dbwrapper.core.errors"):
        log_error_reporter(failure)
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.ERROR
    assert "connection" in record.getMessage()
    assert record.exc_info is not None and record.exc_info[0] is OSError


def test_log_error_reporter_without_cause(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="dbwrapper.core.errors"):
        log_error_reporter(ContractViolation("two rows", operation="select_one"))
    assert len(caplog.records) == 1
    assert not caplog.records[0].exc_info
