"""
Failure taxonomy and the default error reporter.

Every failure caught at the DbWrapper boundary is wrapped into one of the
DbWrapperError subclasses (the driver exception is kept as ``__cause__``) and
handed to the wrapper's error reporter. Query text is carried for diagnostics;
parameter values and credentials never are.
"""

import logging
from collections.abc import Callable

_log = logging.getLogger(__name__)


class DbWrapperError(Exception):
    """Base class for failures reported by a DbWrapper."""

    kind = "error"

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        query: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.query = query

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.query:
            parts.append(f"query={_shorten(self.query)}")
        if self.__cause__ is not None:
            parts.append(f"cause={type(self.__cause__).__name__}: {self.__cause__}")
        return " | ".join(parts)


class ConnectionFailure(DbWrapperError):
    """The physical connection could not be opened or closed."""

    kind = "connection"


class StatementFailure(DbWrapperError):
    """The driver rejected the statement, or binding / decoding failed."""

    kind = "statement"


class ContractViolation(DbWrapperError):
    """The result did not match what the operation promises (e.g. select_one got 2 rows)."""

    kind = "contract"


ErrorReporter = Callable[[DbWrapperError], None]


def log_error_reporter(failure: DbWrapperError) -> None:
    """Default reporter: log at ERROR with the driver exception attached."""
    cause = failure.__cause__
    _log.error(
        "Database %s failure: %s",
        failure.kind,
        failure,
        exc_info=(type(cause), cause, cause.__traceback__) if cause is not None else None,
    )


def _shorten(query: str, limit: int = 200) -> str:
    q = " ".join(query.split())
    return q if len(q) <= limit else q[: limit - 3] + "..."
