"""
DbWrapper: engine-independent SELECT / INSERT / UPDATE / DELETE over one connection.

Every operation runs the same envelope under the lifecycle lock:

1. lazily open the connection (ConnectionLifecycle.ensure_open)
2. build the command and bind parameters
3. execute and decode
4. on failure, report through the error reporter and return the zero value
   ([] / None or the given default / 0)
5. always run the keep-alive check (reset the idle timer, or close)

Failures never reach the caller unless raise_errors is enabled, in which case
the typed DbWrapperError is re-raised after it has been reported.
"""

import logging
from collections.abc import Callable, Collection
from typing import Any, TypeVar

from dbwrapper.core.config import settings
from dbwrapper.core.errors import (
    ContractViolation,
    DbWrapperError,
    ErrorReporter,
    StatementFailure,
    log_error_reporter,
)
from dbwrapper.core.keepalive import ConnectionLifecycle
from dbwrapper.engines import get_adapter
from dbwrapper.engines.base import Command, EngineAdapter
from dbwrapper.models import ProductTypeEnum, WrapperConfig
from dbwrapper.params import ItemMapper, ParametersIn, parameters_from_item, to_parameters

_log = logging.getLogger(__name__)

T = TypeVar("T")
Row = dict[str, Any]


class DbWrapper:
    """
    One database, one connection, uniform failure handling.

    The connection is not opened here; the first operation opens it. With
    keep_alive it then stays open until idle_timeout_ms passes without an
    operation; without keep_alive it is closed at the end of each operation.
    """

    def __init__(
        self,
        adapter: EngineAdapter,
        server: str,
        username: str,
        password: str,
        database: str,
        port: int | None = None,
        *,
        keep_alive: bool | None = None,
        idle_timeout_ms: int | None = None,
        enable_error_log: bool | None = None,
        raise_errors: bool | None = None,
        connect_timeout: int | None = None,
        statement_timeout: float | None = None,
        error_reporter: ErrorReporter | None = None,
    ) -> None:
        config = WrapperConfig(
            server=server,
            username=username,
            password=password or "",
            database=database,
            port=port if port is not None else adapter.default_port,
            keep_alive=settings.DB_KEEP_ALIVE if keep_alive is None else keep_alive,
            idle_timeout_ms=(
                idle_timeout_ms if idle_timeout_ms is not None else settings.DB_IDLE_TIMEOUT_MS
            ),
            raise_errors=settings.DB_RAISE_ERRORS if raise_errors is None else raise_errors,
            connect_timeout=(
                connect_timeout
                if connect_timeout is not None
                else settings.EXTERNAL_DB_CONNECT_TIMEOUT
            ),
            statement_timeout=(
                statement_timeout
                if statement_timeout is not None
                else settings.EXTERNAL_DB_STATEMENT_TIMEOUT
            ),
        )
        self._adapter = adapter
        self._config = config.model_copy(
            update={"connection_string": adapter.build_connection_string(config)}
        )
        self.enable_error_log = (
            settings.DB_ERROR_LOG_ENABLED if enable_error_log is None else enable_error_log
        )
        self._error_reporter: ErrorReporter = error_reporter or log_error_reporter
        self._lifecycle = ConnectionLifecycle(adapter, self._config, self._report)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> WrapperConfig:
        return self._config

    @property
    def adapter(self) -> EngineAdapter:
        return self._adapter

    @property
    def lifecycle(self) -> ConnectionLifecycle:
        return self._lifecycle

    @property
    def keep_alive(self) -> bool:
        return self._config.keep_alive

    @property
    def error_reporter(self) -> ErrorReporter:
        return self._error_reporter

    @error_reporter.setter
    def error_reporter(self, reporter: ErrorReporter | None) -> None:
        self._error_reporter = reporter or log_error_reporter

    # ------------------------------------------------------------------
    # Connection control
    # ------------------------------------------------------------------

    def is_open(self) -> bool:
        return self._lifecycle.is_open()

    def open(self) -> bool:
        """Open now instead of at the first operation. Returns False on failure."""
        return self._lifecycle.open()

    def close(self) -> None:
        """Close the connection and stop the idle timer. Idempotent; the wrapper stays usable."""
        self._lifecycle.close()

    def __enter__(self) -> "DbWrapper":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        return f"<{type(self).__name__} {self._adapter.product_type} {self._config} {state}>"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select_one(
        self,
        query: str,
        decode: Callable[[Row], T],
        parameters: ParametersIn = None,
        *,
        default: T | None = None,
    ) -> T | None:
        """
        Return decode(row) for the single row of query, or default when there is none.

        A second row is a ContractViolation: reported, and default is returned.
        """

        def work(command: Command) -> T | None:
            result = default
            seen = False
            for row in command.execute_reader():
                if seen:
                    raise ContractViolation(
                        "select_one cannot return more than one row",
                        operation="select_one",
                        query=query,
                    )
                result = decode(row)
                seen = True
            return result

        return self._run("select_one", query, self._binder(parameters), work, default)

    def select_list(
        self,
        query: str,
        decode: Callable[[Row], T],
        parameters: ParametersIn = None,
    ) -> list[T]:
        """Return decode(row) for every row, in row order; [] on failure."""

        def work(command: Command) -> list[T]:
            return [decode(row) for row in command.execute_reader()]

        return self._run("select_list", query, self._binder(parameters), work, [])

    def health_check(self) -> bool:
        """Run the engine's ping query. True if it returned a row."""
        try:
            return bool(self.select_one(self._adapter.ping_query, lambda row: True, default=False))
        except DbWrapperError:
            return False

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def execute(self, query: str, parameters: ParametersIn = None) -> int:
        """Run a non-query statement; affected row count, 0 on failure."""
        return self._execute("execute", query, self._binder(parameters))

    def insert(
        self,
        query: str,
        parameters: ParametersIn = None,
        *,
        item: Any = None,
        mapper: ItemMapper | None = None,
        include: Collection[str] | None = None,
        exclude: Collection[str] = (),
    ) -> int:
        """
        Insert and return the affected row count (0 on failure).

        Bind either explicit parameters, or the fields of item (via mapper, a
        mapping, or a pydantic model), filtered by include / exclude.
        """
        if item is not None and parameters is not None:
            raise ValueError("Pass either parameters or item, not both")
        if item is None:
            return self._execute("insert", query, self._binder(parameters))
        return self._execute(
            "insert",
            query,
            lambda: parameters_from_item(
                self._adapter, item, mapper=mapper, include=include, exclude=exclude
            ),
        )

    def update(self, query: str, parameters: ParametersIn = None) -> int:
        """Update and return the affected row count (0 on failure)."""
        return self._execute("update", query, self._binder(parameters))

    def delete(self, query: str, parameters: ParametersIn = None) -> int:
        """Delete and return the affected row count (0 on failure)."""
        return self._execute("delete", query, self._binder(parameters))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _binder(self, parameters: ParametersIn) -> Callable[[], list]:
        return lambda: to_parameters(self._adapter, parameters)

    def _execute(self, operation: str, query: str, bind: Callable[[], list]) -> int:
        return self._run(operation, query, bind, lambda command: command.execute_non_query(), 0)

    def _run(
        self,
        operation: str,
        query: str,
        bind: Callable[[], list],
        work: Callable[[Command], Any],
        default: Any,
    ) -> Any:
        with self._lifecycle.lock:
            try:
                conn = self._lifecycle.ensure_open()
                with self._adapter.create_command(conn, query) as command:
                    command.add_range(bind())
                    return work(command)
            except DbWrapperError as e:
                return self._fail(e, default)
            except Exception as e:
                failure = StatementFailure(
                    f"{operation} failed", operation=operation, query=query
                )
                failure.__cause__ = e
                self._drop_if_broken()
                return self._fail(failure, default)
            finally:
                self._lifecycle.perform_keep_alive_check()

    def _fail(self, failure: DbWrapperError, default: Any) -> Any:
        self._report(failure)
        if self._config.raise_errors:
            raise failure
        return default

    def _drop_if_broken(self) -> None:
        conn = self._lifecycle.connection
        if conn is not None and self._adapter.is_broken(conn):
            self._lifecycle.invalidate()

    def _report(self, failure: DbWrapperError) -> None:
        if not self.enable_error_log:
            return
        try:
            self._error_reporter(failure)
        except Exception:
            _log.exception("Error reporter raised while reporting: %s", failure)


def create_wrapper(
    product_type: ProductTypeEnum | str,
    server: str,
    username: str,
    password: str,
    database: str,
    port: int | None = None,
    **kwargs: Any,
) -> DbWrapper:
    """
    Build a DbWrapper for product_type ("postgres", "mysql", "oracle", "trino").

    port defaults to the engine's standard port; kwargs are passed to DbWrapper.
    """
    return DbWrapper(
        get_adapter(product_type), server, username, password, database, port, **kwargs
    )
