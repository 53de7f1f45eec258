"""
Connection lifecycle for one DbWrapper: lazy open, keep-alive, idle close.

Holds at most one DB-API connection. Keep-alive mode leaves the connection open
between operations and closes it when the IdleTimer expires; otherwise the
connection is closed by the keep-alive check that follows every operation.

All state changes happen under one re-entrant lock. DbWrapper holds the same
lock for a whole operation, so the idle timer cannot close a connection that
an operation is using; a timer callback that was queued behind the lock and
then superseded by a reset is recognized by its generation and ignored.
"""

import logging
import threading
from typing import Any

from dbwrapper.core.errors import ConnectionFailure, ErrorReporter
from dbwrapper.engines.base import EngineAdapter
from dbwrapper.models import WrapperConfig

from .timer import IdleTimer

_log = logging.getLogger(__name__)


class ConnectionLifecycle:
    """Owns the connection handle and the idle timer of one wrapper."""

    def __init__(
        self,
        adapter: EngineAdapter,
        config: WrapperConfig,
        report: ErrorReporter,
    ) -> None:
        self._adapter = adapter
        self._config = config
        self._report = report
        self._lock = threading.RLock()
        self._conn: Any = None
        self._timer: IdleTimer | None = None

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def connection(self) -> Any:
        """Current handle, or None when closed."""
        return self._conn

    @property
    def timer(self) -> IdleTimer | None:
        return self._timer

    def is_open(self) -> bool:
        with self._lock:
            return self._conn is not None

    # ------------------------------------------------------------------
    # Open
    # ------------------------------------------------------------------

    def ensure_open(self) -> Any:
        """
        Return the open connection, opening it first if closed.

        Opening in keep-alive mode arms the idle timer (first use) or resets it.
        Raises ConnectionFailure if the driver cannot connect.
        """
        with self._lock:
            if self._conn is not None:
                return self._conn
            self._conn = self._connect()
            if self._config.keep_alive:
                if self._timer is None:
                    self._timer = IdleTimer(
                        self._config.idle_timeout_sec, self.on_idle_timeout
                    )
                    self._timer.start()
                else:
                    self._timer.reset()
            return self._conn

    def open(self) -> bool:
        """Open eagerly. Failures are reported, not raised; returns is_open()."""
        try:
            self.ensure_open()
        except ConnectionFailure as e:
            self._report(e)
            return False
        return True

    def _connect(self) -> Any:
        cfg = self._config
        try:
            conn = self._adapter.open_connection(cfg.connection_string)
        except Exception as e:
            raise ConnectionFailure(
                f"Could not open connection to {cfg.server}:{cfg.port}/{cfg.database}",
                operation="open",
            ) from e
        if cfg.statement_timeout is not None and cfg.statement_timeout > 0:
            try:
                self._adapter.apply_statement_timeout(conn, cfg.statement_timeout)
            except Exception as e:
                self._close_quiet(conn)
                raise ConnectionFailure(
                    "Could not apply statement timeout", operation="open"
                ) from e
        _log.debug("Opened connection to %s:%s/%s", cfg.server, cfg.port, cfg.database)
        return conn

    # ------------------------------------------------------------------
    # Keep-alive / close
    # ------------------------------------------------------------------

    def perform_keep_alive_check(self) -> None:
        """
        Run after every operation, successful or not.

        Keep-alive: push the idle deadline out again. Otherwise stop the timer
        and close the connection so a failed operation never leaks it.
        """
        with self._lock:
            if self._config.keep_alive:
                if self._conn is not None and self._timer is not None:
                    self._timer.reset()
                return
            if self._timer is not None:
                self._timer.stop()
            self._close_connection()

    def on_idle_timeout(self, generation: int | None = None) -> None:
        """
        Idle timer callback: close the connection.

        A generation that is no longer current means an operation reset the
        timer while this callback waited for the lock; nothing to do then.
        Called with no generation it closes unconditionally.
        """
        with self._lock:
            if generation is not None and (
                self._timer is None or not self._timer.is_current(generation)
            ):
                _log.debug("Ignoring stale idle timeout (generation=%s)", generation)
                return
            if self._timer is not None:
                self._timer.stop()
            if self._conn is not None:
                _log.debug("Closing idle connection after %sms", self._config.idle_timeout_ms)
            self._close_connection()

    def invalidate(self) -> None:
        """Drop a handle the driver reports as broken; the next operation reopens."""
        with self._lock:
            if self._conn is None:
                return
            _log.warning(
                "Dropping broken connection to %s:%s/%s",
                self._config.server,
                self._config.port,
                self._config.database,
            )
            if self._timer is not None:
                self._timer.stop()
            self._close_connection()

    def close(self) -> None:
        """Stop the timer and close the connection. Safe to call repeatedly."""
        with self._lock:
            if self._timer is not None:
                self._timer.stop()
                self._timer = None
            self._close_connection()

    def _close_connection(self) -> None:
        conn = self._conn
        if conn is None:
            return
        self._conn = None
        try:
            conn.close()
        except Exception as e:
            failure = ConnectionFailure("Could not close connection", operation="close")
            failure.__cause__ = e
            self._report(failure)
            return
        _log.debug("Closed connection to %s:%s", self._config.server, self._config.port)

    @staticmethod
    def _close_quiet(conn: Any) -> None:
        try:
            conn.close()
        except Exception as e:
            _log.debug("Ignoring close failure on discarded connection: %s", e)
