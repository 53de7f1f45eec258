"""
Engine adapter contract and the DB-API command wrapper shared by all engines.

An adapter turns a WrapperConfig into a connection string, opens driver
connections from it, and builds commands and parameters in the engine's
placeholder style. The core only talks to this interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

from dbwrapper.models import Parameter, WrapperConfig

_NAME_MARKERS = "@:%"


class Command:
    """
    One query bound to one connection, plus its parameters.

    Parameters are bound by name (``%(name)s`` / ``:name`` styles); engines
    with positional placeholders override ``bind_parameters``.
    """

    def __init__(self, connection: Any, query: str) -> None:
        self.connection = connection
        self.query = query
        self.parameters: list[Parameter] = []
        self._cursor: Any = None

    def add(self, parameter: Parameter) -> None:
        self.parameters.append(parameter)

    def add_range(self, parameters: Iterable[Parameter]) -> None:
        self.parameters.extend(parameters)

    def bind_parameters(self) -> dict[str, Any] | list[Any] | None:
        if not self.parameters:
            return None
        return {p.name: p.value for p in self.parameters}

    def _execute(self) -> Any:
        cur = self.connection.cursor()
        self._cursor = cur
        params = self.bind_parameters()
        if params is not None:
            cur.execute(self.query, params)
        else:
            cur.execute(self.query)
        return cur

    def execute_reader(self) -> Iterator[dict[str, Any]]:
        """Execute and yield rows one at a time as {column: value} dicts."""
        cur = self._execute()
        desc = cur.description
        if not desc:
            return
        names = [d[0] for d in desc]
        for row in iter(cur.fetchone, None):
            yield dict(zip(names, row, strict=True))

    def execute_non_query(self) -> int:
        """Execute and return the driver-reported affected row count."""
        cur = self._execute()
        rc = cur.rowcount
        # DB-API allows -1 / None when the count is unknown
        return rc if rc is not None and rc > 0 else 0

    def close(self) -> None:
        cur, self._cursor = self._cursor, None
        if cur is not None:
            cur.close()

    def __enter__(self) -> "Command":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class EngineAdapter(ABC):
    """Per-engine connection, command and parameter factory."""

    product_type: Any = None
    default_port: int = 0
    ping_query: str = "SELECT 1"
    command_class: type[Command] = Command

    @abstractmethod
    def build_connection_string(self, config: WrapperConfig) -> str:
        """Format the engine's connection string from config."""

    @abstractmethod
    def open_connection(self, connection_string: str) -> Any:
        """Open a DB-API connection (autocommit) from a connection string."""

    def create_command(self, connection: Any, query: str) -> Command:
        return self.command_class(connection, query)

    def create_parameter(self, name: str, value: Any) -> Parameter:
        """Build a parameter; a leading ``@``, ``:`` or ``%`` marker is stripped from name."""
        key = name.lstrip(_NAME_MARKERS)
        if not key:
            raise ValueError(f"Invalid parameter name: {name!r}")
        return Parameter(key, value)

    def apply_statement_timeout(self, connection: Any, seconds: float) -> None:
        """Set a session-level statement timeout. Default: not supported, no-op."""

    def is_broken(self, connection: Any) -> bool:
        """True if the driver reports the connection as unusable."""
        return False

    @staticmethod
    def _run(connection: Any, sql: str, params: Any = None) -> None:
        cur = connection.cursor()
        try:
            if params is not None:
                cur.execute(sql, params)
            else:
                cur.execute(sql)
        finally:
            cur.close()
