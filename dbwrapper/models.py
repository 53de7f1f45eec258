"""
Shared types: supported engines, wrapper configuration, bound parameters.
"""

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class ProductTypeEnum(str, Enum):
    """Supported database product types."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    ORACLE = "oracle"
    TRINO = "trino"


class WrapperConfig(BaseModel):
    """
    Connection settings for one DbWrapper. Frozen: built once at construction.

    connection_string is filled in by the engine adapter right after the other
    fields are validated (see DbWrapper.__init__).
    """

    model_config = ConfigDict(frozen=True)

    server: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    password: str = ""
    database: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    connection_string: str = ""
    keep_alive: bool = False
    idle_timeout_ms: int = Field(default=120_000, gt=0)
    raise_errors: bool = False
    connect_timeout: int = Field(default=10, ge=1)
    statement_timeout: float | None = None

    @property
    def idle_timeout_sec(self) -> float:
        return self.idle_timeout_ms / 1000.0

    def __repr__(self) -> str:
        # keep the password (and the connection string that embeds it) out of logs
        return (
            f"WrapperConfig(server={self.server!r}, port={self.port}, "
            f"database={self.database!r}, username={self.username!r}, "
            f"keep_alive={self.keep_alive}, idle_timeout_ms={self.idle_timeout_ms})"
        )

    __str__ = __repr__


class Parameter(NamedTuple):
    """A named value bound to a command."""

    name: str
    value: Any
