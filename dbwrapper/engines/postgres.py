"""
PostgreSQL adapter (psycopg 3).

Connection string is a libpq conninfo; placeholders are ``%(name)s``.
"""

from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo

from dbwrapper.models import ProductTypeEnum, WrapperConfig

from .base import EngineAdapter


class PostgresAdapter(EngineAdapter):
    product_type = ProductTypeEnum.POSTGRES
    default_port = 5432

    def build_connection_string(self, config: WrapperConfig) -> str:
        return make_conninfo(
            host=config.server,
            port=config.port,
            dbname=config.database,
            user=config.username,
            password=config.password,
            connect_timeout=config.connect_timeout,
        )

    def open_connection(self, connection_string: str) -> Any:
        return psycopg.connect(connection_string, autocommit=True)

    def apply_statement_timeout(self, connection: Any, seconds: float) -> None:
        timeout_ms = int(seconds * 1000)
        # SET cannot take bind parameters; set_config can
        self._run(
            connection,
            "SELECT set_config('statement_timeout', %s, false)",
            (str(timeout_ms),),
        )

    def is_broken(self, connection: Any) -> bool:
        return bool(getattr(connection, "closed", False)) or bool(
            getattr(connection, "broken", False)
        )
