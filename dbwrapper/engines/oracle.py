"""
Oracle adapter (python-oracledb, thin mode).

The connection string is ``user/password@host:port/service?connect_timeout=N``:
the credentials are split back off and the Easy Connect remainder is passed to
oracledb.connect() as its dsn. Placeholders are ``:name``.
"""

from typing import Any

import oracledb

from dbwrapper.models import ProductTypeEnum, WrapperConfig

from .base import EngineAdapter


class OracleAdapter(EngineAdapter):
    product_type = ProductTypeEnum.ORACLE
    default_port = 1521
    ping_query = "SELECT 1 FROM DUAL"

    def build_connection_string(self, config: WrapperConfig) -> str:
        return (
            f"{config.username}/{config.password}"
            f"@{config.server}:{config.port}/{config.database}"
            f"?connect_timeout={config.connect_timeout}"
        )

    def open_connection(self, connection_string: str) -> Any:
        credentials, _, dsn = connection_string.rpartition("@")
        user, _, password = credentials.partition("/")
        conn = oracledb.connect(user=user, password=password, dsn=dsn)
        conn.autocommit = True
        return conn

    def apply_statement_timeout(self, connection: Any, seconds: float) -> None:
        # oracledb enforces this client-side per round trip
        connection.call_timeout = int(seconds * 1000)

    def is_broken(self, connection: Any) -> bool:
        try:
            return not connection.is_healthy()
        except Exception:
            return True
