"""
Engine adapters: PostgreSQL (psycopg), MySQL (pymysql), Oracle (oracledb), Trino.

get_adapter(product_type) returns a fresh adapter for the engine.
"""

from dbwrapper.models import ProductTypeEnum

from .base import Command, EngineAdapter
from .mysql import MysqlAdapter
from .oracle import OracleAdapter
from .postgres import PostgresAdapter
from .trino import TrinoAdapter, TrinoCommand

_ADAPTERS: dict[ProductTypeEnum, type[EngineAdapter]] = {
    ProductTypeEnum.POSTGRES: PostgresAdapter,
    ProductTypeEnum.MYSQL: MysqlAdapter,
    ProductTypeEnum.ORACLE: OracleAdapter,
    ProductTypeEnum.TRINO: TrinoAdapter,
}


def get_adapter(product_type: ProductTypeEnum | str) -> EngineAdapter:
    """Return an adapter instance for product_type (enum or its string value)."""
    pt = ProductTypeEnum(product_type) if isinstance(product_type, str) else product_type
    try:
        return _ADAPTERS[pt]()
    except KeyError:
        raise ValueError(f"Unsupported product_type: {product_type}") from None


__all__ = [
    "Command",
    "EngineAdapter",
    "MysqlAdapter",
    "OracleAdapter",
    "PostgresAdapter",
    "TrinoAdapter",
    "TrinoCommand",
    "get_adapter",
]
