"""
dbwrapper: one keep-alive aware connection per database, with uniform
SELECT / INSERT / UPDATE / DELETE over PostgreSQL, MySQL, Oracle and Trino.
"""

from dbwrapper.core.errors import (
    ConnectionFailure,
    ContractViolation,
    DbWrapperError,
    StatementFailure,
    log_error_reporter,
)
from dbwrapper.engines import EngineAdapter, get_adapter
from dbwrapper.models import Parameter, ProductTypeEnum, WrapperConfig
from dbwrapper.wrapper import DbWrapper, create_wrapper

__all__ = [
    "ConnectionFailure",
    "ContractViolation",
    "DbWrapper",
    "DbWrapperError",
    "EngineAdapter",
    "Parameter",
    "ProductTypeEnum",
    "StatementFailure",
    "WrapperConfig",
    "create_wrapper",
    "get_adapter",
    "log_error_reporter",
]
