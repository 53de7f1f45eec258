"""
Trino adapter.

Connection string is ``trino://user@host:port/catalog?http_scheme=...``; the
password is kept out of the URL when empty. Trino binds positional ``?``
placeholders, so parameters are passed in the order they were added.
"""

import math
from typing import Any
from urllib.parse import parse_qs, quote, unquote, urlsplit

from trino.auth import BasicAuthentication
from trino.dbapi import connect as trino_connect

from dbwrapper.models import ProductTypeEnum, WrapperConfig

from .base import Command, EngineAdapter


class TrinoCommand(Command):
    def bind_parameters(self) -> list[Any] | None:
        if not self.parameters:
            return None
        return [p.value for p in self.parameters]


class TrinoAdapter(EngineAdapter):
    product_type = ProductTypeEnum.TRINO
    default_port = 8080
    command_class = TrinoCommand

    def build_connection_string(self, config: WrapperConfig) -> str:
        userinfo = quote(config.username, safe="")
        if config.password:
            userinfo += ":" + quote(config.password, safe="")
        # a password means BasicAuthentication, which Trino only accepts over https
        scheme = "https" if config.password else "http"
        return (
            f"trino://{userinfo}@{config.server}:{config.port}/{quote(config.database, safe='')}"
            f"?http_scheme={scheme}&request_timeout={config.connect_timeout}"
        )

    def open_connection(self, connection_string: str) -> Any:
        parts = urlsplit(connection_string)
        if parts.scheme != "trino":
            raise ValueError(f"Not a trino:// URL: {parts.scheme!r}")
        query = parse_qs(parts.query)
        username = unquote(parts.username or "")
        password = unquote(parts.password or "")
        kwargs: dict[str, Any] = {
            "host": parts.hostname,
            "port": parts.port or self.default_port,
            "user": username,
            "catalog": unquote(parts.path.lstrip("/")),
            "schema": "default",
            "source": "dbwrapper",
            "http_scheme": query.get("http_scheme", ["http"])[0],
        }
        if password:
            kwargs["auth"] = BasicAuthentication(username, password)
        if "request_timeout" in query:
            kwargs["request_timeout"] = float(query["request_timeout"][0])
        return trino_connect(**kwargs)

    def apply_statement_timeout(self, connection: Any, seconds: float) -> None:
        # whole seconds only, and 0s would mean no limit
        limit = max(1, math.ceil(seconds))
        self._run(connection, "SET SESSION query_max_execution_time = '%ss'" % limit)
