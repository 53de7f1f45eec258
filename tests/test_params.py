"""Unit tests for params: explicit parameters and item-derived parameters."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from dbwrapper.engines import PostgresAdapter
from dbwrapper.models import Parameter
from dbwrapper.params import item_to_mapping, parameters_from_item, to_parameters

ADAPTER = PostgresAdapter()


class Order(BaseModel):
    id: int
    customer: str
    total: float
    row_version: int = 0


@dataclass
class Point:
    x: int
    y: int


def test_to_parameters_none() -> None:
    assert to_parameters(ADAPTER, None) == []


def test_to_parameters_mapping_keeps_order() -> None:
    out = to_parameters(ADAPTER, {"@b": 2, "a": 1})
    assert out == [Parameter("b", 2), Parameter("a", 1)]


def test_to_parameters_sequence_passthrough() -> None:
    params = [Parameter("id", 1), Parameter("name", None)]
    assert to_parameters(ADAPTER, params) == params


def test_to_parameters_rejects_non_parameters() -> None:
    with pytest.raises(TypeError):
        to_parameters(ADAPTER, [("id", 1)])


def test_pydantic_item_in_declaration_order() -> None:
    out = parameters_from_item(ADAPTER, Order(id=1, customer="c", total=9.5))
    assert [p.name for p in out] == ["id", "customer", "total", "row_version"]


def test_exclude_list() -> None:
    out = parameters_from_item(
        ADAPTER, Order(id=1, customer="c", total=9.5), exclude={"row_version", "id"}
    )
    assert out == [Parameter("customer", "c"), Parameter("total", 9.5)]


def test_include_list() -> None:
    out = parameters_from_item(ADAPTER, {"id": 1, "customer": "c"}, include=["customer"])
    assert out == [Parameter("customer", "c")]


def test_include_and_exclude_combined() -> None:
    out = parameters_from_item(
        ADAPTER, {"a": 1, "b": 2, "c": 3}, include={"a", "b"}, exclude={"b"}
    )
    assert out == [Parameter("a", 1)]


def test_mapper_wins_over_item_type() -> None:
    out = parameters_from_item(ADAPTER, Point(1, 2), mapper=lambda p: {"x": p.x, "y": p.y})
    assert out == [Parameter("x", 1), Parameter("y", 2)]


def test_unsupported_item_needs_mapper() -> None:
    with pytest.raises(TypeError, match="mapper"):
        item_to_mapping(Point(1, 2))
