"""
Turn caller input into bound Parameters.

Explicit parameters may be a sequence of Parameter or a {name: value} mapping.
An item to persist is turned into a mapping by, in order: the caller's mapper,
the item itself if it is a Mapping, or the declared fields of a pydantic model.
No other introspection is done; anything else needs a mapper. The caller's
allow list (include) and deny list (exclude) are applied afterwards.
"""

from collections.abc import Callable, Collection, Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from dbwrapper.engines.base import EngineAdapter
from dbwrapper.models import Parameter

ParametersIn = Iterable[Parameter] | Mapping[str, Any] | None
ItemMapper = Callable[[Any], Mapping[str, Any]]


def to_parameters(adapter: EngineAdapter, parameters: ParametersIn) -> list[Parameter]:
    if parameters is None:
        return []
    if isinstance(parameters, Mapping):
        return [adapter.create_parameter(k, v) for k, v in parameters.items()]
    out: list[Parameter] = []
    for p in parameters:
        if not isinstance(p, Parameter):
            raise TypeError(f"Expected Parameter, got {type(p).__name__}")
        out.append(p)
    return out


def item_to_mapping(item: Any, mapper: ItemMapper | None = None) -> Mapping[str, Any]:
    if mapper is not None:
        return mapper(item)
    if isinstance(item, Mapping):
        return item
    if isinstance(item, BaseModel):
        return item.model_dump()
    raise TypeError(
        f"Cannot derive parameters from {type(item).__name__}; pass mapper= or a mapping"
    )


def parameters_from_item(
    adapter: EngineAdapter,
    item: Any,
    *,
    mapper: ItemMapper | None = None,
    include: Collection[str] | None = None,
    exclude: Collection[str] = (),
) -> list[Parameter]:
    """
    Build parameters from item's fields.

    - include: when given, only these field names are bound.
    - exclude: field names never bound (e.g. generated ids, computed columns).
    Order follows the mapping (declaration order for pydantic models).
    """
    fields = item_to_mapping(item, mapper)
    return [
        adapter.create_parameter(name, value)
        for name, value in fields.items()
        if (include is None or name in include) and name not in exclude
    ]
