"""Record (JSON) boundary for registered entities.

Records are ordered column-name to scalar mappings built from the entity
metadata, used for JSON transport and fixture files. Timestamps are
rendered as ``YYYY-MM-DD HH:MM:SS`` text.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TypeVar

from row_map.core.exceptions import MalformedScalarError, MappingError
from row_map.core.registry import EntityRegistry, default_registry
from row_map.mapping import codec

T = TypeVar("T")


def _registry(registry: EntityRegistry | None) -> EntityRegistry:
    return registry if registry is not None else default_registry


def to_record(obj: Any, registry: EntityRegistry | None = None) -> dict[str, Any]:
    """Return the entity's column values in descriptor order."""
    descriptor = _registry(registry).lookup(type(obj))
    return {col.name: codec.encode(col.kind, col.getter(obj)) for col in descriptor.columns}


def from_record(
    entity_type: type[T],
    record: Mapping[str, Any],
    registry: EntityRegistry | None = None,
) -> T:
    """Build an entity from a record.

    Missing keys and nulls take the field's zero value (or None for
    nullable columns). Unknown keys are ignored.
    """
    descriptor = _registry(registry).lookup(entity_type)
    values = []
    for col in descriptor.columns:
        try:
            values.append(codec.decode(col.kind, record.get(col.name), col.nullable))
        except MalformedScalarError as e:
            raise MalformedScalarError(e.kind, e.value, col.name) from None

    obj = descriptor.factory()
    for col, value in zip(descriptor.columns, values):
        col.setter(obj, value)
    return obj  # type: ignore[no-any-return]


def to_json(obj: Any, registry: EntityRegistry | None = None, **kwargs: Any) -> str:
    """Serialize an entity to a JSON object string."""
    return json.dumps(to_record(obj, registry), **kwargs)


def from_json(entity_type: type[T], text: str, registry: EntityRegistry | None = None) -> T:
    """Deserialize an entity from a JSON object string."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise MappingError(f"Expected a JSON object for {entity_type.__qualname__}")
    return from_record(entity_type, data, registry)


def load_records(
    entity_type: type[T],
    text: str,
    registry: EntityRegistry | None = None,
) -> list[T]:
    """Deserialize a JSON array of records, e.g. a fixture file's contents."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise MappingError(f"Expected a JSON array of {entity_type.__qualname__} records")
    return [from_record(entity_type, item, registry) for item in data]
