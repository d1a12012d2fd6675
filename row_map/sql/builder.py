"""Statement builder.

Generates parameterized CRUD statements from an entity's metadata, with
``$n`` positional placeholders, and extracts the matching parameter lists
from entity instances. Nothing here executes SQL.

The placeholder order of each statement and the order of its parameter
list are produced from the same column sequence, so they always agree.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any, Generic, NamedTuple, TypeVar

from row_map.core.exceptions import MappingError
from row_map.core.metadata import ColumnDescriptor, EntityDescriptor
from row_map.core.registry import EntityRegistry, default_registry
from row_map.mapping import codec

T = TypeVar("T")


class Statement(NamedTuple):
    """SQL text paired with its ordered parameter list."""

    sql: str
    params: list[Any]


def _placeholder(index: int) -> str:
    return f"${index}"


class StatementBuilder(Generic[T]):
    """Builds statements for one registered entity type.

    Args:
        entity_type: A registered entity class, or its EntityDescriptor.
        registry: Registry to resolve ``entity_type`` from.
    """

    def __init__(
        self,
        entity_type: type[T] | EntityDescriptor,
        registry: EntityRegistry | None = None,
    ) -> None:
        if isinstance(entity_type, EntityDescriptor):
            self._descriptor = entity_type
        else:
            registry = registry if registry is not None else default_registry
            self._descriptor = registry.lookup(entity_type)

    @property
    def descriptor(self) -> EntityDescriptor:
        return self._descriptor

    # --- SQL text ---

    @cached_property
    def _insert_sql(self) -> str:
        d = self._descriptor
        names = ", ".join(col.name for col in d.columns)
        slots = ", ".join(_placeholder(i) for i in range(1, len(d.columns) + 1))
        return f"INSERT INTO {d.table_name} ({names}) VALUES ({slots})"

    @cached_property
    def _update_sql(self) -> str:
        d = self._descriptor
        if not d.value_columns:
            raise MappingError(
                f"{d.entity_type.__qualname__} has no non-key columns to update"
            )
        assignments = [
            f"{col.name}={_placeholder(i)}" for i, col in enumerate(d.value_columns, start=1)
        ]
        key_slot = _placeholder(len(assignments) + 1)
        return f"UPDATE {d.table_name} SET {', '.join(assignments)} WHERE {d.primary_key}={key_slot}"

    def build_insert(self) -> str:
        """``INSERT INTO t (c1, ...) VALUES ($1, ...)`` in descriptor order."""
        return self._insert_sql

    def build_update(self) -> str:
        """``UPDATE t SET a=$1, ... WHERE pk=$N`` with the key bound last."""
        return self._update_sql

    def build_delete(self) -> str:
        d = self._descriptor
        return f"DELETE FROM {d.table_name} WHERE {d.primary_key}=$1"

    def build_select_by_key(self) -> str:
        d = self._descriptor
        return f"SELECT * FROM {d.table_name} WHERE {d.primary_key}=$1"

    def build_select_all(self) -> str:
        return f"SELECT * FROM {self._descriptor.table_name}"

    # --- Parameters ---

    @staticmethod
    def _values(obj: Any, columns: list[ColumnDescriptor]) -> list[Any]:
        return [codec.encode(col.kind, col.getter(obj)) for col in columns]

    def insert_params(self, obj: T) -> list[Any]:
        """Every column value, in descriptor order."""
        return self._values(obj, list(self._descriptor.columns))

    def update_params(self, obj: T) -> list[Any]:
        """Non-key values in descriptor order, followed by the key value."""
        d = self._descriptor
        return self._values(obj, [*d.value_columns, d.key_column])

    def delete_params(self, obj: T) -> list[Any]:
        return self._values(obj, [self._descriptor.key_column])

    def key_params(self, key: Any) -> list[Any]:
        """Parameter list for ``build_select_by_key`` given a raw key value."""
        return [codec.encode(self._descriptor.key_column.kind, key)]

    # --- Statements ---

    def insert(self, obj: T) -> Statement:
        return Statement(self.build_insert(), self.insert_params(obj))

    def update(self, obj: T) -> Statement:
        return Statement(self.build_update(), self.update_params(obj))

    def delete(self, obj: T) -> Statement:
        return Statement(self.build_delete(), self.delete_params(obj))

    def select_by_key(self, key: Any) -> Statement:
        return Statement(self.build_select_by_key(), self.key_params(key))

    def select_all(self) -> Statement:
        return Statement(self.build_select_all(), [])
