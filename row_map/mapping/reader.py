"""Result reader.

Walks the rows of a query result and decodes them into entities using the
registered column order. The reader is a small state machine:

    UNPOSITIONED --advance--> POSITIONED --advance--> ... --> EXHAUSTED
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from row_map.core.exceptions import (
    ColumnCountMismatchError,
    DecoderStateError,
    MalformedScalarError,
    StrictModeViolation,
)
from row_map.core.registry import EntityRegistry, default_registry
from row_map.mapping import codec

if TYPE_CHECKING:
    from row_map.core.engine import QueryResult
    from row_map.core.metadata import EntityDescriptor

T = TypeVar("T")


class ReaderState(Enum):
    UNPOSITIONED = "unpositioned"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


class ResultReader:
    """Decodes result rows into registered entity types.

    Args:
        columns: Result column names, in result order.
        rows: Result rows; each row holds one scalar per column.
        registry: Registry to resolve entity metadata from.
        strict: Also require column names to equal the registered order.
    """

    def __init__(
        self,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        registry: EntityRegistry | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._columns = list(columns)
        self._rows = rows
        self._registry = registry if registry is not None else default_registry
        self._strict = strict
        self._index = -1
        self._state = ReaderState.UNPOSITIONED
        self._validated: set[type] = set()

    @classmethod
    def from_result(
        cls,
        result: QueryResult,
        registry: EntityRegistry | None = None,
        *,
        strict: bool = False,
    ) -> ResultReader:
        return cls(result.columns, result.rows, registry, strict=strict)

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    def __len__(self) -> int:
        return len(self._rows)

    def advance(self) -> bool:
        """Move to the next row. Returns True if a row is now current."""
        if self._state is ReaderState.EXHAUSTED:
            return False
        if self._index + 1 < len(self._rows):
            self._index += 1
            self._state = ReaderState.POSITIONED
            return True
        self._state = ReaderState.EXHAUSTED
        return False

    def decode_into(self, target: Any) -> Any:
        """Write the current row into ``target`` and return it.

        Every scalar is decoded before the first field is written, so a
        failed validation or a malformed scalar leaves ``target`` untouched.

        Raises:
            DecoderStateError: If no row is current.
            ColumnCountMismatchError: If the result does not have one column
                per registered column.
            MalformedScalarError: If a scalar does not fit its field kind.
        """
        if self._state is not ReaderState.POSITIONED:
            raise DecoderStateError(self._state.value, "decode")

        descriptor = self._registry.lookup(type(target))
        self._validate(descriptor)

        row = self._rows[self._index]
        if len(row) != len(descriptor.columns):
            raise ColumnCountMismatchError(
                descriptor.entity_type, len(descriptor.columns), len(row)
            )
        values = []
        for col, scalar in zip(descriptor.columns, row):
            try:
                values.append(codec.decode(col.kind, scalar, col.nullable))
            except MalformedScalarError as e:
                raise MalformedScalarError(e.kind, e.value, col.name) from None

        for col, value in zip(descriptor.columns, values):
            col.setter(target, value)
        return target

    def decode(self, entity_type: type[T]) -> T:
        """Decode the current row into a new ``entity_type`` instance."""
        if self._state is not ReaderState.POSITIONED:
            raise DecoderStateError(self._state.value, "decode")
        descriptor = self._registry.lookup(entity_type)
        self._validate(descriptor)
        return self.decode_into(descriptor.factory())  # type: ignore[no-any-return]

    def read_all(self, entity_type: type[T]) -> list[T]:
        """Decode every remaining row, in result order."""
        results: list[T] = []
        while self.advance():
            results.append(self.decode(entity_type))
        return results

    def _validate(self, descriptor: EntityDescriptor) -> None:
        """Check the result shape once per entity type."""
        if descriptor.entity_type in self._validated:
            return

        expected = len(descriptor.columns)
        if len(self._columns) != expected:
            raise ColumnCountMismatchError(
                descriptor.entity_type, expected, len(self._columns)
            )
        if self._strict and self._columns != descriptor.column_names:
            raise StrictModeViolation(
                f"Result columns {self._columns} do not match "
                f"{descriptor.entity_type.__qualname__} columns {descriptor.column_names}"
            )
        self._validated.add(descriptor.entity_type)
