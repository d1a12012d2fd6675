"""Entity metadata descriptors.

Frozen dataclasses describing how one entity type maps onto one table.
Built once at registration and shared read-only by the reader, the
statement builder and the record serializer.
"""

from __future__ import annotations

import dataclasses
import inspect
import types
import typing
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from operator import attrgetter
from typing import Any, Callable

from pydantic import BaseModel

from row_map.core.enums import FieldKind

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]

_KIND_BY_TYPE: dict[type, FieldKind] = {
    int: FieldKind.INT64,
    float: FieldKind.FLOAT,
    str: FieldKind.TEXT,
    datetime: FieldKind.TIMESTAMP,
}


@dataclass(frozen=True)
class ColumnDescriptor:
    """One field-to-column binding."""

    name: str
    kind: FieldKind
    attribute: str
    getter: Getter
    setter: Setter
    nullable: bool = False


@dataclass(frozen=True)
class EntityDescriptor:
    """Registered (table, key, columns) shape for an entity type.

    ``columns`` is the canonical order: SELECT results are bound in this
    order and INSERT values are emitted in this order.
    """

    entity_type: type
    table_name: str
    primary_key: str
    columns: tuple[ColumnDescriptor, ...]
    factory: Callable[[], Any]

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    @cached_property
    def key_column(self) -> ColumnDescriptor:
        return next(col for col in self.columns if col.name == self.primary_key)

    @cached_property
    def value_columns(self) -> tuple[ColumnDescriptor, ...]:
        """Every column except the primary key, in descriptor order."""
        return tuple(col for col in self.columns if col.name != self.primary_key)


def _make_setter(attr: str) -> Setter:
    def _set(obj: Any, value: Any) -> None:
        setattr(obj, attr, value)

    return _set


def column(
    name: str,
    kind: FieldKind,
    *,
    attr: str | None = None,
    getter: Getter | None = None,
    setter: Setter | None = None,
    nullable: bool = False,
) -> ColumnDescriptor:
    """Declare a column.

    Args:
        name: Column name in the table.
        kind: Field kind used by the codec.
        attr: Attribute holding the value. Defaults to ``name``.
        getter: Custom read accessor, overrides ``attr`` for reads.
        setter: Custom write accessor, overrides ``attr`` for writes.
        nullable: Keep ``None`` on decode instead of the zero value.
    """
    attribute = attr or name
    return ColumnDescriptor(
        name=name,
        kind=kind,
        attribute=attribute,
        getter=getter or attrgetter(attribute),
        setter=setter or _make_setter(attribute),
        nullable=nullable,
    )


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _field_hints(cls: type) -> dict[str, Any]:
    """Field names mapped to their annotations, in declaration order.

    Pydantic models report their own fields; dataclasses their
    ``fields()``; plain classes their class annotations.
    """
    if _is_pydantic_model(cls):
        return {name: f.annotation for name, f in cls.model_fields.items()}  # type: ignore[attr-defined]

    hints = typing.get_type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return {f.name: hints.get(f.name) for f in dataclasses.fields(cls)}
    return {name: hints.get(name) for name in inspect.get_annotations(cls)}


def _unwrap_optional(hint: Any) -> tuple[Any, bool]:
    """Return ``(inner_type, is_optional)`` for ``X | None`` hints."""
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(hint)
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1 and len(rest) < len(args):
            return rest[0], True
    return hint, False


def derive_columns(cls: type) -> list[ColumnDescriptor]:
    """Build column descriptors from a class's type annotations.

    ``int`` maps to INT64, ``float`` to FLOAT, ``str`` to TEXT and
    ``datetime`` to TIMESTAMP. ``X | None`` fields become nullable.

    Raises:
        TypeError: If a field's annotation has no matching kind.
    """
    result: list[ColumnDescriptor] = []
    for name, annotation in _field_hints(cls).items():
        hint, optional = _unwrap_optional(annotation)
        kind = _KIND_BY_TYPE.get(hint)
        if kind is None:
            raise TypeError(
                f"Cannot derive a column kind for {cls.__qualname__}.{name}: {hint!r}"
            )
        result.append(column(name, kind, nullable=optional))
    return result


def blank_factory(cls: type) -> Callable[[], Any]:
    """Return a callable creating an instance whose fields are set by setters.

    No ``__init__`` runs, so required constructor arguments are not needed.
    Pydantic models are created through ``model_construct``.
    """
    if _is_pydantic_model(cls):
        return cls.model_construct  # type: ignore[attr-defined, no-any-return]

    def _new() -> Any:
        return cls.__new__(cls)

    return _new
