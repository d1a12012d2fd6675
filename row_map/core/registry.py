"""Entity metadata registry.

Maps entity types to their EntityDescriptor. Registration happens once
per type, before any statement builder, reader or repository touches
that type; afterwards the registry is read-only.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from row_map.core.exceptions import (
    DuplicateRegistrationError,
    InvalidPrimaryKeyError,
    RegistryError,
    UnregisteredEntityError,
)
from row_map.core.metadata import (
    ColumnDescriptor,
    EntityDescriptor,
    blank_factory,
    derive_columns,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityRegistry:
    """Holds the metadata descriptor of every registered entity type.

    Entries are write-once: a type cannot be re-registered or removed.
    """

    def __init__(self) -> None:
        self._descriptors: dict[type, EntityDescriptor] = {}
        self._lock = threading.Lock()

    def register(
        self,
        entity_type: type,
        table_name: str,
        primary_key: str,
        columns: Sequence[ColumnDescriptor] | None = None,
        *,
        factory: Callable[[], Any] | None = None,
    ) -> EntityDescriptor:
        """Register the table mapping of ``entity_type``.

        Args:
            entity_type: The entity class.
            table_name: Table the entity is stored in.
            primary_key: Name of the key column.
            columns: Ordered column descriptors. Derived from the class
                annotations when omitted.
            factory: Creates a blank instance for decoding. Defaults to
                allocating the class without calling ``__init__``.

        Returns:
            The registered descriptor.

        Raises:
            DuplicateRegistrationError: If the type is already registered.
            InvalidPrimaryKeyError: If ``primary_key`` does not name exactly
                one column.
            RegistryError: If two columns share a name.
        """
        cols = tuple(columns) if columns is not None else tuple(derive_columns(entity_type))
        names = [col.name for col in cols]

        if names.count(primary_key) != 1:
            raise InvalidPrimaryKeyError(entity_type, primary_key, names)
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise RegistryError(
                f"Duplicate column names for {entity_type.__qualname__}: {duplicates}"
            )

        descriptor = EntityDescriptor(
            entity_type=entity_type,
            table_name=table_name,
            primary_key=primary_key,
            columns=cols,
            factory=factory or blank_factory(entity_type),
        )

        with self._lock:
            if entity_type in self._descriptors:
                raise DuplicateRegistrationError(entity_type)
            self._descriptors[entity_type] = descriptor

        logger.debug(
            "Registered %s -> %s (key=%s, columns=%s)",
            entity_type.__qualname__,
            table_name,
            primary_key,
            names,
        )
        return descriptor

    def lookup(self, entity_type: type) -> EntityDescriptor:
        """Return the descriptor of ``entity_type``.

        Raises:
            UnregisteredEntityError: If the type was never registered.
        """
        try:
            return self._descriptors[entity_type]
        except KeyError:
            raise UnregisteredEntityError(entity_type) from None

    def has(self, entity_type: type) -> bool:
        """Check if an entity type is registered."""
        return entity_type in self._descriptors

    @property
    def entity_types(self) -> list[type]:
        """Registered entity types, in registration order."""
        return list(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)


default_registry = EntityRegistry()


def register_entity(
    entity_type: type,
    table_name: str,
    primary_key: str,
    columns: Sequence[ColumnDescriptor] | None = None,
    *,
    factory: Callable[[], Any] | None = None,
) -> EntityDescriptor:
    """Register ``entity_type`` in the process-wide registry."""
    return default_registry.register(
        entity_type, table_name, primary_key, columns, factory=factory
    )


def lookup_entity(entity_type: type) -> EntityDescriptor:
    """Look up ``entity_type`` in the process-wide registry."""
    return default_registry.lookup(entity_type)


def entity(
    table: str,
    primary_key: str = "id",
    columns: Sequence[ColumnDescriptor] | None = None,
    *,
    registry: EntityRegistry | None = None,
) -> Callable[[type[T]], type[T]]:
    """Class decorator registering the decorated entity type.

    Usage:
        @entity("Trade")
        @dataclass
        class Trade: ...
    """

    def _decorate(cls: type[T]) -> type[T]:
        target = registry if registry is not None else default_registry
        target.register(cls, table, primary_key, columns)
        return cls

    return _decorate
