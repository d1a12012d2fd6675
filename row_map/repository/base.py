"""Generic repository.

CRUD over any registered entity type, composed from the statement
builder, the result reader and a store client. Each operation makes one
client call, hence borrows exactly one pooled connection.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from row_map.core.engine import StoreClient
from row_map.core.exceptions import NotFoundError
from row_map.core.registry import EntityRegistry, default_registry
from row_map.mapping.reader import ResultReader
from row_map.sql.builder import StatementBuilder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Generic[T]):
    """Base repository class for one entity type.

    Subclasses may add entity-specific queries on top of ``self.client``
    and ``self.statements``.

    Args:
        entity_type: A registered entity class.
        client: The store client (usually an Engine).
        registry: Registry the entity type is registered in.
    """

    def __init__(
        self,
        entity_type: type[T],
        client: StoreClient,
        registry: EntityRegistry | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.client = client
        self.registry = registry if registry is not None else default_registry
        self.statements: StatementBuilder[T] = StatementBuilder(entity_type, self.registry)

    def _reader(self, sql: str, params: list[Any]) -> ResultReader:
        result = self.client.execute_query(sql, params)
        return ResultReader.from_result(result, self.registry)

    def get_by_id(self, key: Any) -> T:
        """Fetch the entity with primary key ``key``.

        Raises:
            NotFoundError: If no row has that key.
        """
        reader = self._reader(*self.statements.select_by_key(key))
        if not reader.advance():
            logger.debug("%s %r not found", self.entity_type.__qualname__, key)
            raise NotFoundError(self.entity_type, key)
        return reader.decode(self.entity_type)

    def get_all(self) -> list[T]:
        """Fetch every entity, in the order the store returns them."""
        return self._reader(*self.statements.select_all()).read_all(self.entity_type)

    def insert(self, obj: T) -> int:
        """Insert ``obj``. Returns the affected row count."""
        return self.client.execute(*self.statements.insert(obj))

    def update(self, obj: T) -> int:
        """Update the row with ``obj``'s key. Returns the affected row count."""
        return self.client.execute(*self.statements.update(obj))

    def remove(self, obj: T) -> int:
        """Delete the row with ``obj``'s key. Returns the affected row count."""
        return self.client.execute(*self.statements.delete(obj))
