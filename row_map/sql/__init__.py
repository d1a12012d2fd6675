"""SQL layer - statement generation from entity metadata."""

from __future__ import annotations

from row_map.sql.builder import Statement, StatementBuilder

__all__ = [
    "Statement",
    "StatementBuilder",
]
