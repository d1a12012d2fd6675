"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from row_map.core.connection import ConnectionConfig
from row_map.core.registry import EntityRegistry


@pytest.fixture
def registry() -> EntityRegistry:
    """Fresh registry so tests never touch the process-wide one."""
    return EntityRegistry()


@pytest.fixture
def sqlite_config(tmp_path: Path) -> ConnectionConfig:
    """SQLite file database shared by every pooled connection."""
    return ConnectionConfig(
        driver="sqlite",
        database=str(tmp_path / "row_map.db"),
        pool_size=2,
        pool_timeout=5,
    )


@pytest.fixture
def write_fixture(tmp_path: Path):
    """Helper to write JSON fixture files.

    Usage:
        path = write_fixture("trades.json", '[{"id": 1}]')
    """

    def _write(relative_path: str, content: str) -> Path:
        file_path = tmp_path / "fixtures" / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _write
