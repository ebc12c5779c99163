"""Shared fixtures for squawker tests."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import structlog

from squawker.infrastructure.persistence.database import Database


@pytest.fixture
def logger() -> structlog.stdlib.BoundLogger:
    return structlog.get_logger()


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    """Create a test database."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.initialize()
    yield db
    await db.close()
