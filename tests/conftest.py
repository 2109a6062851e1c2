"""Root conftest — shared test configuration and storage fixtures.

Invariants:
    - Tests never touch the default ops_map.db in the working directory
    - Every storage test gets a fresh SQLite file under tmp_path
"""

import os

import pytest

from opsmap.infrastructure.database import DatabaseSessionManager
from opsmap.infrastructure.snapshot_store import SnapshotStore

os.environ.setdefault("OPSMAP_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPSMAP_LOG_FORMAT", "text")


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'board.db'}")
    await manager.init_models()
    yield manager
    await manager.dispose()


@pytest.fixture
async def store(db_manager):
    return SnapshotStore(db_manager)
