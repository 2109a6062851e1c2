"""Service test fixtures — in-memory snapshot repository."""

import pytest

from tests.services.memory_store import InMemoryStore


@pytest.fixture
def memory_store():
    return InMemoryStore()
