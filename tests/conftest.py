"""Shared test fixtures."""

from unittest.mock import AsyncMock

import pytest

from memchat.memory.client import SupermemoryClient


@pytest.fixture
def memory() -> AsyncMock:
    """A memory backend whose search finds nothing."""
    backend = AsyncMock()
    backend.search.return_value = []
    backend.add_memory.return_value = {"id": "mem_1", "status": "queued"}
    return backend


@pytest.fixture(autouse=True)
def _reset_client_singleton():
    """Keep the shared SupermemoryClient from leaking between tests."""
    SupermemoryClient._reset()
    yield
    SupermemoryClient._reset()
