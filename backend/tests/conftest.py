"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- Shared test fixtures (in-memory collections, repositories)
"""

import os
import sys
from pathlib import Path

import pytest


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["MONGODB_DATABASE"] = "docdao_test"
os.environ["MONGODB_TIMEOUT_MS"] = "200"
os.environ["DEFAULT_PAGE_SIZE"] = "10"
os.environ["DEFAULT_SORT"] = "_id:-1"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["LOG_JSON"] = "true"

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from docdao.stores.memory import InMemoryCollection  # noqa: E402
from widgets import Widget, WidgetRepository  # noqa: E402


@pytest.fixture
def anyio_backend():
    """
    Configure anyio backend for async tests.

    Returns:
        str: Backend name ("asyncio")
    """
    return "asyncio"


@pytest.fixture
def collection() -> InMemoryCollection:
    """Provide an empty in-memory collection."""
    return InMemoryCollection("widgets")


@pytest.fixture
def repo(collection: InMemoryCollection) -> WidgetRepository:
    """Provide a WidgetRepository over the in-memory collection."""
    return WidgetRepository(collection)


@pytest.fixture
async def seeded_repo(repo: WidgetRepository) -> WidgetRepository:
    """
    Repository holding 25 widgets.

    Ranks run 0..24 in insertion order; even ranks are red, odd are blue.
    """
    for rank in range(25):
        await repo.create(
            Widget(
                name=f"widget-{rank:02d}",
                rank=rank,
                color="red" if rank % 2 == 0 else "blue",
            )
        )
    return repo
