"""Shared fixtures: store backends for the contract suite and a fake pgvector pool."""

import pytest

from src.retrieval.memory_store import InMemoryStore
from src.retrieval.postgres_store import PostgresStore
from src.retrieval.store import VectorStore
from tests.fakes import FakePool


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture(params=["memory", "postgres"])
def store(request: pytest.FixtureRequest) -> VectorStore:
    """Every backend, for tests of the shared store contract."""
    if request.param == "memory":
        return InMemoryStore()
    return PostgresStore(pool=FakePool())


@pytest.fixture(params=["memory", "postgres"])
def store_factory(request: pytest.FixtureRequest):
    """Build fresh stores of one backend type."""
    if request.param == "memory":
        return InMemoryStore
    return lambda: PostgresStore(pool=FakePool())
