"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from tests.fakes import FakeEmbeddings, FakeVectorStore


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture()
def embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture()
def store() -> FakeVectorStore:
    return FakeVectorStore()
