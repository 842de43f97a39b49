"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import pytest

from authentication.in_memory_credential_store import InMemoryCredentialStore
from cache.in_memory_cache import InMemoryCacheStore
from history.in_memory_chat_history import InMemoryChatHistoryStore
from models.config import ResponseCacheConfiguration
from tests.unit.utils.fakes import FakeGenerator, FakeRetriever


@pytest.fixture(name="generator")
def generator_fixture() -> FakeGenerator:
    """Fake response generator."""
    return FakeGenerator()


@pytest.fixture(name="retriever")
def retriever_fixture() -> FakeRetriever:
    """Fake retriever."""
    return FakeRetriever()


@pytest.fixture(name="credential_store")
def credential_store_fixture() -> InMemoryCredentialStore:
    """Empty in-memory credential store."""
    return InMemoryCredentialStore()


@pytest.fixture(name="cache_store")
def cache_store_fixture() -> InMemoryCacheStore:
    """Empty in-memory response cache with admission threshold 2."""
    return InMemoryCacheStore(
        ResponseCacheConfiguration(type="memory", admission_threshold=2)
    )


@pytest.fixture(name="history_store")
def history_store_fixture() -> InMemoryChatHistoryStore:
    """Empty in-memory chat history store."""
    return InMemoryChatHistoryStore()
