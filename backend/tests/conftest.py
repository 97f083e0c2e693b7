"""Pytest configuration and fixtures for engine tests."""

from collections.abc import Iterator

import pytest

from medsafety.core.cache import InMemoryCache, reset_cache, set_cache
from medsafety.services.knowledge_repository import KnowledgeRepository, reset_knowledge_repository
from medsafety.services.safety_monitor import SafetyMonitor, reset_safety_monitor


@pytest.fixture(autouse=True)
def reset_singletons() -> Iterator[None]:
    """Reset engine singletons and the installed cache around each test."""
    reset_cache()
    reset_knowledge_repository()
    reset_safety_monitor()
    yield
    reset_cache()
    reset_knowledge_repository()
    reset_safety_monitor()


@pytest.fixture
def memory_cache() -> InMemoryCache:
    """A fresh process-local cache installed as the singleton backend.

    Keeps tests off Redis: anything resolving ``get_cache()`` gets this.
    """
    cache = InMemoryCache()
    set_cache(cache)
    return cache


@pytest.fixture
def repository(memory_cache: InMemoryCache) -> KnowledgeRepository:
    """Knowledge repository backed by the in-memory cache."""
    return KnowledgeRepository(cache=memory_cache)


@pytest.fixture
def monitor(memory_cache: InMemoryCache, repository: KnowledgeRepository) -> SafetyMonitor:
    """Safety monitor backed by the in-memory cache."""
    return SafetyMonitor(cache=memory_cache, repository=repository)
