"""Shared cache-or-seed lifecycle for engine components.

Both components keep their indices in memory and populate them lazily:
the first ``initialize()`` call reads the cache and falls back to seed
data when the cache is empty. The lifecycle is

    UNINITIALIZED -> INITIALIZING -> READY

with INITIALIZING backed by a single shared task, so concurrent first
callers all await the same load. A failed load returns the component to
UNINITIALIZED and re-raises, leaving the next call free to retry.
"""

from abc import ABC, abstractmethod
import asyncio
from enum import Enum
import logging
import re

from pydantic import ValidationError

from medsafety.core.cache import CacheBackend
from medsafety.core.errors import CacheError, EngineInitializationError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_key(value: str) -> str:
    """Normalize a lookup key: case-folded, trimmed, inner whitespace collapsed."""
    return _WHITESPACE.sub(" ", value.strip()).casefold()


def partial_match(a: str, b: str) -> bool:
    """Case-insensitive substring containment in either direction."""
    a_norm = normalize_key(a)
    b_norm = normalize_key(b)
    if not a_norm or not b_norm:
        return False
    return a_norm in b_norm or b_norm in a_norm


class LifecycleState(str, Enum):
    """Initialization state of a cache-backed component."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class CacheBackedService(ABC):
    """Base class for components whose indices live in the cache.

    Subclasses implement ``_load()``, which must fully (re)build the
    in-memory indices from the cache or from seed data.
    """

    def __init__(self, cache: CacheBackend) -> None:
        self._cache = cache
        self._state = LifecycleState.UNINITIALIZED
        self._pending: asyncio.Task | None = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is LifecycleState.READY

    async def initialize(self) -> None:
        """Load indices once; redundant and concurrent calls are safe."""
        if self._state is LifecycleState.READY:
            return
        if self._pending is None:
            self._state = LifecycleState.INITIALIZING
            self._pending = asyncio.ensure_future(self._run_load())
        # shield: a cancelled waiter must not cancel the shared load
        await asyncio.shield(self._pending)

    async def _run_load(self) -> None:
        name = type(self).__name__
        try:
            await self._load()
        except (CacheError, ValidationError) as e:
            self._state = LifecycleState.UNINITIALIZED
            self._pending = None
            logger.error(f"Failed to initialize {name}: {e}")
            raise EngineInitializationError(f"{name} could not load its data: {e}") from e
        except BaseException:
            self._state = LifecycleState.UNINITIALIZED
            self._pending = None
            raise
        self._state = LifecycleState.READY

    @abstractmethod
    async def _load(self) -> None:
        """Rebuild the in-memory indices from the cache or seed data."""

    async def _persist(self, key: str, value: list, ttl: int | None) -> bool:
        """Write a collection to the cache.

        In-memory state stays authoritative when the write fails; the
        failure is logged and the next successful write catches up.

        Returns:
            True if the cache accepted the write.
        """
        try:
            await self._cache.set(key, value, ttl)
        except CacheError as e:
            logger.warning(f"Failed to persist '{key}' ({len(value)} entries) to cache: {e}")
            return False
        return True
