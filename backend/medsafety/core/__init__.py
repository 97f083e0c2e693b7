"""Core engine configuration and utilities."""

from medsafety.core.audit import AuditAction, AuditEvent, log_audit, log_safety_decision
from medsafety.core.cache import (
    CacheBackend,
    InMemoryCache,
    RedisCache,
    get_cache,
    reset_cache,
    set_cache,
)
from medsafety.core.config import settings
from medsafety.core.errors import CacheError, EngineError, EngineInitializationError

__all__ = [
    # Config
    "settings",
    # Cache
    "CacheBackend",
    "InMemoryCache",
    "RedisCache",
    "get_cache",
    "reset_cache",
    "set_cache",
    # Errors
    "CacheError",
    "EngineError",
    "EngineInitializationError",
    # Audit
    "AuditAction",
    "AuditEvent",
    "log_audit",
    "log_safety_decision",
]
