"""Services for the medication safety engine.

- KnowledgeRepository: medication and treatment guideline reference lookups
- SafetyMonitor: safety issue tracking, usage statistics and prescription evaluation
"""

from medsafety.services.base import CacheBackedService, LifecycleState, normalize_key, partial_match
from medsafety.services.knowledge_repository import (
    KnowledgeRepository,
    get_knowledge_repository,
    reset_knowledge_repository,
)
from medsafety.services.safety_monitor import (
    SafetyMonitor,
    get_safety_monitor,
    reset_safety_monitor,
)

__all__ = [
    # Lifecycle
    "CacheBackedService",
    "LifecycleState",
    "normalize_key",
    "partial_match",
    # Knowledge repository
    "KnowledgeRepository",
    "get_knowledge_repository",
    "reset_knowledge_repository",
    # Safety monitor
    "SafetyMonitor",
    "get_safety_monitor",
    "reset_safety_monitor",
]
