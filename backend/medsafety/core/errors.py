"""Exceptions raised by the medication safety engine."""


class EngineError(Exception):
    """Base class for engine errors."""


class CacheError(EngineError):
    """A cache backend could not complete a read or write."""


class EngineInitializationError(EngineError):
    """A component failed to load its indices on first use.

    The component returns to the uninitialized state, so calling
    ``initialize()`` again retries the load.
    """
