"""
System failure error classifications for unrecoverable errors.

These exceptions represent storage or configuration failures that the engine
does not retry; recovery is left to whoever drives the engine.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Database or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class ConfigurationError(SystemFailureError):
    """Configuration that cannot be turned into a working engine."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
