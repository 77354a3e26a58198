"""
Exception hierarchy for model factory operations.

All factory errors share the structured shape used across the application:
a human readable message, a stable error code and a details mapping that can
be logged or rendered as-is. Lookup failures are raised synchronously and
abort the whole generation call; ORM errors raised while persisting are not
wrapped and propagate unchanged.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class FactoryError(Exception):
    """Base exception for model factory operations."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize factory error with structured error information.

        Args:
            message: Human-readable error description
            error_code: Optional error code for programmatic handling
            details: Optional context about the failed lookup
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format for logging."""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'details': self.details,
            'timestamp': self.timestamp.isoformat(),
        }


def _model_name(model: Any) -> str:
    return getattr(model, '__qualname__', None) or str(model)


class UnknownDefinition(FactoryError):
    """Raised when no definition is registered for a model under a name."""

    def __init__(self, model: Any, name: str) -> None:
        self.model = model
        self.name = name
        super().__init__(
            f"Unable to locate factory with name [{name}] [{_model_name(model)}].",
            error_code='UNKNOWN_DEFINITION',
            details={'model': _model_name(model), 'name': name},
        )


class UnknownState(FactoryError):
    """Raised when an active state has neither attributes nor callbacks."""

    def __init__(self, model: Any, state: str) -> None:
        self.model = model
        self.state = state
        super().__init__(
            f"Unable to locate [{state}] state for [{_model_name(model)}].",
            error_code='UNKNOWN_STATE',
            details={'model': _model_name(model), 'state': state},
        )


class UnknownModel(FactoryError):
    """Raised when a model name does not match any registered model."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"No factory is registered for model [{name}].",
            error_code='UNKNOWN_MODEL',
            details={'model': name},
        )


class UnknownConnection(FactoryError):
    """Raised when a persistence connection name has no configured bind."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Database connection [{name}] is not configured.",
            error_code='UNKNOWN_CONNECTION',
            details={'connection': name},
        )


__all__ = [
    'FactoryError',
    'UnknownDefinition',
    'UnknownState',
    'UnknownModel',
    'UnknownConnection',
]
