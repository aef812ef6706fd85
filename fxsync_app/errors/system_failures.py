"""
System failure error classifications for unrecoverable errors.

These exceptions represent programming or contract violations that no
fallback can paper over. They are the only errors allowed to reach the
orchestrator and surface as a degraded connection indicator.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class FallbackContractError(SystemFailureError):
    """Fallback generator produced data violating the entity invariants."""

    def __init__(self, message: str, kind: Optional[str] = None,
                 pair: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.kind = kind
        self.pair = pair


class StateTransitionError(SystemFailureError):
    """Invalid connection state transition."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class ConfigurationError(SystemFailureError):
    """Effective configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
