"""
Error classification system for the dashboard synchronization core.

Errors fall into three categories: transport failures and malformed responses,
both recovered at the data source boundary with fallback data, and system
failures such as a broken fallback contract, which reach the orchestrator.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
    PartialDataError,
    MissingDataError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    FallbackContractError,
    StateTransitionError,
    ConfigurationError,
)
from .recovery import RecoverableError, TransportError

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "PartialDataError",
    "MissingDataError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "FallbackContractError",
    "StateTransitionError",
    "ConfigurationError",
    # Recovery Categories
    "RecoverableError",
    "TransportError",
]
