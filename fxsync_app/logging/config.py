"""
Centralized logging configuration for the FXSync dashboard core.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the package should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(log_level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_source_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for remote data source clients.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the data source subsystem
    """
    return get_logger(name).bind(subsystem="data_source")


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger specifically configured for connection state transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    return get_logger(name).bind(
        subsystem="connection_state",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a connection state transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")


def log_fallback_used(
    logger: FilteringBoundLogger,
    kind: str,
    pair: Optional[str],
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the substitution of synthetic data for a failed remote fetch.

    Args:
        logger: Structlog logger instance
        kind: Source kind that failed (rates, history, news, forecast)
        pair: Currency pair the fetch targeted, if any
        reason: Short description of the failure
        context: Additional context data
    """
    bound_logger = logger.bind(
        source_kind=kind,
        pair=pair,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Using fallback data")
