"""
Centralized logging configuration for the interval engine.

This module provides standardized logging configuration using structlog
for all components. Timer, scheduler, persistence and orchestrator code
all log through loggers obtained here so output stays structured and
consistent.
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

    # Progress lines from the CLI go to stdout, so logs use stderr
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s"
    )
    # basicConfig does nothing once the root logger has handlers
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
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

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


def get_timer_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for interval timer events.

    Binding is deferred to first use, so module-level loggers follow a
    later configure_logging call.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for timer lifecycle and ticks
    """
    return structlog.get_logger(
        name,
        subsystem="interval_timer",
        audit_trail=True
    )


def get_scheduler_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for category scheduling decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for scheduler decisions
    """
    return structlog.get_logger(
        name,
        subsystem="scheduler",
        audit_trail=True
    )


def log_category_decision(
    logger: FilteringBoundLogger,
    category: str,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a next-category decision with standardized format.

    Args:
        logger: Structlog logger instance
        category: Category chosen for the next interval
        reason: Rule that produced the decision
        context: Additional context data
    """
    bound_logger = logger.bind(
        category=category,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Next category decided")


def log_state_transition(
    logger: FilteringBoundLogger,
    interval_id: int,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an interval state transition with standardized format.

    Args:
        logger: Structlog logger instance
        interval_id: ID of the interval transitioning
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        interval_id=interval_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
