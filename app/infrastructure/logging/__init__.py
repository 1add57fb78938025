"""Structured logging infrastructure.

Centralized logging configuration and utilities for the digest engine
using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module
    - bind_run_context(): Context manager for run-scoped logging
    - get_correlation_id(): Get current correlation ID from context
    - clear_run_context(): Clear all run context

Example:
    from infrastructure.logging import get_module_logger, bind_run_context

    logger = get_module_logger()

    with bind_run_context(run_type="digest_sweep"):
        logger.info("digest_sweep_started")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)
from infrastructure.logging.context import (
    bind_run_context,
    get_correlation_id,
    clear_run_context,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_run_context",
    "get_correlation_id",
    "clear_run_context",
]
