"""Run context binding for structured logging.

Binds a correlation ID (and any extra keys) to every log entry emitted
while a digest sweep, or a single planning call, is in progress.

Usage:
    from infrastructure.logging import bind_run_context

    with bind_run_context(run_type="digest_sweep"):
        logger.info("digest_sweep_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_run_context(
    correlation_id: Optional[str] = None,
    run_type: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind run-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique run identifier. Auto-generated if not provided.
        run_type: Kind of run (e.g. "digest_sweep").
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation ID in effect for the block.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    if run_type is not None:
        context["run_type"] = run_type
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_run_context() -> None:
    """Clear all run-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
