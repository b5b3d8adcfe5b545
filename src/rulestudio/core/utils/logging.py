"""
Structured logging utilities.

Provides a context manager for structured operation logging
with timing, error tracking, and metadata.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)


@asynccontextmanager
async def log_operation(
    operation: str,
    subject_ids: dict[str, str] | None = None,
    **context: Any,
) -> AsyncIterator[None]:
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.
    Cancellation is logged as well and re-raised untouched.

    Args:
        operation: Name of the operation being performed
        subject_ids: Dictionary of subject identifiers (e.g., {"rule_id": "force_cast"})
        **context: Additional context to include in logs

    Example:
        async with log_operation("rule_simulation", subject_ids={"rule_id": rule_id}):
            result = await run_lint(...)
    """
    start_time = time.monotonic()
    log_context = {
        "operation": operation,
        **(subject_ids or {}),
        **context,
    }

    logger.info(f"🚀 Starting {operation}", extra=log_context)

    try:
        yield
    except BaseException as e:
        latency_ms = int((time.monotonic() - start_time) * 1000)
        if isinstance(e, Exception):
            logger.error(
                f"❌ {operation} failed after {latency_ms}ms",
                extra={**log_context, "error": str(e), "latency_ms": latency_ms},
                exc_info=True,
            )
        else:
            logger.warning(
                f"⚠️ {operation} cancelled after {latency_ms}ms",
                extra={**log_context, "latency_ms": latency_ms},
            )
        raise
    else:
        latency_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            f"✅ {operation} completed in {latency_ms}ms",
            extra={**log_context, "latency_ms": latency_ms},
        )
