"""
Database retry utilities for handling transient failures.

Provides helpers for automatically retrying database transactions that
fail due to deadlocks, serialization failures or lock timeouts.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# MySQL error codes
MYSQL_DEADLOCK_ERROR = "1213"
MYSQL_LOCK_WAIT_TIMEOUT = "1205"

# PostgreSQL SQLSTATE codes
PG_SERIALIZATION_FAILURE = "40001"
PG_DEADLOCK_DETECTED = "40P01"

TRANSIENT_MARKERS = (
    MYSQL_DEADLOCK_ERROR,
    MYSQL_LOCK_WAIT_TIMEOUT,
    PG_SERIALIZATION_FAILURE,
    PG_DEADLOCK_DETECTED,
    "could not serialize access",
    "deadlock detected",
    "database is locked",
)


def is_deadlock_error(error: Exception) -> bool:
    """
    Check if an exception is a transient concurrency error.

    Args:
        error: The exception to check

    Returns:
        True if the error is a deadlock / serialization failure that should be retried
    """
    if isinstance(error, (OperationalError, DBAPIError)):
        error_str = str(error)
        sqlstate = getattr(getattr(error, "orig", None), "sqlstate", None)
        if sqlstate in (PG_SERIALIZATION_FAILURE, PG_DEADLOCK_DETECTED):
            return True
        return any(marker in error_str for marker in TRANSIENT_MARKERS)
    return False


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """
    Retry a function if it fails due to a database deadlock.

    Uses exponential backoff: base_delay * (2 ** attempt)

    Args:
        func: The async function to execute. It must open its own transaction
            so each attempt starts from a clean state.
        max_attempts: Maximum number of attempts (default: 3)
        base_delay: Base delay in seconds for exponential backoff (default: 0.1)

    Returns:
        The result of the function call

    Raises:
        The original exception if max attempts exceeded or non-deadlock error
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except Exception as e:
            if not is_deadlock_error(e):
                raise

            if attempt < max_attempts - 1:
                delay = base_delay * (2 ** attempt)

                logger.warning(
                    "Database deadlock detected, retrying",
                    extra={
                        "attempt": attempt + 1,
                        "max_attempts": max_attempts,
                        "retry_delay": delay,
                        "error": str(e),
                    }
                )

                await asyncio.sleep(delay)
            else:
                logger.error(
                    "Database deadlock persists after max retries",
                    extra={
                        "attempts": max_attempts,
                        "error": str(e),
                    }
                )
                raise

    raise RuntimeError("retry_on_deadlock requires max_attempts >= 1")
