import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.domain.errors import StoreUnavailableError
from rental_availability.infrastructure.db.retry import is_deadlock_error, retry_on_deadlock

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLAlchemyTransactionManager(TransactionManager):
    def __init__(self, session: AsyncSession, max_attempts: int = 3, base_delay: float = 0.1) -> None:
        self._session = session
        self._max_attempts = max_attempts
        self._base_delay = base_delay

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._session.in_transaction():
            yield
        else:
            async with self._session.begin():
                yield

    async def run_serializable(self, func: Callable[[], Awaitable[T]], operation: str = "transaction") -> T:
        if self._session.in_transaction():
            return await func()

        async def attempt() -> T:
            async with self._session.begin():
                # SQLite serializes through BEGIN IMMEDIATE (see engine.py)
                if self._session.get_bind().dialect.name != "sqlite":
                    await self._session.connection(
                        execution_options={"isolation_level": "SERIALIZABLE"}
                    )
                return await func()

        try:
            return await retry_on_deadlock(attempt, self._max_attempts, self._base_delay)
        except DBAPIError as exc:
            if not is_deadlock_error(exc):
                raise
            logger.error(
                "Serialized transaction failed after retries",
                extra={"operation": operation, "attempts": self._max_attempts},
            )
            raise StoreUnavailableError(operation, self._max_attempts) from exc
