import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import TypeVar

from rental_availability.application.interfaces.transaction_manager import TransactionManager

T = TypeVar("T")

# Manager whose serialized section the current task is running in
_active_manager: ContextVar[object | None] = ContextVar("in_memory_active_tx", default=None)


class InMemoryTransactionManager(TransactionManager):
    """
    Transacciones in-memory.

    `run_serializable` serializa a los llamadores con un asyncio.Lock, que
    cumple el papel del aislamiento SERIALIZABLE del almacén real. Las
    llamadas anidadas desde la misma tarea corren dentro de la sección ya
    adquirida.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield

    async def run_serializable(self, func: Callable[[], Awaitable[T]], operation: str = "transaction") -> T:
        if _active_manager.get() is self:
            return await func()
        async with self._lock:
            token = _active_manager.set(self)
            try:
                return await func()
            finally:
                _active_manager.reset(token)
