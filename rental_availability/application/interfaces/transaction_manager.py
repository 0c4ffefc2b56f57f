from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Protocol, TypeVar

T = TypeVar("T")


class TransactionManager(Protocol):
    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield

    async def run_serializable(self, func: Callable[[], Awaitable[T]], operation: str = "transaction") -> T:
        """
        Ejecuta `func` dentro de una única transacción serializada.

        Si ya hay una transacción abierta, `func` corre dentro de ella. Los
        fallos transitorios del almacén (deadlock, serialización) se
        reintentan en el adaptador; agotados los reintentos se lanza
        StoreUnavailableError.
        """
        ...
