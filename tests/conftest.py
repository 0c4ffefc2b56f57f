"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Motor de disponibilidad sobre adaptadores in-memory (reloj y UUIDs fijos)
- Base de datos SQLite (aiosqlite) para los adaptadores SQL
- Cliente HTTP de prueba (httpx.AsyncClient sobre ASGITransport)
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from rental_availability.api.dependencies import _in_memory_bundle
from rental_availability.application.interfaces.clock import FakeClock
from rental_availability.application.interfaces.listing_repo import ListingRecord
from rental_availability.application.interfaces.uuid_generator import FakeUUIDGenerator
from rental_availability.application.services.availability_engine import AvailabilityEngine
from rental_availability.application.use_cases import (
    CancelBookingUseCase,
    CompleteBookingUseCase,
    ConfirmBookingUseCase,
    CreateBookingUseCase,
)
from rental_availability.config import Settings, get_settings
from rental_availability.infrastructure.db.engine import build_engine, build_sessionmaker
from rental_availability.infrastructure.db.tables import metadata
from rental_availability.infrastructure.in_memory import (
    InMemoryBookingRepo,
    InMemoryBookingStore,
    InMemoryListingRepo,
    InMemoryTransactionManager,
)

# 2024-05-20 12:00 UTC: anterior a todas las fechas de los escenarios de junio
FIXED_NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)

LISTING_ID = "L1"


# ============================================================================
# FIXTURES IN-MEMORY
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW)


@pytest.fixture
def uuid_generator() -> FakeUUIDGenerator:
    return FakeUUIDGenerator(prefix="id")


@pytest.fixture
def booking_store(uuid_generator, clock) -> InMemoryBookingStore:
    return InMemoryBookingStore(uuid_generator=uuid_generator, clock=clock)


@pytest.fixture
def booking_repo() -> InMemoryBookingRepo:
    return InMemoryBookingRepo()


@pytest.fixture
def listing_repo() -> InMemoryListingRepo:
    repo = InMemoryListingRepo()
    repo.add(ListingRecord(id=LISTING_ID, owner_id="owner-1"))
    return repo


@pytest.fixture
def tx_manager() -> InMemoryTransactionManager:
    return InMemoryTransactionManager()


@pytest.fixture
def availability_engine(booking_store, tx_manager, listing_repo, clock) -> AvailabilityEngine:
    return AvailabilityEngine(
        booking_store=booking_store,
        transaction_manager=tx_manager,
        listing_repo=listing_repo,
        clock=clock,
    )


@pytest.fixture
def use_cases(booking_repo, availability_engine, tx_manager, uuid_generator, clock):
    """Casos de uso de reservas cableados sobre los mismos adaptadores in-memory."""
    return {
        "create_booking": CreateBookingUseCase(
            booking_repo=booking_repo,
            availability_engine=availability_engine,
            transaction_manager=tx_manager,
            uuid_generator=uuid_generator,
            clock=clock,
        ),
        "confirm_booking": ConfirmBookingUseCase(
            booking_repo=booking_repo,
            availability_engine=availability_engine,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "cancel_booking": CancelBookingUseCase(
            booking_repo=booking_repo,
            availability_engine=availability_engine,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "complete_booking": CompleteBookingUseCase(
            booking_repo=booking_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
    }


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================

@pytest_asyncio.fixture
async def sql_engine():
    """
    Engine SQLite in-memory con todas las tablas creadas.
    Se crea uno nuevo por test para aislamiento.
    """
    engine = build_engine(Settings(database_url="sqlite+aiosqlite:///:memory:", use_in_memory=False))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sql_session(sql_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = build_sessionmaker(sql_engine)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def file_sql_engine(tmp_path):
    """
    Engine SQLite sobre archivo: cada sesión obtiene su propia conexión,
    necesario para probar escritores concurrentes.
    """
    url = f"sqlite+aiosqlite:///{tmp_path / 'availability.db'}"
    engine = build_engine(Settings(database_url=url, use_in_memory=False))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================

@pytest_asyncio.fixture
async def api_client() -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP contra la app en modo in-memory.
    Cada test arranca con un almacén vacío.
    """
    from rental_availability.main import app

    _in_memory_bundle.cache_clear()
    app.dependency_overrides[get_settings] = lambda: Settings(use_in_memory=True, reject_past_dates=True)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    _in_memory_bundle.cache_clear()
