from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rental_availability.api.deps import AsyncSessionLocal
from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.application.interfaces.booking_store import BookingStore
from rental_availability.application.interfaces.clock import Clock, SystemClock
from rental_availability.application.interfaces.listing_repo import ListingRepo
from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.application.interfaces.uuid_generator import RealUUIDGenerator, UUIDGenerator
from rental_availability.application.services.availability_engine import AvailabilityEngine
from rental_availability.application.use_cases.cancel_booking import CancelBookingUseCase
from rental_availability.application.use_cases.complete_booking import CompleteBookingUseCase
from rental_availability.application.use_cases.confirm_booking import ConfirmBookingUseCase
from rental_availability.application.use_cases.create_booking import CreateBookingUseCase
from rental_availability.config import Settings, get_settings
from rental_availability.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from rental_availability.infrastructure.db.repositories.booking_store_sql import BookingStoreSQL
from rental_availability.infrastructure.db.repositories.listing_repo_sql import ListingRepoSQL
from rental_availability.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from rental_availability.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from rental_availability.infrastructure.in_memory.booking_store import InMemoryBookingStore
from rental_availability.infrastructure.in_memory.listing_repo import InMemoryListingRepo
from rental_availability.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def _in_memory_bundle():
    clock = SystemClock()
    uuid_generator = RealUUIDGenerator()
    return {
        "booking_store": InMemoryBookingStore(uuid_generator=uuid_generator, clock=clock),
        "booking_repo": InMemoryBookingRepo(),
        "listing_repo": InMemoryListingRepo(),
        "tx_manager": InMemoryTransactionManager(),
        "uuid_generator": uuid_generator,
        "clock": clock,
    }


def build_use_cases(
    settings: Settings,
    booking_store: BookingStore,
    booking_repo: BookingRepo,
    listing_repo: ListingRepo,
    tx_manager: TransactionManager,
    uuid_generator: UUIDGenerator,
    clock: Clock,
) -> dict:
    engine = AvailabilityEngine(
        booking_store=booking_store,
        transaction_manager=tx_manager,
        listing_repo=listing_repo,
        clock=clock if settings.reject_past_dates else None,
    )
    return {
        "availability_engine": engine,
        "create_booking": CreateBookingUseCase(
            booking_repo=booking_repo,
            availability_engine=engine,
            transaction_manager=tx_manager,
            uuid_generator=uuid_generator,
            clock=clock,
        ),
        "confirm_booking": ConfirmBookingUseCase(
            booking_repo=booking_repo,
            availability_engine=engine,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "cancel_booking": CancelBookingUseCase(
            booking_repo=booking_repo,
            availability_engine=engine,
            transaction_manager=tx_manager,
            clock=clock,
        ),
        "complete_booking": CompleteBookingUseCase(
            booking_repo=booking_repo,
            transaction_manager=tx_manager,
            clock=clock,
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        bundle = _in_memory_bundle()
        return build_use_cases(settings, **bundle)

    if not session:
        raise RuntimeError("DB session not available")

    clock = SystemClock()
    uuid_generator = RealUUIDGenerator()
    return build_use_cases(
        settings,
        booking_store=BookingStoreSQL(session, uuid_generator, clock),
        booking_repo=BookingRepoSQL(session),
        listing_repo=ListingRepoSQL(session),
        tx_manager=SQLAlchemyTransactionManager(
            session,
            max_attempts=settings.reserve_max_attempts,
            base_delay=settings.reserve_retry_base_delay,
        ),
        uuid_generator=uuid_generator,
        clock=clock,
    )
