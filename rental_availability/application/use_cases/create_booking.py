from datetime import date

from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.application.interfaces.clock import Clock
from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.application.interfaces.uuid_generator import UUIDGenerator
from rental_availability.application.services.availability_engine import AvailabilityEngine
from rental_availability.domain.entities.booking import Booking, BookingStatus
from rental_availability.domain.errors import ConflictError


class CreateBookingUseCase:
    """Registra una solicitud PENDING tras una verificación no vinculante."""

    def __init__(
        self,
        booking_repo: BookingRepo,
        availability_engine: AvailabilityEngine,
        transaction_manager: TransactionManager,
        uuid_generator: UUIDGenerator,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._engine = availability_engine
        self._tx = transaction_manager
        self._uuid = uuid_generator
        self._clock = clock

    async def execute(
        self, listing_id: str, renter_id: str, start_date: date, end_date: date
    ) -> Booking:
        async with self._tx.start():
            result = await self._engine.check_availability(listing_id, start_date, end_date)
            if not result.available:
                raise ConflictError(listing_id, start_date, end_date, result.conflicts)

            now = self._clock.now()
            booking = Booking(
                id=self._uuid.generate_uuid(),
                listing_id=listing_id,
                renter_id=renter_id,
                start_date=start_date,
                end_date=end_date,
                status=BookingStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            return await self._booking_repo.create(booking)
