from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.application.interfaces.clock import Clock
from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.application.services.availability_engine import AvailabilityEngine
from rental_availability.domain.entities.booking import Booking
from rental_availability.domain.errors import BookingNotFoundError


class CancelBookingUseCase:
    def __init__(
        self,
        booking_repo: BookingRepo,
        availability_engine: AvailabilityEngine,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._engine = availability_engine
        self._tx = transaction_manager
        self._clock = clock

    async def execute(self, booking_id: str) -> Booking:
        return await self._tx.run_serializable(lambda: self._cancel(booking_id), "cancel_booking")

    async def _cancel(self, booking_id: str) -> Booking:
        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)

        was_occupying = booking.occupies_range
        expected_version = booking.lock_version
        booking.cancel()
        if was_occupying:
            await self._engine.release_range(booking.id)
        booking.updated_at = self._clock.now()
        await self._booking_repo.update_status(booking, expected_lock_version=expected_version)
        return booking
