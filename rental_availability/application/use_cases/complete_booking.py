from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.application.interfaces.clock import Clock
from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.domain.entities.booking import Booking
from rental_availability.domain.errors import BookingNotFoundError


class CompleteBookingUseCase:
    """CONFIRMED -> COMPLETED; el rango BOOKED se conserva."""

    def __init__(
        self,
        booking_repo: BookingRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._tx = transaction_manager
        self._clock = clock

    async def execute(self, booking_id: str) -> Booking:
        async with self._tx.start():
            booking = await self._booking_repo.get_by_id(booking_id)
            if booking is None:
                raise BookingNotFoundError(booking_id)
            expected_version = booking.lock_version
            booking.complete()
            booking.updated_at = self._clock.now()
            await self._booking_repo.update_status(booking, expected_lock_version=expected_version)
            return booking
