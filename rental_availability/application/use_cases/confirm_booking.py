import logging

from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.application.interfaces.clock import Clock
from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.application.services.availability_engine import AvailabilityEngine
from rental_availability.domain.entities.booking import Booking, BookingStatus
from rental_availability.domain.errors import BookingNotFoundError, ConflictError

logger = logging.getLogger(__name__)


class ConfirmBookingUseCase:
    """
    Confirma una reserva PENDING reservando su rango de fechas.

    Si el rango ya no está libre la transacción se revierte, la reserva se
    marca CANCELLED en una transacción aparte y se relanza el ConflictError.
    """

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
        try:
            return await self._tx.run_serializable(
                lambda: self._confirm(booking_id), "confirm_booking"
            )
        except ConflictError:
            await self._tx.run_serializable(lambda: self._reject(booking_id), "reject_booking")
            raise

    async def _confirm(self, booking_id: str) -> Booking:
        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)

        expected_version = booking.lock_version
        booking.confirm()
        await self._engine.reserve_range(
            booking.listing_id, booking.start_date, booking.end_date, booking.id
        )
        booking.updated_at = self._clock.now()
        await self._booking_repo.update_status(booking, expected_lock_version=expected_version)
        return booking

    async def _reject(self, booking_id: str) -> None:
        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None or booking.status != BookingStatus.PENDING:
            return
        expected_version = booking.lock_version
        booking.cancel()
        booking.updated_at = self._clock.now()
        await self._booking_repo.update_status(booking, expected_lock_version=expected_version)
        logger.info(
            "Booking cancelled: dates no longer available",
            extra={"booking_id": booking_id, "listing_id": booking.listing_id},
        )
