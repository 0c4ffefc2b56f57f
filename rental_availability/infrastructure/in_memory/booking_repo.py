from dataclasses import replace

from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.domain.entities.booking import Booking
from rental_availability.domain.errors import BookingNotFoundError, OptimisticLockError


class InMemoryBookingRepo(BookingRepo):
    def __init__(self) -> None:
        self.bookings: dict[str, Booking] = {}

    async def get_by_id(self, booking_id: str) -> Booking | None:
        booking = self.bookings.get(booking_id)
        return replace(booking) if booking else None

    async def create(self, booking: Booking) -> Booking:
        if booking.id is None:
            raise ValueError("Booking id is required")
        if booking.id in self.bookings:
            raise ValueError("Booking id already exists")
        self.bookings[booking.id] = replace(booking)
        return booking

    async def update_status(self, booking: Booking, expected_lock_version: int | None = None) -> None:
        stored = self.bookings.get(booking.id or "")
        if stored is None:
            raise BookingNotFoundError(booking.id or "")
        if expected_lock_version is not None and stored.lock_version != expected_lock_version:
            raise OptimisticLockError(booking.id or "", expected_lock_version)
        stored.status = booking.status
        stored.lock_version = booking.lock_version
        stored.updated_at = booking.updated_at
