from rental_availability.domain.entities.booking import Booking


class BookingRepo:
    async def get_by_id(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    async def create(self, booking: Booking) -> Booking:
        raise NotImplementedError

    async def update_status(self, booking: Booking, expected_lock_version: int | None = None) -> None:
        raise NotImplementedError
