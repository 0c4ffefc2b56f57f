from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.domain.entities.booking import Booking, BookingStatus
from rental_availability.domain.errors import OptimisticLockError
from rental_availability.infrastructure.db.tables import bookings


def _naive(value):
    return value.replace(tzinfo=None) if value is not None else None


class BookingRepoSQL(BookingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, booking_id: str) -> Booking | None:
        stmt = select(bookings).where(bookings.c.id == booking_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return Booking(
            id=row["id"],
            listing_id=row["listing_id"],
            renter_id=row["renter_id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            status=BookingStatus(row["status"]),
            lock_version=row["lock_version"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def create(self, booking: Booking) -> Booking:
        await self._session.execute(
            insert(bookings).values(
                id=booking.id,
                listing_id=booking.listing_id,
                renter_id=booking.renter_id,
                start_date=booking.start_date,
                end_date=booking.end_date,
                status=booking.status.value,
                lock_version=booking.lock_version,
                created_at=_naive(booking.created_at),
                updated_at=_naive(booking.updated_at),
            )
        )
        return booking

    async def update_status(self, booking: Booking, expected_lock_version: int | None = None) -> None:
        where_clause = [bookings.c.id == booking.id]
        if expected_lock_version is not None:
            where_clause.append(bookings.c.lock_version == expected_lock_version)
        stmt = (
            update(bookings)
            .where(*where_clause)
            .values(
                status=booking.status.value,
                lock_version=booking.lock_version,
                updated_at=_naive(booking.updated_at),
            )
        )
        result = await self._session.execute(stmt)
        if not result.rowcount:
            raise OptimisticLockError(booking.id or "", expected_lock_version or 0)
