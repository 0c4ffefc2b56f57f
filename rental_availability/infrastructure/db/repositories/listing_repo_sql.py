from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rental_availability.application.interfaces.listing_repo import ListingRecord, ListingRepo
from rental_availability.infrastructure.db.tables import listings


class ListingRepoSQL(ListingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, listing_id: str) -> ListingRecord | None:
        result = await self._session.execute(select(listings).where(listings.c.id == listing_id).limit(1))
        row = result.mappings().first()
        if not row:
            return None
        return ListingRecord(
            id=row["id"],
            owner_id=row["owner_id"],
            advance_notice_hours=row["advance_notice_hours"] or 0,
        )
