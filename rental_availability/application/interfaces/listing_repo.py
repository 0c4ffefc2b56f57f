from dataclasses import dataclass


@dataclass
class ListingRecord:
    id: str
    owner_id: str | None = None
    advance_notice_hours: int = 0


class ListingRepo:
    async def get_by_id(self, listing_id: str) -> ListingRecord | None:
        raise NotImplementedError
