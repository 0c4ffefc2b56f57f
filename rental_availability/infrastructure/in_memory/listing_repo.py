from rental_availability.application.interfaces.listing_repo import ListingRecord, ListingRepo


class InMemoryListingRepo(ListingRepo):
    def __init__(self) -> None:
        self.listings: dict[str, ListingRecord] = {}

    async def get_by_id(self, listing_id: str) -> ListingRecord | None:
        return self.listings.get(listing_id)

    def add(self, listing: ListingRecord) -> None:
        self.listings[listing.id] = listing
