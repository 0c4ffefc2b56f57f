from rental_availability.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from rental_availability.infrastructure.db.repositories.booking_store_sql import BookingStoreSQL
from rental_availability.infrastructure.db.repositories.listing_repo_sql import ListingRepoSQL

__all__ = ["BookingStoreSQL", "BookingRepoSQL", "ListingRepoSQL"]
