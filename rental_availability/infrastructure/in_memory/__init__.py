"""Implementaciones in-memory para desarrollo y testing."""

from rental_availability.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from rental_availability.infrastructure.in_memory.booking_store import InMemoryBookingStore
from rental_availability.infrastructure.in_memory.listing_repo import InMemoryListingRepo
from rental_availability.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager

__all__ = [
    # Repositories
    "InMemoryBookingStore",
    "InMemoryBookingRepo",
    "InMemoryListingRepo",
    # Infrastructure
    "InMemoryTransactionManager",
]
