"""Puertos (interfaces) de la capa de aplicación."""

from rental_availability.application.interfaces.booking_repo import BookingRepo
from rental_availability.application.interfaces.booking_store import BookingStore
from rental_availability.application.interfaces.clock import Clock, FakeClock, SystemClock
from rental_availability.application.interfaces.listing_repo import ListingRecord, ListingRepo
from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.application.interfaces.uuid_generator import (
    FakeUUIDGenerator,
    RealUUIDGenerator,
    UUIDGenerator,
)

__all__ = [
    # Repositories
    "BookingStore",
    "BookingRepo",
    "ListingRepo",
    "ListingRecord",
    # Infrastructure
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "UUIDGenerator",
    "RealUUIDGenerator",
    "FakeUUIDGenerator",
]
