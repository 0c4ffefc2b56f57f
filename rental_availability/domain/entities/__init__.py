"""Entidades del dominio de disponibilidad."""

from rental_availability.domain.entities.availability_rule import (
    OCCUPYING_KINDS,
    AvailabilityConflict,
    AvailabilityResult,
    AvailabilityRule,
    RuleKind,
    iter_free_days,
)
from rental_availability.domain.entities.booking import OCCUPYING_STATUSES, Booking, BookingStatus

__all__ = [
    "AvailabilityRule",
    "AvailabilityConflict",
    "AvailabilityResult",
    "RuleKind",
    "OCCUPYING_KINDS",
    "iter_free_days",
    "Booking",
    "BookingStatus",
    "OCCUPYING_STATUSES",
]
