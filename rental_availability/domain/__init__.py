"""
Capa de Dominio - Disponibilidad de listings.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.

Estructura:
- entities/: AvailabilityRule, Booking
- value_objects/: DateRange
- errors.py: Excepciones específicas del dominio
"""

from rental_availability.domain.entities import (
    AvailabilityConflict,
    AvailabilityResult,
    AvailabilityRule,
    Booking,
    BookingStatus,
    RuleKind,
)
from rental_availability.domain.errors import (
    BookingNotFoundError,
    ConflictError,
    DomainError,
    InvalidBookingStatusError,
    InvalidRangeError,
    OptimisticLockError,
    RuleNotEditableError,
    RuleNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from rental_availability.domain.value_objects import DateRange

__all__ = [
    # Entities
    "AvailabilityRule",
    "AvailabilityConflict",
    "AvailabilityResult",
    "RuleKind",
    "Booking",
    "BookingStatus",
    # Value Objects
    "DateRange",
    # Errors
    "DomainError",
    "InvalidRangeError",
    "ValidationError",
    "ConflictError",
    "RuleNotFoundError",
    "RuleNotEditableError",
    "BookingNotFoundError",
    "InvalidBookingStatusError",
    "OptimisticLockError",
    "StoreUnavailableError",
]
