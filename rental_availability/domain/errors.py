"""Excepciones de dominio para el sistema de disponibilidad."""

from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rental_availability.domain.entities.availability_rule import AvailabilityConflict


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de Rango ===


class InvalidRangeError(DomainError):
    """Rango de fechas inválido (fin <= inicio, fecha pasada o no parseable)."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_DATE_RANGE")


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validation failed on '{field}': {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field


# === Errores de Disponibilidad ===


class ConflictError(DomainError):
    """El rango solicitado se superpone con reglas BOOKED/BLOCKED existentes."""

    def __init__(
        self,
        listing_id: str,
        start_date: date,
        end_date: date,
        conflicts: list["AvailabilityConflict"] | None = None,
        message: str | None = None,
    ):
        super().__init__(
            message=message
            or f"Dates {start_date.isoformat()} -> {end_date.isoformat()} "
            f"are not available for listing {listing_id}",
            code="AVAILABILITY_CONFLICT",
        )
        self.listing_id = listing_id
        self.start_date = start_date
        self.end_date = end_date
        self.conflicts = list(conflicts or [])


class RuleNotFoundError(DomainError):
    """La regla de disponibilidad no existe."""

    def __init__(self, rule_id: str):
        super().__init__(
            message=f"Availability rule not found: {rule_id}",
            code="RULE_NOT_FOUND",
        )
        self.rule_id = rule_id


class RuleNotEditableError(DomainError):
    """Las reglas BOOKED solo las crea/borra el ciclo de vida de la reserva."""

    def __init__(self, rule_id: str | None, operation: str):
        target = f"rule {rule_id}" if rule_id else "a BOOKED rule"
        super().__init__(
            message=f"Cannot {operation} {target}: BOOKED rules are managed by bookings",
            code="RULE_NOT_EDITABLE",
        )
        self.rule_id = rule_id
        self.operation = operation


# === Errores de Reserva ===


class BookingNotFoundError(DomainError):
    """La reserva no existe."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"Booking not found: {booking_id}",
            code="BOOKING_NOT_FOUND",
        )
        self.booking_id = booking_id


class InvalidBookingStatusError(DomainError):
    """El estado de la reserva no permite la operación."""

    def __init__(self, current_status: str, expected_status: str | list[str], operation: str):
        expected = expected_status if isinstance(expected_status, str) else ", ".join(expected_status)
        super().__init__(
            message=f"Cannot {operation}: current status '{current_status}', expected '{expected}'",
            code="INVALID_BOOKING_STATUS",
        )
        self.current_status = current_status
        self.expected_status = expected_status
        self.operation = operation


# === Errores de Infraestructura ===


class StoreUnavailableError(DomainError):
    """El almacén transaccional falló de forma transitoria tras agotar reintentos."""

    def __init__(self, operation: str, attempts: int):
        super().__init__(
            message=f"Store unavailable during {operation} after {attempts} attempts",
            code="STORE_UNAVAILABLE",
        )
        self.operation = operation
        self.attempts = attempts


class OptimisticLockError(DomainError):
    """Conflicto de concurrencia al actualizar la reserva."""

    def __init__(self, booking_id: str, expected_version: int):
        super().__init__(
            message=f"Concurrent update on booking {booking_id}: expected version {expected_version}",
            code="OPTIMISTIC_LOCK_ERROR",
        )
        self.booking_id = booking_id
        self.expected_version = expected_version
