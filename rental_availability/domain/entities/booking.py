"""Entidad Booking - subconjunto de la reserva relevante para disponibilidad."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from rental_availability.domain.errors import InvalidBookingStatusError


class BookingStatus(str, Enum):
    """Estados posibles de una reserva."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Solo estas reservas ocupan fechas; PENDING no es vinculante
OCCUPYING_STATUSES: tuple[BookingStatus, ...] = (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)


@dataclass
class Booking:
    """
    Reserva de un renter sobre un listing.

    Ciclo de vida: PENDING -> CONFIRMED | CANCELLED,
    CONFIRMED -> CANCELLED | COMPLETED.
    """

    listing_id: str
    renter_id: str
    start_date: date
    end_date: date
    id: str | None = None
    status: BookingStatus = BookingStatus.PENDING
    lock_version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades calculadas ===

    @property
    def occupies_range(self) -> bool:
        """Verifica si la reserva ocupa su rango de fechas."""
        return self.status in OCCUPYING_STATUSES

    # === Métodos de negocio ===

    def confirm(self) -> None:
        """Confirma la reserva (acción del propietario o instant-book)."""
        self._require(BookingStatus.PENDING, "confirm booking")
        self.status = BookingStatus.CONFIRMED
        self.lock_version += 1

    def cancel(self) -> None:
        """Cancela la reserva."""
        self._require([BookingStatus.PENDING, BookingStatus.CONFIRMED], "cancel booking")
        self.status = BookingStatus.CANCELLED
        self.lock_version += 1

    def complete(self) -> None:
        """Marca la reserva como completada tras el periodo de renta."""
        self._require(BookingStatus.CONFIRMED, "complete booking")
        self.status = BookingStatus.COMPLETED
        self.lock_version += 1

    def _require(self, expected: BookingStatus | list[BookingStatus], operation: str) -> None:
        allowed = expected if isinstance(expected, list) else [expected]
        if self.status not in allowed:
            raise InvalidBookingStatusError(
                current_status=self.status.value,
                expected_status=[s.value for s in allowed],
                operation=operation,
            )
