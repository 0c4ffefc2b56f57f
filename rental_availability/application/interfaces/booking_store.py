"""Interface BookingStore - puerto para reglas de disponibilidad."""

from collections.abc import Sequence
from datetime import date

from rental_availability.domain.entities.availability_rule import AvailabilityRule, RuleKind


class BookingStore:
    """
    Puerto de lectura/escritura de reglas de disponibilidad.

    Todas las consultas de solapamiento usan intervalos semiabiertos:
    `existing.start < query.end AND existing.end > query.start`.
    """

    async def find_overlapping_ranges(
        self,
        listing_id: str,
        start: date,
        end: date,
        kinds: Sequence[RuleKind] | None = None,
        for_update: bool = False,
    ) -> list[AvailabilityRule]:
        """
        Retorna las reglas del listing que intersectan [start, end).

        Args:
            listing_id: Listing consultado.
            start: Inicio de la ventana.
            end: Fin (exclusivo) de la ventana.
            kinds: Filtra por tipo de regla; None retorna todos los tipos.
            for_update: Bloquea las filas leídas cuando el almacén lo soporta.

        Returns:
            Reglas ordenadas por start_date ascendente.
        """
        raise NotImplementedError

    async def find_booked_range(self, booking_id: str) -> AvailabilityRule | None:
        """Retorna la regla BOOKED que pertenece a la reserva, si existe."""
        raise NotImplementedError

    async def insert_booked_range(
        self, listing_id: str, start: date, end: date, booking_id: str
    ) -> AvailabilityRule:
        raise NotImplementedError

    async def delete_booked_range(self, booking_id: str) -> int:
        """Elimina la regla BOOKED de la reserva; retorna filas borradas."""
        raise NotImplementedError

    async def insert_blocked_range(
        self, listing_id: str, start: date, end: date, reason: str | None = None
    ) -> AvailabilityRule:
        raise NotImplementedError

    async def insert_rule(self, rule: AvailabilityRule) -> AvailabilityRule:
        raise NotImplementedError

    async def get_rule(self, rule_id: str) -> AvailabilityRule | None:
        raise NotImplementedError

    async def update_rule(self, rule: AvailabilityRule) -> AvailabilityRule:
        raise NotImplementedError

    async def delete_rule(self, rule_id: str) -> None:
        raise NotImplementedError

    async def find_rule_starting_on(
        self, listing_id: str, day: date, kinds: Sequence[RuleKind]
    ) -> AvailabilityRule | None:
        raise NotImplementedError
