"""Entidad AvailabilityRule - ventana de calendario de un listing."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from rental_availability.domain.value_objects.date_range import DateRange


class RuleKind(str, Enum):
    """Tipos de regla de disponibilidad."""

    AVAILABLE = "AVAILABLE"
    BLOCKED = "BLOCKED"
    BOOKED = "BOOKED"


# Tipos que ocupan el calendario para efectos de conflicto
OCCUPYING_KINDS: tuple[RuleKind, ...] = (RuleKind.BLOCKED, RuleKind.BOOKED)

CONFLICT_REASONS = {
    RuleKind.BLOCKED: "Blocked by availability rule",
    RuleKind.BOOKED: "Already booked",
}


@dataclass
class AvailabilityRule:
    """
    Regla de disponibilidad para un listing.

    Las reglas BOOKED se derivan de una reserva confirmada (booking_id) y
    no son editables por el propietario.
    """

    listing_id: str
    start_date: date
    end_date: date
    kind: RuleKind
    id: str | None = None
    booking_id: str | None = None
    reason: str | None = None
    created_at: datetime | None = None

    @property
    def date_range(self) -> DateRange:
        """Retorna el rango como Value Object."""
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def is_booked(self) -> bool:
        return self.kind == RuleKind.BOOKED

    @property
    def occupies(self) -> bool:
        """Verifica si la regla bloquea el calendario."""
        return self.kind in OCCUPYING_KINDS

    def overlaps(self, window: DateRange) -> bool:
        return self.start_date < window.end and self.end_date > window.start


@dataclass(frozen=True)
class AvailabilityConflict:
    """Rango que impide reservar la ventana consultada."""

    id: str
    start_date: date
    end_date: date
    reason: str
    kind: str | None = None

    @classmethod
    def from_rule(cls, rule: AvailabilityRule) -> "AvailabilityConflict":
        return cls(
            id=rule.id or "",
            start_date=rule.start_date,
            end_date=rule.end_date,
            reason=CONFLICT_REASONS.get(rule.kind, "Unavailable"),
            kind=rule.kind.value,
        )


@dataclass
class AvailabilityResult:
    """Resultado de una consulta de disponibilidad."""

    available: bool
    conflicts: list[AvailabilityConflict] = field(default_factory=list)


def iter_free_days(window: DateRange, rules: Iterable[AvailabilityRule]) -> Iterator[date]:
    """
    Itera los días de `window` no cubiertos por reglas BLOCKED/BOOKED.

    Función pura del conjunto de reglas: cada llamada produce la misma
    secuencia para las mismas reglas.
    """
    occupied = sorted(
        (rule.date_range for rule in rules if rule.occupies and rule.overlaps(window)),
        key=lambda r: r.start,
    )
    index = 0
    for day in window.days():
        # Los rangos que terminan antes del día ya no pueden cubrir días posteriores
        while index < len(occupied) and occupied[index].end <= day:
            index += 1
        if not any(r.contains(day) for r in occupied[index:]):
            yield day
