"""Value Object DateRange - rango de fechas de calendario semiabierto."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from rental_availability.domain.errors import InvalidRangeError


@dataclass(frozen=True)
class DateRange:
    """
    Value Object inmutable que representa un rango [start, end).

    El día `end` no pertenece al rango, por lo que dos rangos que comparten
    un extremo no se superponen.

    Attributes:
        start: Primer día cubierto.
        end: Primer día que ya no está cubierto.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidRangeError(
                f"end date must be after start date: {self.start} >= {self.end}"
            )

    @property
    def nights(self) -> int:
        """Número de días cubiertos por el rango."""
        return (self.end - self.start).days

    def overlaps_with(self, other: "DateRange") -> bool:
        """Verifica si este rango se superpone con otro."""
        return self.start < other.end and other.start < self.end

    def contains(self, day: date) -> bool:
        """Verifica si un día está dentro del rango."""
        return self.start <= day < self.end

    def days(self) -> Iterator[date]:
        """Itera cada día de calendario del rango."""
        current = self.start
        while current < self.end:
            yield current
            current += timedelta(days=1)

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"

    @classmethod
    def single_day(cls, day: date) -> "DateRange":
        """Factory method para el rango [day, day + 1)."""
        return cls(start=day, end=day + timedelta(days=1))

    @classmethod
    def parse(cls, start: str, end: str) -> "DateRange":
        """Construye el rango desde fechas ISO (YYYY-MM-DD)."""
        try:
            start_date = date.fromisoformat(start)
            end_date = date.fromisoformat(end)
        except (TypeError, ValueError) as exc:
            raise InvalidRangeError(f"unparsable date range: {start!r} -> {end!r}") from exc
        return cls(start=start_date, end=end_date)
