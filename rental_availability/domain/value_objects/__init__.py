"""Value Objects del dominio de disponibilidad."""

from rental_availability.domain.value_objects.date_range import DateRange

__all__ = [
    "DateRange",
]
