"""Motor de disponibilidad y resolución de conflictos de reservas."""

import logging
from collections.abc import Sequence
from datetime import date, timedelta

from rental_availability.application.interfaces.booking_store import BookingStore
from rental_availability.application.interfaces.clock import Clock
from rental_availability.application.interfaces.listing_repo import ListingRepo
from rental_availability.application.interfaces.transaction_manager import TransactionManager
from rental_availability.domain.entities.availability_rule import (
    OCCUPYING_KINDS,
    AvailabilityConflict,
    AvailabilityResult,
    AvailabilityRule,
    RuleKind,
    iter_free_days,
)
from rental_availability.domain.errors import (
    ConflictError,
    InvalidRangeError,
    RuleNotEditableError,
    RuleNotFoundError,
    ValidationError,
)
from rental_availability.domain.value_objects.date_range import DateRange

logger = logging.getLogger(__name__)

OWNER_KINDS: tuple[RuleKind, ...] = (RuleKind.AVAILABLE, RuleKind.BLOCKED)


class AvailabilityEngine:
    """
    Garantiza que los rangos BOOKED de un listing nunca se superpongan.

    No mantiene estado propio: toda lectura va al BookingStore y toda
    escritura que depende de una lectura previa corre dentro de
    `TransactionManager.run_serializable`.
    """

    def __init__(
        self,
        booking_store: BookingStore,
        transaction_manager: TransactionManager,
        listing_repo: ListingRepo | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Args:
            booking_store: Almacén de reglas de disponibilidad.
            transaction_manager: Frontera transaccional del almacén.
            listing_repo: Fuente de `advance_notice_hours` (opcional).
            clock: Si se provee, se rechazan ventanas que empiezan en el pasado
                y se aplica el aviso previo del listing.
        """
        self._store = booking_store
        self._tx = transaction_manager
        self._listing_repo = listing_repo
        self._clock = clock

    # === Consultas ===

    async def check_availability(
        self, listing_id: str, start_date: date, end_date: date
    ) -> AvailabilityResult:
        """
        Verifica si la ventana [start_date, end_date) está libre.

        Raises:
            InvalidRangeError: Si la ventana es inválida o empieza en el pasado.
        """
        window = DateRange(start=start_date, end=end_date)
        if self._clock is not None and window.start < self._clock.today():
            raise InvalidRangeError("start date cannot be in the past")

        rules = await self._store.find_overlapping_ranges(
            listing_id, window.start, window.end, kinds=OCCUPYING_KINDS
        )
        conflicts = [AvailabilityConflict.from_rule(rule) for rule in rules]

        notice = await self._advance_notice_conflict(listing_id, window)
        if notice is not None:
            conflicts.append(notice)

        return AvailabilityResult(available=not conflicts, conflicts=conflicts)

    async def get_listing_availability(
        self, listing_id: str, start_date: date, end_date: date
    ) -> list[AvailabilityRule]:
        """Retorna todas las reglas que intersectan la ventana, por start_date."""
        window = DateRange(start=start_date, end=end_date)
        return await self._store.find_overlapping_ranges(listing_id, window.start, window.end)

    async def get_available_dates(
        self, listing_id: str, start_date: date, end_date: date
    ) -> list[date]:
        """
        Retorna los días de [start_date, end_date) que se pueden reservar.

        Excluye los días cubiertos por BLOCKED/BOOKED y, cuando el motor tiene
        reloj, los días pasados y los que caen dentro del aviso previo del
        listing.
        """
        window = DateRange(start=start_date, end=end_date)
        rules = await self._store.find_overlapping_ranges(
            listing_id, window.start, window.end, kinds=OCCUPYING_KINDS
        )
        earliest = await self._earliest_bookable_day(listing_id)
        return [
            day for day in iter_free_days(window, rules) if earliest is None or day >= earliest
        ]

    # === Reglas del propietario ===

    async def create_availability_rule(
        self,
        listing_id: str,
        start_date: date,
        end_date: date,
        kind: RuleKind | str = RuleKind.BLOCKED,
        reason: str | None = None,
    ) -> AvailabilityRule:
        """
        Crea una regla AVAILABLE o BLOCKED.

        Los BLOCKED que se superponen entre sí se conservan tal cual.

        Raises:
            RuleNotEditableError: Si se intenta crear una regla BOOKED.
            ConflictError: Si un BLOCKED se superpone con un BOOKED existente.
        """
        kind = RuleKind(kind)
        if kind == RuleKind.BOOKED:
            raise RuleNotEditableError(None, "create")
        window = DateRange(start=start_date, end=end_date)

        async def _create() -> AvailabilityRule:
            if kind == RuleKind.BLOCKED:
                await self._ensure_not_booked(listing_id, window)
                rule = await self._store.insert_blocked_range(
                    listing_id, window.start, window.end, reason
                )
            else:
                rule = await self._store.insert_rule(
                    AvailabilityRule(
                        listing_id=listing_id,
                        start_date=window.start,
                        end_date=window.end,
                        kind=kind,
                        reason=reason,
                    )
                )
            logger.info(
                "Availability rule created",
                extra={"listing_id": listing_id, "rule_id": rule.id, "kind": kind.value},
            )
            return rule

        return await self._tx.run_serializable(_create, "create_availability_rule")

    async def update_availability_rule(
        self,
        rule_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        kind: RuleKind | str | None = None,
        reason: str | None = None,
    ) -> AvailabilityRule:
        """Modifica una regla del propietario; las BOOKED no son editables."""

        async def _update() -> AvailabilityRule:
            rule = await self._get_owner_rule(rule_id, "update")
            new_kind = RuleKind(kind) if kind is not None else rule.kind
            if new_kind == RuleKind.BOOKED:
                raise RuleNotEditableError(rule_id, "update")
            window = DateRange(
                start=start_date or rule.start_date,
                end=end_date or rule.end_date,
            )
            if new_kind == RuleKind.BLOCKED:
                await self._ensure_not_booked(rule.listing_id, window)

            rule.start_date = window.start
            rule.end_date = window.end
            rule.kind = new_kind
            if reason is not None:
                rule.reason = reason
            return await self._store.update_rule(rule)

        return await self._tx.run_serializable(_update, "update_availability_rule")

    async def delete_availability_rule(self, rule_id: str) -> None:
        """Elimina una regla del propietario; las BOOKED no se pueden borrar."""

        async def _delete() -> None:
            await self._get_owner_rule(rule_id, "delete")
            await self._store.delete_rule(rule_id)

        await self._tx.run_serializable(_delete, "delete_availability_rule")

    async def bulk_update_availability(
        self, listing_id: str, days: Sequence[tuple[date, bool]]
    ) -> int:
        """
        Marca días sueltos como disponibles o bloqueados en una sola transacción.

        Cada día se guarda como la regla [day, day + 1); si ya existe una regla
        del propietario con exactamente ese rango se actualiza su tipo.

        Returns:
            Número de días escritos.

        Raises:
            ValidationError: Si un mismo día aparece más de una vez.
            ConflictError: Si algún día a bloquear ya está reservado; en ese
                caso no se escribe ningún día.
        """
        seen: set[date] = set()
        for day, _ in days:
            if day in seen:
                raise ValidationError("dates", f"duplicate day {day.isoformat()}")
            seen.add(day)

        async def _bulk() -> int:
            # Validar todos los días antes de escribir
            for day, is_available in days:
                if not is_available:
                    await self._ensure_not_booked(listing_id, DateRange.single_day(day))

            count = 0
            for day, is_available in days:
                window = DateRange.single_day(day)
                kind = RuleKind.AVAILABLE if is_available else RuleKind.BLOCKED
                existing = await self._store.find_rule_starting_on(listing_id, day, OWNER_KINDS)
                if existing is not None and existing.end_date == window.end:
                    existing.kind = kind
                    await self._store.update_rule(existing)
                else:
                    await self._store.insert_rule(
                        AvailabilityRule(
                            listing_id=listing_id,
                            start_date=window.start,
                            end_date=window.end,
                            kind=kind,
                        )
                    )
                count += 1
            return count

        count = await self._tx.run_serializable(_bulk, "bulk_update_availability")
        logger.info(
            "Bulk availability update applied",
            extra={"listing_id": listing_id, "days": count},
        )
        return count

    # === Reservas ===

    async def reserve_range(
        self, listing_id: str, start_date: date, end_date: date, booking_id: str
    ) -> AvailabilityRule:
        """
        Reserva atómicamente [start_date, end_date) para una reserva confirmada.

        La verificación y la inserción corren en la misma transacción
        serializada, de modo que dos llamadas concurrentes con rangos
        superpuestos no pueden tener éxito ambas.

        Raises:
            ConflictError: Si el rango intersecta otro rango BOOKED, o si la
                reserva ya tiene reservado un rango distinto.
        """
        window = DateRange(start=start_date, end=end_date)

        async def _reserve() -> AvailabilityRule:
            held = await self._store.find_booked_range(booking_id)
            if held is not None:
                if held.listing_id == listing_id and held.date_range == window:
                    return held
                raise ConflictError(
                    listing_id,
                    window.start,
                    window.end,
                    [AvailabilityConflict.from_rule(held)],
                    message=f"Booking {booking_id} already holds {held.date_range}",
                )

            booked = await self._store.find_overlapping_ranges(
                listing_id, window.start, window.end, kinds=[RuleKind.BOOKED], for_update=True
            )
            if booked:
                logger.warning(
                    "Reservation rejected: overlapping booked range",
                    extra={
                        "listing_id": listing_id,
                        "booking_id": booking_id,
                        "range": str(window),
                        "conflicting_bookings": [rule.booking_id for rule in booked],
                    },
                )
                raise ConflictError(
                    listing_id,
                    window.start,
                    window.end,
                    [AvailabilityConflict.from_rule(rule) for rule in booked],
                    message="Dates are no longer available",
                )
            rule = await self._store.insert_booked_range(
                listing_id, window.start, window.end, booking_id
            )
            logger.info(
                "Range reserved",
                extra={
                    "listing_id": listing_id,
                    "booking_id": booking_id,
                    "range": str(window),
                    "nights": window.nights,
                },
            )
            return rule

        return await self._tx.run_serializable(_reserve, "reserve_range")

    async def release_range(self, booking_id: str) -> None:
        """Libera el rango BOOKED de una reserva. Idempotente."""
        async with self._tx.start():
            deleted = await self._store.delete_booked_range(booking_id)
        if deleted:
            logger.info("Range released", extra={"booking_id": booking_id})

    # === Helpers ===

    async def _ensure_not_booked(self, listing_id: str, window: DateRange) -> None:
        booked = await self._store.find_overlapping_ranges(
            listing_id, window.start, window.end, kinds=[RuleKind.BOOKED], for_update=True
        )
        if booked:
            raise ConflictError(
                listing_id,
                window.start,
                window.end,
                [AvailabilityConflict.from_rule(rule) for rule in booked],
            )

    async def _get_owner_rule(self, rule_id: str, operation: str) -> AvailabilityRule:
        rule = await self._store.get_rule(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        if rule.is_booked:
            raise RuleNotEditableError(rule_id, operation)
        return rule

    async def _advance_notice(self, listing_id: str) -> tuple[int, date] | None:
        """Retorna (horas de aviso, primer día reservable) si el listing exige aviso previo."""
        if self._clock is None or self._listing_repo is None:
            return None
        listing = await self._listing_repo.get_by_id(listing_id)
        if listing is None or listing.advance_notice_hours <= 0:
            return None
        min_start = (self._clock.now() + timedelta(hours=listing.advance_notice_hours)).date()
        return listing.advance_notice_hours, min_start

    async def _earliest_bookable_day(self, listing_id: str) -> date | None:
        if self._clock is None:
            return None
        earliest = self._clock.today()
        notice = await self._advance_notice(listing_id)
        if notice is not None:
            earliest = max(earliest, notice[1])
        return earliest

    async def _advance_notice_conflict(
        self, listing_id: str, window: DateRange
    ) -> AvailabilityConflict | None:
        notice = await self._advance_notice(listing_id)
        if notice is None:
            return None
        hours, min_start = notice
        if window.start >= min_start:
            return None
        return AvailabilityConflict(
            id="advance-notice",
            start_date=self._clock.today(),
            end_date=min_start,
            reason=f"Requires {hours} hours advance notice",
        )
