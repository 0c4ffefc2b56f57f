"""Implementación in-memory del almacén de reglas de disponibilidad."""

from collections.abc import Sequence
from dataclasses import replace
from datetime import date

from rental_availability.application.interfaces.booking_store import BookingStore
from rental_availability.application.interfaces.clock import Clock, SystemClock
from rental_availability.application.interfaces.uuid_generator import RealUUIDGenerator, UUIDGenerator
from rental_availability.domain.entities.availability_rule import AvailabilityRule, RuleKind
from rental_availability.domain.errors import RuleNotFoundError


class InMemoryBookingStore(BookingStore):
    """
    Almacén in-memory para desarrollo y testing.

    Retorna copias de las reglas para que los cambios solo se persistan
    vía `update_rule`, igual que con el almacén SQL.
    """

    def __init__(self, uuid_generator: UUIDGenerator | None = None, clock: Clock | None = None) -> None:
        self._rules: dict[str, AvailabilityRule] = {}
        self._uuid = uuid_generator or RealUUIDGenerator()
        self._clock = clock or SystemClock()

    async def find_overlapping_ranges(
        self,
        listing_id: str,
        start: date,
        end: date,
        kinds: Sequence[RuleKind] | None = None,
        for_update: bool = False,
    ) -> list[AvailabilityRule]:
        wanted = {RuleKind(k) for k in kinds} if kinds else None
        matches = [
            replace(rule)
            for rule in self._rules.values()
            if rule.listing_id == listing_id
            and rule.start_date < end
            and rule.end_date > start
            and (wanted is None or rule.kind in wanted)
        ]
        return sorted(matches, key=lambda r: (r.start_date, r.id or ""))

    async def find_booked_range(self, booking_id: str) -> AvailabilityRule | None:
        for rule in self._rules.values():
            if rule.booking_id == booking_id and rule.kind == RuleKind.BOOKED:
                return replace(rule)
        return None

    async def insert_booked_range(
        self, listing_id: str, start: date, end: date, booking_id: str
    ) -> AvailabilityRule:
        if any(rule.booking_id == booking_id for rule in self._rules.values()):
            raise ValueError(f"Booking {booking_id} already owns a booked range")
        return await self.insert_rule(
            AvailabilityRule(
                listing_id=listing_id,
                start_date=start,
                end_date=end,
                kind=RuleKind.BOOKED,
                booking_id=booking_id,
            )
        )

    async def delete_booked_range(self, booking_id: str) -> int:
        rule_ids = [
            rule_id
            for rule_id, rule in self._rules.items()
            if rule.booking_id == booking_id and rule.kind == RuleKind.BOOKED
        ]
        for rule_id in rule_ids:
            del self._rules[rule_id]
        return len(rule_ids)

    async def insert_blocked_range(
        self, listing_id: str, start: date, end: date, reason: str | None = None
    ) -> AvailabilityRule:
        return await self.insert_rule(
            AvailabilityRule(
                listing_id=listing_id,
                start_date=start,
                end_date=end,
                kind=RuleKind.BLOCKED,
                reason=reason,
            )
        )

    async def insert_rule(self, rule: AvailabilityRule) -> AvailabilityRule:
        rule.id = rule.id or self._uuid.generate_uuid()
        rule.created_at = rule.created_at or self._clock.now()
        self._rules[rule.id] = replace(rule)
        return rule

    async def get_rule(self, rule_id: str) -> AvailabilityRule | None:
        rule = self._rules.get(rule_id)
        return replace(rule) if rule else None

    async def update_rule(self, rule: AvailabilityRule) -> AvailabilityRule:
        if rule.id is None or rule.id not in self._rules:
            raise RuleNotFoundError(rule.id or "")
        self._rules[rule.id] = replace(rule)
        return rule

    async def delete_rule(self, rule_id: str) -> None:
        self._rules.pop(rule_id, None)

    async def find_rule_starting_on(
        self, listing_id: str, day: date, kinds: Sequence[RuleKind]
    ) -> AvailabilityRule | None:
        wanted = {RuleKind(k) for k in kinds}
        matches = sorted(
            (
                rule
                for rule in self._rules.values()
                if rule.listing_id == listing_id and rule.start_date == day and rule.kind in wanted
            ),
            key=lambda r: r.end_date,
        )
        return replace(matches[0]) if matches else None
