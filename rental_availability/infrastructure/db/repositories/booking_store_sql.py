from collections.abc import Sequence
from datetime import date

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_availability.application.interfaces.booking_store import BookingStore
from rental_availability.application.interfaces.clock import Clock
from rental_availability.application.interfaces.uuid_generator import UUIDGenerator
from rental_availability.domain.entities.availability_rule import AvailabilityRule, RuleKind
from rental_availability.domain.errors import RuleNotFoundError
from rental_availability.infrastructure.db.tables import availability_rules


def _to_rule(row) -> AvailabilityRule:
    return AvailabilityRule(
        id=row["id"],
        listing_id=row["listing_id"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        kind=RuleKind(row["kind"]),
        booking_id=row["booking_id"],
        reason=row["reason"],
        created_at=row["created_at"],
    )


class BookingStoreSQL(BookingStore):
    def __init__(self, session: AsyncSession, uuid_generator: UUIDGenerator, clock: Clock) -> None:
        self._session = session
        self._uuid = uuid_generator
        self._clock = clock

    async def find_overlapping_ranges(
        self,
        listing_id: str,
        start: date,
        end: date,
        kinds: Sequence[RuleKind] | None = None,
        for_update: bool = False,
    ) -> list[AvailabilityRule]:
        stmt = select(availability_rules).where(
            availability_rules.c.listing_id == listing_id,
            availability_rules.c.start_date < end,
            availability_rules.c.end_date > start,
        )
        if kinds:
            stmt = stmt.where(availability_rules.c.kind.in_([RuleKind(k).value for k in kinds]))
        stmt = stmt.order_by(availability_rules.c.start_date.asc(), availability_rules.c.id.asc())
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return [_to_rule(row) for row in result.mappings().all()]

    async def find_booked_range(self, booking_id: str) -> AvailabilityRule | None:
        result = await self._session.execute(
            select(availability_rules)
            .where(
                availability_rules.c.booking_id == booking_id,
                availability_rules.c.kind == RuleKind.BOOKED.value,
            )
            .limit(1)
        )
        row = result.mappings().first()
        return _to_rule(row) if row else None

    async def insert_booked_range(
        self, listing_id: str, start: date, end: date, booking_id: str
    ) -> AvailabilityRule:
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
        stmt = delete(availability_rules).where(
            availability_rules.c.booking_id == booking_id,
            availability_rules.c.kind == RuleKind.BOOKED.value,
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

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
        rule.created_at = rule.created_at or self._clock.now().replace(tzinfo=None)
        await self._session.execute(
            insert(availability_rules).values(
                id=rule.id,
                listing_id=rule.listing_id,
                start_date=rule.start_date,
                end_date=rule.end_date,
                kind=rule.kind.value,
                booking_id=rule.booking_id,
                reason=rule.reason,
                created_at=rule.created_at,
            )
        )
        return rule

    async def get_rule(self, rule_id: str) -> AvailabilityRule | None:
        result = await self._session.execute(
            select(availability_rules).where(availability_rules.c.id == rule_id).limit(1)
        )
        row = result.mappings().first()
        return _to_rule(row) if row else None

    async def update_rule(self, rule: AvailabilityRule) -> AvailabilityRule:
        result = await self._session.execute(
            update(availability_rules)
            .where(availability_rules.c.id == rule.id)
            .values(
                start_date=rule.start_date,
                end_date=rule.end_date,
                kind=rule.kind.value,
                reason=rule.reason,
            )
        )
        if not result.rowcount:
            raise RuleNotFoundError(rule.id or "")
        return rule

    async def delete_rule(self, rule_id: str) -> None:
        await self._session.execute(delete(availability_rules).where(availability_rules.c.id == rule_id))

    async def find_rule_starting_on(
        self, listing_id: str, day: date, kinds: Sequence[RuleKind]
    ) -> AvailabilityRule | None:
        result = await self._session.execute(
            select(availability_rules)
            .where(
                availability_rules.c.listing_id == listing_id,
                availability_rules.c.start_date == day,
                availability_rules.c.kind.in_([RuleKind(k).value for k in kinds]),
            )
            .order_by(availability_rules.c.end_date.asc())
            .limit(1)
        )
        row = result.mappings().first()
        return _to_rule(row) if row else None
