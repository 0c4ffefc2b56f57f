"""
Unit tests del ciclo de vida de reservas.

Verifica:
- PENDING no ocupa fechas; CONFIRMED sí
- Confirmar una reserva cuyo rango ya fue tomado la deja CANCELLED
- Cancelar una reserva CONFIRMED libera su rango
"""

import asyncio
from datetime import date

import pytest

from rental_availability.domain.entities.availability_rule import RuleKind
from rental_availability.domain.entities.booking import BookingStatus
from rental_availability.domain.errors import (
    BookingNotFoundError,
    ConflictError,
    InvalidBookingStatusError,
    InvalidRangeError,
    OptimisticLockError,
)

LISTING_ID = "L1"
JUNE_1 = date(2024, 6, 1)
JUNE_5 = date(2024, 6, 5)


async def _create(use_cases, start=JUNE_1, end=JUNE_5, renter_id="renter-1"):
    return await use_cases["create_booking"].execute(
        listing_id=LISTING_ID, renter_id=renter_id, start_date=start, end_date=end
    )


class TestCreateBooking:
    @pytest.mark.asyncio
    async def test_creates_pending_booking(self, use_cases, booking_repo, clock):
        booking = await _create(use_cases)

        assert booking.id == "id-000001"
        assert booking.status == BookingStatus.PENDING
        assert booking.created_at == clock.now()
        assert booking_repo.bookings[booking.id].status == BookingStatus.PENDING

    @pytest.mark.asyncio
    async def test_pending_bookings_do_not_block_dates(self, use_cases, availability_engine):
        await _create(use_cases, renter_id="renter-1")
        second = await _create(use_cases, renter_id="renter-2")

        result = await availability_engine.check_availability(LISTING_ID, JUNE_1, JUNE_5)

        assert second.status == BookingStatus.PENDING
        assert result.available is True

    @pytest.mark.asyncio
    async def test_rejects_unavailable_window(self, use_cases, availability_engine, booking_repo):
        await availability_engine.create_availability_rule(LISTING_ID, date(2024, 6, 3), date(2024, 6, 8))

        with pytest.raises(ConflictError) as exc_info:
            await _create(use_cases)

        assert exc_info.value.conflicts[0].reason == "Blocked by availability rule"
        assert booking_repo.bookings == {}

    @pytest.mark.asyncio
    async def test_rejects_invalid_window(self, use_cases):
        with pytest.raises(InvalidRangeError):
            await _create(use_cases, start=JUNE_5, end=JUNE_1)


class TestConfirmBooking:
    @pytest.mark.asyncio
    async def test_confirm_reserves_range(self, use_cases, availability_engine, booking_store):
        booking = await _create(use_cases)

        confirmed = await use_cases["confirm_booking"].execute(booking.id)

        assert confirmed.status == BookingStatus.CONFIRMED
        assert confirmed.lock_version == 1
        booked = await booking_store.find_overlapping_ranges(LISTING_ID, JUNE_1, JUNE_5, kinds=[RuleKind.BOOKED])
        assert [rule.booking_id for rule in booked] == [booking.id]
        result = await availability_engine.check_availability(LISTING_ID, date(2024, 6, 3), date(2024, 6, 4))
        assert result.available is False

    @pytest.mark.asyncio
    async def test_losing_confirmation_is_cancelled(self, use_cases, booking_repo):
        first = await _create(use_cases, renter_id="renter-1")
        second = await _create(use_cases, start=date(2024, 6, 3), end=date(2024, 6, 7), renter_id="renter-2")

        await use_cases["confirm_booking"].execute(first.id)
        with pytest.raises(ConflictError) as exc_info:
            await use_cases["confirm_booking"].execute(second.id)

        assert exc_info.value.message == "Dates are no longer available"
        assert booking_repo.bookings[first.id].status == BookingStatus.CONFIRMED
        assert booking_repo.bookings[second.id].status == BookingStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_concurrent_confirmations(self, use_cases, booking_repo, booking_store):
        first = await _create(use_cases, renter_id="renter-1")
        second = await _create(use_cases, start=date(2024, 6, 3), end=date(2024, 6, 7), renter_id="renter-2")

        results = await asyncio.gather(
            use_cases["confirm_booking"].execute(first.id),
            use_cases["confirm_booking"].execute(second.id),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, ConflictError)) == 1
        statuses = sorted(b.status.value for b in booking_repo.bookings.values())
        assert statuses == ["CANCELLED", "CONFIRMED"]
        booked = await booking_store.find_overlapping_ranges(
            LISTING_ID, JUNE_1, date(2024, 6, 30), kinds=[RuleKind.BOOKED]
        )
        assert len(booked) == 1

    @pytest.mark.asyncio
    async def test_confirm_requires_pending(self, use_cases):
        booking = await _create(use_cases)
        await use_cases["confirm_booking"].execute(booking.id)

        with pytest.raises(InvalidBookingStatusError):
            await use_cases["confirm_booking"].execute(booking.id)

    @pytest.mark.asyncio
    async def test_unknown_booking(self, use_cases):
        with pytest.raises(BookingNotFoundError):
            await use_cases["confirm_booking"].execute("missing")

    @pytest.mark.asyncio
    async def test_stale_version_is_rejected(self, use_cases, booking_repo):
        booking = await _create(use_cases)
        booking_repo.bookings[booking.id].lock_version = 7

        stale = await booking_repo.get_by_id(booking.id)
        stale.lock_version = 3
        stale.confirm()

        with pytest.raises(OptimisticLockError):
            await booking_repo.update_status(stale, expected_lock_version=3)


class TestCancelAndComplete:
    @pytest.mark.asyncio
    async def test_cancel_confirmed_releases_range(self, use_cases, availability_engine):
        booking = await _create(use_cases)
        await use_cases["confirm_booking"].execute(booking.id)

        cancelled = await use_cases["cancel_booking"].execute(booking.id)

        assert cancelled.status == BookingStatus.CANCELLED
        result = await availability_engine.check_availability(LISTING_ID, JUNE_1, JUNE_5)
        assert result.available is True

    @pytest.mark.asyncio
    async def test_cancel_pending(self, use_cases):
        booking = await _create(use_cases)

        cancelled = await use_cases["cancel_booking"].execute(booking.id)

        assert cancelled.status == BookingStatus.CANCELLED
        with pytest.raises(InvalidBookingStatusError):
            await use_cases["cancel_booking"].execute(booking.id)

    @pytest.mark.asyncio
    async def test_complete_keeps_range_booked(self, use_cases, availability_engine):
        booking = await _create(use_cases)
        await use_cases["confirm_booking"].execute(booking.id)

        completed = await use_cases["complete_booking"].execute(booking.id)

        assert completed.status == BookingStatus.COMPLETED
        result = await availability_engine.check_availability(LISTING_ID, JUNE_1, JUNE_5)
        assert result.available is False

    @pytest.mark.asyncio
    async def test_complete_requires_confirmed(self, use_cases):
        booking = await _create(use_cases)

        with pytest.raises(InvalidBookingStatusError):
            await use_cases["complete_booking"].execute(booking.id)
