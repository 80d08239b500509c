import asyncio
from datetime import date

import pytest

from conftest import make_candidate
from queue_booking.core.errors import ConflictError
from queue_booking.services.booking_service import (
    create_booking,
    list_booked_slots,
    list_bookings,
    reschedule_booking,
)

ATTEMPTS = 5


async def _attempt_create(session_maker, index: int):
    async with session_maker() as session:
        try:
            booking = await create_booking(session, make_candidate(name=f"Client {index}"))
            await session.commit()
            return booking
        except ConflictError as e:
            await session.rollback()
            return e


@pytest.mark.asyncio
async def test_concurrent_creates_for_one_slot_yield_single_booking(session_maker):
    results = await asyncio.gather(*(_attempt_create(session_maker, i) for i in range(ATTEMPTS)))

    conflicts = [r for r in results if isinstance(r, ConflictError)]
    created = [r for r in results if not isinstance(r, ConflictError)]
    assert len(created) == 1
    assert len(conflicts) == ATTEMPTS - 1

    async with session_maker() as session:
        bookings = await list_bookings(session)
        assert len(bookings) == 1
        assert bookings[0].status == "pending"
        assert await list_booked_slots(session, date(2024, 6, 1)) == ["10:00"]


@pytest.mark.asyncio
async def test_concurrent_reschedules_into_one_slot(session_maker):
    async with session_maker() as session:
        ids = []
        for label in ("10:00", "11:00"):
            booking = await create_booking(session, make_candidate(time=label, name=f"Client {label}"))
            ids.append(booking.id)
        await session.commit()

    async def move(booking_id: int):
        async with session_maker() as session:
            try:
                await reschedule_booking(session, booking_id, new_date="2024-06-01", new_time="13:00")
                await session.commit()
                return True
            except ConflictError:
                await session.rollback()
                return False

    outcomes = await asyncio.gather(*(move(i) for i in ids))
    assert sorted(outcomes) == [False, True]

    async with session_maker() as session:
        assert sorted(await list_booked_slots(session, date(2024, 6, 1))) == sorted(
            ["13:00", "10:00" if outcomes[1] else "11:00"]
        )
