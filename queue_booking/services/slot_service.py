from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from queue_booking.core.config import settings
from queue_booking.models.booking import ACTIVE_STATUSES, Booking


def slot_labels() -> list[str]:
    """Configured slot labels in display order."""
    return list(settings.booking_time_slots)


def is_known_slot(label: str) -> bool:
    return label in settings.booking_time_slots


async def get_booked_times(session: AsyncSession, d: date) -> set[str]:
    """Time labels held by active bookings on the given date."""
    result = await session.execute(
        select(Booking.time).where(
            Booking.date == d,
            Booking.status.in_(ACTIVE_STATUSES),
        )
    )
    return {row[0] for row in result.all()}


async def get_slot_availability(session: AsyncSession, d: date) -> list[tuple[str, bool]]:
    """Returns list of (time_label, available) for every configured slot on the date."""
    booked = await get_booked_times(session, d)
    return [(label, label not in booked) for label in slot_labels()]
