"""
Booking lifecycle: validation, slot availability and status changes.

Slot exclusivity is enforced by the store. The ``uq_bookings_active_slot``
partial unique index allows one pending/accepted booking per (date, time), so
two writers that both pass ``check_availability`` cannot both commit. The one
that loses surfaces here as an IntegrityError and is reported as ConflictError.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from queue_booking.core.errors import ConflictError, NotFoundError, ValidationError
from queue_booking.models.booking import (
    ACTIVE_SLOT_INDEX,
    ACTIVE_STATUSES,
    Booking,
    BookingCandidate,
    BookingStatus,
)
from queue_booking.services.slot_service import get_booked_times, is_known_slot

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"0[0-9]{9}")

SLOT_TAKEN_MESSAGE = "Slot full"

# Checked in this order; the first missing one is reported
_REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "name"),
    ("phone", "phone"),
    ("car_model", "carModel"),
    ("license_plate", "licensePlate"),
    ("date", "date"),
    ("time", "time"),
)


@dataclass(frozen=True)
class ValidatedBooking:
    name: str
    phone: str
    car_model: str
    license_plate: str
    date: date
    time: str


def validate_phone(phone: str) -> str:
    if not PHONE_PATTERN.fullmatch(phone):
        raise ValidationError("Invalid phone format")
    return phone


def validate_time(label: str) -> str:
    if not is_known_slot(label):
        raise ValidationError("Invalid time slot")
    return label


def validate_status(value: str) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationError("Invalid status value") from None


def parse_booking_date(value: str) -> date:
    """Parse YYYY-MM-DD or an ISO-8601 datetime down to its calendar day."""
    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        raise ValidationError("Invalid date") from None


def validate_candidate(candidate: BookingCandidate) -> ValidatedBooking:
    """Check a booking request and normalize it. Raises ValidationError on the first problem."""
    values: dict[str, str] = {}
    for attr, label in _REQUIRED_FIELDS:
        value = getattr(candidate, attr)
        if value is None or not value.strip():
            raise ValidationError(f"Missing field: {label}")
        values[attr] = value.strip()
    validate_phone(values["phone"])
    validate_time(values["time"])
    booking_date = parse_booking_date(values["date"])
    return ValidatedBooking(
        name=values["name"],
        phone=values["phone"],
        car_model=values["car_model"],
        license_plate=values["license_plate"],
        date=booking_date,
        time=values["time"],
    )


async def check_availability(
    session: AsyncSession, d: date, time: str, excluding_id: int | None = None
) -> bool:
    q = select(Booking.id).where(
        Booking.date == d,
        Booking.time == time,
        Booking.status.in_(ACTIVE_STATUSES),
    )
    if excluding_id is not None:
        q = q.where(Booking.id != excluding_id)
    result = await session.execute(q.limit(1))
    return result.first() is None


def _is_active_slot_violation(error: IntegrityError) -> bool:
    # PostgreSQL names the index; SQLite names the indexed columns
    message = str(error.orig)
    return (
        ACTIVE_SLOT_INDEX in message
        or "UNIQUE constraint failed: bookings.date, bookings.time" in message
    )


async def _flush_or_conflict(session: AsyncSession, booking: Booking) -> None:
    # rollback expires persistent rows, so read the slot first
    slot = (booking.date, booking.time)
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        if not _is_active_slot_violation(e):
            raise
        logger.info("Slot %s %s taken by a concurrent write: %s", slot[0], slot[1], e.orig)
        raise ConflictError(SLOT_TAKEN_MESSAGE) from e
    await session.refresh(booking)


async def get_booking(session: AsyncSession, booking_id: int) -> Booking:
    booking = await session.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


async def create_booking(session: AsyncSession, candidate: BookingCandidate) -> Booking:
    data = validate_candidate(candidate)
    if not await check_availability(session, data.date, data.time):
        logger.info("Booking rejected, slot %s %s is full", data.date, data.time)
        raise ConflictError(SLOT_TAKEN_MESSAGE)
    booking = Booking(
        name=data.name,
        phone=data.phone,
        car_model=data.car_model,
        license_plate=data.license_plate,
        date=data.date,
        time=data.time,
        status=BookingStatus.PENDING.value,
    )
    session.add(booking)
    await _flush_or_conflict(session, booking)
    logger.info("Booking %s created for %s %s", booking.id, booking.date, booking.time)
    return booking


async def update_status(session: AsyncSession, booking_id: int, status: str) -> Booking:
    new_status = validate_status(status)
    booking = await get_booking(session, booking_id)
    if booking.status == new_status.value:
        return booking
    booking.status = new_status.value
    session.add(booking)
    # Re-activating a rejected booking can collide with a newer one in its slot
    await _flush_or_conflict(session, booking)
    logger.info("Booking %s status set to %s", booking.id, booking.status)
    return booking


async def reschedule_booking(
    session: AsyncSession,
    booking_id: int,
    new_date: str | None = None,
    new_time: str | None = None,
    new_status: str | None = None,
) -> tuple[Booking, bool]:
    """Apply any of date/time/status to a booking.

    Returns (booking, rescheduled) where rescheduled is True when the date or
    time actually changed.
    """
    if new_date is None and new_time is None and new_status is None:
        raise ValidationError("No fields to update")
    target_date = parse_booking_date(new_date) if new_date is not None else None
    target_time = validate_time(new_time.strip()) if new_time is not None else None
    target_status = validate_status(new_status) if new_status is not None else None

    booking = await get_booking(session, booking_id)
    effective_date = target_date or booking.date
    effective_time = target_time or booking.time
    effective_status = target_status.value if target_status else booking.status

    moves_slot = target_date is not None or target_time is not None
    if moves_slot and effective_status in ACTIVE_STATUSES:
        available = await check_availability(
            session, effective_date, effective_time, excluding_id=booking.id
        )
        if not available:
            logger.info(
                "Reschedule of booking %s rejected, slot %s %s is full",
                booking.id, effective_date, effective_time,
            )
            raise ConflictError(SLOT_TAKEN_MESSAGE)

    rescheduled = effective_date != booking.date or effective_time != booking.time
    booking.date = effective_date
    booking.time = effective_time
    booking.status = effective_status
    session.add(booking)
    await _flush_or_conflict(session, booking)
    if rescheduled:
        logger.info("Booking %s moved to %s %s", booking.id, booking.date, booking.time)
    return booking, rescheduled


async def delete_booking(session: AsyncSession, booking_id: int) -> None:
    booking = await get_booking(session, booking_id)
    await session.delete(booking)
    await session.flush()
    logger.info("Booking %s deleted", booking_id)


async def list_bookings(session: AsyncSession) -> list[Booking]:
    result = await session.execute(
        select(Booking).order_by(Booking.date, Booking.time, Booking.id)
    )
    return list(result.scalars().all())


async def list_booked_slots(session: AsyncSession, d: date) -> list[str]:
    return sorted(await get_booked_times(session, d))


async def find_bookings_by_phone(session: AsyncSession, phone: str | None) -> list[Booking]:
    if phone is None or not phone.strip():
        raise ValidationError("Missing field: phone")
    validate_phone(phone.strip())
    result = await session.execute(
        select(Booking)
        .where(Booking.phone == phone.strip())
        .order_by(Booking.date.desc(), Booking.time.desc())
    )
    return list(result.scalars().all())


async def summarize(session: AsyncSession, today: date | None = None) -> dict:
    """Counts for the admin dashboard: today's bookings, pending, and per status."""
    today = today or date.today()
    today_count = await session.scalar(
        select(func.count()).select_from(Booking).where(Booking.date == today)
    )
    result = await session.execute(
        select(Booking.status, func.count()).group_by(Booking.status)
    )
    breakdown = {s.value: 0 for s in BookingStatus}
    for status_value, count in result.all():
        breakdown[status_value] = count
    return {
        "today_bookings": today_count or 0,
        "pending_bookings": breakdown[BookingStatus.PENDING.value],
        "status_breakdown": breakdown,
    }
