import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from queue_booking.api.deps import get_current_admin
from queue_booking.api.schemas.booking import (
    BookedTimesResponse,
    BookingPublic,
    BookingSummary,
    BookingUpdateRequest,
    CheckStatusRequest,
    MessageResponse,
)
from queue_booking.core.db import get_session
from queue_booking.core.errors import ValidationError
from queue_booking.models.admin import Admin
from queue_booking.models.booking import BookingCandidate
from queue_booking.services import booking_service
from queue_booking.services.notification_service import BookingEvent, notify_admin

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingPublic, status_code=status.HTTP_201_CREATED)
async def submit_booking(
    body: BookingCandidate,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> BookingPublic:
    booking = await booking_service.create_booking(session, body)
    # Runs after the response; failures are logged inside notify_admin
    background_tasks.add_task(notify_admin, BookingEvent.from_booking("created", booking))
    return BookingPublic.model_validate(booking)


@router.get("", response_model=list[BookingPublic])
async def list_all_bookings(
    session: AsyncSession = Depends(get_session),
    _admin: Admin = Depends(get_current_admin),
) -> list[BookingPublic]:
    bookings = await booking_service.list_bookings(session)
    return [BookingPublic.model_validate(b) for b in bookings]


@router.get("/summary", response_model=BookingSummary)
async def booking_summary(
    session: AsyncSession = Depends(get_session),
    _admin: Admin = Depends(get_current_admin),
) -> BookingSummary:
    return BookingSummary(**await booking_service.summarize(session))


@router.get("/booked-times", response_model=BookedTimesResponse)
async def booked_times(
    date_param: str | None = Query(None, alias="date"),
    session: AsyncSession = Depends(get_session),
) -> BookedTimesResponse:
    """Time labels already held on the given date, so the booking form can disable them."""
    if not date_param:
        raise ValidationError("Missing date parameter")
    d = booking_service.parse_booking_date(date_param)
    times = await booking_service.list_booked_slots(session, d)
    return BookedTimesResponse(date=d.isoformat(), booked_times=times)


@router.post("/check-status", response_model=list[BookingPublic])
async def check_status(
    body: CheckStatusRequest,
    session: AsyncSession = Depends(get_session),
) -> list[BookingPublic]:
    bookings = await booking_service.find_bookings_by_phone(session, body.phone)
    return [BookingPublic.model_validate(b) for b in bookings]


@router.patch("/{booking_id}", response_model=BookingPublic)
async def update_booking(
    booking_id: int,
    body: BookingUpdateRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    _admin: Admin = Depends(get_current_admin),
) -> BookingPublic:
    if body.date is None and body.time is None and body.status is not None:
        booking = await booking_service.update_status(session, booking_id, body.status)
        return BookingPublic.model_validate(booking)
    booking, rescheduled = await booking_service.reschedule_booking(
        session,
        booking_id,
        new_date=body.date,
        new_time=body.time,
        new_status=body.status,
    )
    if rescheduled:
        background_tasks.add_task(notify_admin, BookingEvent.from_booking("rescheduled", booking))
    return BookingPublic.model_validate(booking)


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: int,
    session: AsyncSession = Depends(get_session),
    _admin: Admin = Depends(get_current_admin),
) -> MessageResponse:
    await booking_service.delete_booking(session, booking_id)
    return MessageResponse(message="Booking deleted")
