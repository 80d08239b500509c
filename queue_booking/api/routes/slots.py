from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from queue_booking.api.schemas.booking import AvailableSlotsResponse, SlotInfo
from queue_booking.core.db import get_session
from queue_booking.services.booking_service import parse_booking_date
from queue_booking.services.slot_service import get_slot_availability

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/available", response_model=AvailableSlotsResponse)
async def available_slots(
    date_param: str = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
) -> AvailableSlotsResponse:
    """Return every configured slot for the date with an available flag."""
    d = parse_booking_date(date_param)
    slots_with_availability = await get_slot_availability(session, d)
    return AvailableSlotsResponse(
        date=d.isoformat(),
        slots=[SlotInfo(time=label, available=avail) for label, avail in slots_with_availability],
    )
