from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys and serializes camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingUpdateRequest(CamelModel):
    status: str | None = None
    date: str | None = None
    time: str | None = None


class BookingPublic(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    phone: str
    car_model: str
    license_plate: str
    date: date
    time: str
    status: str
    created_at: datetime
    updated_at: datetime


class BookedTimesResponse(CamelModel):
    date: str  # YYYY-MM-DD
    booked_times: list[str]


class CheckStatusRequest(CamelModel):
    phone: str | None = None


class BookingSummary(CamelModel):
    today_bookings: int
    pending_bookings: int
    status_breakdown: dict[str, int]


class MessageResponse(BaseModel):
    message: str


class SlotInfo(CamelModel):
    time: str
    available: bool


class AvailableSlotsResponse(CamelModel):
    date: str  # YYYY-MM-DD
    slots: list[SlotInfo]
