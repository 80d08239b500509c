import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> dt.datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return dt.datetime.now(dt.UTC).replace(tzinfo=None)


class BookingStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Statuses that occupy a slot
ACTIVE_STATUSES: tuple[str, ...] = (BookingStatus.PENDING.value, BookingStatus.ACCEPTED.value)

ACTIVE_SLOT_INDEX = "uq_bookings_active_slot"

_ACTIVE_SLOT_PREDICATE = text("status IN ('pending', 'accepted')")


class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    __table_args__ = (
        # one active booking per slot; rejected rows never block it
        Index(
            ACTIVE_SLOT_INDEX,
            "date",
            "time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_PREDICATE,
            sqlite_where=_ACTIVE_SLOT_PREDICATE,
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    name: str
    phone: str = Field(max_length=10, index=True)
    car_model: str
    license_plate: str
    date: dt.date = Field(index=True)
    time: str = Field(max_length=16)
    status: str = Field(default=BookingStatus.PENDING.value, max_length=16, index=True)
    created_at: dt.datetime = Field(default_factory=_utc_naive_now)
    updated_at: dt.datetime = Field(
        default_factory=_utc_naive_now,
        sa_column_kwargs={"onupdate": _utc_naive_now},
    )


class BookingCandidate(BaseModel):
    """A booking request before validation; booking_service.validate_candidate reports field errors."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    phone: str | None = None
    car_model: str | None = None
    license_plate: str | None = None
    date: str | None = None
    time: str | None = None
