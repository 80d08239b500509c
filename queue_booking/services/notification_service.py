import logging
from dataclasses import dataclass
from datetime import date
from typing import Literal

import httpx

from queue_booking.core.config import settings
from queue_booking.models.booking import Booking

logger = logging.getLogger(__name__)

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"

EventKind = Literal["created", "rescheduled"]

_HEADLINES: dict[str, str] = {
    "created": "New booking",
    "rescheduled": "Booking rescheduled",
}


@dataclass(frozen=True)
class BookingEvent:
    kind: EventKind
    booking_id: int
    name: str
    phone: str
    car_model: str
    license_plate: str
    date: date
    time: str
    status: str

    @classmethod
    def from_booking(cls, kind: EventKind, booking: Booking) -> "BookingEvent":
        # Snapshot now; the row may change before the background task runs
        return cls(
            kind=kind,
            booking_id=booking.id,
            name=booking.name,
            phone=booking.phone,
            car_model=booking.car_model,
            license_plate=booking.license_plate,
            date=booking.date,
            time=booking.time,
            status=booking.status,
        )


def build_booking_message(event: BookingEvent) -> str:
    return "\n".join(
        [
            f"{_HEADLINES[event.kind]} #{event.booking_id}",
            f"Name: {event.name}",
            f"Phone: {event.phone}",
            f"Car: {event.car_model} ({event.license_plate})",
            f"Date: {event.date.strftime('%d/%m/%Y')}",
            f"Time: {event.time}",
            f"Status: {event.status}",
        ]
    )


async def notify_admin(event: BookingEvent) -> None:
    """Push a booking event to the admin's LINE account (call from background task).

    Best effort: failures are logged and never raised.
    """
    if not settings.notifications_enabled:
        logger.debug("LINE notifications disabled (channel token or admin user id not set), skipping")
        return
    payload = {
        "to": settings.line_admin_user_id,
        "messages": [{"type": "text", "text": build_booking_message(event)}],
    }
    try:
        async with httpx.AsyncClient(timeout=settings.notification_timeout_seconds) as client:
            resp = await client.post(
                LINE_PUSH_URL,
                json=payload,
                headers={"Authorization": f"Bearer {settings.line_channel_access_token}"},
            )
        if resp.status_code != 200:
            logger.warning(
                "LINE push for booking %s failed: status=%s body=%s",
                event.booking_id,
                resp.status_code,
                resp.text[:500],
            )
            return
        logger.info("LINE %s notification sent for booking %s", event.kind, event.booking_id)
    except Exception as e:
        logger.exception("Failed to send LINE notification for booking %s: %s", event.booking_id, e)
