from queue_booking.models.admin import Admin
from queue_booking.models.booking import ACTIVE_STATUSES, Booking, BookingCandidate, BookingStatus

__all__ = [
    "ACTIVE_STATUSES",
    "Admin",
    "Booking",
    "BookingCandidate",
    "BookingStatus",
]
