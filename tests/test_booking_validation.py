from datetime import date

import pytest

from conftest import make_candidate
from queue_booking.core.errors import ValidationError
from queue_booking.models import BookingCandidate
from queue_booking.services.booking_service import (
    parse_booking_date,
    validate_candidate,
    validate_status,
)


def test_valid_candidate_is_normalized():
    data = validate_candidate(make_candidate(name="  Somchai  ", date="2024-06-01T00:00:00.000Z"))
    assert data.name == "Somchai"
    assert data.date == date(2024, 6, 1)
    assert data.time == "10:00"


def test_candidate_accepts_camel_and_snake_keys():
    camel = BookingCandidate.model_validate({"carModel": "Civic", "licensePlate": "1AB"})
    snake = BookingCandidate(car_model="Civic", license_plate="1AB")
    assert camel == snake
    assert camel.name is None
    assert camel.model_dump(by_alias=True, exclude_none=True) == {"carModel": "Civic", "licensePlate": "1AB"}


def test_accepts_phone_with_leading_zero():
    assert validate_candidate(make_candidate(phone="0812345678")).phone == "0812345678"


@pytest.mark.parametrize("phone", ["1234567890", "081234567", "08123456789", "08-1234567", "๐812345678"])
def test_rejects_bad_phone(phone):
    with pytest.raises(ValidationError, match="Invalid phone format"):
        validate_candidate(make_candidate(phone=phone))


def test_rejects_time_outside_slots():
    with pytest.raises(ValidationError, match="Invalid time slot"):
        validate_candidate(make_candidate(time="09:00"))


@pytest.mark.parametrize("value", ["2024-02-30", "tomorrow", "01/06/2024"])
def test_rejects_bad_date(value):
    with pytest.raises(ValidationError, match="Invalid date"):
        validate_candidate(make_candidate(date=value))


def test_missing_field_is_reported_first():
    # phone and time are both bad too, but the missing field wins
    with pytest.raises(ValidationError, match="Missing field: carModel"):
        validate_candidate(make_candidate(car_model="   ", phone="123", time="09:00"))


def test_phone_checked_before_time():
    with pytest.raises(ValidationError, match="Invalid phone format"):
        validate_candidate(make_candidate(phone="123", time="09:00", date="not-a-date"))


def test_time_checked_before_date():
    with pytest.raises(ValidationError, match="Invalid time slot"):
        validate_candidate(make_candidate(time="09:00", date="not-a-date"))


def test_parse_booking_date_truncates_datetime():
    assert parse_booking_date("2024-06-01T15:30:00+07:00") == date(2024, 6, 1)


def test_validate_status():
    assert validate_status("accepted").value == "accepted"
    with pytest.raises(ValidationError, match="Invalid status value"):
        validate_status("done")
