from dataclasses import FrozenInstanceError
from datetime import date, datetime

import pytest

from carwash.models import (
    Booking,
    TimeSlot,
    UserState,
    format_date,
    make_booking_id,
    parse_date,
)


def test_make_booking_id_joins_parts_with_dashes():
    assert make_booking_id(42, "05.03.2024", "10:00") == "42-05.03.2024-10:00"


def test_parse_date_reads_day_month_year():
    assert parse_date("05.03.2024") == date(2024, 3, 5)


def test_format_date_pads_fields():
    assert format_date(date(2024, 3, 5)) == "05.03.2024"


@pytest.mark.parametrize("text", ["01.01.2024", "29.02.2024", "31.12.1999"])
def test_format_parse_round_trip(text):
    assert format_date(parse_date(text)) == text


@pytest.mark.parametrize(
    "text", ["2024-03-05", "5.3.2024", "32.01.2024", "29.02.2023", "", "05.03.24"]
)
def test_parse_date_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_date(text)


def test_booking_created_defaults_to_now():
    before = datetime.now()
    booking = Booking("id", "05.03.2024", "10:00", "Lada", "TEST01", 1)
    after = datetime.now()
    assert before <= booking.created <= after


def test_booking_is_immutable():
    booking = Booking("id", "05.03.2024", "10:00", "Lada", "TEST01", 1)
    with pytest.raises(FrozenInstanceError):
        booking.time = "11:00"
    assert booking.time == "10:00"


def test_user_state_defaults():
    state = UserState()
    assert not (state.awaiting_day or state.awaiting_time or state.awaiting_car_info)
    assert state.selected_date == ""
    assert state.selected_time == ""


def test_time_slot_defaults():
    slot = TimeSlot(time="10:00", available=True)
    assert slot.booked_by == ""
    assert slot.car_model is None
    assert slot.car_number is None