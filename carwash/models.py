"""Domain records for car-wash bookings and the date helpers they rely on."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

DATE_FORMAT = "%d.%m.%Y"
TIME_FORMAT = "%H:%M"

# Indexed by datetime.date.weekday(): Monday is 0.
WEEKDAY_NAMES = (
    "Понедельник",
    "Вторник",
    "Среда",
    "Четверг",
    "Пятница",
    "Суббота",
    "Воскресенье",
)

_DATE_SHAPE = re.compile(r"\d{2}\.\d{2}\.\d{4}")


@dataclass(frozen=True)
class Booking:
    """A single reserved wash slot."""

    id: str
    date: str
    time: str
    car_model: str
    car_number: str
    user_id: int
    created: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class UserState:
    """Where a user is in the booking dialogue."""

    awaiting_day: bool = False
    awaiting_time: bool = False
    awaiting_car_info: bool = False
    selected_date: str = ""
    selected_time: str = ""


@dataclass(frozen=True)
class TimeSlot:
    """An hour on the schedule and who, if anyone, holds it."""

    time: str
    available: bool
    booked_by: str = ""
    car_model: Any = None
    car_number: Any = None


def make_booking_id(user_id: int, date: str, time: str) -> str:
    """Build the identifier a booking is stored under."""
    return f"{user_id}-{date}-{time}"


def parse_date(text: str) -> date:
    """Parse a DD.MM.YYYY date; raise ValueError if it is malformed."""
    if not _DATE_SHAPE.fullmatch(text):
        raise ValueError(f"date {text!r} is not in DD.MM.YYYY form")
    return datetime.strptime(text, DATE_FORMAT).date()


def format_date(value: date) -> str:
    """Render a date as DD.MM.YYYY."""
    return value.strftime(DATE_FORMAT)