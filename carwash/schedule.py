"""An in-memory booking schedule."""

from __future__ import annotations

import threading
from datetime import date as Date
from datetime import datetime

from .models import Booking, make_booking_id, parse_date


def _date_key(text: str) -> Date:
    try:
        return parse_date(text)
    except ValueError:
        return Date.min


class ScheduleService:
    """Bookings held in memory, guarded by a lock."""

    def __init__(self, start_time: int, end_time: int, admin_id: int = 0) -> None:
        self.start_time = start_time
        self.end_time = end_time
        self._admin_id = admin_id
        self._bookings: list[Booking] = []
        self._lock = threading.Lock()

    def _taken(self, date: str, time: str) -> bool:
        return any(b.date == date and b.time == time for b in self._bookings)

    def book_date_time(
        self, date: str, time: str, car_model: str, car_number: str, user_id: int
    ) -> bool:
        """Reserve the slot; return False if it is already taken."""
        with self._lock:
            if self._taken(date, time):
                return False
            self._bookings.append(
                Booking(
                    id=make_booking_id(user_id, date, time),
                    date=date,
                    time=time,
                    car_model=car_model,
                    car_number=car_number,
                    user_id=user_id,
                    created=datetime.now(),
                )
            )
            return True

    def is_time_available(self, date: str, time: str) -> bool:
        with self._lock:
            return not self._taken(date, time)

    def cancel_booking(self, booking_id: str, user_id: int) -> Booking | None:
        """Remove the booking if the user owns it or is the admin; return what was removed."""
        with self._lock:
            for index, booking in enumerate(self._bookings):
                if booking.id == booking_id:
                    if booking.user_id == user_id or user_id == self._admin_id:
                        return self._bookings.pop(index)
                    return None
            return None

    def get_bookings_grouped_by_date(self) -> dict[str, list[Booking]]:
        with self._lock:
            grouped: dict[str, list[Booking]] = {}
            for booking in self._bookings:
                grouped.setdefault(booking.date, []).append(booking)
            return grouped

    def get_available_time_slots(self, date: str) -> list[str]:
        """Hourly slots within opening hours that are still free on the date."""
        with self._lock:
            booked = {b.time for b in self._bookings if b.date == date}
        slots = (f"{hour:02d}:00" for hour in range(self.start_time, self.end_time + 1))
        return [slot for slot in slots if slot not in booked]

    def get_user_bookings(self, user_id: int) -> list[Booking]:
        """The user's bookings, ordered by date then time."""
        with self._lock:
            mine = [b for b in self._bookings if b.user_id == user_id]
        return sorted(mine, key=lambda b: (_date_key(b.date), b.time))

    def get_booking(self, user_id: int, date: str, time: str) -> Booking | None:
        with self._lock:
            return next(
                (
                    b
                    for b in self._bookings
                    if b.user_id == user_id and b.date == date and b.time == time
                ),
                None,
            )