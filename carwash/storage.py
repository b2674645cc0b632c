"""SQLite persistence for bookings."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from .models import Booking

_SCHEMA = """
CREATE TABLE IF NOT EXISTS bookings (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    time TEXT NOT NULL,
    car_model TEXT NOT NULL,
    car_number TEXT NOT NULL,
    user_id INTEGER NOT NULL,
    created_at TIMESTAMP NOT NULL
)
"""

_COLUMNS = "id, date, time, car_model, car_number, user_id, created_at"


class SQLiteStorage:
    """Bookings kept in a SQLite database, with the wash's opening hours."""

    def __init__(self, db_path: str | Path, start_time: int, end_time: int) -> None:
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.execute(_SCHEMA)
        self._conn.commit()
        self.start_time = start_time
        self.end_time = end_time

    @staticmethod
    def _to_booking(row: tuple) -> Booking:
        booking_id, date, time, car_model, car_number, user_id, created = row
        return Booking(
            id=booking_id,
            date=date,
            time=time,
            car_model=car_model,
            car_number=car_number,
            user_id=user_id,
            created=datetime.fromisoformat(created),
        )

    def _select(self, where: str = "", params: tuple = ()) -> list[Booking]:
        query = f"SELECT {_COLUMNS} FROM bookings"
        if where:
            query += f" WHERE {where}"
        return [self._to_booking(row) for row in self._conn.execute(query, params)]

    def add_booking(self, booking: Booking) -> None:
        """Insert a booking; raises sqlite3.IntegrityError if its id exists."""
        with self._conn:
            self._conn.execute(
                f"INSERT INTO bookings ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    booking.id,
                    booking.date,
                    booking.time,
                    booking.car_model,
                    booking.car_number,
                    booking.user_id,
                    booking.created.isoformat(),
                ),
            )

    def is_time_available(self, date: str, time: str) -> bool:
        """Whether no booking holds this date and time."""
        (count,) = self._conn.execute(
            "SELECT COUNT(*) FROM bookings WHERE date = ? AND time = ?", (date, time)
        ).fetchone()
        return count == 0

    def get_all_bookings(self) -> list[Booking]:
        return self._select()

    def get_bookings_by_date(self, date: str) -> list[Booking]:
        return self._select("date = ?", (date,))

    def get_booking_by_id(self, booking_id: str) -> Booking | None:
        """Return the booking with this id, or None if there is none."""
        found = self._select("id = ?", (booking_id,))
        return found[0] if found else None

    def delete_booking(self, booking_id: str) -> None:
        """Remove the booking with this id; a missing id is not an error."""
        with self._conn:
            self._conn.execute("DELETE FROM bookings WHERE id = ?", (booking_id,))

    def get_user_bookings(self, user_id: int) -> list[Booking]:
        return self._select("user_id = ?", (user_id,))

    def get_bookings_by_date_time(self, date: str, time: str) -> list[Booking]:
        return self._select("date = ? AND time = ?", (date, time))

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> SQLiteStorage:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()