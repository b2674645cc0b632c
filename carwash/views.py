"""Texts and keyboards the bot sends, built without touching the network."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date as Date
from datetime import datetime, timedelta
from typing import Any

from .api import inline_button, inline_keyboard, reply_keyboard
from .models import WEEKDAY_NAMES, Booking, format_date, parse_date

MONTH_NAMES = (
    "Января",
    "Февраля",
    "Марта",
    "Апреля",
    "Мая",
    "Июня",
    "Июля",
    "Августа",
    "Сентября",
    "Октября",
    "Ноября",
    "Декабря",
)

MAIN_MENU = "🏠 Главное меню"
BOOK = "📝 Записаться"
SCHEDULE = "🕒 Расписание"
MY_BOOKINGS = "❌ Мои записи"
CANCEL = "❌ Отменить запись"
HELP = "ℹ️ Помощь"
NO_BOOKINGS = "У вас нет активных записей."


@dataclass(frozen=True)
class Reply:
    """A message ready to be sent: text, parse mode and keyboard."""

    text: str
    parse_mode: str | None = None
    reply_markup: dict[str, Any] | None = None


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now()


def welcome_message() -> Reply:
    text = "🚗 *Добро пожаловать в бота автомойки!* 🧼\n\n    \nВыберите действие:"
    return Reply(
        text,
        "Markdown",
        reply_keyboard([[BOOK, SCHEDULE], [CANCEL, HELP]]),
    )


def day_selection(now: datetime | None = None) -> Reply:
    """Buttons for today and the six days after it."""
    today = _now(now).date()
    rows = []
    for offset in range(7):
        day = today + timedelta(days=offset)
        if offset == 0:
            label = "Сегодня"
        elif offset == 1:
            label = "Завтра"
        else:
            label = WEEKDAY_NAMES[day.weekday()]
        text = f"📅 {label} ({day.strftime('%d.%m')})"
        rows.append([inline_button(text, "day_" + format_date(day))])
    rows.append([inline_button(MAIN_MENU, "main_menu")])
    return Reply("Выберите день для записи:", reply_markup=inline_keyboard(rows))


def time_slots(
    date_str: str,
    start_hour: int,
    end_hour: int,
    is_available: Callable[[str, str], bool],
    now: datetime | None = None,
) -> Reply:
    """Hourly slot buttons for a date; raises ValueError if the date is malformed.

    Hours that have already begun today are shown as unavailable.
    """
    day = parse_date(date_str)
    current = _now(now)
    is_today = date_str == format_date(current.date())
    header = f"Выберите время на {WEEKDAY_NAMES[day.weekday()]}, {format_date(day)}:"

    rows = []
    for hour in range(start_hour, end_hour + 1):
        slot = f"{hour:02d}:00"
        available = is_available(date_str, slot)
        if is_today and hour <= current.hour:
            available = False
        label = f"🟢 {slot} (Свободно)" if available else f"🔴 {slot} (Недоступно)"
        rows.append([inline_button(label, "time_" + slot)])
    rows.append(
        [
            inline_button("🔙 Назад к выбору даты", "back_to_dates"),
            inline_button(MAIN_MENU, "main_menu"),
        ]
    )
    return Reply(header, reply_markup=inline_keyboard(rows))


def _date_key(text: str) -> Date:
    try:
        return parse_date(text)
    except ValueError:
        return Date.min


def schedule_message(bookings: Iterable[Booking], now: datetime | None = None) -> Reply:
    """All bookings grouped by day, days in order and bookings by time."""
    grouped: dict[str, list[Booking]] = {}
    for booking in bookings:
        grouped.setdefault(booking.date, []).append(booking)

    today = _now(now).date()
    tomorrow = today + timedelta(days=1)

    parts = ["📅 *Расписание моек*\n\n"]
    for key in sorted(grouped, key=_date_key):
        day = _date_key(key)
        month = MONTH_NAMES[day.month - 1]
        if day == today:
            title = "Сегодня"
        elif day == tomorrow:
            title = "Завтра"
        else:
            title = WEEKDAY_NAMES[day.weekday()]
        parts.append(f"=== {title}, {day.day} {month} ===\n")
        for booking in sorted(grouped[key], key=lambda b: b.time):
            parts.append(f"🕒 {booking.time} - {booking.car_model} {booking.car_number}\n")
        parts.append("\n")
    if not grouped:
        parts.append("На данный момент нет записей\n")

    return Reply("".join(parts), "Markdown", reply_keyboard([[BOOK, MAIN_MENU]]))


def user_bookings_message(bookings: Iterable[Booking]) -> Reply:
    """The user's bookings with a cancel button under each."""
    bookings = list(bookings)
    if not bookings:
        return Reply(NO_BOOKINGS)
    parts = ["📋 *Ваши записи:*\n\n"]
    rows = []
    for booking in bookings:
        parts.append(
            f"📅 {booking.date}\n🕒 {booking.time}\n"
            f"🚗 {booking.car_model} {booking.car_number}\n\n"
        )
        rows.append(
            [
                inline_button(
                    "❌ Отменить эту запись", f"cancel_{booking.date}_{booking.time}"
                )
            ]
        )
    rows.append([inline_button("🏠 В главное меню", "main_menu")])
    return Reply("".join(parts), "Markdown", inline_keyboard(rows))


def cancel_menu(bookings: Iterable[Booking]) -> Reply:
    """A button per booking that cancels it by id."""
    bookings = list(bookings)
    if not bookings:
        return Reply(NO_BOOKINGS)
    rows = [
        [
            inline_button(
                f"{b.date} {b.time} - {b.car_model} {b.car_number}", "cancel_" + b.id
            )
        ]
        for b in bookings
    ]
    rows.append([inline_button("🔙 Назад", "main_menu")])
    return Reply("Выберите запись для отмены:", reply_markup=inline_keyboard(rows))


def channel_notification(booking: Booking) -> Reply:
    """The channel post announcing a booking, with an admin cancel button."""
    text = (
        "🆕 Новая запись на мойку:\n"
        f"📅 <b>{booking.date}</b> в <code>{booking.time}</code>\n"
        f"🚗 <i>{booking.car_model} {booking.car_number}</i>\n"
        f"👤 ID: {booking.user_id}"
    )
    markup = inline_keyboard(
        [[inline_button("❌ Отменить", f"admin_cancel:{booking.id}")]]
    )
    return Reply(text, "HTML", markup)


def confirmation_message(booking: Booking) -> Reply:
    text = (
        "✅ Вы успешно записаны на мойку!\n\n"
        f"\t📅 Дата: {booking.date}\n"
        f"\t🕒 Время: {booking.time}\n"
        f"\t🚗 Автомобиль: {booking.car_model} {booking.car_number}\n"
        "\t\n"
        "\tСпасибо за выбор нашей услуги!"
    )
    return Reply(text, reply_markup=reply_keyboard([[MAIN_MENU]]))


def admin_new_booking_text(time: str, car_model: str, car_number: str) -> str:
    return f"🆕 Новая запись:\nВремя: {time}\nАвто: {car_model} {car_number}"


def cancellation_text(booking: Booking) -> str:
    return (
        f"✅ Запись отменена:\n📅 {booking.date}\n🕒 {booking.time}\n"
        f"🚗 {booking.car_model} {booking.car_number}"
    )


def admin_cancellation_text(booking: Booking) -> str:
    return (
        "ℹ️ Пользователь отменил запись:\n"
        f"{booking.date} {booking.time} - {booking.car_model} {booking.car_number}"
    )


def parse_car_info(text: str) -> tuple[str, str]:
    """Split "model number" at the first space; raise ValueError if there is none."""
    parts = text.split(" ", 1)
    if len(parts) < 2:
        raise ValueError("car model and number must be separated by a space")
    return parts[0], parts[1]