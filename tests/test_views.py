from datetime import datetime, timedelta

import pytest

from carwash.models import Booking, format_date
from carwash.views import (
    Reply,
    admin_cancellation_text,
    admin_new_booking_text,
    cancel_menu,
    cancellation_text,
    channel_notification,
    confirmation_message,
    day_selection,
    parse_car_info,
    schedule_message,
    time_slots,
    user_bookings_message,
    welcome_message,
)

NOW = datetime(2024, 3, 5, 9, 30)


def _booking(date, time, model="Лада", number="123", user_id=7):
    return Booking(
        id=f"{user_id}-{date}-{time}",
        date=date,
        time=time,
        car_model=model,
        car_number=number,
        user_id=user_id,
        created=NOW,
    )


def _inline_rows(reply):
    return reply.reply_markup["inline_keyboard"]


def test_welcome_message_keyboard():
    reply = welcome_message()
    assert reply.parse_mode == "Markdown"
    assert reply.text.endswith("Выберите действие:")
    labels = [[b["text"] for b in row] for row in reply.reply_markup["keyboard"]]
    assert labels == [
        ["📝 Записаться", "🕒 Расписание"],
        ["❌ Отменить запись", "ℹ️ Помощь"],
    ]


def test_day_selection_covers_a_week():
    reply = day_selection(NOW)
    rows = _inline_rows(reply)
    assert reply.text == "Выберите день для записи:"
    assert len(rows) == 8
    for offset, row in enumerate(rows[:7]):
        expected = "day_" + format_date(NOW.date() + timedelta(days=offset))
        assert row[0]["callback_data"] == expected
    assert rows[0][0]["text"].startswith("📅 Сегодня")
    assert rows[1][0]["text"].startswith("📅 Завтра")
    assert rows[2][0]["text"].startswith("📅 Четверг")
    assert rows[7] == [{"text": "🏠 Главное меню", "callback_data": "main_menu"}]


def test_time_slots_for_other_day():
    reply = time_slots(
        "05.03.2024", 8, 12, lambda d, t: t != "10:00", datetime(2024, 3, 4, 15)
    )
    rows = _inline_rows(reply)
    assert reply.text == "Выберите время на Вторник, 05.03.2024:"
    assert len(rows) == 6
    assert rows[0][0] == {"text": "🟢 08:00 (Свободно)", "callback_data": "time_08:00"}
    assert rows[2][0] == {"text": "🔴 10:00 (Недоступно)", "callback_data": "time_10:00"}
    assert [b["callback_data"] for b in rows[-1]] == ["back_to_dates", "main_menu"]


def test_time_slots_today_blocks_started_hours():
    reply = time_slots("05.03.2024", 8, 11, lambda d, t: True, NOW)
    labels = [row[0]["text"] for row in _inline_rows(reply)[:-1]]
    assert ["Недоступно" in label for label in labels] == [True, True, False, False]


def test_time_slots_passes_date_to_checker():
    seen = []
    time_slots("06.03.2024", 8, 9, lambda d, t: seen.append((d, t)) or True, NOW)
    assert seen == [("06.03.2024", "08:00"), ("06.03.2024", "09:00")]


def test_time_slots_rejects_bad_date():
    with pytest.raises(ValueError):
        time_slots("2024-03-05", 8, 20, lambda d, t: True, NOW)


def test_schedule_message_empty():
    reply = schedule_message([], NOW)
    assert reply.text == "📅 *Расписание моек*\n\nНа данный момент нет записей\n"
    assert reply.parse_mode == "Markdown"


def test_schedule_message_groups_and_orders():
    tomorrow = format_date(NOW.date() + timedelta(days=1))
    bookings = [
        _booking(tomorrow, "12:00"),
        _booking("05.03.2024", "14:00"),
        _booking("05.03.2024", "09:00", model="Газель"),
    ]
    text = schedule_message(bookings, NOW).text
    today_pos = text.index("=== Сегодня, 5 Марта ===")
    tomorrow_pos = text.index("=== Завтра,")
    assert today_pos < tomorrow_pos
    assert text.index("🕒 09:00 - Газель 123") < text.index("🕒 14:00 - Лада 123")
    assert text.index("🕒 14:00") < tomorrow_pos
    assert "На данный момент нет записей" not in text


def test_user_bookings_message():
    empty = user_bookings_message([])
    assert empty == Reply("У вас нет активных записей.")
    reply = user_bookings_message([_booking("05.03.2024", "10:00")])
    assert reply.text.startswith("📋 *Ваши записи:*\n\n")
    assert "🚗 Лада 123" in reply.text
    rows = _inline_rows(reply)
    assert rows[0][0]["callback_data"] == "cancel_05.03.2024_10:00"
    assert rows[-1][0]["callback_data"] == "main_menu"


def test_cancel_menu_uses_ids():
    booking = _booking("05.03.2024", "10:00")
    reply = cancel_menu([booking])
    rows = _inline_rows(reply)
    assert rows[0][0]["callback_data"] == "cancel_" + booking.id
    assert rows[0][0]["text"] == "05.03.2024 10:00 - Лада 123"
    assert cancel_menu([]).text == "У вас нет активных записей."


def test_channel_notification():
    booking = _booking("05.03.2024", "10:00")
    reply = channel_notification(booking)
    assert reply.parse_mode == "HTML"
    assert "<b>05.03.2024</b>" in reply.text
    assert reply.text.endswith("👤 ID: 7")
    assert _inline_rows(reply)[0][0]["callback_data"] == "admin_cancel:" + booking.id


def test_confirmation_message():
    reply = confirmation_message(_booking("05.03.2024", "10:00"))
    assert reply.text.startswith("✅ Вы успешно записаны на мойку!")
    assert "🕒 Время: 10:00" in reply.text
    assert reply.reply_markup == {"keyboard": [[{"text": "🏠 Главное меню"}]]}


def test_notification_texts():
    booking = _booking("05.03.2024", "10:00")
    assert admin_new_booking_text("10:00", "Лада", "123").splitlines() == [
        "🆕 Новая запись:",
        "Время: 10:00",
        "Авто: Лада 123",
    ]
    assert cancellation_text(booking).startswith("✅ Запись отменена:\n📅 05.03.2024")
    assert admin_cancellation_text(booking).endswith("05.03.2024 10:00 - Лада 123")


def test_parse_car_info():
    assert parse_car_info("Лада 123") == ("Лада", "123")
    assert parse_car_info("Газель 12 3") == ("Газель", "12 3")
    assert parse_car_info("Лада ") == ("Лада", "")
    with pytest.raises(ValueError):
        parse_car_info("Лада")