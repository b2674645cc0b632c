"""The car-wash booking bot: dialogue state and update handling."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from . import views
from .api import TelegramAPI, TelegramError
from .config import Config
from .models import Booking, UserState, format_date, make_booking_id, parse_date
from .storage import SQLiteStorage

log = logging.getLogger(__name__)

_CAR_INFO_PROMPT = "Введите марку и номер машины через пробел\nПример: Лада 123"
_CAR_INFO_RETRY = "Нужно ввести и марку, и номер!\nПример: Газель 123"


class CarWashBot:
    """Reacts to Telegram updates, keeping each user's place in the booking dialogue."""

    def __init__(self, config: Config, api: TelegramAPI, storage: SQLiteStorage) -> None:
        self.config = config
        self.api = api
        self.storage = storage
        self.admin_id = config.admin_id
        self.user_states: dict[int, UserState] = {}
        self.clock = datetime.now
        self._last_message_ids: dict[int, int] = {}
        self._lock = threading.Lock()

    def is_admin(self, user_id: int) -> bool:
        return self.config.is_admin(user_id)

    # Sending helpers

    def _send(self, chat_id: int, text: str) -> None:
        try:
            self.api.send_message(chat_id, text)
        except TelegramError as exc:
            log.error("Failed to send message: %s", exc)

    def _send_saved(self, chat_id: int, reply: views.Reply) -> None:
        try:
            sent = self.api.send_message(
                chat_id, reply.text, parse_mode=reply.parse_mode, reply_markup=reply.reply_markup
            )
        except TelegramError as exc:
            log.error("Failed to send message: %s", exc)
            return
        with self._lock:
            self._last_message_ids[chat_id] = sent["message_id"]

    def _delete_last_message(self, chat_id: int) -> None:
        with self._lock:
            message_id = self._last_message_ids.get(chat_id, 0)
        if message_id:
            try:
                self.api.delete_message(chat_id, message_id)
            except TelegramError as exc:
                log.debug("Could not delete message %s: %s", message_id, exc)

    def _answer(self, callback_id: str, text: str = "", show_alert: bool = False) -> None:
        try:
            self.api.answer_callback_query(callback_id, text, show_alert)
        except TelegramError as exc:
            log.error("Failed to answer callback: %s", exc)

    def notify_channel(self, booking: Booking) -> None:
        """Announce a booking in the configured channel.

        Raises ValueError if no channel is configured and TelegramError if sending fails.
        """
        if self.config.channel_id == 0:
            raise ValueError("channel ID not configured")
        reply = views.channel_notification(booking)
        self.api.send_message(
            self.config.channel_id,
            reply.text,
            parse_mode=reply.parse_mode,
            reply_markup=reply.reply_markup,
        )

    # Dispatch

    def handle_update(self, update: dict[str, Any]) -> None:
        if update.get("message") is not None:
            self.handle_message(update["message"])
        elif update.get("callback_query") is not None:
            self.handle_callback_query(update["callback_query"])

    def handle_message(self, message: dict[str, Any]) -> None:
        chat_id = message["chat"]["id"]
        user_id = message.get("from", {}).get("id", 0)
        text = message.get("text", "")

        state = self.user_states.get(user_id)
        if state is not None and state.awaiting_car_info:
            self._handle_car_info_input(chat_id, user_id, text)
            return

        if text in ("/start", "/menu", views.MAIN_MENU):
            self._send_saved(chat_id, views.welcome_message())
        elif text in (views.BOOK, "/book"):
            self._show_day_selection(chat_id)
        elif text in (views.SCHEDULE, "/schedule"):
            self._show_schedule(chat_id)
        elif text in (views.MY_BOOKINGS, "/mybookings"):
            self._show_user_bookings(chat_id, user_id)
        elif text in (views.CANCEL, "/cancel"):
            self._handle_cancel_command(chat_id, user_id)
        else:
            self._send(chat_id, "Я не понимаю эту команду. Используйте кнопки меню.")

    def handle_callback_query(self, query: dict[str, Any]) -> None:
        message = query.get("message") or {}
        chat_id = message.get("chat", {}).get("id", 0)
        user_id = query.get("from", {}).get("id", 0)
        data = query.get("data", "")
        query_id = query["id"]

        self._answer(query_id)

        if data.startswith("day_"):
            self._handle_day_selection(chat_id, user_id, data.removeprefix("day_"))
        elif data.startswith("time_"):
            self._handle_time_selection(chat_id, user_id, data.removeprefix("time_"))
        elif data == "main_menu":
            self._send_saved(chat_id, views.welcome_message())
        elif data.startswith("cancel_"):
            self._handle_booking_cancellation(chat_id, user_id, data.removeprefix("cancel_"))
        elif data == "back_to_dates":
            self._show_day_selection(chat_id)
        elif data.startswith("admin_cancel:"):
            self._handle_admin_cancel(query_id, user_id, message, data.removeprefix("admin_cancel:"))
        else:
            self._answer(query_id)

    def run(self) -> None:
        """Poll for updates and handle them until interrupted."""
        try:
            me = self.api.get_me()
            log.info("Bot started: @%s", me.get("username", ""))
        except TelegramError as exc:
            log.warning("Could not fetch bot identity: %s", exc)
        log.info("Admin IDs: %s", self.config.admin_ids)
        for update in self.api.iter_updates(timeout=60):
            self.handle_update(update)

    # Booking dialogue

    def _show_day_selection(self, chat_id: int) -> None:
        self._send_saved(chat_id, views.day_selection(self.clock()))

    def _slot_available(self, date: str, time: str) -> bool:
        try:
            return self.storage.is_time_available(date, time)
        except sqlite3.Error as exc:
            log.error("Availability check failed: %s", exc)
            return False

    def _show_time_slots(self, chat_id: int, date_str: str) -> None:
        try:
            reply = views.time_slots(
                date_str,
                self.storage.start_time,
                self.storage.end_time,
                self._slot_available,
                self.clock(),
            )
        except ValueError:
            self._send(chat_id, "Ошибка формата даты")
            return
        self._send_saved(chat_id, reply)

    def _handle_day_selection(self, chat_id: int, user_id: int, date_str: str) -> None:
        now = self.clock()
        try:
            selected = parse_date(date_str)
        except ValueError:
            self._send(chat_id, "❌ Ошибка формата даты")
            self._show_day_selection(chat_id)
            return

        if selected < now.date():
            self._send(chat_id, "❌ Нельзя записаться на прошедшую дату")
            self._show_day_selection(chat_id)
            return

        if date_str == format_date(now.date()) and now.hour >= self.storage.end_time:
            self._send(chat_id, "❌ На сегодня время записи уже закончилось")
            self._show_day_selection(chat_id)
            return

        self.user_states[user_id] = UserState(awaiting_time=True, selected_date=date_str)
        self._show_time_slots(chat_id, date_str)

    def _handle_time_selection(self, chat_id: int, user_id: int, time_str: str) -> None:
        state = self.user_states.get(user_id, UserState())
        now = self.clock()
        if state.selected_date == format_date(now.date()):
            try:
                chosen = datetime.strptime(time_str, "%H:%M")
            except ValueError:
                chosen = None
            if chosen is not None:
                slot_start = now.replace(
                    hour=chosen.hour, minute=chosen.minute, second=0, microsecond=0
                )
                if slot_start < now + timedelta(hours=1):
                    self._send(chat_id, "❌ Нельзя записаться на прошедшее время")
                    self._show_time_slots(chat_id, state.selected_date)
                    return

        if not self._slot_available(state.selected_date, time_str):
            self._send(chat_id, "❌ Это время уже занято! Выберите другое время.")
            self._show_time_slots(chat_id, state.selected_date)
            return

        self.user_states[user_id] = UserState(
            awaiting_car_info=True,
            selected_date=state.selected_date,
            selected_time=time_str,
        )
        self._send_saved(chat_id, views.Reply(_CAR_INFO_PROMPT))

    def _handle_car_info_input(self, chat_id: int, user_id: int, text: str) -> None:
        self._delete_last_message(chat_id)

        try:
            car_model, car_number = views.parse_car_info(text)
        except ValueError:
            self._send_saved(chat_id, views.Reply(_CAR_INFO_RETRY))
            return

        state = self.user_states.get(user_id, UserState())
        booking_id = make_booking_id(user_id, state.selected_date, state.selected_time)
        booking = Booking(
            id=booking_id,
            date=state.selected_date,
            time=state.selected_time,
            car_model=car_model,
            car_number=car_number,
            user_id=user_id,
            created=datetime.now(),
        )
        try:
            self.storage.add_booking(booking)
        except sqlite3.Error as exc:
            log.error("Failed to save booking: %s", exc)
            self._send(chat_id, "⚠️ Ошибка при сохранении записи")
            return

        if self.config.channel_id != 0:
            self._announce(booking_id)

        self.user_states.pop(user_id, None)
        self._send_saved(chat_id, views.confirmation_message(booking))
        self._send(
            self.admin_id,
            views.admin_new_booking_text(state.selected_time, car_model, car_number),
        )

    def _announce(self, booking_id: str) -> None:
        try:
            stored = self.storage.get_booking_by_id(booking_id)
        except sqlite3.Error as exc:
            log.error("Failed to read booking: %s", exc)
            return
        if stored is None:
            return
        try:
            self.notify_channel(stored)
        except (ValueError, TelegramError) as exc:
            log.error("Failed to notify channel: %s", exc)
            self._send(self.admin_id, f"Ошибка отправки в канал: {exc}")

    # Viewing and cancelling

    def _show_schedule(self, chat_id: int) -> None:
        try:
            bookings = self.storage.get_all_bookings()
        except sqlite3.Error:
            self._send(chat_id, "⚠️ Ошибка при получении расписания")
            return
        self._send_saved(chat_id, views.schedule_message(bookings, self.clock()))

    def _show_user_bookings(self, chat_id: int, user_id: int) -> None:
        try:
            bookings = self.storage.get_user_bookings(user_id)
        except sqlite3.Error:
            self._send(chat_id, "⚠️ Ошибка при получении ваших записей")
            return
        if not bookings:
            self._send(chat_id, views.NO_BOOKINGS)
            return
        self._send_saved(chat_id, views.user_bookings_message(bookings))

    def _handle_cancel_command(self, chat_id: int, user_id: int) -> None:
        try:
            bookings = self.storage.get_user_bookings(user_id)
        except sqlite3.Error:
            bookings = []
        if not bookings:
            self._send(chat_id, views.NO_BOOKINGS)
            return
        self._send_saved(chat_id, views.cancel_menu(bookings))

    def _handle_booking_cancellation(self, chat_id: int, user_id: int, booking_id: str) -> None:
        try:
            booking = self.storage.get_booking_by_id(booking_id)
        except sqlite3.Error:
            self._send(chat_id, "❌ Ошибка при отмене записи")
            return
        if booking is None:
            self._send(chat_id, "❌ Запись не найдена")
            return
        try:
            self.storage.delete_booking(booking_id)
        except sqlite3.Error:
            self._send(chat_id, "❌ Не удалось отменить запись")
            return

        self._send(chat_id, views.cancellation_text(booking))
        if user_id != self.admin_id:
            self._send(self.admin_id, views.admin_cancellation_text(booking))

    def _handle_admin_cancel(
        self, query_id: str, user_id: int, message: dict[str, Any], booking_id: str
    ) -> None:
        if not self.is_admin(user_id):
            self._answer(query_id, "❌ Только администратор может отменять записи", True)
            return
        try:
            self.storage.delete_booking(booking_id)
        except sqlite3.Error:
            self._answer(query_id, "⚠️ Не удалось отменить запись", True)
            return
        self._answer(query_id, "✅ Запись отменена")
        try:
            self.api.edit_message_text(
                self.config.channel_id,
                message.get("message_id", 0),
                f"❌ ОТМЕНЕНО АДМИНОМ\n{message.get('text', '')}",
                parse_mode="HTML",
            )
        except TelegramError as exc:
            log.error("Failed to edit channel message: %s", exc)


def create_bot(config: Config, db_path: str | Path = "bookings.db") -> CarWashBot:
    """Connect to the Bot API and open the booking database.

    Raises TelegramError if the token is rejected and sqlite3.Error if the database fails.
    """
    api = TelegramAPI(config.bot_token)
    api.get_me()
    storage = SQLiteStorage(db_path, config.start_time, config.end_time)
    return CarWashBot(config, api, storage)