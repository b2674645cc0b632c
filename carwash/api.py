"""A small client for the Telegram Bot HTTP API and helpers for keyboards."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from typing import Any

import requests

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.telegram.org"
RETRY_DELAY = 3.0
REQUEST_TIMEOUT = 30.0


class TelegramError(Exception):
    """The Bot API refused a request, or it could not be reached."""

    def __init__(self, description: str, error_code: int | None = None) -> None:
        super().__init__(description)
        self.description = description
        self.error_code = error_code


class TelegramAPI:
    """Calls Bot API methods over HTTP and returns their results."""

    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self.token = token
        self.session = session if session is not None else requests.Session()
        self.base_url = base_url.rstrip("/")

    def _post(self, method: str, params: dict[str, Any], timeout: float) -> Any:
        url = f"{self.base_url}/bot{self.token}/{method}"
        payload = {key: value for key, value in params.items() if value is not None}
        try:
            response = self.session.post(url, json=payload, timeout=timeout)
        except requests.RequestException as exc:
            raise TelegramError(f"{method}: {type(exc).__name__}") from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise TelegramError(
                f"{method}: HTTP {response.status_code}", response.status_code
            ) from exc
        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description", "unknown error") if isinstance(body, dict) else "unknown error"
            code = body.get("error_code") if isinstance(body, dict) else None
            raise TelegramError(description, code)
        return body.get("result")

    def call(self, method: str, **kwargs: Any) -> Any:
        """Invoke a Bot API method; parameters set to None are left out."""
        return self._post(method, kwargs, REQUEST_TIMEOUT)

    def get_me(self) -> dict[str, Any]:
        return self.call("getMe")

    def get_updates(self, offset: int = 0, timeout: int = 60) -> list[dict[str, Any]]:
        """Long-poll for updates starting at the given offset."""
        return self._post(
            "getUpdates", {"offset": offset, "timeout": timeout}, timeout + 10
        )

    def iter_updates(self, timeout: int = 60) -> Iterator[dict[str, Any]]:
        """Yield updates forever, acknowledging each one and retrying after failures."""
        offset = 0
        while True:
            try:
                updates = self.get_updates(offset, timeout)
            except TelegramError as exc:
                log.warning("Failed to get updates: %s; retrying", exc)
                time.sleep(RETRY_DELAY)
                continue
            for update in updates:
                offset = max(offset, update["update_id"] + 1)
                yield update

    def send_message(
        self,
        chat_id: int | str,
        text: str,
        parse_mode: str | None = None,
        reply_markup: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self.call(
            "sendMessage",
            chat_id=chat_id,
            text=text,
            parse_mode=parse_mode,
            reply_markup=reply_markup,
        )

    def edit_message_text(
        self,
        chat_id: int | str,
        message_id: int,
        text: str,
        parse_mode: str | None = None,
    ) -> Any:
        return self.call(
            "editMessageText",
            chat_id=chat_id,
            message_id=message_id,
            text=text,
            parse_mode=parse_mode,
        )

    def delete_message(self, chat_id: int | str, message_id: int) -> Any:
        return self.call("deleteMessage", chat_id=chat_id, message_id=message_id)

    def answer_callback_query(
        self, callback_id: str, text: str = "", show_alert: bool = False
    ) -> Any:
        return self.call(
            "answerCallbackQuery",
            callback_query_id=callback_id,
            text=text or None,
            show_alert=True if show_alert else None,
        )


def inline_button(text: str, data: str) -> dict[str, str]:
    """An inline keyboard button that sends back callback data."""
    return {"text": text, "callback_data": data}


def inline_keyboard(rows: Iterable[Iterable[dict[str, str]]]) -> dict[str, Any]:
    """An inline keyboard markup from rows of buttons."""
    return {"inline_keyboard": [list(row) for row in rows]}


def reply_keyboard(rows: Iterable[Iterable[str]]) -> dict[str, Any]:
    """A reply keyboard markup from rows of button labels."""
    return {"keyboard": [[{"text": label} for label in row] for row in rows]}