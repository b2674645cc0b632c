"""Settings read from environment variables."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

_INT_SHAPE = re.compile(r"[+-]?\d+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class Config:
    """Bot settings."""

    bot_token: str = ""
    admin_id: int = 0
    admin_ids: list[int] = field(default_factory=list)
    start_time: int = 8
    end_time: int = 20
    channel_id: int = 0

    def is_admin(self, user_id: int) -> bool:
        """Whether the user is one of the listed admins or the single legacy admin."""
        if user_id in self.admin_ids:
            return True
        return self.admin_id != 0 and user_id == self.admin_id


def _environ(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if env is None else env


def _parse_int(text: str) -> int:
    if not _INT_SHAPE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer {text!r} out of range")
    return value


def _parse_int_list(text: str) -> list[int]:
    values = []
    for part in text.split(","):
        try:
            values.append(_parse_int(part.strip()))
        except ValueError:
            continue
    return values


def get_env(key: str, default: str = "", env: Mapping[str, str] | None = None) -> str:
    """Return the variable if it is set, even to an empty string, else the default."""
    return _environ(env).get(key, default)


def get_env_int(key: str, default: int = 0, env: Mapping[str, str] | None = None) -> int:
    """Return the variable as an integer, or the default if unset or not a number."""
    value = _environ(env).get(key)
    if value is None:
        return default
    try:
        return _parse_int(value)
    except ValueError:
        return default


def get_env_int_list(
    key: str, default: list[int] | None = None, env: Mapping[str, str] | None = None
) -> list[int]:
    """Return the comma-separated integers in the variable, skipping bad entries."""
    value = _environ(env).get(key)
    if value is None:
        return list(default) if default is not None else []
    return _parse_int_list(value)


def parse_admin_ids(text: str) -> list[int]:
    """Parse a comma-separated list of user ids, ignoring entries that are not ids."""
    if not text:
        return []
    return _parse_int_list(text)


def load(env: Mapping[str, str] | None = None) -> Config:
    """Build a Config from the given mapping, or from the process environment."""
    return Config(
        bot_token=get_env("TELEGRAM_BOT_TOKEN", "", env),
        admin_id=get_env_int("ADMIN_CHAT_ID", 0, env),
        admin_ids=parse_admin_ids(get_env("ADMIN_IDS", "", env)),
        start_time=get_env_int("START_TIME", 8, env),
        end_time=get_env_int("END_TIME", 20, env),
        channel_id=get_env_int("CHANNEL_ID", 0, env),
    )