"""Command-line entry point that starts the bot."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from collections.abc import Sequence

from dotenv import load_dotenv

from . import config as config_module
from .api import TelegramError
from .bot import create_bot

log = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Load settings, connect and serve updates; return a process exit code."""
    parser = argparse.ArgumentParser(prog="carwash", description="Car-wash booking bot")
    parser.add_argument("--db-path", default="bookings.db", help="SQLite database file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    if not load_dotenv(".env"):
        log.warning("Warning: .env file not loaded")

    cfg = config_module.load()
    if not cfg.bot_token:
        log.error("Bot token is not set. Provide TELEGRAM_BOT_TOKEN in the .env file")
        return 1

    log.info("Bot token loaded (first 5 characters: %r)", cfg.bot_token[:5])

    try:
        bot = create_bot(cfg, args.db_path)
    except (TelegramError, sqlite3.Error) as exc:
        log.error("Failed to create bot: %s", exc)
        return 1

    log.info("Bot started successfully")
    try:
        bot.run()
    except KeyboardInterrupt:
        log.info("Stopped")
    finally:
        bot.storage.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())