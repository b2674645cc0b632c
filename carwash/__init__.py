"""Telegram bot for booking car wash time slots, with SQLite storage."""

__version__ = "0.1.0"