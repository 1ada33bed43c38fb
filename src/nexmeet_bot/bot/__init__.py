"""Telegram front end."""

from .telegram_bot import TelegramBot

__all__ = ["TelegramBot"]
