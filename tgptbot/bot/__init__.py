"""Telegram side: application, relay handler and middleware."""

from .bot import Bot, BotError
from .handlers import RelayHandler
from .middleware import duration, use, whitelist
from .outgoing import Outgoing

__all__ = ["Bot", "BotError", "Outgoing", "RelayHandler", "duration", "use", "whitelist"]
