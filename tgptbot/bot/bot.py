# tgptbot/bot/bot.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import asyncio

from telegram import Update
from telegram.error import InvalidToken
from telegram.ext import Application, ApplicationBuilder, ContextTypes, MessageHandler, filters

from tgptbot.config import Settings

from .handlers import RelayHandler
from .middleware import duration, use, whitelist

POLL_TIMEOUT = 30
ALLOWED_UPDATES = [Update.MESSAGE, Update.EDITED_MESSAGE]


class BotError(RuntimeError):
    pass


def build_application(token: str) -> Application:
    try:
        # one update at a time, the next one waits for the reply
        return ApplicationBuilder().token(token).concurrent_updates(False).build()
    except InvalidToken as e:
        raise BotError(f"failed to create bot: {e}") from e


class Bot:
    def __init__(self, settings: Settings, application: Application | None = None):
        self.settings = settings
        self.log = settings.log.get_logger("bot")
        self.application = application or build_application(settings.token)
        self._stopped = asyncio.Event()

        handler = use(
            RelayHandler(settings.chat, settings.timeout, log=self.log),
            whitelist(settings.users, log=self.log),  # allow only users from config
            duration(log=self.log),
        )
        self.application.add_handler(MessageHandler(filters.TEXT & filters.UpdateType.MESSAGES, handler))
        self.application.add_error_handler(self._on_error)

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        self.log.error("unhandled error update=%r", update, exc_info=context.error)

    async def start(self, shutdown: asyncio.Event) -> None:
        """Polls until shutdown is set, then stops gracefully."""
        self.log.info("starting")
        app = self.application
        try:
            async with app:
                await app.start()
                await app.updater.start_polling(timeout=POLL_TIMEOUT, allowed_updates=ALLOWED_UPDATES)

                await shutdown.wait()
                self.log.info("stopping")

                await app.updater.stop()
                await app.stop()
        finally:
            await self.settings.chat.close()
            self._stopped.set()

    async def stop(self) -> None:
        """Waits for the bot to stop."""
        await self._stopped.wait()
