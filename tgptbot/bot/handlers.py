# tgptbot/bot/handlers.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from datetime import timedelta

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from tgptbot.chat import Chat
from tgptbot.ygpt import YGPTError

from .outgoing import Outgoing

ERROR_PREFIX = "ERROR: failed to get completion: "


class RelayHandler:
    """Sends the message text to the completion API and the answer back to the chat."""

    def __init__(self, chat: Chat, timeout: timedelta, log: logging.Logger | None = None):
        self.chat = chat
        self.timeout = timeout
        self.log = log or logging.getLogger("tgptbot.bot")

    async def relay(self, text: str, message_id: int) -> Outgoing:
        try:
            result = await self.chat.generation(text, message_id, timeout=self.timeout.total_seconds())
        except YGPTError as e:
            self.log.error("failed id=%s error=%s", message_id, e)
            return Outgoing(ERROR_PREFIX + str(e))

        return Outgoing(result, parse_mode=ParseMode.MARKDOWN)

    async def __call__(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = update.effective_user
        message = update.effective_message
        content = (message.text or "").strip()

        self.log.info("generation id=%s user_id=%s", message.message_id, user.id)
        self.log.debug("generation id=%s user_id=%s text=%r", message.message_id, user.id, content)

        out = await self.relay(content, message.message_id)
        await update.effective_chat.send_message(out.text, parse_mode=out.parse_mode)
