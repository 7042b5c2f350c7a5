# tgptbot/bot/middleware.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import functools
import logging
import time
from datetime import timedelta
from typing import Awaitable, Callable, Iterable

from telegram import Update
from telegram.ext import ContextTypes

from tgptbot.config import format_duration

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]
Middleware = Callable[[Handler], Handler]

ERROR_REPLY = "oops, an error has occurred\n\n"

_log = logging.getLogger("tgptbot.bot")


def use(handler: Handler, *middlewares: Middleware) -> Handler:
    """Wraps handler, the first middleware is the outermost one."""
    for m in reversed(middlewares):
        handler = m(handler)
    return handler


def whitelist(users: Iterable[int], log: logging.Logger | None = None) -> Middleware:
    allowed = frozenset(users)
    log = log or _log

    def middleware(next_handler: Handler) -> Handler:
        @functools.wraps(next_handler)
        async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            user = update.effective_user
            if user is None or user.id not in allowed:
                log.debug("blocked user=%s", getattr(user, "id", None))
                return
            await next_handler(update, context)

        return wrapper

    return middleware


def truncate(elapsed: float, step_ms: int = 100) -> timedelta:
    ms = int(elapsed * 1000)
    return timedelta(milliseconds=ms - ms % step_ms)


def duration(log: logging.Logger | None = None) -> Middleware:
    """Logs handling time and turns a handler failure into a reply."""
    log = log or _log

    def middleware(next_handler: Handler) -> Handler:
        @functools.wraps(next_handler)
        async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            start = time.monotonic()
            message_id = update.effective_message.message_id
            user = update.effective_user

            log.info("got id=%s user=%s", message_id, getattr(user, "username", None))
            try:
                await next_handler(update, context)
            except Exception as e:
                # the error occurred inside the handler
                log.warning("handler failed id=%s error=%r", message_id, e)
                await update.effective_chat.send_message(ERROR_REPLY + str(e))
            finally:
                log.info(
                    "handled id=%s duration=%s",
                    message_id,
                    format_duration(truncate(time.monotonic() - start)),
                )

        return wrapper

    return middleware
