import asyncio
import logging
from datetime import timedelta

import httpx
from telegram.constants import ParseMode

from conftest import json_handler, make_update, mock_client
from tgptbot.bot.handlers import ERROR_PREFIX, RelayHandler
from tgptbot.bot.middleware import duration, use, whitelist
from tgptbot.chat import Chat


def _handler(handler, timeout=timedelta(seconds=5)):
    chat = Chat(api_key="test-key", url="https://llm.example.test/chat", client=mock_client(handler))
    return RelayHandler(chat, timeout)


def test_relay_success():
    out = asyncio.run(_handler(json_handler()).relay("Кто ты?", 1))

    assert out.text == "Меня зовут Алиса"
    assert out.parse_mode == ParseMode.MARKDOWN


def test_relay_failure(caplog):
    with caplog.at_level(logging.ERROR, logger="tgptbot.bot"):
        out = asyncio.run(_handler(json_handler("oops", status=502)).relay("Кто ты?", 3))

    assert out.text.startswith(ERROR_PREFIX + "failed to generate chat")
    assert "unexpected status code=502" in out.text
    assert out.parse_mode is None
    assert "failed id=3" in caplog.text


def test_relay_timeout():
    async def slow(request):
        await asyncio.sleep(1)
        return httpx.Response(200)

    out = asyncio.run(_handler(slow, timeout=timedelta(milliseconds=50)).relay("hi", 1))

    assert out.text.startswith(ERROR_PREFIX)
    assert "deadline exceeded" in out.text


def test_call_sends_trimmed_text():
    captured = {}

    def handler(request):
        captured["body"] = request.content.decode("utf-8")
        return json_handler()(request)

    update = make_update(text="  Кто ты?\n")
    asyncio.run(_handler(handler)(update, None))

    assert '"text":"Кто ты?"' in captured["body"]
    update.effective_chat.send_message.assert_awaited_once_with(
        "Меня зовут Алиса", parse_mode=ParseMode.MARKDOWN
    )


def test_call_empty_text_replies_with_error():
    def handler(request):
        raise AssertionError("no request expected")

    update = make_update(text="   ")
    asyncio.run(_handler(handler)(update, None))

    text = update.effective_chat.send_message.await_args.args[0]
    assert text == ERROR_PREFIX + "failed to generate chat: required parameter is missing: text is empty"


def test_send_failure_is_caught_by_middleware():
    update = make_update()
    update.effective_chat.send_message.side_effect = [RuntimeError("can't parse entities"), None]

    wrapped = use(_handler(json_handler()), whitelist([1]), duration())
    asyncio.run(wrapped(update, None))

    last = update.effective_chat.send_message.await_args_list[-1]
    assert last.args[0] == "oops, an error has occurred\n\ncan't parse entities"


def test_blocked_sender_makes_no_api_call():
    calls = []

    def handler(request):
        calls.append(request)
        return json_handler()(request)

    update = make_update(user_id=42)
    asyncio.run(use(_handler(handler), whitelist([1]), duration())(update, None))

    assert calls == []
    update.effective_chat.send_message.assert_not_awaited()
