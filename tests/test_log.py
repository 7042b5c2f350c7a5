import io
import logging

import pytest

from tgptbot.log import LogContext


def test_from_debug_level():
    ctx = LogContext.from_debug_level("debug")

    assert ctx.level == logging.DEBUG
    assert ctx.verbose is True
    assert LogContext.from_debug_level("warn").level == logging.WARNING


def test_from_debug_level_unknown():
    with pytest.raises(ValueError, match="unknown debug level"):
        LogContext.from_debug_level("trace")


def test_install_writes_formatted_lines():
    stream = io.StringIO()
    ctx = LogContext.from_debug_level("info", name="tgptbot-test")

    logger = ctx.install(stream)
    logger.info("hello %s", "world")
    ctx.get_logger("child").debug("hidden")
    ctx.get_logger("child").warning("visible")

    out = stream.getvalue()
    assert "| INFO | tgptbot-test | hello world" in out
    assert "hidden" not in out
    assert "| WARNING | tgptbot-test.child | visible" in out


def test_install_is_repeatable():
    stream = io.StringIO()
    ctx = LogContext.from_debug_level("error", name="tgptbot-repeat")

    ctx.install(stream)
    logger = ctx.install(stream)

    assert len(logger.handlers) == 1
    assert logging.getLogger("telegram").level == logging.WARNING


def test_verbose_turns_on_library_logs():
    LogContext.from_debug_level("debug", name="tgptbot-verbose").install(io.StringIO())

    assert logging.getLogger("telegram").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG
