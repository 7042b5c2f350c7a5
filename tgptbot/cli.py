# tgptbot/cli.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import asyncio
import logging
import platform
import signal
import sys
from argparse import ArgumentParser

from tgptbot import BUILD_DATE, NAME, REVISION, __version__
from tgptbot.bot import Bot, BotError
from tgptbot.config import ConfigError, Settings, load
from tgptbot.log import bootstrap_logging

STOP_SIGNALS = tuple(
    s for s in (signal.SIGINT, signal.SIGTERM, getattr(signal, "SIGQUIT", None)) if s is not None
)


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="tgptbot", description="Telegram bot for YandexGPT chat generation.")
    parser.add_argument("-config", "--config", default="config.json", help="configuration file")
    parser.add_argument("-version", "--version", action="store_true", help="show version")
    return parser


def version_info() -> str:
    return f"{NAME}: {__version__} {REVISION} {platform.python_version()} {BUILD_DATE}"


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, shutdown: asyncio.Event, log: logging.Logger) -> None:
    def _on_signal(sig: signal.Signals) -> None:
        log.info("stopping signal=%s", sig.name)
        shutdown.set()

    for sig in STOP_SIGNALS:
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
        except NotImplementedError:  # pragma: no cover - windows
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(shutdown.set))


async def serve(bot: Bot, log: logging.Logger) -> None:
    shutdown = asyncio.Event()
    _install_signal_handlers(asyncio.get_running_loop(), shutdown, log)

    await bot.start(shutdown)
    await bot.stop()  # wait graceful bot stop


def run(settings: Settings) -> None:
    log = settings.log.install()
    log.info(
        "main logging=%s version=%s revision=%s build_date=%s python=%s",
        settings.debug_level, __version__, REVISION, BUILD_DATE, platform.python_version(),
    )
    log.info("read config: %s", settings)

    bot = Bot(settings)
    asyncio.run(serve(bot, log))
    log.info("stopped")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(version_info())
        parser.print_help()
        return 0

    log = bootstrap_logging()
    try:
        run(load(args.config))
    except (ConfigError, BotError) as e:
        log.error("startup failed: %s", e)
        return 1
    except Exception:
        log.exception("abnormal termination version=%s", __version__)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
