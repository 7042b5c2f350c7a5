"""Telegram bot relaying messages to YandexGPT."""

import os
from importlib import metadata

NAME = "TgTGPYBot"


def _safe_version() -> str:
    try:
        return metadata.version("tgptbot")
    except metadata.PackageNotFoundError:
        return "unknown"


__version__ = _safe_version()
# set by the build
REVISION = os.getenv("TGPTBOT_REVISION", "")
BUILD_DATE = os.getenv("TGPTBOT_BUILD_DATE", "")
