# tgptbot/config.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated, Any

import httpx
from pydantic import BaseModel, BeforeValidator, PlainSerializer, ValidationError, field_validator

from tgptbot.chat import Chat, build_http_client
from tgptbot.log import LogContext
from tgptbot.ygpt import CHAT_URL

HIDDEN = "****"
EMPTY = "empty"

_DURATION_RE = re.compile(r"[-+]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:ns|us|µs|μs|ms|s|m|h))+")
_DURATION_PART_RE = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")

# microseconds per unit
_UNITS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}


class ConfigError(RuntimeError):
    pass


def parse_duration(value: str) -> timedelta:
    """Parses Go-style durations: "60s", "1m30s", "1.5h", "300ms"."""
    s = value.strip()
    if s in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION_RE.fullmatch(s):
        raise ValueError(f"invalid duration {value!r}")

    sign = -1 if s.startswith("-") else 1
    total = Decimal(0)
    for number, unit in _DURATION_PART_RE.findall(s.lstrip("+-")):
        try:
            total += Decimal(number) * _UNITS[unit]
        except InvalidOperation as e:
            raise ValueError(f"invalid duration {value!r}") from e

    try:
        return timedelta(microseconds=sign * int(total))
    except OverflowError as e:
        raise ValueError(f"invalid duration {value!r}") from e


def _frac(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = str(rest).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def format_duration(d: timedelta) -> str:
    """Inverse of parse_duration, canonical form: "1m0s", "5s", "1h2m3.5s", "300ms"."""
    us = d // timedelta(microseconds=1)
    if us == 0:
        return "0s"

    sign = "-" if us < 0 else ""
    us = abs(us)

    if us < 1_000:
        return f"{sign}{us}µs"
    if us < 1_000_000:
        return f"{sign}{_frac(us, 1_000)}ms"

    hours, rest = divmod(us, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _frac(rest, 1_000_000) + "s"

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return sign + seconds


def _duration_in(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value
    if not isinstance(value, str):
        raise ValueError(f"duration must be a string, got {value!r}")
    return parse_duration(value)


Duration = Annotated[timedelta, BeforeValidator(_duration_in), PlainSerializer(format_duration, return_type=str)]


def hide_param(param: str) -> str:
    return HIDDEN if param else EMPTY


class ChatConfig(BaseModel):
    api_key: str = ""
    proxy: str = ""


class RawSettings(BaseModel):
    """Config file as it is, nothing derived yet."""

    token: str = ""
    timeout: Duration = timedelta(minutes=1)
    debug_level: str = ""
    users: list[int] = []
    chat: ChatConfig = ChatConfig()

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("timeout must be positive")
        return v

    def finalize(self, http_client: httpx.AsyncClient | None = None) -> "Settings":
        try:
            log_context = LogContext.from_debug_level(self.debug_level)
        except ValueError as e:
            raise ConfigError(f"config init logger: {e}") from e

        if not self.chat.api_key:
            raise ConfigError("config init GPT: empty API key")

        if http_client is None:
            try:
                http_client = build_http_client(self.chat.proxy)
            except ValueError as e:
                raise ConfigError(f"config init GPT: {e}") from e

        chat = Chat(
            api_key=self.chat.api_key,
            url=CHAT_URL,
            client=http_client,
            proxy=self.chat.proxy,
            log=log_context.get_logger("chat"),
        )

        return Settings(
            token=self.token,
            timeout=self.timeout,
            debug_level=self.debug_level,
            users=frozenset(self.users),
            chat=chat,
            log=log_context,
        )


@dataclass(frozen=True, repr=False)
class Settings:
    token: str
    timeout: timedelta
    debug_level: str
    users: frozenset[int]
    chat: Chat
    log: LogContext = field(default_factory=LogContext)

    def log_value(self) -> str:
        return ", ".join([
            f"token={hide_param(self.token)}",
            f"timeout={format_duration(self.timeout)}",
            f"debug_level={self.debug_level}",
            f"chat.api_key={hide_param(self.chat.api_key)}",
            f"chat.proxy={hide_param(self.chat.proxy)}",
        ])

    __str__ = log_value
    __repr__ = log_value


def read_raw(config_file: str | Path) -> RawSettings:
    full_path = Path(str(config_file).strip()).resolve()

    try:
        data = full_path.read_bytes()
    except OSError as e:
        raise ConfigError(f"config read: {e}") from e

    try:
        return RawSettings.model_validate_json(data)
    except ValidationError as e:
        raise ConfigError(f"config unmarshal: {e}") from e


def load(config_file: str | Path, *, http_client: httpx.AsyncClient | None = None) -> Settings:
    """Reads the JSON config and returns ready settings."""
    return read_raw(config_file).finalize(http_client=http_client)
