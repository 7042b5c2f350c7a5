from __future__ import annotations
from dataclasses import dataclass

from telegram.constants import ParseMode


@dataclass(frozen=True)
class Outgoing:
    text: str
    parse_mode: ParseMode | None = None     # None -> plain text
