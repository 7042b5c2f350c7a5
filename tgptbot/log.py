# tgptbot/log.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TextIO

LOGGER_NAME = "tgptbot"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

DEBUG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# third-party loggers, noisy only in verbose mode
LIBRARY_LOGGERS = ("telegram", "httpx")


@dataclass(frozen=True)
class LogContext:
    """
    Logging setup of one process.
    Built from the config "debug_level", installed once at startup,
    then only used to hand out loggers.
    """
    level: int = logging.INFO
    verbose: bool = False
    name: str = LOGGER_NAME

    @classmethod
    def from_debug_level(cls, debug_level: str, name: str = LOGGER_NAME) -> "LogContext":
        level = DEBUG_LEVELS.get(debug_level)
        if level is None:
            raise ValueError(f"unknown debug level: {debug_level!r}")
        return cls(level=level, verbose=level == logging.DEBUG, name=name)

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(self.name)

    def get_logger(self, suffix: str) -> logging.Logger:
        return logging.getLogger(f"{self.name}.{suffix}")

    def install(self, stream: TextIO | None = None) -> logging.Logger:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(logging.Formatter(LOG_FORMAT))

        logger = self.logger
        logger.handlers.clear()
        logger.setLevel(self.level)
        logger.addHandler(h)
        logger.propagate = False

        lib_level = logging.DEBUG if self.verbose else logging.WARNING
        for name in LIBRARY_LOGGERS:
            lib = logging.getLogger(name)
            lib.handlers.clear()
            lib.setLevel(lib_level)
            lib.addHandler(h)
            lib.propagate = False

        return logger


def bootstrap_logging() -> logging.Logger:
    # used until the config is read
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    return logging.getLogger(LOGGER_NAME)
