# tgptbot/ygpt/types.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_serializer

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


class Model(str, Enum):
    GENERAL = "general"


class Role(str, Enum):
    USER = "User"
    USER_RU = "Пользователь"
    ASSISTANT = "Assistant"
    ASSISTANT_RU = "Ассистент"


class GenerationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    partial_results: bool = Field(False, alias="partialResults")
    temperature: float = 0.0
    max_tokens: int = Field(2000, alias="maxTokens")


class Message(BaseModel):
    role: Role
    text: str

    @field_serializer("role")
    def _dump_role(self, role) -> str:
        # model_construct() skips validation, so check again on the way out
        return Role(role).value


class TextGenerationChat(BaseModel):
    """Request body of the chat generation API."""

    model_config = ConfigDict(populate_by_name=True)

    model: Model = Model.GENERAL
    generation_options: GenerationOptions = Field(default_factory=GenerationOptions, alias="generationOptions")
    messages: list[Message]
    instruction_text: str | None = Field(None, alias="instructionText")

    @field_serializer("model")
    def _dump_model(self, model) -> str:
        return Model(model).value

    def dump_json(self) -> bytes:
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


class ChatResult(BaseModel):
    message: Message
    num_tokens: str  # int64 as a string

    _num_tokens: int = PrivateAttr(0)

    @property
    def tokens(self) -> int:
        return self._num_tokens

    def parse_num_tokens(self) -> int:
        if not _INT_RE.fullmatch(self.num_tokens):
            raise ValueError(f"failed to parse num_tokens: {self.num_tokens!r}")
        value = int(self.num_tokens)
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise ValueError(f"failed to parse num_tokens: {self.num_tokens!r} out of range")
        self._num_tokens = value
        return self._num_tokens


class ChatResponse(BaseModel):
    result: ChatResult

    def __str__(self) -> str:
        return self.result.message.text
