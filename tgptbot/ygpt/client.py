# tgptbot/ygpt/client.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from .types import ChatResponse, GenerationOptions, Message, Model, Role, TextGenerationChat

CHAT_URL = "https://llm.api.cloud.yandex.net/llm/v1alpha/chat"
MAX_TOKENS = 2000


class YGPTError(RuntimeError):
    pass


class RequiredParamError(YGPTError):
    def __init__(self, name: str):
        super().__init__(f"required parameter is missing: {name} is empty")
        self.name = name


class ChatGenerationError(YGPTError):
    """Any failure of a chat generation call; the cause is chained."""

    def __init__(self, reason):
        super().__init__(f"failed to generate chat: {reason}")
        self.reason = reason


@dataclass(frozen=True)
class ChatRequest:
    """
    Parameters of one generation call.
    Fails on construction if any of them is empty.
    """
    api_key: str = field(repr=False)
    url: str
    text: str

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not self.api_key:
            raise RequiredParamError("api_key")
        if not self.url:
            raise RequiredParamError("url")
        if not self.text:
            raise RequiredParamError("text")

    def marshal(self) -> bytes:
        # preview API: only the "general" model, temperature=0 and maxTokens=2000
        body = TextGenerationChat(
            model=Model.GENERAL,
            generation_options=GenerationOptions(max_tokens=MAX_TOKENS),
            messages=[Message(role=Role.USER, text=self.text)],
        )
        return body.dump_json()

    def build(self, client: httpx.AsyncClient) -> httpx.Request:
        return client.build_request(
            "POST",
            self.url,
            content=self.marshal(),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Authorization": f"Api-Key {self.api_key}",
            },
        )


async def generation_chat(
    client: httpx.AsyncClient,
    request: ChatRequest,
    *,
    timeout: float | None = None,
) -> ChatResponse:
    http_request = request.build(client)
    try:
        return await asyncio.wait_for(_send(client, http_request), timeout)
    except asyncio.TimeoutError as e:
        raise ChatGenerationError(f"deadline exceeded after {timeout}s") from e


async def _send(client: httpx.AsyncClient, http_request: httpx.Request) -> ChatResponse:
    try:
        resp = await client.send(http_request, stream=True)
    except httpx.HTTPError as e:
        raise ChatGenerationError(e) from e

    try:
        if resp.status_code != httpx.codes.OK:
            raise await _status_error(resp)

        try:
            body = await resp.aread()
        except httpx.HTTPError as e:
            raise ChatGenerationError(e) from e

        return _build_response(body)
    finally:
        await resp.aclose()


async def _status_error(resp: httpx.Response) -> ChatGenerationError:
    try:
        body = await resp.aread()
    except httpx.HTTPError as e:
        err = ChatGenerationError(f"unexpected status code={resp.status_code}: {e}")
        err.__cause__ = e
        return err

    text = body.decode("utf-8", "replace")
    return ChatGenerationError(f"unexpected status code={resp.status_code}: {text}")


def _build_response(body: bytes) -> ChatResponse:
    try:
        response = ChatResponse.model_validate_json(body)
    except ValidationError as e:
        raise ChatGenerationError(e) from e

    try:
        response.result.parse_num_tokens()
    except ValueError as e:
        raise ChatGenerationError(e) from e

    return response
