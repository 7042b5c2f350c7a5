# tgptbot/chat.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from tgptbot.ygpt import ChatGenerationError, ChatRequest, RequiredParamError, generation_chat

SUPPORTED_PROXY_SCHEMES = {"http", "https", "socks5", "socks5h"}


def build_http_client(proxy: str = "") -> httpx.AsyncClient:
    """
    Outbound client for the completion API.
    An explicit proxy wins, otherwise HTTP(S)_PROXY / ALL_PROXY from env are used.
    """
    if not proxy:
        return httpx.AsyncClient(trust_env=True)

    try:
        proxy_url = httpx.URL(proxy)
    except httpx.InvalidURL as e:
        raise ValueError(f"failed to parse proxy URL: {e}") from e

    if proxy_url.scheme not in SUPPORTED_PROXY_SCHEMES or not proxy_url.host:
        raise ValueError(f"failed to parse proxy URL: unsupported proxy {proxy!r}")

    return httpx.AsyncClient(proxy=proxy_url)


@dataclass(frozen=True)
class Chat:
    api_key: str = field(repr=False)
    url: str
    client: httpx.AsyncClient = field(repr=False)
    proxy: str = field(default="", repr=False)
    log: logging.Logger = field(default_factory=lambda: logging.getLogger("tgptbot.chat"), repr=False, compare=False)

    async def generation(self, text: str, message_id: int, *, timeout: float | None = None) -> str:
        try:
            request = ChatRequest(api_key=self.api_key, url=self.url, text=text)
        except RequiredParamError as e:
            raise ChatGenerationError(e) from e

        resp = await generation_chat(self.client, request, timeout=timeout)
        self.log.info("chat generation id=%s tokens=%d", message_id, resp.result.tokens)
        return str(resp)

    async def close(self) -> None:
        await self.client.aclose()
