"""YandexGPT chat generation API client."""

from .client import (
    CHAT_URL,
    MAX_TOKENS,
    ChatGenerationError,
    ChatRequest,
    RequiredParamError,
    YGPTError,
    generation_chat,
)
from .types import ChatResponse, ChatResult, GenerationOptions, Message, Model, Role, TextGenerationChat

__all__ = [
    "CHAT_URL",
    "MAX_TOKENS",
    "ChatGenerationError",
    "ChatRequest",
    "ChatResponse",
    "ChatResult",
    "GenerationOptions",
    "Message",
    "Model",
    "RequiredParamError",
    "Role",
    "TextGenerationChat",
    "YGPTError",
    "generation_chat",
]
