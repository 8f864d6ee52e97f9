"""LLM client configuration."""

from .client import (
    ChatClient,
    LangChainChatClient,
    LLMClientError,
    LLMResponse,
    RateLimitError,
    create_chat_client,
    create_chat_model,
)

__all__ = [
    "ChatClient",
    "LangChainChatClient",
    "LLMClientError",
    "LLMResponse",
    "RateLimitError",
    "create_chat_client",
    "create_chat_model",
]
