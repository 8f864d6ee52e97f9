"""Chat model client for Tier 1 analysis.

The analyzer receives a client instance explicitly; nothing here is a
process-wide singleton. Any object with a ``model_name`` attribute and a
``complete(messages)`` method can stand in, which is how tests inject a
fake.
"""

from typing import Protocol

import openai
import structlog
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from pydantic import BaseModel

from records_intel.config.settings import Settings, get_settings

logger = structlog.get_logger(__name__)


class LLMClientError(Exception):
    """Model call failed."""

    pass


class RateLimitError(LLMClientError):
    """Provider signalled rate limiting (HTTP 429); the call may be retried."""

    pass


class LLMResponse(BaseModel):
    """Wrapper for LLM response with metadata."""

    content: str
    model: str
    prompt_tokens: int | None = None
    completion_tokens: int | None = None


class ChatClient(Protocol):
    """Interface the analyzer depends on."""

    model_name: str

    def complete(self, messages: list[BaseMessage]) -> LLMResponse: ...


def _is_rate_limit(error: Exception) -> bool:
    if isinstance(error, openai.RateLimitError):
        return True
    if getattr(error, "status_code", None) == 429:
        return True
    message = str(error).lower()
    return "429" in message or "rate limit" in message


def _message_text(content) -> str:
    if isinstance(content, str):
        return content
    # Content blocks: plain strings or {"type": "text", "text": ...}
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict):
            parts.append(block.get("text", ""))
    return "".join(parts)


class LangChainChatClient:
    """Adapter from a LangChain chat model to ``ChatClient``.

    Args:
        chat_model: Configured LangChain chat model.
        model_name: Model identifier recorded in responses and the ledger.
    """

    def __init__(self, chat_model: BaseChatModel, model_name: str) -> None:
        self._chat_model = chat_model
        self.model_name = model_name

    def complete(self, messages: list[BaseMessage]) -> LLMResponse:
        """Send one chat request.

        Raises:
            RateLimitError: Provider is rate limiting.
            LLMClientError: Any other provider or transport failure.
        """
        try:
            message = self._chat_model.invoke(messages)
        except Exception as e:
            if _is_rate_limit(e):
                raise RateLimitError(str(e)) from e
            raise LLMClientError(str(e)) from e

        usage = getattr(message, "usage_metadata", None) or {}
        return LLMResponse(
            content=_message_text(message.content),
            model=self.model_name,
            prompt_tokens=usage.get("input_tokens"),
            completion_tokens=usage.get("output_tokens"),
        )


def create_chat_model(settings: Settings | None = None) -> BaseChatModel:
    """Create the configured LangChain chat model.

    Args:
        settings: Optional custom settings. Uses defaults if not provided.

    Returns:
        ``ChatOpenAI`` pointed at the hosted OpenAI-compatible endpoint, or
        ``ChatOllama`` for a local model.

    Raises:
        LLMClientError: If the provider is unknown.
    """
    settings = settings or get_settings()
    provider = settings.llm_provider.lower()

    if provider == "deepseek":
        return ChatOpenAI(
            model=settings.llm_model_name,
            base_url=settings.llm_base_url,
            api_key=settings.deepseek_api_key,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_request_timeout,
            max_retries=0,  # rate limits are retried by the analyzer
        )

    if provider == "ollama":
        return ChatOllama(
            model=settings.llm_model_name,
            base_url=settings.llm_ollama_base_url,
            temperature=settings.llm_temperature,
            num_predict=settings.llm_max_tokens,
            client_kwargs={"timeout": settings.llm_request_timeout},
        )

    raise LLMClientError(f"Unknown LLM provider: {settings.llm_provider}")


def create_chat_client(settings: Settings | None = None) -> LangChainChatClient:
    """Create the chat client handed to ``LLMAnalyzer``."""
    settings = settings or get_settings()
    logger.info("chat_client_created", provider=settings.llm_provider, model=settings.llm_model_name)
    return LangChainChatClient(create_chat_model(settings), model_name=settings.llm_model_name)
