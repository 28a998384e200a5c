"""Chat-completions adapters backed by LiteLLM.

Groq and the AI/ML API both speak the OpenAI chat-completions shape, so they
share one LiteLLM-based implementation and differ only in model prefix and
base URL.
"""

from __future__ import annotations

from typing import Any, ClassVar

import litellm
from pydantic import SecretStr

from src.ai_router.adapters.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    ProviderAdapter,
    estimate_usage,
    flatten_messages,
)
from src.ai_router.types import (
    ChatMessage,
    ExecutionResult,
    ModelDescriptor,
    ProviderName,
    RequestOptions,
    TokenUsage,
)


class ChatCompletionAdapter(ProviderAdapter):
    """Adapter for providers with a native multi-turn chat endpoint."""

    model_prefix: ClassVar[str]

    def __init__(self, api_key: SecretStr | None, api_base: str | None = None) -> None:
        super().__init__(api_key)
        self._api_base = api_base

    def _litellm_model(self, model: ModelDescriptor) -> str:
        return f"{self.model_prefix}/{model.id}"

    async def _execute(
        self,
        model: ModelDescriptor,
        messages: list[ChatMessage],
        options: RequestOptions,
    ) -> ExecutionResult:
        kwargs: dict[str, Any] = {
            "model": self._litellm_model(model),
            "messages": [m.to_dict() for m in messages],
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
            "temperature": (
                options.temperature if options.temperature is not None else DEFAULT_TEMPERATURE
            ),
            "api_key": self._secret(),
            "stream": False,
        }
        if self._api_base:
            kwargs["api_base"] = self._api_base

        response = await litellm.acompletion(**kwargs)

        content = _extract_text(response)
        usage = getattr(response, "usage", None)
        if usage is None:
            return ExecutionResult(
                content=content,
                usage=estimate_usage(flatten_messages(messages), content),
                usage_estimated=True,
            )

        prompt_tokens = usage.prompt_tokens or 0
        completion_tokens = usage.completion_tokens or 0
        return ExecutionResult(
            content=content,
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=usage.total_tokens or prompt_tokens + completion_tokens,
            ),
        )


def _extract_text(response: Any) -> str:
    """Reply text, or "" when the completion carries no choices or content.

    Only the shape of an already-received completion is tolerated here; a
    malformed reply is still charged and counted as a success. Transport and
    provider errors are raised by litellm before this point and propagate.
    """
    try:
        return response.choices[0].message.content or ""
    except (AttributeError, IndexError, KeyError):
        return ""


class GroqAdapter(ChatCompletionAdapter):
    provider = ProviderName.GROQ
    model_prefix = "groq"


class AIMLAPIAdapter(ChatCompletionAdapter):
    """OpenAI-compatible gateway to many hosted models."""

    provider = ProviderName.AIMLAPI
    model_prefix = "openai"
