"""Gemini adapter over the generateContent REST endpoint.

Gemini is called with a single prompt, so multi-turn conversations are
flattened into ``role: content`` lines first. When the reply carries no
usageMetadata the token counts are estimated from text length.
"""

from __future__ import annotations

from typing import Any

import httpx
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


class GeminiAdapter(ProviderAdapter):
    provider = ProviderName.GEMINI

    def __init__(
        self,
        api_key: SecretStr | None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key)
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._http_client = http_client

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=50),
            )
        return self._http_client

    async def _execute(
        self,
        model: ModelDescriptor,
        messages: list[ChatMessage],
        options: RequestOptions,
    ) -> ExecutionResult:
        prompt = flatten_messages(messages)
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": options.max_tokens or DEFAULT_MAX_TOKENS,
                "temperature": (
                    options.temperature
                    if options.temperature is not None
                    else DEFAULT_TEMPERATURE
                ),
            },
        }

        resp = await self._client().post(
            f"{self._base_url}/models/{model.id}:generateContent",
            json=payload,
            headers={"x-goog-api-key": self._secret()},
        )
        resp.raise_for_status()
        data = resp.json()

        content = _extract_text(data)
        metadata = data.get("usageMetadata")
        if not metadata:
            return ExecutionResult(
                content=content,
                usage=estimate_usage(prompt, content),
                usage_estimated=True,
            )

        prompt_tokens = int(metadata.get("promptTokenCount", 0))
        completion_tokens = int(metadata.get("candidatesTokenCount", 0))
        return ExecutionResult(
            content=content,
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=int(
                    metadata.get("totalTokenCount", prompt_tokens + completion_tokens)
                ),
            ),
        )

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


def _extract_text(data: dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)
