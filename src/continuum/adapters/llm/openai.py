"""OpenAI chat completions provider."""

from typing import Any

from continuum.adapters.llm.base import (
    HTTPCompletionProvider,
    LLMMessage,
    LLMResponse,
    usage_counts,
)
from continuum.config import settings


class OpenAIProvider(HTTPCompletionProvider):
    """GPT models through the chat completions endpoint."""

    vendor = "openai"
    endpoint = "chat/completions"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            api_key=api_key or settings.openai_api_key,
            model=model or settings.openai_model,
            base_url=base_url,
            timeout=timeout,
        )

    def build_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def build_body(
        self, messages: list[LLMMessage], temperature: float, max_tokens: int
    ) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    def parse_body(self, data: dict[str, Any]) -> LLMResponse:
        choices = data.get("choices")
        if not choices:
            raise ValueError("OpenAI response has no choices")

        first = choices[0]
        usage = data.get("usage") or {}
        return LLMResponse(
            content=first["message"].get("content") or "",
            model=data.get("model", self.model),
            usage=usage_counts(usage.get("prompt_tokens", 0), usage.get("completion_tokens", 0)),
            raw_response=data,
            finish_reason=first.get("finish_reason"),
        )
