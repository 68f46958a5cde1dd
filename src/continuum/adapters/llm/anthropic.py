"""Anthropic Messages API provider."""

from typing import Any

from continuum.adapters.llm.base import (
    HTTPCompletionProvider,
    LLMMessage,
    LLMResponse,
    usage_counts,
)
from continuum.config import settings

API_VERSION = "2023-06-01"


class AnthropicProvider(HTTPCompletionProvider):
    """Claude models through the Messages API.

    The system instruction is sent as a top-level ``system`` field rather than
    as a message.
    """

    vendor = "anthropic"
    endpoint = "messages"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str = "https://api.anthropic.com/v1",
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            api_key=api_key or settings.anthropic_api_key,
            model=model or settings.anthropic_model,
            base_url=base_url,
            timeout=timeout,
        )

    def build_headers(self) -> dict[str, str]:
        return {"x-api-key": self.api_key or "", "anthropic-version": API_VERSION}

    def build_body(
        self, messages: list[LLMMessage], temperature: float, max_tokens: int
    ) -> dict[str, Any]:
        system = "\n\n".join(m.content for m in messages if m.role == "system")
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [
                {"role": m.role, "content": m.content} for m in messages if m.role != "system"
            ],
        }
        if system:
            body["system"] = system
        return body

    def parse_body(self, data: dict[str, Any]) -> LLMResponse:
        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise ValueError("Anthropic response has no content blocks")

        text = "".join(b.get("text", "") for b in blocks if b.get("type") == "text")
        usage = data.get("usage") or {}
        return LLMResponse(
            content=text,
            model=data.get("model", self.model),
            usage=usage_counts(usage.get("input_tokens", 0), usage.get("output_tokens", 0)),
            raw_response=data,
            finish_reason=data.get("stop_reason"),
        )
