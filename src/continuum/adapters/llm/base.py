"""Completion provider interface and the shared HTTP transport."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from continuum.config import settings
from continuum.logging import get_logger

logger = get_logger(__name__)


@dataclass
class LLMResponse:
    """Text returned by a completion provider."""

    content: str
    model: str
    usage: dict[str, int] = field(default_factory=dict)
    raw_response: dict[str, Any] | None = None
    finish_reason: str | None = None


@dataclass
class LLMMessage:
    """One chat turn sent to a provider."""

    role: str  # "system", "user", "assistant"
    content: str


class LLMProvider(ABC):
    """A completion service used for prompt synthesis and refinement.

    Implementations:
    - AnthropicProvider: Anthropic Messages API
    - OpenAIProvider: OpenAI chat completions
    - StubLLMProvider: canned marker-bearing text for tests and offline use

    Providers raise on timeout, non-2xx status or a malformed body; callers
    treat any of these as a failed generation and do not retry.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        """Run one completion.

        Args:
            messages: An optional system message followed by the user message
            temperature: Sampling temperature
            max_tokens: Completion length cap

        Returns:
            LLMResponse with the generated text
        """
        ...


class HTTPCompletionProvider(LLMProvider):
    """Provider speaking JSON over HTTPS with a single POST per completion.

    Subclasses describe the request (path, headers, body) and how to read the
    response body; the transport, status check and timeout live here.
    """

    vendor: str = "http"
    endpoint: str = ""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.completion_timeout_seconds

        if not self.api_key:
            logger.warning("llm_api_key_missing", vendor=self.vendor)

    @property
    def name(self) -> str:
        return f"{self.vendor}:{self.model}"

    @abstractmethod
    def build_headers(self) -> dict[str, str]:
        """Authentication and version headers."""
        ...

    @abstractmethod
    def build_body(
        self, messages: list[LLMMessage], temperature: float, max_tokens: int
    ) -> dict[str, Any]:
        """Vendor request body."""
        ...

    @abstractmethod
    def parse_body(self, data: dict[str, Any]) -> LLMResponse:
        """Read a vendor response body. Raises ValueError/KeyError if malformed."""
        ...

    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        if not self.api_key:
            raise ValueError(f"{self.vendor} API key not configured")

        body = self.build_body(messages, temperature, max_tokens)
        url = f"{self.base_url}/{self.endpoint}"
        logger.debug("llm_request", provider=self.name, turns=len(messages))

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                url,
                headers={**self.build_headers(), "Content-Type": "application/json"},
                json=body,
            )
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise ValueError(f"{self.vendor} returned a non-object body")

        result = self.parse_body(data)
        logger.info(
            "llm_response",
            provider=self.name,
            total_tokens=result.usage.get("total_tokens", 0),
            finish_reason=result.finish_reason,
        )
        return result


def usage_counts(prompt_tokens: int, completion_tokens: int) -> dict[str, int]:
    """Normalized token usage."""
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
    }
