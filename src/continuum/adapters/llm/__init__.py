"""LLM provider adapters."""

from continuum.adapters.llm.base import (
    HTTPCompletionProvider,
    LLMMessage,
    LLMProvider,
    LLMResponse,
)
from continuum.adapters.llm.anthropic import AnthropicProvider
from continuum.adapters.llm.openai import OpenAIProvider
from continuum.adapters.llm.stub import StubLLMProvider

__all__ = [
    "HTTPCompletionProvider",
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "AnthropicProvider",
    "OpenAIProvider",
    "StubLLMProvider",
]
