"""Adapters for external services."""

from continuum.adapters.llm.base import LLMProvider

__all__ = [
    "LLMProvider",
]
