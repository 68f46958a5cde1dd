"""API route modules."""

from continuum.api.routes import feedback, generate, health, intelligence, predict, prompts

__all__ = ["feedback", "generate", "health", "intelligence", "predict", "prompts"]
