"""Stub completion provider for testing and offline use."""

from continuum.adapters.llm.base import LLMMessage, LLMProvider, LLMResponse, usage_counts
from continuum.logging import get_logger

logger = get_logger(__name__)

DEFAULT_STUB_RESPONSE = (
    "[APPLYING: golden hour lighting, locked camera]\n"
    "Steady lateral tracking at 35mph along a coastal highway. Camera mounted on "
    "tracking vehicle's left side maintains fixed lateral position. Golden hour "
    "sunlight, warm tones, shallow depth of field, 24fps. Vehicle continues "
    "steadily screen-left to screen-right.\n"
    "[SUGGESTION: Brand favors coastal roads at golden hour]"
)


class StubLLMProvider(LLMProvider):
    """Returns a fixed marker-bearing completion.

    Every call is kept in ``calls`` so tests can inspect the instruction that
    would have been sent.
    """

    def __init__(self, response: str = DEFAULT_STUB_RESPONSE) -> None:
        self.response = response
        self.calls: list[list[LLMMessage]] = []

    @property
    def name(self) -> str:
        return "stub"

    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        self.calls.append(list(messages))
        logger.info("stub_llm_complete", turns=len(messages), max_tokens=max_tokens)

        user_text = next((m.content for m in reversed(messages) if m.role == "user"), "")
        return LLMResponse(
            content=self.response,
            model="stub-model",
            usage=usage_counts(len(user_text.split()), len(self.response.split())),
            finish_reason="stop",
        )
