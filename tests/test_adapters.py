"""Tests for completion provider adapters."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from continuum.adapters.llm import AnthropicProvider, LLMMessage, OpenAIProvider, StubLLMProvider

MESSAGES = [
    LLMMessage(role="system", content="You are a cinematographer."),
    LLMMessage(role="user", content="A car on a coastal road"),
]


def _response(url: str, status_code: int = 200, payload: dict | None = None) -> httpx.Response:
    return httpx.Response(
        status_code, json=payload or {}, request=httpx.Request("POST", url)
    )


@pytest.mark.asyncio
async def test_stub_complete(stub_provider) -> None:
    """Test stub provider returns the canned text and records the call."""
    response = await stub_provider.complete(MESSAGES)

    assert response.model == "stub-model"
    assert "[APPLYING:" in response.content
    assert response.finish_reason == "stop"
    assert response.usage["prompt_tokens"] == 6
    assert stub_provider.calls == [MESSAGES]


@pytest.mark.asyncio
async def test_stub_custom_response() -> None:
    provider = StubLLMProvider(response="Plain prompt.")

    response = await provider.complete(MESSAGES)

    assert response.content == "Plain prompt."


class TestAnthropicProvider:
    def test_name(self) -> None:
        assert AnthropicProvider(api_key="key", model="claude-test").name == "anthropic:claude-test"

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        provider = AnthropicProvider(api_key="")

        with pytest.raises(ValueError):
            await provider.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_complete_moves_system_out_of_messages(self) -> None:
        provider = AnthropicProvider(api_key="key", model="claude-test")
        payload = {
            "model": "claude-test",
            "content": [
                {"type": "text", "text": "Steady tracking "},
                {"type": "text", "text": "at dusk."},
            ],
            "usage": {"input_tokens": 12, "output_tokens": 4},
            "stop_reason": "end_turn",
        }

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = _response(f"{provider.base_url}/messages", payload=payload)
            response = await provider.complete(MESSAGES, max_tokens=256)

        assert response.content == "Steady tracking at dusk."
        assert response.usage == {
            "prompt_tokens": 12,
            "completion_tokens": 4,
            "total_tokens": 16,
        }
        assert response.finish_reason == "end_turn"

        sent = mock_post.call_args.kwargs["json"]
        assert sent["system"] == "You are a cinematographer."
        assert sent["messages"] == [{"role": "user", "content": "A car on a coastal road"}]
        assert sent["max_tokens"] == 256
        assert mock_post.call_args.kwargs["headers"]["anthropic-version"] == "2023-06-01"

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        provider = AnthropicProvider(api_key="key")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = _response(f"{provider.base_url}/messages", 529)
            with pytest.raises(httpx.HTTPStatusError):
                await provider.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_malformed_body_raises(self) -> None:
        provider = AnthropicProvider(api_key="key")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = _response(
                f"{provider.base_url}/messages", payload={"error": "nope"}
            )
            with pytest.raises(ValueError):
                await provider.complete(MESSAGES)


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        provider = OpenAIProvider(api_key="")

        with pytest.raises(ValueError):
            await provider.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_complete(self) -> None:
        provider = OpenAIProvider(api_key="key", model="gpt-test")
        payload = {
            "model": "gpt-test",
            "choices": [{"message": {"content": "Locked-off wide."}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
        }

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = _response(
                f"{provider.base_url}/chat/completions", payload=payload
            )
            response = await provider.complete(MESSAGES, temperature=0.2)

        assert response.content == "Locked-off wide."
        assert response.model == "gpt-test"
        assert response.usage["total_tokens"] == 12
        sent = mock_post.call_args.kwargs["json"]
        assert sent["temperature"] == 0.2
        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer key"
        assert mock_post.call_args.args[0] == "https://api.openai.com/v1/chat/completions"
        assert [m["role"] for m in sent["messages"]] == ["system", "user"]

    @pytest.mark.asyncio
    async def test_missing_choices_raises(self) -> None:
        provider = OpenAIProvider(api_key="key")

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = _response(
                f"{provider.base_url}/chat/completions", payload={"choices": []}
            )
            with pytest.raises(ValueError):
                await provider.complete(MESSAGES)
