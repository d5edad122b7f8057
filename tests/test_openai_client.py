"""Tests for the OpenAIClient — mock the OpenAI SDK underneath."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from openai import APIConnectionError, RateLimitError

from spawnsmart.shared.openai_client import DryRunClient, OpenAIClient, _parse_retry_after


def _make_text_response(text: str, prompt_tokens: int = 10, completion_tokens: int = 5):
    """Create a mock OpenAI response with text only."""
    message = SimpleNamespace(content=text, tool_calls=None)
    choice = SimpleNamespace(message=message)
    usage = SimpleNamespace(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )
    return SimpleNamespace(choices=[choice], usage=usage)


def _rate_limit_error(message: str = "Rate limit reached", headers: dict | None = None) -> RateLimitError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(429, headers=headers or {}, request=request)
    return RateLimitError(message, response=response, body=None)


class TestChatCompletion:
    @pytest.mark.asyncio
    async def test_returns_text_and_usage(self, mock_openai_client: OpenAIClient) -> None:
        mock_openai_client._client.chat.completions.create = AsyncMock(
            return_value=_make_text_response("Keep it humid.")
        )

        result = await mock_openai_client.chat_completion(system="sys", user_message="hi")

        assert result.content == "Keep it humid."
        assert result.usage.total_tokens == 15

    @pytest.mark.asyncio
    async def test_request_parameters(self, mock_openai_client: OpenAIClient) -> None:
        create = AsyncMock(return_value=_make_text_response("{}"))
        mock_openai_client._client.chat.completions.create = create

        await mock_openai_client.chat_completion(
            system="sys", user_message="hi", temperature=0.2, json_mode=True,
        )

        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 1000
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "sys"}
        assert kwargs["messages"][1] == {"role": "user", "content": "hi"}

    @pytest.mark.asyncio
    async def test_none_content_is_empty_string(self, mock_openai_client: OpenAIClient) -> None:
        response = _make_text_response("")
        response.choices[0].message.content = None
        mock_openai_client._client.chat.completions.create = AsyncMock(return_value=response)

        result = await mock_openai_client.chat_completion(system="s", user_message="u")
        assert result.content == ""


class TestRetry:
    @pytest.mark.asyncio
    async def test_retries_rate_limit(self, mock_openai_client: OpenAIClient) -> None:
        mock_openai_client._client.chat.completions.create = AsyncMock(
            side_effect=[_rate_limit_error(), _make_text_response("ok")]
        )
        with patch("spawnsmart.shared.openai_client.asyncio.sleep", new=AsyncMock()) as sleep:
            result = await mock_openai_client.chat_completion(system="s", user_message="u")

        assert result.content == "ok"
        sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_retries_connection_error(self, mock_openai_client: OpenAIClient) -> None:
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_openai_client._client.chat.completions.create = AsyncMock(
            side_effect=[APIConnectionError(request=request), _make_text_response("ok")]
        )
        with patch("spawnsmart.shared.openai_client.asyncio.sleep", new=AsyncMock()):
            result = await mock_openai_client.chat_completion(system="s", user_message="u")
        assert result.content == "ok"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, mock_openai_client: OpenAIClient) -> None:
        create = AsyncMock(side_effect=_rate_limit_error())
        mock_openai_client._client.chat.completions.create = create
        with patch("spawnsmart.shared.openai_client.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(RateLimitError):
                await mock_openai_client.chat_completion(system="s", user_message="u")
        assert create.await_count == 4

    @pytest.mark.asyncio
    async def test_quota_errors_not_retried(self, mock_openai_client: OpenAIClient) -> None:
        create = AsyncMock(side_effect=_rate_limit_error("You exceeded your quota: insufficient_quota"))
        mock_openai_client._client.chat.completions.create = create
        with pytest.raises(RateLimitError):
            await mock_openai_client.chat_completion(system="s", user_message="u")
        assert create.await_count == 1


class TestParseRetryAfter:
    def test_header(self) -> None:
        assert _parse_retry_after(_rate_limit_error(headers={"retry-after": "7"})) == 7.0

    def test_message_milliseconds(self) -> None:
        assert _parse_retry_after(_rate_limit_error("Please try again in 250ms.")) == 0.25

    def test_message_seconds(self) -> None:
        assert _parse_retry_after(_rate_limit_error("Please try again in 1.5s.")) == 1.5

    def test_missing(self) -> None:
        assert _parse_retry_after(_rate_limit_error("slow down")) is None


class TestDryRunClient:
    @pytest.mark.asyncio
    async def test_recommendations_are_json(self) -> None:
        import json

        result = await DryRunClient().chat_completion(system="Reply in JSON", user_message="x", json_mode=True)
        assert len(json.loads(result.content)["recommendations"]) == 5

    @pytest.mark.asyncio
    async def test_fact_and_advice(self) -> None:
        fact = await DryRunClient().chat_completion(system="Share an interesting fact", user_message="x")
        advice = await DryRunClient().chat_completion(system="You are a mycologist", user_message="x")
        assert "mycelium" in fact.content.lower()
        assert advice.content.startswith("- ")
