"""Async OpenAI chat-completion wrapper used by the advice features."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from typing import Any

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError

from spawnsmart.schemas.advice import ChatCompletion, TokenUsage

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000

# Retry settings for rate-limit (429) and transient connection errors
_MAX_RETRIES = 4
_BASE_DELAY = 2  # seconds


def _parse_retry_after(exc: RateLimitError) -> float | None:
    """Extract the suggested retry delay from an OpenAI rate limit error.

    Checks the ``Retry-After`` header first, then the "try again in Xs / Xms"
    text of the error message. Returns seconds, or None if not found.
    """
    try:
        headers = exc.response.headers  # type: ignore[union-attr]
        if retry_after := headers.get("retry-after"):
            return float(retry_after)
    except (AttributeError, TypeError, ValueError):
        pass

    m = re.search(r"try again in (\d+(?:\.\d+)?)\s*(ms|s)\b", str(exc), re.IGNORECASE)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value
    return None


class OpenAIClient:
    """Thin async wrapper around the OpenAI SDK.

    ``chat_completion`` sends one system + user message pair and returns the
    reply text with its token usage. Rate-limit and connection errors are
    retried with exponential backoff; everything else propagates.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _call_with_retry(self, **kwargs: Any) -> Any:
        """Call chat.completions.create with exponential backoff and ±25% jitter."""
        for attempt in range(_MAX_RETRIES):
            try:
                return await self._client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                msg = str(exc).lower()
                if "insufficient_quota" in msg or "context_length_exceeded" in msg:
                    logger.error("OpenAI request not retryable: %s", exc)
                    raise
                if attempt == _MAX_RETRIES - 1:
                    raise
                backoff = _BASE_DELAY * (2 ** attempt)
                suggested = _parse_retry_after(exc)
                base_delay = max(suggested or 0.0, backoff)
                jitter = random.uniform(-0.25 * base_delay, 0.25 * base_delay)
                delay = max(1.0, base_delay + jitter)
                logger.warning(
                    "Rate limited (429), retrying in %.1fs (attempt %d/%d, suggested=%.1fs): %s",
                    delay, attempt + 1, _MAX_RETRIES, suggested or 0.0, exc,
                )
                await asyncio.sleep(delay)
            except (APIConnectionError, APITimeoutError) as exc:
                if attempt == _MAX_RETRIES - 1:
                    raise
                backoff = _BASE_DELAY * (2 ** attempt)
                jitter = random.uniform(-0.25 * backoff, 0.25 * backoff)
                delay = max(1.0, backoff + jitter)
                logger.warning(
                    "Connection error, retrying in %.1fs (attempt %d/%d): %s",
                    delay, attempt + 1, _MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)

    async def chat_completion(
        self,
        *,
        system: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> ChatCompletion:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._call_with_retry(**kwargs)
        usage = getattr(response, "usage", None)
        content = response.choices[0].message.content or ""
        logger.debug("Chat completion: %d chars", len(content))
        return ChatCompletion(
            content=content,
            usage=TokenUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            ),
        )


# ======================================================================
# Dry-run client: zero API calls
# ======================================================================

_DRY_RUN_REPLIES: dict[str, str] = {
    "advice": (
        "- Keep the substrate at field capacity: a firm squeeze should release only a few drops.\n"
        "- Hold colonization temperatures between 75-80°F and avoid direct light.\n"
        "- Leave the lid closed until the surface is fully colonized, then introduce fresh air.\n"
        "- Mist the walls rather than the substrate surface once pins appear."
    ),
    "fact": (
        "Fungal mycelium can transport nutrients and chemical signals between trees, "
        "linking whole forests into a shared underground network."
    ),
    "recommendations": json.dumps({
        "recommendations": [
            "Pasteurize your substrate at 160-180°F for 1-2 hours before mixing with spawn.",
            "Break up fully colonized spawn thoroughly so the mix colonizes evenly.",
            "Keep the container out of direct light and hold it at 75-80°F during colonization.",
            "Check for contamination daily and isolate anything showing green or black patches.",
            "Begin fruiting conditions once the surface is fully white and consolidated.",
        ]
    }),
}


class DryRunClient:
    """Drop-in replacement for OpenAIClient that makes zero API calls."""

    model = "dry-run"

    async def chat_completion(
        self,
        *,
        system: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> ChatCompletion:
        key = self._detect_feature(system, json_mode)
        logger.info("[dry-run] chat completion for %s", key)
        return ChatCompletion(content=_DRY_RUN_REPLIES[key])

    @staticmethod
    def _detect_feature(system: str, json_mode: bool) -> str:
        lowered = system.lower()
        if json_mode or "json" in lowered:
            return "recommendations"
        if "fact" in lowered:
            return "fact"
        return "advice"
