"""Personalized cultivation recommendations with client-side request limits."""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Callable

from spawnsmart.advice.prompts import (
    RECOMMENDATION_SYSTEM_PROMPT,
    RECOMMENDATION_USER_PROMPT,
    TRAINING_CATEGORIES,
    format_training_data,
)
from spawnsmart.calculator.data import get_experience_level, get_substrate_type
from spawnsmart.schemas.advice import RecommendationSet
from spawnsmart.schemas.calculator import CalculatorInput
from spawnsmart.shared.openai_client import DryRunClient, OpenAIClient

logger = logging.getLogger(__name__)

GENERIC_RECOMMENDATIONS: tuple[str, ...] = (
    "Maintain proper humidity levels during colonization.",
    "Ensure good air exchange during fruiting.",
    "Keep your workspace clean and sanitized.",
    "Monitor temperature to stay within the optimal range.",
    "Be patient and consistent with your cultivation practices.",
)

_NUMBERED = re.compile(r"^\s*\d+[.)]\s*(.+?)\s*$", re.MULTILINE)
_BULLETED = re.compile(r"^\s*[•*\-]\s*(.+?)\s*$", re.MULTILINE)
_FENCED = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def _coerce(obj: Any) -> list[str] | None:
    """A JSON array of strings, or an object holding one under ``recommendations``."""
    if isinstance(obj, dict):
        obj = obj.get("recommendations")
    if not isinstance(obj, list):
        return None
    return [item.strip() for item in obj if isinstance(item, str) and item.strip()]


def parse_recommendations(text: str) -> list[str]:
    """Pull a list of recommendations out of a model reply.

    Tries, in order: the reply as JSON, a fenced JSON block, the first JSON
    array or object in the text, then numbered items, bullet points and
    finally non-empty lines.
    """
    text = text.strip()
    if not text:
        return []

    # 1. Clean JSON
    try:
        parsed = _coerce(json.loads(text))
        if parsed is not None:
            return parsed
    except json.JSONDecodeError:
        pass

    # 2. ```json ... ``` fenced block
    match = _FENCED.search(text)
    if match:
        try:
            parsed = _coerce(json.loads(match.group(1).strip()))
            if parsed is not None:
                return parsed
        except json.JSONDecodeError:
            pass

    # 3. First array or object embedded in prose
    starts = [i for i in (text.find("["), text.find("{")) if i >= 0]
    if starts:
        try:
            obj, _ = json.JSONDecoder().raw_decode(text, idx=min(starts))
            parsed = _coerce(obj)
            if parsed is not None:
                return parsed
        except json.JSONDecodeError:
            pass

    # 4. Plain-text lists
    numbered = _NUMBERED.findall(text)
    if numbered:
        return numbered
    bullets = _BULLETED.findall(text)
    if bullets:
        return bullets
    return [
        line.strip() for line in text.splitlines()
        if line.strip() and line.strip()[0] not in "{}[]"
    ]


class RecommendationService:
    """Serves AI recommendations for a calculator setup, falling back to static ones.

    Results are cached per setup. AI requests are capped at ``max_requests``
    per session and spaced at least ``min_interval`` seconds apart; once
    either limit bites, static recommendations are returned with
    ``limit_reached`` set.
    """

    def __init__(
        self,
        client: OpenAIClient | DryRunClient | None,
        *,
        max_requests: int = 3,
        min_interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.max_requests = max_requests
        self.min_interval = min_interval
        self._clock = clock
        self._request_count = 0
        self._last_request: float | None = None
        self._cached: RecommendationSet | None = None
        self._cached_fingerprint = ""

    @property
    def request_count(self) -> int:
        return self._request_count

    def reset_request_limits(self) -> None:
        self._request_count = 0
        self._last_request = None
        logger.info("Recommendation request limits reset")

    def _can_make_request(self) -> bool:
        if self._request_count >= self.max_requests:
            logger.warning("Maximum recommendation requests reached (%d)", self.max_requests)
            return False
        if self._last_request is not None:
            elapsed = self._clock() - self._last_request
            if elapsed < self.min_interval:
                logger.warning(
                    "Too soon since last recommendation request (%.1fs < %.1fs)",
                    elapsed, self.min_interval,
                )
                return False
        return True

    @staticmethod
    def _fingerprint(inputs: CalculatorInput) -> str:
        return inputs.model_dump_json()

    async def get_personalized_recommendations(
        self, inputs: CalculatorInput, *, force_refresh: bool = False
    ) -> RecommendationSet:
        fingerprint = self._fingerprint(inputs)
        if not force_refresh and self._cached is not None and fingerprint == self._cached_fingerprint:
            logger.debug("Using cached %s recommendations", self._cached.source)
            return self._cached.model_copy(deep=True)

        if self.client is None:
            logger.info("No OpenAI client configured, using static recommendations")
            return self._remember(fingerprint, static_recommendations(inputs))

        if not self._can_make_request():
            result = static_recommendations(inputs)
            result.limit_reached = True
            return result

        self._last_request = self._clock()
        self._request_count += 1
        logger.info(
            "Requesting AI recommendations (%d/%d) for %s",
            self._request_count, self.max_requests, inputs.experience_level,
        )
        try:
            completion = await self.client.chat_completion(
                system=RECOMMENDATION_SYSTEM_PROMPT.format(training_data=format_training_data()),
                user_message=self._user_prompt(inputs),
                json_mode=True,
            )
        except Exception as exc:
            logger.warning("AI recommendations failed, using static ones: %s", exc)
            return static_recommendations(inputs)

        recommendations = parse_recommendations(completion.content)
        if not recommendations:
            logger.warning("AI reply contained no recommendations, using static ones")
            return static_recommendations(inputs)

        logger.info("Generated %d AI recommendations", len(recommendations))
        return self._remember(
            fingerprint, RecommendationSet(recommendations=recommendations, source="ai")
        )

    def _remember(self, fingerprint: str, result: RecommendationSet) -> RecommendationSet:
        self._cached = result
        self._cached_fingerprint = fingerprint
        return result.model_copy(deep=True)

    @staticmethod
    def _user_prompt(inputs: CalculatorInput) -> str:
        level = get_experience_level(inputs.experience_level)
        substrate = get_substrate_type(inputs.substrate_type)
        return RECOMMENDATION_USER_PROMPT.format(
            experience_level=level.label if level else "unknown",
            spawn_amount=inputs.spawn_amount,
            substrate_ratio=inputs.substrate_ratio,
            substrate_type=substrate.label if substrate else "unknown",
            container_size=inputs.container_size,
            categories=", ".join(TRAINING_CATEGORIES),
        )


def static_recommendations(inputs: CalculatorInput) -> RecommendationSet:
    """Recommendations for the experience level, or a generic set."""
    level = get_experience_level(inputs.experience_level)
    if level is None or not level.recommendations:
        logger.warning("No static recommendations for level %r", inputs.experience_level)
        return RecommendationSet(recommendations=list(GENERIC_RECOMMENDATIONS))
    return RecommendationSet(recommendations=list(level.recommendations))
