"""AI cultivation advice and mushroom facts, with static fallbacks."""

from __future__ import annotations

import logging
import re

from spawnsmart.calculator.data import get_experience_level, get_substrate_type
from spawnsmart.content.fallbacks import GENERIC_RETRY_MESSAGE, default_component_content
from spawnsmart.content.resolver import ContentResolver
from spawnsmart.schemas.advice import AdviceResult
from spawnsmart.schemas.calculator import CalculatorInput
from spawnsmart.shared.openai_client import DryRunClient, OpenAIClient

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def fill_template(template: str, values: dict[str, str]) -> str:
    """Replace ``{{name}}`` placeholders; unknown names are left as written."""
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def template_values(inputs: CalculatorInput) -> dict[str, str]:
    level = get_experience_level(inputs.experience_level)
    substrate = get_substrate_type(inputs.substrate_type)
    return {
        "experienceLevel": level.label if level else inputs.experience_level,
        "spawnAmount": _number(inputs.spawn_amount),
        "substrateRatio": _number(inputs.substrate_ratio),
        "substrateType": substrate.label if substrate else inputs.substrate_type,
        "containerSize": _number(inputs.container_size),
    }


class CultivationAdvisor:
    """Generates setup-specific advice and one-off facts.

    Prompts come from the ``aiAdvice`` and ``mushroomFacts`` UI copy, so they
    can be edited in the CMS. Without a client, advice is unavailable and
    facts come from the resolver's static list.
    """

    def __init__(self, client: OpenAIClient | DryRunClient | None, resolver: ContentResolver) -> None:
        self.client = client
        self.resolver = resolver

    async def _prompts(self, component: str) -> tuple[str, str]:
        content = await self.resolver.get_component_content(component)
        defaults = default_component_content(component)
        return (
            content.get("systemPrompt") or defaults["systemPrompt"],
            content.get("prompt") or defaults["prompt"],
        )

    async def generate_advice(self, inputs: CalculatorInput) -> AdviceResult:
        if self.client is None:
            return AdviceResult(
                text=GENERIC_RETRY_MESSAGE, ok=False, source="static",
                error="OpenAI API key not configured",
            )

        system, template = await self._prompts("aiAdvice")
        prompt = fill_template(template, template_values(inputs))
        try:
            completion = await self.client.chat_completion(system=system, user_message=prompt)
        except Exception as exc:
            logger.warning("Advice generation failed: %s", exc)
            return AdviceResult(text=GENERIC_RETRY_MESSAGE, ok=False, source="static", error=str(exc))

        text = completion.content.strip()
        if not text:
            return AdviceResult(text=GENERIC_RETRY_MESSAGE, ok=False, source="static", error="empty reply")
        logger.info("Generated advice (%d tokens)", completion.usage.total_tokens)
        return AdviceResult(text=text)

    async def interesting_fact(self) -> AdviceResult:
        """An AI-generated fact, or a static one when the AI is unavailable."""
        if self.client is not None:
            system, prompt = await self._prompts("mushroomFacts")
            try:
                completion = await self.client.chat_completion(system=system, user_message=prompt)
                if completion.content.strip():
                    return AdviceResult(text=completion.content.strip())
                error = "empty reply"
            except Exception as exc:
                logger.warning("Fact generation failed, using a static fact: %s", exc)
                error = str(exc)
        else:
            error = ""

        fact = await self.resolver.get_random_static_fact()
        return AdviceResult(text=fact, ok=not error, source="static", error=error)
