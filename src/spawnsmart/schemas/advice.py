"""Pydantic models for the LLM-backed advice features."""

from typing import Literal

from pydantic import BaseModel


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletion(BaseModel):
    """Text and token usage of a single chat completion."""

    content: str
    usage: TokenUsage = TokenUsage()


class AdviceResult(BaseModel):
    """Generated advice or fact. ``ok`` is False when a fallback was used."""

    text: str
    ok: bool = True
    source: Literal["ai", "static"] = "ai"
    error: str = ""


class RecommendationSet(BaseModel):
    recommendations: list[str]
    source: Literal["ai", "static"] = "static"
    limit_reached: bool = False
