"""Spawn-to-substrate mix arithmetic. Pure functions, no state."""

from __future__ import annotations

from spawnsmart.calculator.data import EXPERIENCE_LEVELS, get_experience_level, get_substrate_type
from spawnsmart.schemas.calculator import CalculationResult, CalculatorInput, Ingredient


def _fmt(value: float) -> str:
    return f"{value:.1f}"


def calculate_substrate_ingredients(substrate_type: str, substrate_volume: float | str) -> list[Ingredient]:
    """Split ``substrate_volume`` into the recipe's ingredients ([] for unknown types)."""
    substrate = get_substrate_type(substrate_type)
    if substrate is None:
        return []
    volume = float(substrate_volume)
    return [
        Ingredient(ingredient=part.ingredient, amount=_fmt(volume * part.ratio), unit=part.unit)
        for part in substrate.composition
    ]


def calculate_mix(inputs: CalculatorInput) -> CalculationResult:
    """Compute volumes for a spawn amount, ratio, substrate and container.

    Each figure is rounded to one decimal before feeding the next one, so
    the total always equals the displayed spawn plus substrate volumes.
    """
    substrate_volume = _fmt(inputs.spawn_amount * inputs.substrate_ratio)
    total = float(_fmt(inputs.spawn_amount + float(substrate_volume)))
    return CalculationResult(
        spawn_amount=inputs.spawn_amount,
        substrate_volume=substrate_volume,
        total_mix_volume=_fmt(total),
        container_fill=_fmt(total / inputs.container_size * 100),
        # Twice the mix volume leaves headspace for fruiting.
        optimal_monotub_volume=_fmt(total * 2),
        container_overfilled=total > inputs.container_size,
        ingredients=calculate_substrate_ingredients(inputs.substrate_type, substrate_volume),
    )


def recommendations_for_experience(level_id: str) -> list[str]:
    """Recommendations for an experience level (beginner's for unknown levels)."""
    level = get_experience_level(level_id) or EXPERIENCE_LEVELS[0]
    return list(level.recommendations)
