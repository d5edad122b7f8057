"""Pydantic models for the spawn-to-substrate calculator."""

from pydantic import BaseModel, Field


class CompositionPart(BaseModel):
    """One ingredient of a substrate recipe, as a fraction of substrate volume."""

    ingredient: str
    ratio: float
    unit: str = "quarts"


class SubstrateType(BaseModel):
    id: str              # e.g. "cvg"
    label: str
    composition: list[CompositionPart]
    description: str = ""
    benefits: list[str] = []


class ExperienceLevel(BaseModel):
    id: str              # "beginner", "intermediate", "expert"
    label: str
    default_substrate_ratio: int
    description: str = ""
    recommendations: list[str] = []


class ContainerSize(BaseModel):
    size: int            # quarts
    label: str
    description: str = ""


class CalculatorInput(BaseModel):
    """The user's calculator selections."""

    experience_level: str = "beginner"
    spawn_amount: float = Field(default=1, ge=0)      # quarts
    substrate_ratio: int = Field(default=2, ge=0)     # 1:N spawn to substrate
    substrate_type: str = "cvg"
    container_size: float = Field(default=5, gt=0)    # quarts


class Ingredient(BaseModel):
    ingredient: str
    amount: str          # one decimal, e.g. "3.0"
    unit: str = "quarts"


class CalculationResult(BaseModel):
    """Calculator output. Volumes are strings formatted to one decimal."""

    spawn_amount: float
    substrate_volume: str
    total_mix_volume: str
    container_fill: str
    optimal_monotub_volume: str
    container_overfilled: bool = False
    ingredients: list[Ingredient] = []
