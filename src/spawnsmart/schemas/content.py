"""Resolved content models — what the resolver hands to consumers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SupplierType = Literal["substrate", "spores", "grain", "accessories"]
SporeType = Literal["cubensis", "cyanescens", "gourmet", "medicinal", "other"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
LoadStatus = Literal["loaded", "empty", "failed", "fallback"]

SUPPLIER_TYPES: tuple[str, ...] = ("substrate", "spores", "grain", "accessories")
SPORE_TYPES: tuple[str, ...] = ("cubensis", "cyanescens", "gourmet", "medicinal", "other")
DIFFICULTIES: tuple[str, ...] = ("beginner", "intermediate", "advanced")

# component name -> field name -> text
ComponentContent = dict[str, str]


class Product(BaseModel):
    """A product sold by a supplier."""

    name: str
    description: str = ""
    price: str = ""
    url: str = ""
    supplier_id: str = ""


class Supplier(BaseModel):
    """A supplier of substrate, spores, grain or accessories."""

    id: str
    entry_id: str = ""  # CMS sys.id, the target of product links
    name: str
    description: str = ""
    url: str = ""
    featured: bool = False
    referral_code: str = ""
    type: SupplierType
    products: list[Product] = []


class SporeVariety(BaseModel):
    """A spore or culture variety."""

    id: str
    name: str
    scientific_name: str = ""
    type: SporeType = "other"
    difficulty: Difficulty = "intermediate"
    colonization_time: str = ""
    description: str = ""
    appearance: str = ""
    growing_conditions: str = ""
    price: str = ""
    url: str = ""
    image_url: str = ""
    supplier_ids: list[str] = []
    supplier_names: list[str] = []
    # Type-dependent extras
    strength: str = ""
    mood_effects: str = ""
    medicinal_benefits: str = ""
    culinary_uses: str = ""


class EducationalItem(BaseModel):
    """An educational article or guide."""

    title: str
    description: str = ""
    body: str = ""
    category: str = ""
    tags: list[str] = []


class FAQItem(BaseModel):
    """A frequently asked question, ordered within its category."""

    question: str
    answer: str = ""
    category: str = "general"
    order: int = 0  # 1-based after loading


class CategoryLoad(BaseModel):
    """Outcome of one step of the load sequence."""

    status: LoadStatus = "empty"
    count: int = 0
    error: str = ""


class LoadReport(BaseModel):
    """Per-category outcome of the resolver's load sequence."""

    suppliers: CategoryLoad = Field(default_factory=CategoryLoad)
    products: CategoryLoad = Field(default_factory=CategoryLoad)
    spores: CategoryLoad = Field(default_factory=CategoryLoad)
    educational: CategoryLoad = Field(default_factory=CategoryLoad)
    faqs: CategoryLoad = Field(default_factory=CategoryLoad)
    facts: CategoryLoad = Field(default_factory=CategoryLoad)
    components: CategoryLoad = Field(default_factory=CategoryLoad)
