"""Bundled spore dataset — served when the CMS has no spore entries."""

from __future__ import annotations

import logging
import re
from typing import Any

from spawnsmart.content.mapping import (
    COLONIZATION_TIMES,
    describe_spore,
    infer_difficulty,
    infer_spore_type,
)
from spawnsmart.schemas.content import SporeVariety

logger = logging.getLogger(__name__)

# Column names follow the spreadsheet export the dataset came from.
RAW_SPORE_DATA: tuple[dict[str, str], ...] = (
    {
        "Mushroom Type": "Psilocybe cubensis",
        "Subtype": "Golden Teacher",
        "Spore Name": "Golden Teacher Spores",
        "Price": "$19.99",
        "URL": "https://pnwspore.com/product/golden-teacher-spores/",
        "Store": "PNW Spore Co.",
        "Growing Conditions": (
            "Beginner-friendly; grows well indoors in warm, humid environments "
            "using standard substrates like brown rice flour or manure."
        ),
        "Size & Appearance": "Medium-sized with golden-yellow caps, up to 8 cm wide, and slender pale stems.",
        "Strength": "Moderate to Strong",
        "Mood Effects": "Euphoric, uplifting, introspective.",
    },
    {
        "Mushroom Type": "Psilocybe cubensis",
        "Subtype": "B+",
        "Spore Name": "B+ Mushroom Spores",
        "Price": "$19.99",
        "URL": "https://pnwspore.com/product/b-mushroom-spores/",
        "Store": "PNW Spore Co.",
        "Growing Conditions": "Beginner-friendly; resilient strain that adapts well to various conditions.",
        "Size & Appearance": "Large caps with caramel coloration and thick stems.",
        "Strength": "Moderate",
        "Mood Effects": "Euphoric, visual, introspective.",
    },
    {
        "Mushroom Type": "Psilocybe cubensis",
        "Subtype": "Penis Envy",
        "Spore Name": "Penis Envy Spores",
        "Price": "$24.99",
        "URL": "https://pnwspore.com/product/penis-envy-spores/",
        "Store": "PNW Spore Co.",
        "Growing Conditions": "Advanced; requires careful attention to humidity and substrate quality.",
        "Size & Appearance": "Distinctive phallic shape with thick stems and small caps.",
        "Strength": "Very Strong",
        "Mood Effects": "Intense visuals, profound introspection.",
    },
    {
        "Mushroom Type": "Psilocybe cyanescens",
        "Subtype": "Wavy Caps",
        "Spore Name": "Psilocybe Cyanescens Spores",
        "Price": "$29.99",
        "URL": "https://pnwspore.com/product/psilocybe-cyanescens-spores/",
        "Store": "PNW Spore Co.",
        "Growing Conditions": "Advanced; prefers woody substrates and cooler temperatures.",
        "Size & Appearance": "Distinctive wavy caps with caramel to chestnut coloration.",
        "Strength": "Very Strong",
        "Mood Effects": "Intense visuals, euphoria, deep introspection.",
    },
    {
        "Mushroom Type": "Gourmet",
        "Subtype": "Blue Oyster",
        "Spore Name": "Blue Oyster Mushroom Culture",
        "Price": "$15.99",
        "URL": (
            "https://northspore.com/collections/cultures/products/"
            "blue-oyster-pleurotus-ostreatus-var-columbinus-culture"
        ),
        "Store": "North Spore",
        "Growing Conditions": "Beginner-friendly; grows well on straw, coffee grounds, and hardwood.",
        "Size & Appearance": "Beautiful blue-gray clusters with shelf-like growth pattern.",
        "Culinary Uses": "Excellent for stir-fries, soups, and meat substitutes.",
    },
    {
        "Mushroom Type": "Medicinal",
        "Subtype": "Lion's Mane",
        "Spore Name": "Lion's Mane Culture",
        "Price": "$18.99",
        "URL": "https://northspore.com/collections/cultures/products/lions-mane-hericium-erinaceus-culture",
        "Store": "North Spore",
        "Growing Conditions": "Intermediate; prefers hardwood substrates with high humidity.",
        "Size & Appearance": "Distinctive white, tooth-like or pom-pom appearance.",
        "Medicinal Benefits": "Supports cognitive function, nerve health, and immune system.",
    },
)

_PLACEHOLDER_IMAGE = "https://via.placeholder.com/150?text={}"


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def process_spore_record(record: dict[str, Any], index: int) -> SporeVariety:
    """Standardize one raw record into a :class:`SporeVariety`."""
    def col(key: str) -> str:
        value = record.get(key)
        return value.strip() if isinstance(value, str) else ""

    name = col("Subtype") or "Unknown Variety"
    mushroom_type = col("Mushroom Type")
    conditions = col("Growing Conditions")
    store = col("Store")
    spore_type = infer_spore_type(mushroom_type, name)
    difficulty = infer_difficulty(col("Difficulty"), conditions, name)

    return SporeVariety(
        id=f"local-{index + 1}-{_slug(name)}",
        name=name,
        scientific_name=mushroom_type if " " in mushroom_type else "",
        type=spore_type,
        difficulty=difficulty,
        colonization_time=COLONIZATION_TIMES[difficulty],
        description=col("Description") or describe_spore(name, difficulty, spore_type, conditions, store),
        appearance=col("Size & Appearance"),
        growing_conditions=conditions,
        price=col("Price") or "Price not available",
        url=col("URL"),
        image_url=_PLACEHOLDER_IMAGE.format(name.replace(" ", "+")),
        supplier_names=[store or "Unknown"],
        strength=col("Strength"),
        mood_effects=col("Mood Effects"),
        medicinal_benefits=col("Medicinal Benefits"),
        culinary_uses=col("Culinary Uses"),
    )


def consolidate_spores(spores: list[SporeVariety]) -> list[SporeVariety]:
    """Merge varieties sharing name and type, combining their supplier names."""
    merged: dict[tuple[str, str], SporeVariety] = {}
    for spore in spores:
        key = (spore.name, spore.type)
        existing = merged.get(key)
        if existing is None:
            merged[key] = spore.model_copy(deep=True)
            continue
        for supplier in spore.supplier_names:
            if supplier not in existing.supplier_names:
                existing.supplier_names.append(supplier)
    return list(merged.values())


def load_local_spores(records: tuple[dict[str, Any], ...] | list[dict[str, Any]] = RAW_SPORE_DATA) -> list[SporeVariety]:
    spores = [process_spore_record(record, i) for i, record in enumerate(records)]
    result = consolidate_spores(spores)
    logger.debug("Loaded %d local spore varieties from %d records", len(result), len(records))
    return result
