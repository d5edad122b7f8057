"""Calculator option tables: experience levels, substrate recipes, containers, tips."""

from __future__ import annotations

from spawnsmart.schemas.calculator import (
    CompositionPart,
    ContainerSize,
    ExperienceLevel,
    SubstrateType,
)

EXPERIENCE_LEVELS: tuple[ExperienceLevel, ...] = (
    ExperienceLevel(
        id="beginner",
        label="Beginner",
        default_substrate_ratio=2,
        description="New to cultivation with limited experience",
        recommendations=[
            "Start with lower substrate ratios (1:1 to 1:2)",
            "Use simple substrate mixes like CVG",
            "Focus on sterile technique and contamination prevention",
            "Begin with more forgiving mushroom species",
        ],
    ),
    ExperienceLevel(
        id="intermediate",
        label="Intermediate",
        default_substrate_ratio=3,
        description="Some successful grows with basic understanding",
        recommendations=[
            "Experiment with substrate ratios between 1:2 and 1:4",
            "Try different substrate formulations",
            "Consider more advanced techniques like agar work",
            "Optimize fruiting conditions for better yields",
        ],
    ),
    ExperienceLevel(
        id="expert",
        label="Expert",
        default_substrate_ratio=4,
        description="Consistent success with advanced knowledge",
        recommendations=[
            "Push substrate ratios to 1:4 or higher for maximum yields",
            "Create custom substrate blends for specific species",
            "Implement advanced techniques like grain-to-grain transfers",
            "Fine-tune all environmental parameters for optimal results",
        ],
    ),
)

SUBSTRATE_TYPES: tuple[SubstrateType, ...] = (
    SubstrateType(
        id="cvg",
        label="CVG Mix (Coco coir, Vermiculite, Gypsum)",
        composition=[
            CompositionPart(ingredient="Coco Coir", ratio=0.5),
            CompositionPart(ingredient="Vermiculite", ratio=0.4),
            CompositionPart(ingredient="Gypsum", ratio=0.1),
        ],
        description="A simple and effective substrate mix suitable for beginners",
        benefits=[
            "Easy to prepare",
            "Resistant to contamination",
            "Good water retention",
            "Widely available ingredients",
        ],
    ),
    SubstrateType(
        id="manure",
        label="Manure Mix",
        composition=[
            CompositionPart(ingredient="Composted Manure", ratio=0.5),
            CompositionPart(ingredient="Coco Coir", ratio=0.3),
            CompositionPart(ingredient="Vermiculite", ratio=0.15),
            CompositionPart(ingredient="Gypsum", ratio=0.05),
        ],
        description="Nutrient-rich substrate for higher yields",
        benefits=[
            "Higher nutrient content",
            "Potentially larger yields",
            "Good for certain gourmet mushrooms",
            "Better for experienced growers",
        ],
    ),
    SubstrateType(
        id="sawdust",
        label="Sawdust Mix",
        composition=[
            CompositionPart(ingredient="Hardwood Sawdust", ratio=0.7),
            CompositionPart(ingredient="Wheat Bran", ratio=0.2),
            CompositionPart(ingredient="Gypsum", ratio=0.1),
        ],
        description="Specialized substrate for wood-loving species",
        benefits=[
            "Ideal for wood-loving species",
            "Good for oyster and lion's mane mushrooms",
            "Can be supplemented for higher yields",
            "Sustainable option using wood waste",
        ],
    ),
)

CONTAINER_SIZES: tuple[ContainerSize, ...] = (
    ContainerSize(size=1, label="1 quart", description="Small test batches or experiments"),
    ContainerSize(size=5, label="5 quarts", description="Standard shoebox size, good for beginners"),
    ContainerSize(size=12, label="12 quarts", description="Medium monotub, balanced yield and management"),
    ContainerSize(size=20, label="20 quarts", description="Large monotub, higher yields for experienced growers"),
    ContainerSize(size=54, label="54 quarts", description="Full-size monotub, maximum yields for experts"),
)

CULTIVATION_TIPS: tuple[str, ...] = (
    "Lower ratios (1:1, 1:2) provide faster colonization and less contamination risk.",
    "Higher ratios (1:4, 1:5) may provide better yields but increase contamination risk.",
    "Optimal temperature range is 65-80°F (18-27°C).",
    "Ensure proper field capacity (moisture content) in your substrate.",
    "Monitor pH levels (aim for 6.0-7.0).",
    "During colonization, CO2 levels can be high, but reduce during fruiting.",
    "Use a pressure cooker to properly sterilize grain spawn.",
    "Pasteurize bulk substrate to reduce competing organisms.",
    "Maintain cleanliness in your work area to prevent contamination.",
)


def get_experience_level(level_id: str) -> ExperienceLevel | None:
    return next((level for level in EXPERIENCE_LEVELS if level.id == level_id), None)


def get_substrate_type(type_id: str) -> SubstrateType | None:
    return next((s for s in SUBSTRATE_TYPES if s.id == type_id), None)
