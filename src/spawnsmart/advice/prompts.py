"""Prompts for the personalized recommendation request."""

# category name -> reference recommendations the model picks from
TRAINING_CATEGORIES: dict[str, list[str]] = {
    "Substrate Preparation": [
        "Hydrate substrate to field capacity: squeezing a handful should release only a few drops.",
        "Pasteurize bulk substrate at 160-180°F for 1-2 hours to reduce competing organisms.",
        "Let pasteurized substrate cool to room temperature before mixing with spawn.",
        "Add gypsum to improve substrate structure and supply calcium and sulfur.",
    ],
    "Spawn Ratios": [
        "Lower spawn-to-substrate ratios (1:1 to 1:2) colonize faster and resist contamination.",
        "Higher ratios (1:4 and above) stretch spawn further but need cleaner technique.",
        "Break spawn into individual grains so it spreads evenly through the substrate.",
    ],
    "Container Setup": [
        "Fill containers no deeper than 3-4 inches of mixed substrate for even fruiting.",
        "Choose a container roughly twice the volume of your total mix to leave headspace.",
        "Drill or tape fresh air exchange holes before colonization finishes.",
    ],
    "Colonization": [
        "Hold colonization temperatures between 75-80°F and keep containers out of direct light.",
        "Leave containers closed until the surface is fully colonized.",
        "Check daily for green, blue or black patches and isolate contaminated containers.",
    ],
    "Fruiting Conditions": [
        "Introduce fresh air and indirect light once the surface is fully colonized.",
        "Maintain 85-95% humidity by misting the container walls rather than the pins.",
        "Harvest just before the veil breaks for the best texture.",
    ],
    "Contamination Prevention": [
        "Work in still air and wipe every surface with 70% isopropyl alcohol.",
        "Wear gloves and a mask when handling spawn or open substrate.",
        "Sterilize grain spawn in a pressure cooker at 15 PSI for 90 minutes.",
    ],
}

RECOMMENDATION_SYSTEM_PROMPT = """\
You are an expert mushroom cultivation advisor. Provide personalized \
recommendations based on the user's cultivation setup and the following \
reference material:

{training_data}

Analyze the user's setup and pick the most relevant recommendations from the \
reference material, adapting them to the user's numbers where useful. Respond \
with a JSON object of the form {{"recommendations": ["...", "..."]}} where each \
string is one specific, actionable recommendation.
"""

RECOMMENDATION_USER_PROMPT = """\
I'm growing mushrooms with the following setup:
- Experience level: {experience_level}
- Spawn amount: {spawn_amount} quarts
- Substrate ratio: 1:{substrate_ratio}
- Substrate type: {substrate_type}
- Container size: {container_size} quarts

Give me 5 specific recommendations for this setup. Focus on the reference \
categories most relevant to it: {categories}.
"""


def format_training_data() -> str:
    return "\n\n".join(
        f"Category: {name}\n" + "\n".join(items)
        for name, items in TRAINING_CATEGORIES.items()
    )
