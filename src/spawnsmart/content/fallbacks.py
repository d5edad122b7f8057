"""Hardcoded defaults served when the CMS has nothing for a category."""

from __future__ import annotations

from spawnsmart.schemas.content import ComponentContent

GENERIC_RETRY_MESSAGE = "Something went wrong. Please try again."

STATIC_FACTS: tuple[str, ...] = (
    "Mushrooms are more closely related to humans than to plants, belonging to their own kingdom called Fungi.",
    "Some mushroom species can break down plastic, potentially helping with environmental cleanup.",
    "The largest living organism on Earth is a honey fungus in Oregon, spanning 2.4 miles (3.8 km) across.",
    "Mushrooms can produce vitamin D when exposed to sunlight, similar to human skin.",
    "Some mushroom species are bioluminescent and glow in the dark naturally.",
    "Fungi play a crucial role in ecosystems as decomposers, breaking down dead organic matter.",
    "Mushrooms communicate through an underground network sometimes called the 'Wood Wide Web'.",
    "There are over 14,000 described species of mushrooms, with scientists estimating many more undiscovered.",
    "Mushrooms have been used medicinally for thousands of years in many cultures.",
    "The study of fungi is called mycology, derived from the Greek word 'mykes' meaning mushroom.",
)

_TAGLINE = (
    "The Ultimate Mushroom Cultivation Tool – Calculate spawn ratios, boost yields, "
    "and achieve pro-level results. Perfect for all skill levels!"
)

# Prompt templates use {{field}} placeholders filled from the calculator input.
_ADVICE_PROMPT = """I'm growing mushrooms with the following setup:
- Experience level: {{experienceLevel}}
- Using {{spawnAmount}} quarts of spawn
- With a spawn-to-substrate ratio of 1:{{substrateRatio}}
- Using {{substrateType}} substrate
- In a {{containerSize}} quart container

Based on this setup, what are 3-5 specific cultivation tips or potential issues I should be aware of? \
Focus on practical advice related to my specific parameters."""

_ADVICE_SYSTEM_PROMPT = (
    "You are a professional mycologist specializing in mushroom cultivation. "
    "Provide practical, scientifically accurate cultivation advice based on the user's specific growing parameters. "
    "Focus on spawn-to-substrate ratios, container size considerations, and substrate type optimization. "
    "Keep your response concise, educational, and formatted as bullet points. "
    "Avoid discussing psychoactive effects or illegal activities. "
    "Limit your response to 3-5 specific, actionable tips directly related to the user's setup."
)

_FACT_PROMPT = (
    "Share one fascinating scientific fact about mushrooms that most people don't know. "
    "Focus on their biology, history, or ecological role. "
    "Keep it concise (1-2 sentences) and educational."
)

_FACT_SYSTEM_PROMPT = (
    "You are a mycology expert sharing educational information about mushrooms. "
    "Provide scientifically accurate, interesting facts focusing on biology, ecological role, "
    "or scientific history. Avoid discussing recreational use or psychoactive effects. "
    "Keep your response concise, educational, and suitable for a general audience."
)

DEFAULT_COMPONENT_CONTENT: dict[str, ComponentContent] = {
    "header": {
        "title": "SpawnSmart",
        "description": _TAGLINE,
    },
    "calculator": {
        "title": "SpawnSmart",
        "description": _TAGLINE,
        "experienceLevel": "Experience Level",
        "spawnAmount": "Spawn Amount (quarts)",
        "substrateRatio": "Substrate Ratio",
        "substrateType": "Substrate Type",
        "containerSize": "Container Size (quarts)",
        "save": "Save",
        "reset": "Reset",
        "saveSuccess": "Settings saved successfully!",
        "saveFailure": "Failed to save settings",
        "saveError": "An error occurred while saving settings",
        "resetConfirm": "Are you sure you want to reset to default values?",
    },
    "resultsPanel": {
        "title": "Calculation Results",
        "spawnAmountLabel": "Spawn Amount",
        "substrateVolumeLabel": "Substrate Volume",
        "ingredientsTitle": "Substrate Ingredients",
        "noResultsText": "Complete the form to see results",
        "containerAlertText": (
            "Warning: Your container size is smaller than the total volume. "
            "Consider using a larger container or reducing amounts."
        ),
    },
    "aiAdvice": {
        "title": "AI Cultivation Advisor",
        "loadingText": "Generating personalized cultivation advice...",
        "errorText": "Unable to generate advice. Please check your API key or try again later.",
        "refreshButton": "Get New Advice",
        "prompt": _ADVICE_PROMPT,
        "systemPrompt": _ADVICE_SYSTEM_PROMPT,
    },
    "mushroomFacts": {
        "title": "Mushroom Fact",
        "loadingText": "Loading interesting fact...",
        "errorText": "Unable to load interesting fact. Please check your API key.",
        "refreshButton": "New Fact",
        "prompt": _FACT_PROMPT,
        "systemPrompt": _FACT_SYSTEM_PROMPT,
    },
    "recommendations": {
        "title": "Cultivation Recommendations",
        "loadingText": "Loading recommendations...",
        "errorText": "Unable to load recommendations. Please try again later.",
        "refreshButton": "Refresh",
        "noRecommendationsText": "Complete the form to see personalized recommendations.",
    },
    "substrateSuppliers": {
        "title": "Suppliers",
        "disclaimer": "* Affiliate links support this calculator",
        "viewAllText": "View All",
        "featuredOnlyText": "Featured Only",
    },
}


def default_component_content(name: str) -> ComponentContent:
    """Return a copy of the default UI copy for ``name`` ({} when none)."""
    return dict(DEFAULT_COMPONENT_CONTENT.get(name, {}))
