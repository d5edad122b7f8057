"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from builders import entry, link, loc, rich
from spawnsmart.shared.openai_client import OpenAIClient


@pytest.fixture
def cms_content() -> dict[str, Any]:
    """A small but complete set of raw CMS entries, localized the way the API returns them."""
    return {
        "supplier": [
            entry(
                "sup-entry-1",
                id=loc("north-spore"), name=loc("North Spore"), type=loc("spores"),
                featured=loc(True), url=loc("https://northspore.com"),
                description=loc("Cultures and spawn"), referralCode=loc("SPAWN10"),
            ),
            entry(
                "sup-entry-2",
                id=loc("myco-supply"), name=loc("Myco Supply"), type=loc("substrate"),
                featured=loc(False), url=loc("https://mycosupply.com"),
            ),
            entry(
                "sup-entry-3",
                id=loc("grain-co"), name=loc("Grain Co"), type=loc("grain"), featured=loc(True),
            ),
        ],
        "product": [
            entry("prod-1", name=loc("Blue Oyster Culture"), supplier=loc(link("sup-entry-1"))),
            entry("prod-2", name=loc("CVG Bag"), price=loc("$24.99"), supplier=loc(link("myco-supply"))),
            entry("prod-3", name=loc("Orphan Product"), supplier=loc(link("missing"))),
        ],
        "spore": [
            entry(
                "spore-1",
                mushroomType=loc("Psilocybe cubensis"), subtype=loc("Golden Teacher"),
                growingConditions=loc(rich("Beginner-friendly;", "grows well indoors.")),
                description=loc(rich("A classic variety.")),
                store=loc(link("sup-entry-1")), price=loc("$19.99"),
                image=loc({"fields": {"file": loc({"url": "//images.ctfassets.net/gt.jpg"})}}),
            ),
            entry(
                "spore-2",
                mushroomType=loc("Gourmet"), subtype=loc("Blue Oyster"),
                store=loc(link("dangling")),
                culinaryUses=loc(rich("Stir-fries", "soups")),
            ),
        ],
        "educationalContent": [
            entry(
                "edu-1", title=loc("Sterile Technique"), category=loc("basics"),
                content=loc(rich("Wipe everything down.")), tags=loc(["clean", "beginner"]),
            ),
            entry("edu-2", title=loc("Fruiting"), category=loc("advanced")),
        ],
        "faq": [
            entry("faq-1", question=loc("Why mist?"), answer=loc(rich("Humidity.")),
                  category=loc("fruiting"), order=loc(5)),
            entry("faq-2", question=loc("How long?"), answer=loc("Two weeks."),
                  category=loc("fruiting"), order=loc(2)),
            entry("faq-3", question=loc("What is spawn?"), category=loc("basics")),
        ],
        "mushroomFact": [
            entry("fact-1", fact=loc("Fungi breathe oxygen.")),
            entry("fact-2", fact=loc("Mycelium can span miles.")),
        ],
        "componentContent": [
            entry("cc-1", componentId=loc("header.title"), title=loc("title"),
                  labels=loc({"value": "SpawnSmart CMS"})),
            entry("cc-2", componentId=loc("calculator"), title=loc("Mix Calculator"),
                  labels=loc('{"save": "Save it", "reset": "Start over"}'),
                  buttons=loc({"calculate": "Go"})),
        ],
    }


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "spawnsmart.yml"
    cfg.write_text(
        """\
contentful:
  space_id: "space123"
  access_token: "token456"
openai:
  model: "gpt-4o-mini"
state_file: "{state}"
""".format(state=str(tmp_path / "state.json"))
    )
    return cfg


@pytest.fixture
def mock_openai_client() -> OpenAIClient:
    """Return an OpenAIClient with a mocked OpenAI SDK underneath."""
    client = OpenAIClient.__new__(OpenAIClient)
    client._client = AsyncMock()
    client.model = "gpt-4o"
    client.temperature = 0.7
    client.max_tokens = 1000
    return client
