"""Tests for the CLI commands that run without network access."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from builders import FakeTransport, entry, loc
from spawnsmart.calculator.user_data import STORAGE_KEY
from spawnsmart.cli import app
from spawnsmart.content.resolver import ContentResolver
from spawnsmart.context import AppContext

runner = CliRunner()

_ENV_VARS = (
    "CONTENTFUL_SPACE_ID", "CONTENTFUL_ACCESS_TOKEN", "CONTENTFUL_ENVIRONMENT",
    "OPENAI_API_KEY", "OPENAI_MODEL",
)


@pytest.fixture
def offline_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A config with no credentials, so every command stays offline."""
    monkeypatch.setattr("spawnsmart.cli.console", Console(width=200))
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    cfg = tmp_path / "spawnsmart.yml"
    cfg.write_text(f'state_file: "{tmp_path / "state.json"}"\n')
    return cfg


class TestValidate:
    def test_valid(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["validate", "--config", str(offline_config)])
        assert result.exit_code == 0
        assert "Config is valid" in result.output
        assert "(not set)" in result.output

    def test_invalid(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("- a\n- b\n")
        result = runner.invoke(app, ["validate", "--config", str(bad)])
        assert result.exit_code == 1
        assert "Config validation failed" in result.output


class TestCalculate:
    def test_options(self) -> None:
        result = runner.invoke(app, ["calculate", "--options"])
        assert result.exit_code == 0
        assert "Experience levels" in result.output
        assert "54 quarts" in result.output

    def test_mix_and_save(self, offline_config: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, [
            "calculate", "--config", str(offline_config),
            "-e", "intermediate", "-s", "2", "-k", "12", "--save",
        ])
        assert result.exit_code == 0, result.output
        assert "Substrate Volume:       6.0 quarts" in result.output
        assert "Total Mix Volume:       8.0 quarts" in result.output

        saved = json.loads((tmp_path / "state.json").read_text())
        assert saved[STORAGE_KEY]["experience_level"] == "intermediate"
        assert saved[STORAGE_KEY]["spawn_amount"] == 2

    def test_overfilled_warning(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["calculate", "--config", str(offline_config), "-s", "4", "-k", "5"])
        assert result.exit_code == 0
        assert "Warning" in result.output

    def test_invalid_input(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["calculate", "--config", str(offline_config), "-k", "0"])
        assert result.exit_code == 1
        assert "Invalid calculator input" in result.output


class TestOfflineContent:
    def test_spores_from_bundled_dataset(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["spores", "--config", str(offline_config), "--type", "gourmet"])
        assert result.exit_code == 0, result.output
        assert "Blue Oyster" in result.output

    def test_no_suppliers(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["suppliers", "--config", str(offline_config)])
        assert result.exit_code == 0
        assert "No suppliers available" in result.output

    def test_recommend_without_api_key(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["recommend", "--config", str(offline_config), "-e", "expert"])
        assert result.exit_code == 0
        assert "(static)" in result.output

    def test_advice_dry_run(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["advice", "--config", str(offline_config), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "field capacity" in result.output

    def test_advice_without_api_key_fails(self, offline_config: Path) -> None:
        result = runner.invoke(app, ["advice", "--config", str(offline_config)])
        assert result.exit_code == 1
        assert "OpenAI API key not configured" in result.output


@pytest.fixture
def bracketed_cms(offline_config: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Serve CMS entries whose text contains square brackets."""
    transport = FakeTransport({
        "faq": [
            entry("faq-1", question=loc("Use [sterile] gloves?"), answer=loc("See [/] the tag"),
                  category=loc("basics")),
        ],
        "mushroomFact": [entry("fact-1", fact=loc("Fungi [bold]are[/bold] everywhere."))],
        "spore": [entry("sp-1", subtype=loc("Golden [Teacher]"), mushroomType=loc("cubensis"))],
    })

    def create(config, *, dry_run=False, on_step=None):
        return AppContext(config, transport, ContentResolver(transport, on_step=on_step), None)

    monkeypatch.setattr(AppContext, "create", staticmethod(create))
    return offline_config


class TestCmsTextIsNotMarkup:
    def test_faq(self, bracketed_cms: Path) -> None:
        result = runner.invoke(app, ["faq", "--config", str(bracketed_cms)])
        assert result.exit_code == 0, result.output
        assert "Use [sterile] gloves?" in result.output
        assert "See [/] the tag" in result.output

    def test_fact(self, bracketed_cms: Path) -> None:
        result = runner.invoke(app, ["fact", "--config", str(bracketed_cms)])
        assert result.exit_code == 0, result.output
        assert "Fungi [bold]are[/bold] everywhere." in result.output

    def test_spores(self, bracketed_cms: Path) -> None:
        result = runner.invoke(app, ["spores", "--config", str(bracketed_cms)])
        assert result.exit_code == 0, result.output
        assert "Golden [Teacher]" in result.output
