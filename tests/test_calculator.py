"""Tests for the mix calculator and the saved calculator state."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from spawnsmart.calculator.data import CONTAINER_SIZES, EXPERIENCE_LEVELS, SUBSTRATE_TYPES
from spawnsmart.calculator.mix import (
    calculate_mix,
    calculate_substrate_ingredients,
    recommendations_for_experience,
)
from spawnsmart.calculator.user_data import STORAGE_KEY, UserDataStore
from spawnsmart.schemas.calculator import CalculatorInput


class TestCalculateMix:
    def test_basic_mix(self) -> None:
        result = calculate_mix(CalculatorInput(spawn_amount=2, substrate_ratio=3, container_size=10))
        assert result.substrate_volume == "6.0"
        assert result.total_mix_volume == "8.0"
        assert result.container_fill == "80.0"
        assert result.optimal_monotub_volume == "16.0"
        assert result.container_overfilled is False

    def test_defaults(self) -> None:
        result = calculate_mix(CalculatorInput())
        assert (result.substrate_volume, result.total_mix_volume, result.container_fill) == ("2.0", "3.0", "60.0")
        assert result.optimal_monotub_volume == "6.0"

    def test_overfilled_container(self) -> None:
        result = calculate_mix(CalculatorInput(spawn_amount=3, substrate_ratio=4, container_size=5))
        assert result.total_mix_volume == "15.0"
        assert result.container_fill == "300.0"
        assert result.container_overfilled is True

    def test_fractional_spawn(self) -> None:
        result = calculate_mix(CalculatorInput(spawn_amount=1.5, substrate_ratio=2, container_size=12))
        assert result.substrate_volume == "3.0"
        assert result.total_mix_volume == "4.5"
        assert result.container_fill == "37.5"

    def test_ingredients_follow_substrate(self) -> None:
        result = calculate_mix(CalculatorInput(spawn_amount=2, substrate_ratio=3, substrate_type="cvg"))
        assert [(i.ingredient, i.amount) for i in result.ingredients] == [
            ("Coco Coir", "3.0"), ("Vermiculite", "2.4"), ("Gypsum", "0.6"),
        ]

    def test_unknown_substrate_has_no_ingredients(self) -> None:
        result = calculate_mix(CalculatorInput(substrate_type="peat"))
        assert result.ingredients == []

    @pytest.mark.parametrize(
        "kwargs",
        [{"spawn_amount": -1}, {"substrate_ratio": -2}, {"container_size": 0}],
    )
    def test_invalid_inputs_rejected(self, kwargs) -> None:
        with pytest.raises(ValidationError):
            CalculatorInput(**kwargs)


class TestIngredients:
    def test_manure_recipe(self) -> None:
        items = calculate_substrate_ingredients("manure", "10.0")
        assert [(i.ingredient, i.amount, i.unit) for i in items] == [
            ("Composted Manure", "5.0", "quarts"),
            ("Coco Coir", "3.0", "quarts"),
            ("Vermiculite", "1.5", "quarts"),
            ("Gypsum", "0.5", "quarts"),
        ]

    def test_recipes_sum_to_one(self) -> None:
        for substrate in SUBSTRATE_TYPES:
            assert sum(p.ratio for p in substrate.composition) == pytest.approx(1.0)


class TestData:
    def test_experience_levels(self) -> None:
        assert [(lvl.id, lvl.default_substrate_ratio) for lvl in EXPERIENCE_LEVELS] == [
            ("beginner", 2), ("intermediate", 3), ("expert", 4),
        ]

    def test_container_sizes(self) -> None:
        assert [c.size for c in CONTAINER_SIZES] == [1, 5, 12, 20, 54]

    def test_recommendations_for_unknown_level(self) -> None:
        assert recommendations_for_experience("wizard") == recommendations_for_experience("beginner")


class TestUserDataStore:
    def test_starts_with_defaults(self) -> None:
        store = UserDataStore()
        assert store.inputs == CalculatorInput()
        assert store.results.total_mix_volume == "3.0"
        assert store.recommendations == list(EXPERIENCE_LEVELS[0].recommendations)

    def test_experience_change_resets_ratio(self) -> None:
        store = UserDataStore()
        store.update("substrate_ratio", 5)
        store.update("experience_level", "expert")

        assert store.inputs.substrate_ratio == 4
        assert store.results.substrate_volume == "4.0"
        assert store.recommendations == list(EXPERIENCE_LEVELS[2].recommendations)

    def test_update_recalculates(self) -> None:
        store = UserDataStore()
        store.update("spawn_amount", 2)
        assert store.results.substrate_volume == "4.0"

    def test_update_rejects_unknown_field(self) -> None:
        with pytest.raises(ValueError, match="Unknown calculator field"):
            UserDataStore().update("colour", "blue")

    def test_update_rejects_invalid_value(self) -> None:
        store = UserDataStore()
        with pytest.raises(ValidationError):
            store.update("container_size", 0)
        assert store.inputs.container_size == 5

    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "state" / "calc.json"
        store = UserDataStore(path)
        store.update("experience_level", "intermediate")
        store.update("substrate_ratio", 5)
        assert store.save() is True

        saved = json.loads(path.read_text())
        assert saved[STORAGE_KEY]["substrate_ratio"] == 5

        restored = UserDataStore(path)
        assert restored.load() is True
        assert restored.inputs.experience_level == "intermediate"
        assert restored.inputs.substrate_ratio == 5
        assert restored.results.substrate_volume == "5.0"

    def test_load_missing_or_corrupt(self, tmp_path: Path) -> None:
        path = tmp_path / "calc.json"
        assert UserDataStore(path).load() is False
        path.write_text("{not json")
        assert UserDataStore(path).load() is False
        path.write_text(json.dumps({STORAGE_KEY: {"container_size": -3}}))
        assert UserDataStore(path).load() is False

    def test_reset(self) -> None:
        store = UserDataStore()
        store.update("spawn_amount", 9)
        store.reset()
        assert store.inputs == CalculatorInput()

    def test_save_without_path(self) -> None:
        assert UserDataStore().save() is False
