"""Tests for the bundled spore dataset."""

from __future__ import annotations

from spawnsmart.content.local_spores import (
    RAW_SPORE_DATA,
    consolidate_spores,
    load_local_spores,
    process_spore_record,
)


class TestProcessRecord:
    def test_cubensis_beginner(self) -> None:
        spore = process_spore_record(RAW_SPORE_DATA[0], 0)
        assert spore.name == "Golden Teacher"
        assert spore.type == "cubensis"
        assert spore.scientific_name == "Psilocybe cubensis"
        assert spore.difficulty == "beginner"
        assert spore.colonization_time == "10-14 days"
        assert spore.supplier_names == ["PNW Spore Co."]
        assert spore.strength == "Moderate to Strong"

    def test_advanced_variety(self) -> None:
        spore = process_spore_record(RAW_SPORE_DATA[2], 2)
        assert spore.difficulty == "advanced"
        assert spore.colonization_time == "21-30 days"

    def test_gourmet_and_medicinal(self) -> None:
        oyster = process_spore_record(RAW_SPORE_DATA[4], 4)
        lions_mane = process_spore_record(RAW_SPORE_DATA[5], 5)
        assert oyster.type == "gourmet"
        assert oyster.culinary_uses.startswith("Excellent")
        assert lions_mane.type == "medicinal"
        assert lions_mane.difficulty == "intermediate"
        assert lions_mane.colonization_time == "14-21 days"

    def test_generated_description(self) -> None:
        spore = process_spore_record(RAW_SPORE_DATA[3], 3)
        assert spore.description.startswith("Wavy Caps is a advanced level cyanescens variety.")
        assert spore.description.endswith("Available from PNW Spore Co.")
        assert not spore.description.endswith("..")

    def test_sparse_record(self) -> None:
        spore = process_spore_record({"Subtype": "Enigma"}, 0)
        assert spore.difficulty == "advanced"
        assert spore.type == "other"
        assert spore.price == "Price not available"
        assert spore.supplier_names == ["Unknown"]


class TestConsolidate:
    def test_merges_suppliers_for_same_name_and_type(self) -> None:
        records = [
            {"Mushroom Type": "Psilocybe cubensis", "Subtype": "B+", "Store": "PNW Spore Co."},
            {"Mushroom Type": "Psilocybe cubensis", "Subtype": "B+", "Store": "Spore Works"},
            {"Mushroom Type": "Psilocybe cubensis", "Subtype": "B+", "Store": "PNW Spore Co."},
            {"Mushroom Type": "Gourmet", "Subtype": "B+", "Store": "Elsewhere"},
        ]
        spores = consolidate_spores([process_spore_record(r, i) for i, r in enumerate(records)])

        assert len(spores) == 2
        assert spores[0].supplier_names == ["PNW Spore Co.", "Spore Works"]
        assert spores[1].supplier_names == ["Elsewhere"]

    def test_does_not_mutate_input(self) -> None:
        first = process_spore_record({"Subtype": "X", "Store": "A"}, 0)
        second = process_spore_record({"Subtype": "X", "Store": "B"}, 1)
        consolidate_spores([first, second])
        assert first.supplier_names == ["A"]


class TestLoadLocalSpores:
    def test_bundled_dataset(self) -> None:
        spores = load_local_spores()
        assert len(spores) == 6
        assert {s.type for s in spores} == {"cubensis", "cyanescens", "gourmet", "medicinal"}
        assert len({s.id for s in spores}) == 6
