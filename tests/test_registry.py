"""
Tests for the calculator registry and the built-in catalog.
"""

import logging

import pytest

from mazerion.calculators import ALL_CALCULATORS, build_registry, default_registry
from mazerion.calculators.basic import AbvCalculator, BrixToSgCalculator
from mazerion.core.errors import CalcValidationError
from mazerion.core.registry import (
    VALID_CATEGORIES,
    CalculatorRegistry,
    validate_category,
)

EXPECTED_IDS = {
    # Basic
    "abv", "brix_to_sg", "plato_to_sg", "sg_to_brix", "sg_correction",
    "hydrometer_correction", "dilution", "blending", "gravity_from_ingredients",
    # Advanced
    "volume_adjustment", "refractometer", "attenuation", "alcohol_tolerance",
    "bench_trials",
    # Brewing
    "nutrition", "yeast_pitch", "yeast_starter", "fermentation_timeline", "carbonation",
    # Beer
    "ibu", "srm", "mash", "efficiency",
    # Finishing
    "bottling", "stabilization", "acid_addition", "sulfite", "backsweetening",
    "tannin", "pasteurization",
    # Mead Styles
    "melomel", "bochet", "cyser", "metheglin", "acerglyn", "braggot", "capsicumel",
    "hydromel", "sack", "great_mead", "lactomel", "oxymel", "pyment",
    # Utilities
    "priming_alternatives", "cost_calculator", "batch_cost", "water_chemistry",
    "upscaling", "waste", "gallons_to_bottles", "gallons_to_bottles_with_losses",
}


class TestCatalog:
    """Tests for the built-in calculator set."""

    def test_count(self, registry):
        assert registry.count() == 51
        assert len(registry) == len(ALL_CALCULATORS)

    def test_ids_unique(self, registry):
        ids = registry.list_ids()
        assert len(ids) == len(set(ids))

    def test_all_expected_ids_present(self, registry):
        assert set(registry.list_ids()) == EXPECTED_IDS

    def test_categories_are_valid(self, registry):
        for calc in registry.get_all():
            assert calc.category in VALID_CATEGORIES, calc.id

    def test_calculators_have_display_metadata(self, registry):
        for calc in registry.get_all():
            assert calc.name
            assert calc.description

    def test_categories_in_fixed_order(self, registry):
        assert registry.categories() == list(VALID_CATEGORIES)

    def test_mead_styles_category(self, registry):
        ids = [c.id for c in registry.get_by_category("Mead Styles")]
        assert len(ids) == 13
        assert "bochet" in ids

    def test_default_registry_is_cached(self):
        assert default_registry() is default_registry()


class TestRegistry:
    """Tests for CalculatorRegistry lookups."""

    def test_get_builds_fresh_instance(self, registry):
        first = registry.get("abv")
        second = registry.get("abv")
        assert isinstance(first, AbvCalculator)
        assert first is not second

    def test_get_unknown_returns_none(self, registry):
        assert registry.get("not_a_calculator") is None
        assert "not_a_calculator" not in registry
        assert "abv" in registry

    def test_duplicate_id_first_wins(self, caplog):
        reg = CalculatorRegistry()
        reg.register("abv", AbvCalculator)
        with caplog.at_level(logging.WARNING):
            reg.register("abv", BrixToSgCalculator)
        assert isinstance(reg.get("abv"), AbvCalculator)
        assert "registered twice" in caplog.text

    def test_build_registry_is_independent(self):
        assert build_registry() is not build_registry()


class TestCategoryValidation:
    """Tests for validate_category."""

    def test_valid(self):
        for category in VALID_CATEGORIES:
            validate_category(category)

    def test_invalid(self):
        with pytest.raises(CalcValidationError, match="Invalid category"):
            validate_category("Cocktails")

    def test_case_sensitive(self):
        with pytest.raises(CalcValidationError):
            validate_category("basic")
