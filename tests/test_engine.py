"""
Tests for the calculation engine: limits, lookup and batch handling.
"""

from decimal import Decimal

import pytest

from mazerion.config import Limits, Settings
from mazerion.core.errors import (
    CalcParseError,
    CalcValidationError,
    CalculationError,
    CalculatorNotFoundError,
    InputTooLargeError,
)
from mazerion.core.measurement import Measurement
from mazerion.engine import CalcEngine
from mazerion.models.inputs import CalcRequest


@pytest.fixture
def small_engine(registry) -> CalcEngine:
    """Engine with tight limits."""
    limits = Limits(max_id_length=10, max_params=2, max_key_length=5,
                    max_value_length=8, max_batch_size=2)
    return CalcEngine(registry=registry, settings=Settings(limits=limits))


class TestRun:
    """Tests for CalcEngine.run."""

    def test_run_abv(self, engine, abv_params):
        result = engine.run("abv", abv_params)
        assert result.output.value == Decimal("5.25")

    def test_run_with_measurement(self, engine):
        result = engine.run("brix_to_sg", {}, [Measurement.brix(Decimal("20"))])
        assert abs(result.output.value - Decimal("1.083")) < Decimal("0.001")

    def test_unknown_calculator(self, engine):
        with pytest.raises(CalculatorNotFoundError) as exc_info:
            engine.run("mystery", {})
        assert exc_info.value.kind == "not_found"
        assert "mystery" in exc_info.value.message

    def test_illegal_id_characters(self, engine):
        with pytest.raises(CalcValidationError):
            engine.run("abv; drop", {})

    def test_run_request(self, engine):
        response = engine.run_request(CalcRequest(calculator_id="abv", params={"og": 1.05, "fg": 1.01}))
        assert response.calculator_id == "abv"
        assert response.unit == "abv"
        assert response.display == "5.25 % ABV"


class TestLimits:
    """Tests for request size limits."""

    def test_id_too_long(self, small_engine):
        with pytest.raises(InputTooLargeError, match="exceeds 10 characters"):
            small_engine.run("gallons_to_bottles", {"volume": "1"})

    def test_too_many_params(self, small_engine):
        with pytest.raises(InputTooLargeError, match="Too many parameters"):
            small_engine.run("abv", {"og": "1.05", "fg": "1.01", "x": "1"})

    def test_key_too_long(self, small_engine):
        with pytest.raises(InputTooLargeError, match="Parameter name"):
            small_engine.run("abv", {"original": "1.05"})

    def test_value_too_long(self, small_engine):
        with pytest.raises(InputTooLargeError, match="Value of 'og'"):
            small_engine.run("abv", {"og": "1.0500000000", "fg": "1.01"})

    def test_limits_checked_before_lookup(self, small_engine):
        """An oversized request for an unknown id fails on size, not lookup."""
        with pytest.raises(InputTooLargeError):
            small_engine.run("x" * 11, {})


class TestBatch:
    """Tests for CalcEngine.run_batch."""

    def test_failures_are_captured(self, engine):
        items = engine.run_batch([
            CalcRequest(calculator_id="abv", params={"og": "1.050", "fg": "1.010"}),
            CalcRequest(calculator_id="abv", params={"og": "1.050"}),
            CalcRequest(calculator_id="nope"),
        ])
        assert [item.ok for item in items] == [True, False, False]
        assert items[0].result.value == Decimal("5.25")
        assert items[1].error_kind == "missing_input"
        assert items[2].error_kind == "not_found"

    def test_out_of_range_measurement_is_captured(self, engine):
        items = engine.run_batch([
            CalcRequest(
                calculator_id="brix_to_sg",
                measurements=[{"value": "90", "unit": "brix"}],
            ),
        ])
        assert items[0].error_kind == "out_of_range"

    def test_empty_batch(self, engine):
        with pytest.raises(CalcValidationError, match="at least one"):
            engine.run_batch([])

    def test_batch_too_large(self, small_engine):
        requests = [CalcRequest(calculator_id="abv")] * 3
        with pytest.raises(InputTooLargeError, match="Batch too large"):
            small_engine.run_batch(requests)


class TestCatalogQueries:
    """Tests for listing and describing calculators."""

    def test_list(self, engine):
        assert len(engine.list_calculators()) == 51

    def test_by_category(self, engine):
        infos = engine.calculators_by_category("Beer")
        assert [i.id for i in infos] == ["ibu", "srm", "mash", "efficiency"]

    def test_by_invalid_category(self, engine):
        with pytest.raises(CalcValidationError):
            engine.calculators_by_category("Spirits")

    def test_get_info(self, engine):
        info = engine.get_info("sulfite")
        assert info.category == "Finishing"

    def test_get_info_unknown(self, engine):
        with pytest.raises(CalculatorNotFoundError):
            engine.get_info("nope")


class TestNumericFaults:
    """Tests for absurd magnitudes and arithmetic faults."""

    # Boil gravity far below 1 drives the Tinseth power term past Decimal's exponent range
    OVERFLOWING_IBU = {
        "hop_weight_g": "28", "alpha_acid": "5", "boil_time": "60",
        "volume_l": "20", "boil_gravity": "-1e15",
    }

    def test_huge_value_is_a_parse_error(self, engine):
        with pytest.raises(CalcParseError) as exc_info:
            engine.run("abv", {"og": "1e999999999", "fg": "1.010"})
        assert exc_info.value.field == "og"

    def test_overflow_is_a_calculation_error(self, engine):
        with pytest.raises(CalculationError, match="numeric failure") as exc_info:
            engine.run("ibu", self.OVERFLOWING_IBU)
        assert exc_info.value.kind == "calculation"

    def test_batch_isolates_numeric_faults(self, engine):
        items = engine.run_batch([
            CalcRequest(calculator_id="abv", params={"og": "1e999999999", "fg": "1.010"}),
            CalcRequest(calculator_id="ibu", params=self.OVERFLOWING_IBU),
            CalcRequest(calculator_id="abv", params={"og": "1.050", "fg": "1.010"}),
        ])
        assert [item.ok for item in items] == [False, False, True]
        assert items[0].error_kind == "parse"
        assert items[1].error_kind == "calculation"
        assert items[2].result.value == Decimal("5.25")
