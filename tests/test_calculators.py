"""
Tests for individual calculators.

Covers the reference scenarios for ABV and gravity conversions, the
validate/calculate contract across the whole catalog, and spot checks for
each category.
"""

from decimal import Decimal

import pytest

from mazerion.core.calculator import Calculator
from mazerion.core.errors import (
    CalcError,
    CalcMissingInputError,
    CalcOutOfRangeError,
    CalcParseError,
    CalcValidationError,
    CalculationError,
)
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit


def close(actual: Decimal, expected: str, tol: str = "0.001") -> bool:
    return abs(actual - Decimal(expected)) <= Decimal(tol)


# One valid request per registered calculator
SAMPLE_INPUTS: dict[str, dict[str, str]] = {
    "abv": {"og": "1.050", "fg": "1.010"},
    "brix_to_sg": {"brix": "20"},
    "plato_to_sg": {"plato": "12.5"},
    "sg_to_brix": {"sg": "1.083"},
    "sg_correction": {"sg": "1.050", "temperature": "25"},
    "hydrometer_correction": {"measured_sg": "1.050", "sample_temp": "90"},
    "dilution": {"current_volume": "10", "current_abv": "14", "target_abv": "10"},
    "blending": {"volume1": "10", "abv1": "14", "volume2": "4", "abv2": "0"},
    "gravity_from_ingredients": {"water_volume": "10", "honey_weight": "3.5"},
    "volume_adjustment": {"current_volume": "10", "current_gravity": "1.100", "target_gravity": "1.050"},
    "refractometer": {"original_brix": "20", "current_brix": "8"},
    "attenuation": {"og": "1.050", "fg": "1.010"},
    "alcohol_tolerance": {"yeast_strain": "d47", "og": "1.100"},
    "bench_trials": {"trial_volume": "100", "trial_addition": "0.5", "batch_volume": "20"},
    "nutrition": {"volume": "20", "target_abv": "12"},
    "yeast_pitch": {"volume": "20", "og": "1.060"},
    "yeast_starter": {"cells_needed": "300"},
    "fermentation_timeline": {"og": "1.100", "fg": "1.000"},
    "carbonation": {"volume": "19", "temperature": "20", "target_co2": "2.5"},
    "ibu": {"hop_weight_g": "28", "alpha_acid": "5", "boil_time": "60",
            "volume_l": "20", "boil_gravity": "1.050"},
    "srm": {"grain_weight": "10", "lovibond": "4", "volume": "5"},
    "mash": {"target_temp": "67", "grain_temp": "20", "grain_weight": "5", "ratio": "3"},
    "efficiency": {"grain_weight": "10", "ppg": "37", "measured_gravity": "1.050", "volume": "5"},
    "bottling": {"volume": "19"},
    "stabilization": {"volume": "20", "ph": "3.4"},
    "acid_addition": {"current_ph": "3.6", "volume": "20", "target_ph": "3.4"},
    "sulfite": {"volume": "20", "target_free_so2": "50", "ph": "3.4"},
    "backsweetening": {"current_sg": "1.000", "volume": "20", "target_sg": "1.010"},
    "tannin": {"volume": "20"},
    "pasteurization": {"temperature": "65"},
    "melomel": {"volume": "10"},
    "bochet": {"volume": "10", "target_abv": "12"},
    "cyser": {"volume": "10", "target_abv": "12"},
    "metheglin": {"volume": "10", "target_abv": "12"},
    "acerglyn": {"volume": "10", "target_abv": "12", "maple_percent": "25"},
    "braggot": {"volume": "10", "target_abv": "6", "honey_percent": "50"},
    "capsicumel": {"volume": "10", "target_abv": "12"},
    "hydromel": {"volume": "10", "target_abv": "5"},
    "sack": {"volume": "10", "target_abv": "16"},
    "great_mead": {"volume": "19", "target_abv": "14"},
    "lactomel": {"volume": "10", "target_abv": "12"},
    "oxymel": {"volume": "1", "vinegar_percent": "30", "honey_percent": "30"},
    "pyment": {"volume": "10", "target_abv": "14"},
    "priming_alternatives": {"sugar_type": "honey", "amount": "100"},
    "cost_calculator": {"volume": "19", "honey_cost": "10", "honey_kg": "6"},
    "batch_cost": {"honey_cost": "60", "yeast_cost": "5", "bottles_count": "26"},
    "water_chemistry": {"calcium": "100", "sulfate": "150", "chloride": "50"},
    "upscaling": {"current_volume": "5", "target_volume": "20", "honey": "1.5"},
    "waste": {"initial_volume": "20", "num_rackings": "2"},
    "gallons_to_bottles": {"volume": "7.5"},
    "gallons_to_bottles_with_losses": {"initial_volume": "20", "num_rackings": "2"},
}


class TestAbv:
    """Tests for the ABV calculator."""

    def test_typical_mead(self, run, abv_params):
        result = run("abv", abv_params)

        assert result.output.unit == Unit.ABV
        assert result.output.value == Decimal("5.25")
        assert result.warnings == ()
        assert result.get_meta("og") == "1.050"
        assert result.get_meta("fg") == "1.010"
        assert "131.25" in result.get_meta("formula")

    def test_missing_fg(self, run):
        with pytest.raises(CalcMissingInputError):
            run("abv", {"og": "1.050"})

    def test_high_abv_warns(self, run):
        result = run("abv", {"og": "1.200", "fg": "1.010"})
        assert result.output.value > 20
        assert len(result.warnings) == 1

    def test_fg_above_og_rejected(self, run):
        with pytest.raises(CalcValidationError, match="OG must be >= FG"):
            run("abv", {"og": "1.010", "fg": "1.050"})

    def test_unparseable_og(self, run):
        with pytest.raises(CalcParseError) as exc_info:
            run("abv", {"og": "heavy", "fg": "1.010"})
        assert exc_info.value.field == "og"


class TestGravityConversions:
    """Tests for Brix, Plato and SG conversions."""

    def test_brix_20(self, run):
        result = run("brix_to_sg", {}, [Measurement.brix(Decimal("20"))])
        assert result.output.unit == Unit.SPECIFIC_GRAVITY
        assert close(result.output.value, "1.083")
        assert result.warnings == ()

    def test_brix_from_param(self, run):
        result = run("brix_to_sg", {"brix": "20"})
        assert close(result.output.value, "1.083")

    def test_brix_above_typical_warns(self, run):
        result = run("brix_to_sg", {"brix": "50"})
        assert any("above typical range" in w for w in result.warnings)

    def test_brix_out_of_range_param(self, run):
        with pytest.raises(CalcOutOfRangeError):
            run("brix_to_sg", {"brix": "80"})

    def test_brix_missing(self, run):
        with pytest.raises(CalcMissingInputError):
            run("brix_to_sg", {"sg": "1.050"})

    def test_sg_brix_round_trip(self, run):
        """SG to Brix and back lands near the starting gravity."""
        brix = run("sg_to_brix", {"sg": "1.083"}).output.value
        assert close(brix, "20", tol="0.3")
        sg = run("brix_to_sg", {"brix": str(brix)}).output.value
        assert close(sg, "1.083", tol="0.002")

    def test_plato_to_sg(self, run):
        result = run("plato_to_sg", {"plato": "12.5"})
        assert result.output.value == Decimal("1.0500")

    def test_sg_correction_at_calibration_is_identity(self, run):
        result = run("sg_correction", {"sg": "1.050", "temperature": "20"})
        assert result.output.value == Decimal("1.050")

    def test_hydrometer_correction_warm_sample_reads_higher(self, run):
        result = run("hydrometer_correction", {"measured_sg": "1.050", "sample_temp": "90"})
        assert result.output.value > Decimal("1.050")
        assert len(result.warnings) == 1

    def test_gravity_from_honey(self, run):
        result = run("gravity_from_ingredients", {"water_volume": "10", "honey_weight": "3.5"})
        assert close(result.output.value, "1.1022")
        assert result.warnings == ()


class TestDilutionAndBlending:
    """Dilution is blending with water at 0% ABV."""

    def test_dilution(self, run):
        result = run("dilution", {
            "current_volume": "10", "current_abv": "14", "target_abv": "10",
        })
        assert result.output.unit == Unit.LITERS
        assert result.output.value == Decimal("4")

    def test_dilution_matches_blending(self, run):
        water = run("dilution", {
            "current_volume": "10", "current_abv": "14", "target_abv": "10",
        }).output.value
        blended = run("blending", {
            "volume1": "10", "abv1": "14", "volume2": str(water), "abv2": "0",
        })
        assert blended.output.value == Decimal("10")

    def test_dilution_target_not_lower(self, run):
        with pytest.raises(CalcValidationError):
            run("dilution", {"current_volume": "10", "current_abv": "10", "target_abv": "12"})


class TestCalculatorContract:
    """Properties every registered calculator must hold."""

    def test_empty_input_fails_everywhere(self, registry):
        for calc in registry.get_all():
            with pytest.raises(CalcError):
                calc.calculate(CalcInput())

    def test_failed_validate_means_failed_calculate(self, registry):
        junk = CalcInput().add_param("unrelated", "x")
        for calc in registry.get_all():
            try:
                calc.validate(junk)
            except CalcError as e:
                with pytest.raises(CalcError) as exc_info:
                    calc.calculate(junk)
                assert exc_info.value.kind == e.kind, calc.id

    def test_ids_match_registry(self, registry):
        for calc_id in registry.list_ids():
            assert registry.get(calc_id).id == calc_id


class TestAdvanced:
    """Spot checks for the advanced calculators."""

    def test_volume_adjustment(self, run):
        result = run("volume_adjustment", {
            "current_volume": "10", "current_gravity": "1.100", "target_gravity": "1.050",
        })
        assert result.output.unit == Unit.LITERS
        assert close(result.output.value, "0.4762", tol="0.0001")
        assert result.get_meta("water_to_add") == "0.48 L"
        assert result.get_meta("final_volume") == "10.48 L"
        assert result.warnings == ()

    def test_volume_adjustment_target_must_be_lower(self, run):
        with pytest.raises(CalcValidationError, match="must be less than current"):
            run("volume_adjustment", {
                "current_volume": "10", "current_gravity": "1.050", "target_gravity": "1.050",
            })

    def test_refractometer(self, run):
        result = run("refractometer", {"original_brix": "20", "current_brix": "8"})
        assert result.output.unit == Unit.SPECIFIC_GRAVITY
        assert close(result.output.value, "1.0594", tol="0.0001")
        assert result.get_meta("apparent_attenuation") == "60.0%"
        assert result.warnings == ()

    def test_refractometer_low_attenuation_warns(self, run):
        result = run("refractometer", {"original_brix": "20", "current_brix": "16"})
        assert any("Low attenuation" in w for w in result.warnings)

    def test_refractometer_zero_brix(self, run):
        with pytest.raises(CalcValidationError, match="Original Brix must be positive"):
            run("refractometer", {"original_brix": "0", "current_brix": "0"})

    def test_attenuation(self, run):
        result = run("attenuation", {"og": "1.050", "fg": "1.010"})
        assert result.output.unit == Unit.PERCENT
        assert result.output.value == Decimal("80")
        assert result.get_meta("real_attenuation") == "65.5%"
        assert result.get_meta("original_extract") == "12.50°P"
        assert result.warnings == ()

    def test_attenuation_low_warns(self, run):
        result = run("attenuation", {"og": "1.050", "fg": "1.020"})
        assert result.output.value == Decimal("60")
        assert any("Low attenuation" in w for w in result.warnings)

    def test_attenuation_fg_above_og(self, run):
        with pytest.raises(CalcValidationError, match="FG cannot be greater than OG"):
            run("attenuation", {"og": "1.010", "fg": "1.050"})

    def test_alcohol_tolerance_alias_and_fg(self, run):
        result = run("alcohol_tolerance", {"yeast_strain": "EC1118", "og": "1.100"})
        assert result.output.unit == Unit.ABV
        assert result.output.value == Decimal("18")
        assert result.get_meta("estimated_fg") == "0.963"
        assert result.warnings == ()

    def test_alcohol_tolerance_low_strain_warns(self, run):
        result = run("alcohol_tolerance", {"yeast_strain": "S-04"})
        assert result.output.value == Decimal("11")
        assert any("Low tolerance" in w for w in result.warnings)
        assert result.get_meta("estimated_fg") is None

    def test_alcohol_tolerance_unknown_strain(self, run):
        result = run("alcohol_tolerance", {"yeast_strain": "mystery"})
        assert result.output.value == Decimal("12")
        assert result.get_meta("characteristics") == "Generic strain (estimate)"

    def test_bench_trials(self, run):
        result = run("bench_trials", {
            "trial_volume": "100", "trial_addition": "0.5", "batch_volume": "20",
        })
        assert result.output.unit == Unit.GRAMS
        assert result.output.value == Decimal("100")
        assert result.get_meta("scale_factor") == "200.0x"
        assert result.get_meta("batch_addition_g") == "100.0 g (0.10 kg)"
        assert any("Large scale factor" in w for w in result.warnings)

    def test_bench_trials_small_trial_warns(self, run):
        result = run("bench_trials", {
            "trial_volume": "40", "trial_addition": "0.2", "batch_volume": "1",
        })
        assert result.output.value == Decimal("5")
        assert len(result.warnings) == 1
        assert "Very small trial volume" in result.warnings[0]


class TestBeer:
    """Spot checks for the beer calculators."""

    IBU_PARAMS = {
        "hop_weight_g": "28", "alpha_acid": "5", "boil_time": "60",
        "volume_l": "20", "boil_gravity": "1.050",
    }

    def test_ibu_tinseth(self, run):
        result = run("ibu", self.IBU_PARAMS)
        assert close(result.output.value, "16.15", tol="0.01")
        assert result.get_meta("output_unit") == "IBU"
        assert result.get_meta("utilization") == "23.1%"
        assert result.get_meta("formula") == "Tinseth"
        assert result.warnings == ()

    def test_ibu_high_alpha_warns(self, run):
        result = run("ibu", {**self.IBU_PARAMS, "alpha_acid": "25"})
        assert result.warnings == ("Alpha acid > 20% is unusually high - verify value",)

    def test_ibu_negative_boil_time(self, run):
        with pytest.raises(CalcValidationError, match="Boil time"):
            run("ibu", {**self.IBU_PARAMS, "boil_time": "-5"})

    def test_srm_morey(self, run):
        result = run("srm", {"grain_weight": "10", "lovibond": "4", "volume": "5"})
        assert close(result.output.value, "6.21", tol="0.01")
        assert result.get_meta("output_unit") == "SRM"
        assert result.get_meta("mcu") == "8.00"
        assert result.get_meta("color_description") == "Straw to Pale Gold"

    def test_srm_black(self, run):
        result = run("srm", {"grain_weight": "10", "lovibond": "500", "volume": "5"})
        assert result.get_meta("color_description") == "Black"
        assert any("black" in w for w in result.warnings)

    def test_mash_strike_water(self, run):
        result = run("mash", {
            "target_temp": "67", "grain_temp": "20", "grain_weight": "5", "ratio": "3",
        })
        assert result.output.unit == Unit.CELSIUS
        assert close(result.output.value, "70.133")
        assert result.get_meta("strike_temperature").startswith("70.1°C")
        assert result.get_meta("water_volume").startswith("15.00 L")
        assert result.warnings == ()

    def test_mash_thick_warns(self, run):
        result = run("mash", {
            "target_temp": "67", "grain_temp": "20", "grain_weight": "5", "ratio": "1",
        })
        assert result.warnings == ("Ratio <1.5 L/kg - very thick mash",)

    def test_efficiency(self, run):
        result = run("efficiency", {
            "grain_weight": "10", "ppg": "37", "measured_gravity": "1.050", "volume": "5",
        })
        assert close(result.output.value, "67.57", tol="0.01")
        assert result.get_meta("category") == "Average (65-70%)"
        assert result.warnings == ()

    def test_efficiency_below_60_warns(self, run):
        result = run("efficiency", {
            "grain_weight": "10", "ppg": "37", "measured_gravity": "1.040", "volume": "5",
        })
        assert result.get_meta("category") == "Poor (<60%) - Check process"
        assert any("Efficiency <60%" in w for w in result.warnings)


class TestBrewing:
    """Spot checks for fermentation calculators."""

    def test_nutrition_tosna_2(self, run):
        result = run("nutrition", {"volume": "20", "target_abv": "12"})
        assert result.output.unit == Unit.GRAMS
        assert result.get_meta("protocol") == "TOSNA 2.0"
        assert result.get_meta("addition_1_24hrs") is not None
        assert result.get_meta("total_fermaid_o").endswith(" g")

    def test_nutrition_abv_out_of_band(self, run):
        with pytest.raises(CalcValidationError, match="5-20%"):
            run("nutrition", {"volume": "20", "target_abv": "25"})

    def test_nutrition_tosna_1_warns(self, run):
        result = run("nutrition", {"volume": "20", "target_abv": "12", "protocol": "tosna_1"})
        assert any("TOSNA 1.0" in w for w in result.warnings)

    def test_fermentation_timeline(self, run):
        result = run("fermentation_timeline", {"og": "1.100", "fg": "1.000"})
        assert result.output.value == Decimal("10")
        assert result.get_meta("output_unit") == "days"
        assert result.get_meta("total_time") == "15 days"

    def test_keg_carbonation(self, run):
        result = run("carbonation", {
            "volume": "19", "temperature": "4", "target_co2": "2.5", "method": "keg",
        })
        assert result.get_meta("output_unit") == "psi"
        assert result.output.value > 0

    def test_priming_sugar(self, run):
        result = run("carbonation", {"volume": "19", "temperature": "20", "target_co2": "2.5"})
        assert result.get_meta("method") == "Bottle Priming"
        assert result.output.value > 0

    def test_starter_not_needed(self, run):
        with pytest.raises(CalcValidationError):
            run("yeast_starter", {"cells_needed": "50", "cells_available": "100"})

    def test_yeast_pitch(self, run):
        result = run("yeast_pitch", {"volume": "20", "og": "1.060"})
        assert result.output.unit == Unit.GRAMS
        assert result.output.value == Decimal("5.625")
        assert result.get_meta("cells_billion") == "225 billion cells"
        assert result.get_meta("plato") == "15.0°P"
        assert result.warnings == ()

    def test_yeast_pitch_large_lager_needs_starter(self, run):
        result = run("yeast_pitch", {"volume": "60", "og": "1.060", "yeast_type": "Lager"})
        assert result.get_meta("cells_billion") == "1350 billion cells"
        assert any("starter" in w for w in result.warnings)


class TestFinishing:
    """Spot checks for finishing calculators."""

    def test_bottling(self, run):
        result = run("bottling", {"volume": "19"})
        assert result.output.value == Decimal("24")
        assert result.get_meta("cases_12") == "2 cases + 0 loose"
        assert any("leftover" in w for w in result.warnings)

    def test_sulfite(self, run):
        result = run("sulfite", {"volume": "20", "target_free_so2": "50", "ph": "3.4"})
        assert close(result.output.value, "1.7361")

    def test_sulfite_requires_ph(self, run):
        with pytest.raises(CalcMissingInputError):
            run("sulfite", {"volume": "20", "target_free_so2": "50"})

    def test_stabilization_high_ph_warns(self, run):
        result = run("stabilization", {"volume": "20"}, [Measurement.ph(Decimal("3.8"))])
        assert result.output.value == Decimal("10.0")
        assert any("pH > 3.6" in w for w in result.warnings)

    def test_acid_target_must_be_lower(self, run):
        with pytest.raises(CalcValidationError):
            run("acid_addition", {"current_ph": "3.4", "volume": "20", "target_ph": "3.6"})

    def test_pasteurization_reference_temperature(self, run):
        result = run("pasteurization", {"temperature": "60"})
        assert result.output.value == Decimal("50")
        assert result.get_meta("output_unit") == "minutes"
        assert result.get_meta("pu_level").startswith("50 PU")

    def test_pasteurization_too_cold(self, run):
        with pytest.raises(CalcValidationError, match="too low"):
            run("pasteurization", {"temperature": "55"})

    def test_backsweetening(self, run):
        result = run("backsweetening", {"current_sg": "1.000", "volume": "20", "target_sg": "1.010"})
        assert result.output.value > 0
        assert result.get_meta("gravity_increase") == "0.010"

    def test_tannin(self, run):
        result = run("tannin", {"volume": "20"})
        assert result.output.value == Decimal("2")
        assert result.get_meta("tannin_tsp") == "0.400 tsp"
        assert result.get_meta("dosage") == "0.10 g/L"
        assert len(result.warnings) == 2

    def test_tannin_high_level(self, run):
        result = run("tannin", {"volume": "20", "tannin_level": "HIGH"})
        assert result.output.value == Decimal("3")


class TestMeadStyles:
    """Spot checks for mead style recipes."""

    def test_great_mead(self, run):
        result = run("great_mead", {"volume": "19", "target_abv": "14"})
        assert result.output.unit == Unit.GRAMS
        assert result.output.value == Decimal("35910")
        assert result.get_meta("honey") == "35.91 kg"

    def test_great_mead_default_abv(self, run):
        result = run("great_mead", {"volume": "1"})
        assert result.get_meta("target_abv") == "14%"

    def test_melomel_credits_fruit_sugar(self, run):
        result = run("melomel", {"volume": "10"})
        assert result.output.value == Decimal("15960")

    def test_bochet_always_warns(self, run):
        result = run("bochet", {"volume": "10", "target_abv": "12"})
        assert len(result.warnings) == 1

    def test_oxymel_percentages_over_100(self, run):
        with pytest.raises(CalcValidationError, match="cannot exceed 100%"):
            run("oxymel", {"volume": "1", "vinegar_percent": "60", "honey_percent": "50"})

    def test_negative_volume(self, run):
        with pytest.raises(CalcValidationError, match="Volume must be positive"):
            run("sack", {"volume": "-1", "target_abv": "16"})

    def test_cyser_credits_juice_sugar(self, run):
        result = run("cyser", {"volume": "10", "target_abv": "12"})
        assert close(result.output.value, "15680", tol="0.01")
        assert result.get_meta("juice_volume_L") == "5.00 L"
        assert result.warnings == ()

    def test_cyser_high_juice_warns(self, run):
        result = run("cyser", {"volume": "10", "target_abv": "12", "juice_percent": "80"})
        assert any("more cider than mead" in w for w in result.warnings)

    def test_metheglin(self, run):
        result = run("metheglin", {"volume": "10", "target_abv": "12"})
        assert result.output.value == Decimal("16200")
        assert result.get_meta("spice_g") == "10.0 g"
        assert len(result.warnings) == 1

    def test_acerglyn(self, run):
        result = run("acerglyn", {"volume": "10", "target_abv": "12", "maple_percent": "25"})
        assert result.output.value == Decimal("2970")
        assert result.get_meta("maple_syrup_g") == "1473 g"

    def test_acerglyn_percent_range(self, run):
        with pytest.raises(CalcValidationError, match="between 0 and 100"):
            run("acerglyn", {"volume": "10", "target_abv": "12", "maple_percent": "150"})

    def test_braggot(self, run):
        result = run("braggot", {"volume": "10", "target_abv": "6", "honey_percent": "50"})
        assert result.output.value == Decimal("990")
        assert result.get_meta("honey_g") == "990 g"

    def test_capsicumel_hot(self, run):
        result = run("capsicumel", {"volume": "10", "target_abv": "12", "heat_level": "hot"})
        assert result.output.value == Decimal("16200")
        assert result.get_meta("pepper_g") == "15.0 g"
        assert len(result.warnings) == 1

    def test_hydromel(self, run):
        result = run("hydromel", {"volume": "10", "target_abv": "5"})
        assert result.output.value == Decimal("1650")
        assert result.warnings == ()

    def test_hydromel_very_low_abv_warns(self, run):
        result = run("hydromel", {"volume": "10", "target_abv": "3"})
        assert any("Very low ABV" in w for w in result.warnings)

    def test_sack(self, run):
        result = run("sack", {"volume": "10", "target_abv": "16"})
        assert result.output.value == Decimal("5280")
        assert result.warnings == ()

    def test_lactomel(self, run):
        result = run("lactomel", {"volume": "10", "target_abv": "12"})
        assert result.output.value == Decimal("3960")
        assert result.get_meta("lactose_g") == "1000 g"
        assert result.warnings == ()

    def test_lactomel_heavy_lactose_warns(self, run):
        result = run("lactomel", {"volume": "10", "target_abv": "12", "lactose_level": "heavy"})
        assert result.get_meta("lactose_g") == "1500 g"
        assert any("High lactose" in w for w in result.warnings)

    def test_pyment(self, run):
        result = run("pyment", {"volume": "10", "target_abv": "14"})
        assert result.output.value == Decimal("660")
        assert result.get_meta("abv_from_honey") == "2.0%"
        assert result.get_meta("juice_volume_L") == "4.00 L"
        assert result.warnings == ()

    def test_pyment_juice_covers_target(self, run):
        result = run("pyment", {"volume": "10", "target_abv": "10"})
        assert result.output.value == 0
        assert result.get_meta("abv_from_honey") == "0.0%"


class TestUtilities:
    """Spot checks for utility calculators."""

    def test_gallons_to_bottles(self, run):
        result = run("gallons_to_bottles", {"volume": "7.5"})
        assert result.output.unit == Unit.LITERS
        assert result.get_meta("bottles_750ml") == "10 bottles (750 mL / standard wine)"
        assert result.get_meta("cases_750ml") == "1 cases (12 × 750mL)"

    def test_with_losses_racking_cap(self, run):
        with pytest.raises(CalcValidationError, match="Maximum 10 rackings"):
            run("gallons_to_bottles_with_losses", {"initial_volume": "20", "num_rackings": "11"})

    def test_with_losses_reduces_volume(self, run):
        result = run("gallons_to_bottles_with_losses", {"initial_volume": "20", "num_rackings": "2"})
        assert result.output.value < Decimal("20")

    def test_waste_racking_range(self, run):
        with pytest.raises(CalcValidationError, match="Rackings must be 0-10"):
            run("waste", {"initial_volume": "20", "num_rackings": "11"})

    def test_waste_output_in_liters(self, run):
        result = run("waste", {"initial_volume": "20"})
        assert result.output.unit == Unit.LITERS
        assert result.output.value < Decimal("20")

    def test_batch_cost_rejects_text(self, run):
        with pytest.raises(CalcParseError):
            run("batch_cost", {"honey_cost": "cheap"})

    def test_batch_cost_totals(self, run):
        result = run("batch_cost", {"honey_cost": "60", "yeast_cost": "5", "bottles_count": "26"})
        assert result.output.value == Decimal("65")
        assert result.get_meta("cost_per_bottle") == "$2.50"

    def test_priming_alternatives_default(self, run):
        result = run("priming_alternatives", {"sugar_type": "corn_sugar"})
        assert result.output.value == Decimal("100")

    def test_cost_calculator(self, run):
        result = run("cost_calculator", {"volume": "19", "honey_cost": "10", "honey_kg": "6"})
        assert result.output.value == Decimal("68")
        assert result.get_meta("output_unit") == "USD"
        assert result.get_meta("bottles_750ml") == "25"
        assert result.get_meta("cost_per_bottle_with_bottle") == "$4.22"
        assert result.get_meta("total_with_bottles") == "$105.50"
        assert result.warnings == ()

    def test_cost_calculator_expensive_bottles_warn(self, run):
        result = run("cost_calculator", {"volume": "3", "honey_cost": "100", "honey_kg": "6"})
        assert any("High per-bottle cost" in w for w in result.warnings)

    def test_water_chemistry(self, run):
        result = run("water_chemistry", {
            "calcium": "100", "magnesium": "10", "sulfate": "150", "chloride": "50",
        })
        assert result.output.value == Decimal("3")
        assert result.get_meta("so4_cl_ratio") == "3.00:1"
        assert result.get_meta("profile") == "Moderately Bitter (Amber, Brown)"
        assert result.get_meta("mineral") == "Water profile adequate"
        assert result.warnings == ()

    def test_water_chemistry_sulfate_only(self, run):
        result = run("water_chemistry", {"calcium": "100", "sulfate": "100"})
        assert result.get_meta("profile") == "Highly Bitter (IPA, Pale Ale)"

    def test_water_chemistry_low_calcium_warns(self, run):
        result = run("water_chemistry", {"calcium": "20", "chloride": "100"})
        assert result.get_meta("profile") == "Chloride Dominant (Sweet)"
        assert any("Calcium <50 ppm" in w for w in result.warnings)

    def test_water_chemistry_rejects_text(self, run):
        with pytest.raises(CalcParseError):
            run("water_chemistry", {"calcium": "hard"})

    def test_upscaling(self, run):
        result = run("upscaling", {"current_volume": "5", "target_volume": "20", "honey": "1.5"})
        assert result.output.unit == Unit.PERCENT
        assert result.output.value == Decimal("400")
        assert result.get_meta("scale_factor") == "4.00x"
        assert result.get_meta("honey_original") == "1.50"
        assert result.get_meta("honey_scaled") == "6.00"
        assert result.warnings == ()

    def test_upscaling_without_ingredients_warns(self, run):
        result = run("upscaling", {"current_volume": "5", "target_volume": "10"})
        assert result.warnings == ("No ingredients provided - showing scale factor only",)


class TestWholeCatalog:
    """Every calculator accepts its sample input and is deterministic."""

    def test_samples_cover_registry(self, registry):
        assert set(SAMPLE_INPUTS) == set(registry.list_ids())

    @pytest.mark.parametrize("calc_id", sorted(SAMPLE_INPUTS))
    def test_deterministic(self, run, calc_id):
        first = run(calc_id, SAMPLE_INPUTS[calc_id])
        assert first == run(calc_id, SAMPLE_INPUTS[calc_id])

    def test_arithmetic_fault_becomes_calculation_error(self):
        class Divider(Calculator):
            id = "divider"

            def compute(self, input):
                return CalcResult.new(Measurement.new(Decimal(1) / Decimal(0), Unit.PERCENT))

        with pytest.raises(CalculationError, match="divider: numeric failure"):
            Divider().calculate(CalcInput().add_param("x", "1"))
