"""
Advanced calculators: volume adjustment, refractometer correction,
attenuation, yeast alcohol tolerance and bench trial scaling.
"""

from decimal import Decimal
from typing import NamedTuple

from mazerion.calculators.basic import ABV_FACTOR
from mazerion.core.calculator import (
    Calculator,
    measurement_input,
    require_decimal,
    require_measurement,
    require_params,
)
from mazerion.core.errors import CalcValidationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit


class YeastStrain(NamedTuple):
    max_abv: Decimal
    temperature_range: str
    characteristics: str


YEAST_STRAINS: dict[str, YeastStrain] = {
    "ec-1118": YeastStrain(Decimal(18), "15-30°C", "Champagne yeast, very clean, high tolerance"),
    "k1-v1116": YeastStrain(Decimal(18), "15-30°C", "Strong fermenter, good for meads"),
    "71b-1122": YeastStrain(Decimal(14), "15-30°C", "Fruity, softens acid, good for melomels"),
    "d47": YeastStrain(Decimal(15), "15-20°C", "Tropical fruit notes, temperature sensitive"),
    "us-05": YeastStrain(Decimal(12), "15-24°C", "Clean American ale, neutral"),
    "s-04": YeastStrain(Decimal(11), "15-24°C", "English ale, slightly fruity"),
    "wy3068": YeastStrain(Decimal(10), "18-24°C", "Hefeweizen, banana and clove"),
    "safale_be-134": YeastStrain(Decimal(11), "18-28°C", "Belgian Saison, peppery"),
    "qa23": YeastStrain(Decimal(16), "15-30°C", "Portuguese wine yeast, neutral"),
    "dv10": YeastStrain(Decimal(16), "10-35°C", "Wide temperature range, champagne-like"),
}

STRAIN_ALIASES = {
    "ec1118": "ec-1118",
    "k1v1116": "k1-v1116",
    "71b1122": "71b-1122",
    "us05": "us-05",
    "s04": "s-04",
    "wyeast3068": "wy3068",
}

GENERIC_STRAIN = YeastStrain(Decimal(12), "18-24°C", "Generic strain (estimate)")


def lookup_strain(name: str) -> YeastStrain:
    """Find a strain by name or alias, case-insensitive. Unknown names get a generic estimate."""
    key = name.strip().lower()
    key = STRAIN_ALIASES.get(key, key)
    return YEAST_STRAINS.get(key, GENERIC_STRAIN)


class VolumeAdjustmentCalculator(Calculator):
    id = "volume_adjustment"
    name = "Volume Adjustment"
    description = "Calculate volume adjustments for target gravity (dilution or concentration)"
    category = "Advanced"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "current_volume", "current_gravity", "target_gravity")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "current_volume")
        current = require_decimal(input, "current_gravity")
        target = require_decimal(input, "target_gravity")
        if target >= current:
            raise CalcValidationError(
                "Target gravity must be less than current gravity. "
                "Use boiling to concentrate wort, not this calculator."
            )
        if target <= 0:
            raise CalcValidationError("Target gravity must be positive")

        final_volume = volume * current / target
        water = final_volume - volume
        result = CalcResult.new(Measurement.new(water, Unit.LITERS))
        if water > volume:
            result = result.with_warning(
                "Adding more water than original volume - double-check target"
            )

        return (
            result.with_meta("water_to_add", f"{water:.2f} L")
            .with_meta("final_volume", f"{final_volume:.2f} L")
            .with_meta("current_gravity", input.get_param("current_gravity"))
            .with_meta("target_gravity", input.get_param("target_gravity"))
        )


class RefractometerCalculator(Calculator):
    """Terrill cubic correction for refractometer readings taken after fermentation starts."""

    id = "refractometer"
    name = "Refractometer Correction"
    description = "Correct refractometer readings for alcohol (Terrill cubic)"
    category = "Advanced"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.BRIX, "original_brix")
        require_params(input, "current_brix")

    def compute(self, input: CalcInput) -> CalcResult:
        original = measurement_input(input, Unit.BRIX, "original_brix").value
        current = require_decimal(input, "current_brix")
        if original <= 0:
            raise CalcValidationError("Original Brix must be positive")

        sg = (
            1
            - Decimal("0.00085683") * original
            + Decimal("0.0034941") * current
            + Decimal("0.00011687") * original ** 2
            + Decimal("0.000029") * current ** 2
        )
        result = CalcResult.new(Measurement.sg(sg))

        apparent = (original - current) / original * 100
        if apparent > 90:
            result = result.with_warning("Very high attenuation - verify fermentation complete")
        elif apparent < 30:
            result = result.with_warning("Low attenuation - fermentation may still be active")

        return (
            result.with_meta("original_brix", f"{original:.2f}°Bx")
            .with_meta("current_brix", f"{current:.2f}°Bx")
            .with_meta("apparent_attenuation", f"{apparent:.1f}%")
            .with_meta("formula", "Terrill cubic equation")
        )


class AttenuationCalculator(Calculator):
    id = "attenuation"
    name = "Attenuation Calculator"
    description = "Calculate apparent and real attenuation (ASBC formulas)"
    category = "Advanced"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "og", "fg")

    def compute(self, input: CalcInput) -> CalcResult:
        og = require_decimal(input, "og")
        fg = require_decimal(input, "fg")
        if fg > og:
            raise CalcValidationError("FG cannot be greater than OG")
        if og <= 1:
            raise CalcValidationError("OG must be greater than 1.000")

        apparent = (og - fg) / (og - 1) * 100
        original_extract = (og - 1) * 250
        apparent_extract = (fg - 1) * 250
        real_extract = Decimal("0.1808") * original_extract + Decimal("0.8192") * apparent_extract
        real = (original_extract - real_extract) / original_extract * 100

        result = CalcResult.new(Measurement.new(apparent, Unit.PERCENT))
        if apparent < 65:
            result = result.with_warning("Low attenuation (<65%) - may be under-attenuated or stuck")
        if apparent > 85:
            result = result.with_warning("Very high attenuation (>85%) - check for contamination")

        return (
            result.with_meta("apparent_attenuation", f"{apparent:.1f}%")
            .with_meta("real_attenuation", f"{real:.1f}%")
            .with_meta("real_extract", f"{real_extract:.2f}°P")
            .with_meta("original_extract", f"{original_extract:.2f}°P")
            .with_meta("original_gravity", input.get_param("og"))
            .with_meta("final_gravity", input.get_param("fg"))
            .with_meta("formula", "ASBC standard")
        )


class AlcoholToleranceCalculator(Calculator):
    id = "alcohol_tolerance"
    name = "Alcohol Tolerance"
    description = "Calculate maximum ABV and estimated FG for yeast strain"
    category = "Advanced"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "yeast_strain")

    def compute(self, input: CalcInput) -> CalcResult:
        strain_name = input.get_param("yeast_strain") or ""
        strain = lookup_strain(strain_name)

        result = CalcResult.new(Measurement.new(strain.max_abv, Unit.ABV))
        if strain.max_abv < 12:
            result = result.with_warning(
                "Low tolerance strain - not suitable for high-gravity brews"
            )
        result = (
            result.with_meta("max_abv", f"{strain.max_abv}%")
            .with_meta("yeast_strain", strain_name)
            .with_meta("temperature_range", strain.temperature_range)
            .with_meta("characteristics", strain.characteristics)
        )

        if input.has_param("og"):
            og = require_decimal(input, "og")
            estimated_fg = og - strain.max_abv / ABV_FACTOR
            result = (
                result.with_meta("original_gravity", f"{og:.3f}")
                .with_meta("estimated_fg", f"{estimated_fg:.3f}")
                .with_meta(
                    "calculation",
                    f"FG = {og:.3f} - ({strain.max_abv} / 131.25) = {estimated_fg:.3f}",
                )
            )

        return result.with_meta(
            "tip", "Actual tolerance varies with nutrition and fermentation conditions"
        )


class BenchTrialsCalculator(Calculator):
    id = "bench_trials"
    name = "Bench Trials"
    description = "Calculate bench trial additions and scaling to full batch"
    category = "Advanced"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "trial_volume", "trial_addition", "batch_volume")

    def compute(self, input: CalcInput) -> CalcResult:
        trial_ml = require_decimal(input, "trial_volume")
        trial_g = require_decimal(input, "trial_addition")
        batch_l = require_decimal(input, "batch_volume")
        if trial_ml <= 0 or batch_l <= 0:
            raise CalcValidationError("Volumes must be positive")

        dosage = trial_g / trial_ml
        batch_ml = batch_l * 1000
        batch_g = dosage * batch_ml
        scale = batch_ml / trial_ml

        result = (
            CalcResult.new(Measurement.new(batch_g, Unit.GRAMS))
            .with_meta("trial_volume_mL", f"{trial_ml} mL")
            .with_meta("trial_addition_g", f"{trial_g:.2f} g")
            .with_meta("dosage_rate", f"{dosage:.3f} g/mL")
            .with_meta("batch_volume_L", f"{batch_l} L")
            .with_meta("batch_addition_g", f"{batch_g:.1f} g ({batch_g / 1000:.2f} kg)")
            .with_meta("scale_factor", f"{scale:.1f}x")
        )
        if scale > 100:
            result = result.with_warning(
                "Large scale factor - consider intermediate trials to verify dosage"
            )
        if trial_ml < 50:
            result = result.with_warning(
                "Very small trial volume - measurement errors will be amplified"
            )
        return result
