"""
Basic calculators: ABV, gravity scale conversions, temperature corrections,
dilution, blending and starting gravity from fermentables.
"""

from decimal import Decimal

from mazerion.core.calculator import (
    Calculator,
    measurement_input,
    optional_decimal,
    param_choice,
    require_decimal,
    require_measurement,
    require_params,
)
from mazerion.core.errors import CalcValidationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit
from mazerion.core.validation import brix_warning, plato_warning

ABV_FACTOR = Decimal("131.25")

# Gravity points contributed by 1 kg of fermentable dissolved in 1 L
POINTS_PER_KG_PER_L: dict[str, Decimal] = {
    "honey": Decimal("292"),
    "table_sugar": Decimal("384"),
    "dme": Decimal("367"),
    "maple_syrup": Decimal("250"),
}

HONEY_DENSITY_KG_PER_L = Decimal("1.42")
SG_TEMP_COEFFICIENT = Decimal("0.00013")
SG_CALIBRATION_C = Decimal("20")


def brix_to_sg(brix: Decimal) -> Decimal:
    """Brew Your Own conversion from °Brix to specific gravity."""
    return brix / (Decimal("258.6") - (brix / Decimal("258.2")) * Decimal("227.1")) + 1


def sg_to_brix(sg: Decimal) -> Decimal:
    """Cubic polynomial conversion from specific gravity to °Brix."""
    return (
        Decimal("-676.67")
        + Decimal("1286.4") * sg
        - Decimal("800.47") * sg ** 2
        + Decimal("190.74") * sg ** 3
    )


def plato_to_sg(plato: Decimal) -> Decimal:
    """Linear approximation: 1 °P ≈ 4 gravity points."""
    return 1 + plato * Decimal("0.004")


def hydrometer_density_ratio(temp_f: Decimal) -> Decimal:
    """Relative water density polynomial used for hydrometer correction (°F)."""
    return (
        Decimal("1.00130346")
        - Decimal("0.000134722124") * temp_f
        + Decimal("0.00000204052596") * temp_f ** 2
        - Decimal("0.00000000232820948") * temp_f ** 3
    )


class AbvCalculator(Calculator):
    id = "abv"
    name = "ABV Calculator"
    description = "Calculate alcohol by volume from original and final specific gravity"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "og", "fg")

    def compute(self, input: CalcInput) -> CalcResult:
        og = require_decimal(input, "og")
        fg = require_decimal(input, "fg")
        if og < fg:
            raise CalcValidationError("OG must be >= FG")

        abv = (og - fg) * ABV_FACTOR
        result = CalcResult.new(Measurement.new(abv, Unit.ABV))
        if abv > 20:
            result = result.with_warning("ABV > 20% is unusually high")

        return (
            result.with_meta("og", input.get_param("og"))
            .with_meta("fg", input.get_param("fg"))
            .with_meta("formula", "Standard ABV = (OG - FG) × 131.25")
        )


class BrixToSgCalculator(Calculator):
    id = "brix_to_sg"
    name = "Brix to SG"
    description = "Convert degrees Brix to specific gravity (Brew Your Own formula)"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.BRIX, "brix")

    def compute(self, input: CalcInput) -> CalcResult:
        brix = measurement_input(input, Unit.BRIX, "brix").value
        sg = brix_to_sg(brix)

        result = CalcResult.new(Measurement.sg(sg))
        warning = brix_warning(brix)
        if warning:
            result = result.with_warning(warning)

        return (
            result.with_meta("brix", f"{brix:.2f}°Bx")
            .with_meta("sg", f"{sg:.4f}")
            .with_meta("formula", "Brew Your Own (accurate)")
            .with_meta("calculation", f"{brix}/(258.6 - ({brix}÷258.2)×227.1) + 1")
        )


class PlatoToSgCalculator(Calculator):
    id = "plato_to_sg"
    name = "Plato to SG"
    description = "Convert degrees Plato to specific gravity"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.PLATO, "plato")

    def compute(self, input: CalcInput) -> CalcResult:
        plato = measurement_input(input, Unit.PLATO, "plato").value
        sg = plato_to_sg(plato)

        result = CalcResult.new(Measurement.sg(sg))
        warning = plato_warning(plato)
        if warning:
            result = result.with_warning(warning)
        return result.with_meta("plato", f"{plato:.2f}°P").with_meta(
            "formula", "SG = 1 + °P × 0.004"
        )


class SgToBrixCalculator(Calculator):
    id = "sg_to_brix"
    name = "SG to Brix"
    description = "Convert specific gravity to degrees Brix (cubic polynomial)"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.SPECIFIC_GRAVITY, "sg")

    def compute(self, input: CalcInput) -> CalcResult:
        sg = measurement_input(input, Unit.SPECIFIC_GRAVITY, "sg").value
        brix = sg_to_brix(sg)

        result = CalcResult.new(Measurement.brix(brix))
        warning = brix_warning(brix)
        if warning:
            result = result.with_warning(warning)

        return (
            result.with_meta("sg", f"{sg:.4f}")
            .with_meta("brix", f"{brix:.2f}°Bx")
            .with_meta("formula", "Cubic polynomial (accurate)")
            .with_meta("calculation", "−676.67 + 1286.4·SG − 800.47·SG² + 190.74·SG³")
        )


class SgCorrectionCalculator(Calculator):
    id = "sg_correction"
    name = "SG Temperature Correction"
    description = "Correct specific gravity reading for temperature (calibrated at 20°C)"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.SPECIFIC_GRAVITY, "sg")
        require_measurement(input, Unit.CELSIUS, "temperature")

    def compute(self, input: CalcInput) -> CalcResult:
        sg = measurement_input(input, Unit.SPECIFIC_GRAVITY, "sg").value
        temp = measurement_input(input, Unit.CELSIUS, "temperature").value

        correction = SG_TEMP_COEFFICIENT * (temp - SG_CALIBRATION_C)
        result = CalcResult.new(Measurement.sg(sg + correction))
        if abs(temp - SG_CALIBRATION_C) > 10:
            result = result.with_warning(
                "Large temperature deviation from calibration (20°C)"
            )

        return (
            result.with_meta("measured_sg", sg)
            .with_meta("temperature", f"{temp} °C")
            .with_meta("correction", correction)
            .with_meta("calibration", "20°C")
        )


class HydrometerCorrectionCalculator(Calculator):
    id = "hydrometer_correction"
    name = "Hydrometer Temperature Correction"
    description = "Correct hydrometer readings for temperature (general polynomial formula)"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "measured_sg", "sample_temp")

    def compute(self, input: CalcInput) -> CalcResult:
        measured = require_decimal(input, "measured_sg")
        sample_f = require_decimal(input, "sample_temp")
        calibration_f = optional_decimal(input, "calibration_temp", "68")

        corrected = measured * (
            hydrometer_density_ratio(sample_f) / hydrometer_density_ratio(calibration_f)
        )
        result = CalcResult.new(Measurement.sg(corrected))
        if abs(sample_f - calibration_f) > 15:
            result = result.with_warning(
                "Large temperature difference - ensure accurate reading"
            )

        return (
            result.with_meta("corrected_sg", f"{corrected:.4f}")
            .with_meta("measured_sg", input.get_param("measured_sg"))
            .with_meta("sample_temp", f"{sample_f}°F")
            .with_meta("calibration_temp", f"{calibration_f}°F")
            .with_meta("correction", f"{corrected - measured:+.5f}")
            .with_meta("formula", "General polynomial (accurate for any calibration temp)")
        )


class DilutionCalculator(Calculator):
    id = "dilution"
    name = "Dilution Calculator"
    description = "Calculate water needed to reduce ABV"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "current_volume", "current_abv", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "current_volume")
        current = require_decimal(input, "current_abv")
        target = require_decimal(input, "target_abv")
        if current <= target:
            raise CalcValidationError("Current ABV must be greater than target ABV")
        if target <= 0:
            raise CalcValidationError("Target ABV must be positive")

        water = volume * (current / target - 1)
        return (
            CalcResult.new(Measurement.new(water, Unit.LITERS))
            .with_meta("current_volume", f"{volume} L")
            .with_meta("current_abv", f"{current}%")
            .with_meta("target_abv", f"{target}%")
            .with_meta("final_volume", f"{volume + water} L")
        )


class BlendingCalculator(Calculator):
    id = "blending"
    name = "Blending Calculator"
    description = "Calculate final ABV when mixing two batches"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume1", "abv1", "volume2", "abv2")

    def compute(self, input: CalcInput) -> CalcResult:
        v1 = require_decimal(input, "volume1")
        a1 = require_decimal(input, "abv1")
        v2 = require_decimal(input, "volume2")
        a2 = require_decimal(input, "abv2")
        total = v1 + v2
        if total <= 0:
            raise CalcValidationError("Total volume must be positive")

        blended = (v1 * a1 + v2 * a2) / total
        return (
            CalcResult.new(Measurement.new(blended, Unit.ABV))
            .with_meta("batch1", f"{v1} L @ {a1}%")
            .with_meta("batch2", f"{v2} L @ {a2}%")
            .with_meta("total_volume", f"{total} L")
        )


class GravityFromIngredientsCalculator(Calculator):
    id = "gravity_from_ingredients"
    name = "Gravity from Ingredients"
    description = "Calculate expected gravity from honey/sugar and water volumes"
    category = "Basic"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "water_volume", "honey_weight")

    def compute(self, input: CalcInput) -> CalcResult:
        water_l = require_decimal(input, "water_volume")
        ingredient_kg = require_decimal(input, "honey_weight")
        ingredient = param_choice(input, "ingredient_type", "honey")
        if water_l <= 0:
            raise CalcValidationError("Water volume must be positive")
        if ingredient_kg < 0:
            raise CalcValidationError("Ingredient weight cannot be negative")

        points_factor = POINTS_PER_KG_PER_L.get(ingredient, POINTS_PER_KG_PER_L["honey"])
        concentration = ingredient_kg / water_l
        points = concentration * points_factor
        sg = 1 + points / 1000
        honey_volume = ingredient_kg / HONEY_DENSITY_KG_PER_L

        result = (
            CalcResult.new(Measurement.sg(sg))
            .with_meta("ingredient_type", ingredient)
            .with_meta("ingredient_kg", f"{ingredient_kg:.2f} kg")
            .with_meta("water_L", f"{water_l:.2f} L")
            .with_meta("honey_volume_L", f"{honey_volume:.2f} L")
            .with_meta("total_volume", f"{water_l + honey_volume:.2f} L")
            .with_meta("concentration", f"{concentration:.3f} kg/L")
            .with_meta("gravity_points", f"{points:.1f} points")
            .with_meta("estimated_sg", f"{sg:.3f}")
            .with_meta("formula", "Metric: (kg/L) × points_per_kg_per_L")
        )
        if sg > Decimal("1.120"):
            result = result.with_warning(
                "Very high gravity (>1.120) - may stress yeast, consider stepped feeding"
            )
        if sg < Decimal("1.040"):
            result = result.with_warning("Low gravity (<1.040) - will produce low ABV")
        return result
