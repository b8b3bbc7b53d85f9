"""
Finishing calculators: bottling, stabilization, acid and sulfite additions,
backsweetening, tannin and in-bottle pasteurization.
"""

from decimal import ROUND_FLOOR, Decimal

from mazerion.core.calculator import (
    Calculator,
    measurement_input,
    optional_decimal,
    param_choice,
    parse_decimal,
    require_decimal,
    require_measurement,
    require_params,
)
from mazerion.core.errors import CalcValidationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit, celsius_to_fahrenheit

TSP_GRAMS = Decimal(5)

# Grams per liter for each 0.1 pH drop
ACID_STRENGTH: dict[str, tuple[Decimal, str]] = {
    "tartaric": (Decimal("0.15"), "Tartaric Acid (wine standard, strongest)"),
    "citric": (Decimal("0.17"), "Citric Acid (bright, fruity character)"),
    "malic": (Decimal("0.19"), "Malic Acid (soft, apple-like)"),
    "lactic": (Decimal("0.22"), "Lactic Acid (smooth, creamy)"),
}

# Fraction of potassium metabisulfite mass released as SO2
KMETA_SO2_YIELD = Decimal("0.576")

HONEY_POINTS_PER_KG_PER_L = Decimal("0.292")
HONEY_DENSITY_KG_PER_L = Decimal("1.425")

TANNIN_DOSAGE: dict[str, Decimal] = {
    "low": Decimal("0.05"),
    "medium": Decimal("0.10"),
    "high": Decimal("0.15"),
}

TANNIN_TYPES: dict[str, str] = {
    "wine_tannin": "Wine Tannin (grape-derived, general purpose)",
    "ft_blanc": "FT Blanc (oak, for white wines/meads)",
    "tannin_riche": "Tannin Riche (adds body without astringency)",
    "tannin_complex": "Tannin Complex (mouthfeel enhancement)",
}

PASTEURIZATION_MIN_C = Decimal(60)
PASTEURIZATION_MAX_C = Decimal(75)
LETHAL_RATE_BASE = Decimal("1.393")


def sulfite_effectiveness(ph: Decimal) -> str:
    if ph < 3:
        return "Very High (pH < 3.0)"
    if ph < Decimal("3.5"):
        return "High (pH 3.0-3.5)"
    if ph < Decimal("3.8"):
        return "Moderate (pH 3.5-3.8)"
    return "Low (pH > 3.8) - Consider adding more or lowering pH"


class BottlingCalculator(Calculator):
    id = "bottling"
    name = "Bottling Calculator"
    description = "Calculate bottles needed and headspace for batch volume"
    category = "Finishing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        bottle_ml = optional_decimal(input, "bottle_size", "750")
        loss_pct = optional_decimal(input, "loss_percent", "3")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if bottle_ml <= 0:
            raise CalcValidationError("Bottle size must be positive")
        if loss_pct < 0 or loss_pct >= 100:
            raise CalcValidationError("Loss percent must be between 0 and 100")

        usable_l = volume * (1 - loss_pct / 100)
        usable_ml = usable_l * 1000
        bottles = (usable_ml / bottle_ml).to_integral_value(rounding=ROUND_FLOOR)
        leftover_ml = usable_ml - bottles * bottle_ml
        cases, loose = divmod(int(bottles), 12)

        result = (
            CalcResult.new(Measurement.new(bottles, Unit.GRAMS))
            .with_meta("output_unit", "bottles")
            .with_meta("bottle_size_ml", f"{bottle_ml} mL")
            .with_meta("bottles_needed", f"{bottles:.0f} bottles")
            .with_meta("cases_12", f"{cases} cases + {loose} loose")
            .with_meta("usable_volume_L", f"{usable_l:.2f} L")
            .with_meta("loss_L", f"{volume - usable_l:.2f} L ({loss_pct}%)")
            .with_meta("leftover_ml", f"{leftover_ml:.0f} mL")
        )
        if leftover_ml > 200:
            result = result.with_warning("Significant leftover - consider adding a smaller bottle")
        if bottle_ml < 375:
            result = result.with_warning("Small bottles - consider aging potential and oxidation")
        return result


class StabilizationCalculator(Calculator):
    id = "stabilization"
    name = "Stabilization"
    description = "Calculate K-meta + sorbate for chemical stabilization"
    category = "Finishing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")

        kmeta = volume * Decimal("0.5")
        sorbate = volume * Decimal("0.75")
        result = (
            CalcResult.new(Measurement.new(kmeta, Unit.GRAMS))
            .with_meta("kmeta_g", f"{kmeta:.1f} g")
            .with_meta("kmeta_tsp", f"{kmeta / TSP_GRAMS:.2f} tsp")
            .with_meta("sorbate_g", f"{sorbate:.1f} g")
            .with_meta("sorbate_tsp", f"{sorbate / TSP_GRAMS:.2f} tsp")
            .with_meta("volume_L", f"{volume} L")
        )

        ph = input.find_measurement(Unit.PH)
        if ph is None and input.has_param("ph"):
            ph = measurement_input(input, Unit.PH, "ph")
        if ph is not None and ph.value > Decimal("3.6"):
            result = result.with_warning(
                "pH > 3.6 - sorbate less effective, may produce geranium off-flavor"
            )

        return result.with_warning(
            "CRITICAL: Add K-meta 24 hours before sorbate to kill remaining yeast"
        ).with_warning("Stabilization prevents re-fermentation for backsweetening")


class AcidAdditionCalculator(Calculator):
    id = "acid_addition"
    name = "Acid Addition"
    description = "Calculate acid additions to adjust pH - accounts for different acid strengths"
    category = "Finishing"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.PH, "current_ph")
        require_params(input, "volume", "target_ph")

    def compute(self, input: CalcInput) -> CalcResult:
        current = measurement_input(input, Unit.PH, "current_ph").value
        volume = require_decimal(input, "volume")
        target = require_decimal(input, "target_ph")
        acid_type = param_choice(input, "acid_type", "tartaric")
        if target >= current:
            raise CalcValidationError(
                "Target pH must be lower than current pH (acid lowers pH)"
            )
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")

        drop = current - target
        factor, acid_name = ACID_STRENGTH.get(acid_type, (ACID_STRENGTH["tartaric"][0], "Tartaric Acid"))
        grams = volume * drop * factor * 10

        result = CalcResult.new(Measurement.new(grams, Unit.GRAMS))
        if drop > Decimal("0.5"):
            result = result.with_warning(
                "Large pH drop (>0.5) - add in stages and taste between additions"
            )
        if drop > 1:
            result = result.with_warning(
                "Very large pH drop (>1.0) - MUST add in multiple stages over days"
            )
        if target < 3:
            result = result.with_warning("Target pH <3.0 - will taste very tart/sour")
        result = result.with_warning(
            "Always add acid gradually - easy to add, impossible to remove"
        )

        return (
            result.with_meta("acid_type", acid_name)
            .with_meta("acid_needed_g", f"{grams:.2f}")
            .with_meta("acid_needed_tsp", f"{grams / TSP_GRAMS:.2f}")
            .with_meta("current_ph", f"{current:.2f}")
            .with_meta("target_ph", f"{target:.2f}")
            .with_meta("ph_change", f"{drop:.2f}")
            .with_meta("strength_factor", f"{factor:.2f}")
            .with_meta("volume_liters", f"{volume:.2f}")
        )


class SulfiteCalculator(Calculator):
    id = "sulfite"
    name = "Sulfite Calculator"
    description = "Calculate K-meta additions with pH-dependent effectiveness"
    category = "Finishing"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.PH, "ph")
        require_params(input, "volume", "target_free_so2")

    def compute(self, input: CalcInput) -> CalcResult:
        ph = measurement_input(input, Unit.PH, "ph").value
        volume = require_decimal(input, "volume")
        target_ppm = require_decimal(input, "target_free_so2")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if target_ppm < 0:
            raise CalcValidationError("Target SO2 cannot be negative")

        # ppm is mg/L; K-meta releases ~57.6% of its mass as SO2
        kmeta_g = volume * target_ppm / 1000 / KMETA_SO2_YIELD

        result = (
            CalcResult.new(Measurement.new(kmeta_g, Unit.GRAMS))
            .with_meta("kmeta_g", f"{kmeta_g:.2f} g")
            .with_meta("kmeta_tsp", f"{kmeta_g / TSP_GRAMS:.2f} tsp")
            .with_meta("volume_L", f"{volume:.2f} L")
            .with_meta("target_so2_ppm", f"{target_ppm} ppm")
            .with_meta("ph", f"{ph:.2f}")
            .with_meta("effectiveness", sulfite_effectiveness(ph))
            .with_meta(
                "tip",
                "Add K-meta 24 hours before sorbate. Dissolve in small amount of water first.",
            )
        )
        if ph > Decimal("3.8"):
            result = result.with_warning(
                "High pH reduces sulfite effectiveness - consider adjusting pH first"
            )
        if target_ppm > 80:
            result = result.with_warning("High SO₂ target (>80 ppm) - may affect aroma and flavor")
        return result


class BacksweeteningCalculator(Calculator):
    id = "backsweetening"
    name = "Backsweetening"
    description = "Calculate sweetener needed to reach target gravity"
    category = "Finishing"

    def validate(self, input: CalcInput) -> None:
        require_measurement(input, Unit.SPECIFIC_GRAVITY, "current_sg")
        require_params(input, "volume", "target_sg")

    def compute(self, input: CalcInput) -> CalcResult:
        current = measurement_input(input, Unit.SPECIFIC_GRAVITY, "current_sg").value
        volume = require_decimal(input, "volume")
        target = require_decimal(input, "target_sg")
        if target <= current:
            raise CalcValidationError("Target gravity must be greater than current gravity")

        increase = target - current
        honey_kg = volume * increase / HONEY_POINTS_PER_KG_PER_L
        honey_l = honey_kg / HONEY_DENSITY_KG_PER_L
        honey_g = honey_kg * 1000

        result = CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
        if increase > Decimal("0.040"):
            result = result.with_warning(
                "Large gravity increase (>0.040) - consider backsweetening in stages"
            )
        if target > Decimal("1.100"):
            result = result.with_warning(
                "Final gravity >1.100 - ensure stabilization before backsweetening"
            )

        return (
            result.with_meta("honey_needed", f"{honey_kg:.2f} kg ({honey_g:.0f} g)")
            .with_meta("current_gravity", f"{current:.3f}")
            .with_meta("target_gravity", f"{target:.3f}")
            .with_meta("gravity_increase", f"{increase:.3f}")
            .with_meta("current_volume", f"{volume:.2f} L")
            .with_meta("honey_volume", f"{honey_l:.2f} L")
            .with_meta("final_volume", f"{volume + honey_l:.2f} L")
            .with_meta(
                "tip",
                "Always stabilize (sorbate + sulfite) before backsweetening to prevent refermentation",
            )
        )


class TanninCalculator(Calculator):
    id = "tannin"
    name = "Tannin Calculator"
    description = "Calculate tannin additions for body and mouthfeel"
    category = "Finishing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        level = param_choice(input, "tannin_level", "medium")
        tannin_type = param_choice(input, "tannin_type", "wine_tannin")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")

        dosage = TANNIN_DOSAGE.get(level, TANNIN_DOSAGE["medium"])
        grams = volume * dosage

        return (
            CalcResult.new(Measurement.new(grams, Unit.GRAMS))
            .with_meta("tannin_g", f"{grams:.2f} g")
            .with_meta("tannin_tsp", f"{grams / TSP_GRAMS:.3f} tsp")
            .with_meta("tannin_type", TANNIN_TYPES.get(tannin_type, "Wine Tannin (grape-derived)"))
            .with_meta("tannin_level", level)
            .with_meta("dosage", f"{dosage:.2f} g/L")
            .with_warning("Add gradually, taste after 24 hours - easy to over-tannin")
            .with_warning("Tannin adds astringency/dryness - use sparingly in sweet meads")
        )


class PasteurizationCalculator(Calculator):
    id = "pasteurization"
    name = "Pasteurization (PU-based)"
    description = "Calculate in-bottle pasteurization time using Pasteurization Units"
    category = "Finishing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "temperature")
        temp = parse_decimal("temperature", input.get_param("temperature"))
        if temp < PASTEURIZATION_MIN_C:
            raise CalcValidationError(
                "Temperature too low for pasteurization (min 60°C / 140°F)"
            )
        if temp > PASTEURIZATION_MAX_C:
            raise CalcValidationError(
                "Temperature too high - risk of flavor damage and bottle bombs (max 75°C / 167°F)"
            )

    def compute(self, input: CalcInput) -> CalcResult:
        temp = require_decimal(input, "temperature")
        target_pu = optional_decimal(input, "target_pu", "50")
        if target_pu <= 0:
            raise CalcValidationError("Target PU must be positive")

        lethal_rate = LETHAL_RATE_BASE ** (temp - PASTEURIZATION_MIN_C)
        hold_min = target_pu / lethal_rate

        result = (
            CalcResult.new(Measurement.new(hold_min, Unit.GRAMS))
            .with_meta("output_unit", "minutes")
            .with_meta("hold_time_min", f"{hold_min:.2f} minutes")
            .with_meta("hold_time_sec", f"{hold_min * 60:.0f} seconds")
            .with_meta("temperature_c", f"{temp:.1f}°C")
            .with_meta("temperature_f", f"{celsius_to_fahrenheit(temp):.1f}°F")
            .with_meta("target_pu", f"{target_pu} PU")
            .with_meta("lethal_rate", f"{lethal_rate:.2f} PU/min")
            .with_meta("method", "In-bottle pasteurization (PU-based hot water bath)")
            .with_meta(
                "calculation",
                f"PU = t × 1.393^(T-60) = {hold_min:.1f} × {lethal_rate:.2f} = "
                f"{hold_min * lethal_rate:.1f}",
            )
            .with_warning(
                "CRITICAL: Hold time starts when INTERNAL LIQUID reaches target temp "
                "(use sacrificial/probed bottle)"
            )
            .with_warning("Use champagne bottles or bottles rated for pasteurization")
            .with_warning(
                "Monitor temperature closely - exceeding temp risks flavor damage and bottle explosions"
            )
            .with_meta(
                "purpose",
                "Beverage stabilization: primarily yeast control to prevent refermentation/over-carbonation",
            )
            .with_meta("safety_note", "Reduces spoilage microbes (NOT sterilization)")
        )

        if target_pu == 30:
            result = result.with_meta("pu_level", "30 PU: Light pasteurization (minimal yeast control)")
        elif target_pu == 50:
            result = result.with_meta("pu_level", "50 PU: Standard pasteurization (good yeast control)")
        elif target_pu >= 76:
            result = result.with_meta("pu_level", "76+ PU: Heavy pasteurization (maximum yeast kill)")

        if temp >= 70:
            result = result.with_warning(
                "High temperature (≥70°C) - watch for caramelization and off-flavors"
            )
        if hold_min > 30:
            result = result.with_warning(
                "Long hold time - consider higher temperature for shorter duration"
            )
        elif hold_min < 5:
            result = result.with_warning(
                "Very short hold time - ensure accurate temperature control"
            )
        return result
