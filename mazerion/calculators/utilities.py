"""
Utility calculators: priming sugar equivalents, batch costing, water
profile, recipe scaling, process losses and bottle counts.
"""

from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal

from mazerion.core.calculator import (
    Calculator,
    optional_decimal,
    param_choice,
    parse_decimal,
    require_decimal,
    require_params,
)
from mazerion.core.errors import CalcParseError, CalcValidationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit, convert, liters_to_gallons

# Grams of each sugar giving the same carbonation as 1 g corn sugar
PRIMING_EQUIVALENTS: dict[str, Decimal] = {
    "corn_sugar": Decimal("1"),
    "table_sugar": Decimal("0.91"),
    "dme": Decimal("1.35"),
    "honey": Decimal("1.25"),
}

SCALABLE_INGREDIENTS = ("honey", "water", "fruit", "nutrients", "spices", "yeast")

# Fraction of volume lost to gross lees on the first racking
GROSS_LEES: dict[str, Decimal] = {
    "bucket": Decimal("0.08"),
    "carboy": Decimal("0.06"),
    "keg": Decimal("0.05"),
    "barrel": Decimal("0.07"),
}

# Fraction lost to fine lees on each later racking
FINE_LEES: dict[str, Decimal] = {
    "bucket": Decimal("0.03"),
    "carboy": Decimal("0.02"),
    "keg": Decimal("0.015"),
    "barrel": Decimal("0.025"),
}

CLARIFICATION_LOSS: dict[str, Decimal] = {
    "filtered": Decimal("0.04"),
    "fined": Decimal("0.02"),
    "standard": Decimal("0.01"),
    "none": Decimal("0"),
}

TRANSFER_LOSS = Decimal("0.005")
MAX_RACKINGS = 10

# (metadata key, mL per bottle, label)
BOTTLE_SIZES: list[tuple[str, Decimal, str]] = [
    ("bottles_12oz", Decimal("354.88"), "12 oz / 355 mL"),
    ("bottles_375ml", Decimal(375), "375 mL / half-bottle"),
    ("bottles_500ml", Decimal(500), "500 mL"),
    ("bottles_750ml", Decimal(750), "750 mL / standard wine"),
    ("bottles_1L", Decimal(1000), "1 L / magnum"),
    ("bottles_1.5L", Decimal(1500), "1.5 L"),
    ("bottles_3L", Decimal(3000), "3 L / double magnum"),
    ("bottles_5L", Decimal(5000), "5 L / jeroboam"),
    ("bottles_6L", Decimal(6000), "6 L / imperial"),
]

# (metadata key, bottle key, bottles per case, label)
CASE_SIZES: list[tuple[str, str, int, str]] = [
    ("cases_12oz", "bottles_12oz", 24, "24 × 12oz"),
    ("cases_375ml", "bottles_375ml", 12, "12 × 375mL"),
    ("cases_750ml", "bottles_750ml", 12, "12 × 750mL"),
    ("cases_1L", "bottles_1L", 12, "12 × 1L"),
]


def parse_count(input: CalcInput, key: str, default: str) -> int:
    raw = input.get_param(key) or default
    try:
        return int(raw.strip())
    except ValueError:
        raise CalcParseError(key, raw)


def bottle_counts(volume_l: Decimal) -> dict[str, Decimal]:
    """Whole bottles of each size (half-even rounding) for ``volume_l`` liters."""
    volume_ml = volume_l * 1000
    return {key: (volume_ml / size).to_integral_value() for key, size, _ in BOTTLE_SIZES}


def with_bottle_breakdown(result: CalcResult, volume_l: Decimal) -> CalcResult:
    """Attach bottle, case and volume conversions for ``volume_l`` liters."""
    counts = bottle_counts(volume_l)
    for key, _, label in BOTTLE_SIZES:
        result = result.with_meta(key, f"{counts[key]} bottles ({label})")
    for key, bottle_key, per_case, label in CASE_SIZES:
        cases = (counts[bottle_key] / per_case).to_integral_value(rounding=ROUND_CEILING)
        result = result.with_meta(key, f"{cases} cases ({label})")
    return (
        result.with_meta("volume_gallons", f"{liters_to_gallons(volume_l):.2f} gal")
        .with_meta("volume_liters", f"{volume_l:.2f} L")
        .with_meta("volume_quarts", f"{convert(volume_l, Unit.LITERS, Unit.QUARTS):.2f} qt")
        .with_meta(
            "volume_fluid_ounces",
            f"{convert(volume_l, Unit.LITERS, Unit.FLUID_OUNCES):.1f} fl oz",
        )
    )


class PrimingAlternativesCalculator(Calculator):
    id = "priming_alternatives"
    name = "Priming Sugar Alternatives"
    description = "Calculate equivalent amounts for different priming sugars"
    category = "Utilities"

    def compute(self, input: CalcInput) -> CalcResult:
        sugar_type = param_choice(input, "sugar_type", "corn_sugar")
        amount = optional_decimal(input, "amount", "100")
        if amount <= 0:
            raise CalcValidationError("Amount must be positive")

        factor = PRIMING_EQUIVALENTS.get(sugar_type, PRIMING_EQUIVALENTS["corn_sugar"])
        corn_sugar = amount / factor

        result = CalcResult.new(Measurement.new(corn_sugar, Unit.GRAMS))
        for name, equivalent in PRIMING_EQUIVALENTS.items():
            result = result.with_meta(f"{name}_g", f"{corn_sugar * equivalent:.1f}")
        result = result.with_meta("input_type", sugar_type).with_meta(
            "input_amount", f"{amount}"
        )
        if corn_sugar > 200:
            result = result.with_warning("High sugar amount - risk of overcarbonation")
        return result


class CostCalculator(Calculator):
    id = "cost_calculator"
    name = "Cost Calculator"
    description = "Calculate batch cost breakdown and per-bottle pricing"
    category = "Utilities"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "honey_cost", "honey_kg")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        honey_price = require_decimal(input, "honey_cost")
        honey_kg = require_decimal(input, "honey_kg")
        yeast = optional_decimal(input, "yeast_cost", "5")
        nutrients = optional_decimal(input, "nutrient_cost", "3")
        additives = optional_decimal(input, "additive_cost", "0")
        bottle_price = optional_decimal(input, "bottle_cost", "1.50")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")

        honey_total = honey_kg * honey_price
        batch_total = honey_total + yeast + nutrients + additives
        bottles = (volume * 1000 / 750).to_integral_value(rounding=ROUND_FLOOR)
        per_bottle = batch_total / bottles if bottles > 0 else Decimal(0)
        per_bottle_total = per_bottle + bottle_price

        result = (
            CalcResult.new(Measurement.new(batch_total, Unit.GRAMS))
            .with_meta("output_unit", "USD")
            .with_meta("total_batch_cost", f"${batch_total:.2f}")
            .with_meta("honey_cost", f"${honey_total:.2f}")
            .with_meta("yeast_cost", f"${yeast:.2f}")
            .with_meta("nutrient_cost", f"${nutrients:.2f}")
            .with_meta("additive_cost", f"${additives:.2f}")
            .with_meta("bottles_750ml", f"{bottles:.0f}")
            .with_meta("cost_per_bottle_ingredients", f"${per_bottle:.2f}")
            .with_meta("cost_per_bottle_with_bottle", f"${per_bottle_total:.2f}")
            .with_meta("total_with_bottles", f"${batch_total + bottles * bottle_price:.2f}")
        )
        if per_bottle_total > 15:
            result = result.with_warning(
                "High per-bottle cost - consider bulk ingredient purchases"
            )
        return result


class BatchCostCalculator(Calculator):
    id = "batch_cost"
    name = "Batch Cost Calculator"
    description = "Calculate total cost per batch and per bottle"
    category = "Utilities"

    COST_KEYS = ("honey_cost", "fruit_cost", "yeast_cost", "nutrients_cost", "other_cost")

    def compute(self, input: CalcInput) -> CalcResult:
        costs = {key: optional_decimal(input, key, "0") for key in self.COST_KEYS}
        bottle_count = optional_decimal(input, "bottles_count", "30")
        if bottle_count <= 0:
            raise CalcValidationError("Bottle count must be positive")

        total = sum(costs.values(), Decimal(0))
        per_bottle = total / bottle_count

        result = (
            CalcResult.new(Measurement.new(total, Unit.PERCENT))
            .with_meta("output_unit", "USD")
            .with_meta("total_batch_cost", f"${total:.2f}")
            .with_meta("cost_per_bottle", f"${per_bottle:.2f}")
            .with_meta("bottle_count", f"{bottle_count}")
        )
        for key, cost in costs.items():
            result = result.with_meta(key, f"${cost:.2f}")
        if per_bottle > 10:
            result = result.with_warning("Cost >$10/bottle - expensive batch")
        if total > 200:
            result = result.with_warning("Total cost >$200 - verify ingredient prices")
        return result


class WaterChemistryCalculator(Calculator):
    id = "water_chemistry"
    name = "Water Chemistry"
    description = "Calculate water profile and mineral additions"
    category = "Utilities"

    def compute(self, input: CalcInput) -> CalcResult:
        calcium = optional_decimal(input, "calcium", "0")
        magnesium = optional_decimal(input, "magnesium", "0")
        sulfate = optional_decimal(input, "sulfate", "0")
        chloride = optional_decimal(input, "chloride", "0")

        if chloride > 0:
            ratio = sulfate / chloride
        elif sulfate > 0:
            ratio = Decimal(999)
        else:
            ratio = Decimal(1)

        if ratio > 3:
            profile = "Highly Bitter (IPA, Pale Ale)"
        elif ratio > Decimal("1.5"):
            profile = "Moderately Bitter (Amber, Brown)"
        elif ratio > Decimal("0.5"):
            profile = "Balanced"
        elif ratio > 0:
            profile = "Malty (Stout, Porter, Mead)"
        else:
            profile = "Chloride Dominant (Sweet)"

        if calcium < 50:
            mineral = "Gypsum (CaSO4) or Calcium Chloride (CaCl2)"
        elif sulfate < 50 and chloride < 50:
            mineral = "Gypsum for bitter, CaCl2 for malty"
        else:
            mineral = "Water profile adequate"

        result = (
            CalcResult.new(Measurement.new(ratio, Unit.PERCENT))
            .with_meta("output_unit", "SO4:Cl ratio")
            .with_meta("profile", profile)
            .with_meta("so4_cl_ratio", f"{ratio:.2f}:1")
            .with_meta("calcium", f"{calcium} ppm")
            .with_meta("magnesium", f"{magnesium} ppm")
            .with_meta("sulfate", f"{sulfate} ppm")
            .with_meta("chloride", f"{chloride} ppm")
            .with_meta("mineral", mineral)
            .with_meta(
                "ion_contribution",
                f"Ca: {calcium}ppm, Mg: {magnesium}ppm, SO4: {sulfate}ppm, Cl: {chloride}ppm",
            )
        )
        if calcium < 50:
            result = result.with_warning("Calcium <50 ppm - may affect mash pH and yeast health")
        if calcium > 150:
            result = result.with_warning("Calcium >150 ppm - may be excessive")
        if sulfate > 400:
            result = result.with_warning("Sulfate >400 ppm - may be too bitter/astringent")
        if chloride > 200:
            result = result.with_warning("Chloride >200 ppm - may be too sweet/minerally")
        return result


class UpscalingCalculator(Calculator):
    id = "upscaling"
    name = "Recipe Upscaling"
    description = "Scale recipes up or down - maintains perfect proportions"
    category = "Utilities"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "current_volume", "target_volume")

    def compute(self, input: CalcInput) -> CalcResult:
        current = require_decimal(input, "current_volume")
        target = require_decimal(input, "target_volume")
        if current <= 0 or target <= 0:
            raise CalcValidationError("Volumes must be positive")

        scale = target / current
        result = (
            CalcResult.new(Measurement.new(scale * 100, Unit.PERCENT))
            .with_meta("original_volume", f"{current} L")
            .with_meta("target_volume", f"{target} L")
            .with_meta("scale_factor", f"{scale:.2f}x")
        )

        scaled_any = False
        for name in SCALABLE_INGREDIENTS:
            if not input.has_param(name):
                continue
            amount = parse_decimal(name, input.get_param(name))
            result = result.with_meta(f"{name}_original", f"{amount:.2f}").with_meta(
                f"{name}_scaled", f"{amount * scale:.2f}"
            )
            scaled_any = True

        if scale > 10:
            result = result.with_warning("Large scale factor - verify equipment capacity")
        if scale < Decimal("0.1"):
            result = result.with_warning("Scaling down - small measurements may be difficult")
        if not scaled_any:
            result = result.with_warning("No ingredients provided - showing scale factor only")
        return result


class WasteCalculator(Calculator):
    """Losses proportional to the starting volume for each racking and clarification step."""

    id = "waste"
    name = "Waste/Loss Calculator"
    description = "Calculate expected losses through brewing process from start to bottle"
    category = "Utilities"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "initial_volume")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "initial_volume")
        rackings = parse_count(input, "num_rackings", "3")
        vessel = param_choice(input, "vessel_type", "carboy")
        process = param_choice(input, "process_type", "standard")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if not 0 <= rackings <= MAX_RACKINGS:
            raise CalcValidationError("Rackings must be 0-10")

        gross = volume * GROSS_LEES.get(vessel, GROSS_LEES["carboy"])
        fine_each = volume * FINE_LEES.get(vessel, FINE_LEES["carboy"])
        transfer_each = volume * TRANSFER_LOSS
        clarification = volume * CLARIFICATION_LOSS.get(process, CLARIFICATION_LOSS["standard"])

        fine_total = fine_each * max(rackings - 1, 0)
        transfer_total = transfer_each * rackings
        racking_loss = gross + fine_total + transfer_total if rackings else Decimal(0)
        total_loss = racking_loss + clarification
        final = volume - total_loss

        def pct(part: Decimal) -> Decimal:
            return part / volume * 100

        result = (
            CalcResult.new(Measurement.new(final, Unit.LITERS))
            .with_meta("initial_volume", f"{volume:.2f} L")
            .with_meta("final_volume", f"{final:.2f} L")
            .with_meta("total_loss", f"{total_loss:.2f} L ({pct(total_loss):.1f}%)")
            .with_meta("num_rackings", rackings)
            .with_meta("vessel_type", vessel)
            .with_meta("process_type", process)
        )
        if rackings > 0:
            result = result.with_meta(
                "loss_gross_lees",
                f"{gross:.2f} L ({pct(gross):.1f}%) - Primary fermentation sediment",
            )
        if rackings > 1:
            result = result.with_meta(
                "loss_fine_lees",
                f"{fine_total:.2f} L ({pct(fine_total):.1f}%) - "
                f"{rackings - 1} secondary rackings",
            )
        if rackings > 0:
            result = result.with_meta(
                "loss_transfers",
                f"{transfer_total:.2f} L ({pct(transfer_total):.1f}%) - "
                "Hose deadspace & spillage",
            )
        if clarification > 0:
            result = result.with_meta(
                "loss_clarification",
                f"{clarification:.2f} L ({pct(clarification):.1f}%) - {process}",
            )
        if rackings > 0:
            result = result.with_meta(
                "racking_1",
                f"Primary → Secondary: {gross + transfer_each:.2f} L loss "
                "(gross lees + transfer)",
            )
        for step in range(2, rackings + 1):
            result = result.with_meta(
                f"racking_{step}",
                f"Racking {step}: {fine_each + transfer_each:.2f} L loss (fine lees + transfer)",
            )

        if pct(total_loss) > 25:
            result = result.with_warning(
                "High loss rate (>25%) - consider fewer rackings or different vessel"
            )
        if rackings > 4:
            result = result.with_warning("Many rackings - ensure benefits outweigh losses")
        if final < volume * Decimal("0.6"):
            result = result.with_warning(
                "Less than 60% recovery - process may be too aggressive"
            )
        return result


class GallonsToBottlesCalculator(Calculator):
    id = "gallons_to_bottles"
    name = "Gallons to Bottles"
    description = "Calculate bottle count from volume"
    category = "Utilities"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        return with_bottle_breakdown(CalcResult.new(Measurement.new(volume, Unit.LITERS)), volume)


class GallonsToBottlesWithLossesCalculator(Calculator):
    """
    Bottle counts after compounding losses.

    Unlike ``waste``, every step removes a fraction of what is left after
    the previous step.
    """

    id = "gallons_to_bottles_with_losses"
    name = "Gallons to Bottles (with Losses)"
    description = "Calculate bottle count accounting for brewing losses"
    category = "Utilities"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "initial_volume")

    def compute(self, input: CalcInput) -> CalcResult:
        initial = require_decimal(input, "initial_volume")
        if initial <= 0:
            raise CalcValidationError("Volume must be positive")
        vessel = param_choice(input, "vessel_type", "carboy")
        rackings = parse_count(input, "num_rackings", "0")
        if rackings < 0:
            raise CalcValidationError("Rackings cannot be negative")
        if rackings > MAX_RACKINGS:
            raise CalcValidationError("Maximum 10 rackings allowed")
        process = param_choice(input, "process_type", "standard")

        volume = initial
        gross_pct = GROSS_LEES.get(vessel, GROSS_LEES["carboy"])
        gross = volume * gross_pct
        volume -= gross

        fine = Decimal(0)
        transfer = Decimal(0)
        for step in range(rackings):
            if step == 0:
                lees_pct = Decimal("0.02")
            elif step == 1:
                lees_pct = Decimal("0.015")
            else:
                lees_pct = Decimal("0.01")
            lees = volume * lees_pct
            fine += lees
            volume -= lees
            moved = volume * TRANSFER_LOSS
            transfer += moved
            volume -= moved

        clarification = volume * CLARIFICATION_LOSS.get(process, CLARIFICATION_LOSS["standard"])
        volume -= clarification

        total_loss = initial - volume
        loss_pct = total_loss / initial * 100
        recovery_pct = volume / initial * 100

        result = (
            CalcResult.new(Measurement.new(volume, Unit.LITERS))
            .with_meta("initial_volume", f"{initial:.2f} L")
            .with_meta("final_volume", f"{volume:.2f} L")
            .with_meta("total_loss", f"{total_loss:.2f} L ({loss_pct:.1f}%)")
            .with_meta("gross_lees_loss", f"{gross:.2f} L ({gross_pct * 100:.1f}%)")
            .with_meta("fine_lees_loss", f"{fine:.2f} L")
            .with_meta("transfer_loss", f"{transfer:.2f} L")
            .with_meta("clarification_loss", f"{clarification:.2f} L")
            .with_meta("vessel_type", vessel)
            .with_meta("num_rackings", rackings)
        )
        result = with_bottle_breakdown(result, volume)

        if loss_pct > 25:
            result = result.with_warning(f"High total loss: {loss_pct:.1f}%")
        if rackings > 4:
            result = result.with_warning(f"Many rackings ({rackings}) - consider reducing")
        if recovery_pct < 60:
            result = result.with_warning(f"Low recovery: {recovery_pct:.1f}%")
        return result
