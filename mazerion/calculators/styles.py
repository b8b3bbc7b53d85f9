"""
Mead style calculators.

Every style reports the honey to add in grams. Two honey factors are in
use: 135 g/L per % ABV for whole honey and 33 g/L per % ABV for the
fermentable-sugar shortcut some recipes quote.
"""

from decimal import Decimal
from typing import Optional

from mazerion.core.calculator import (
    Calculator,
    optional_decimal,
    param_choice,
    require_decimal,
    require_params,
)
from mazerion.core.errors import CalcValidationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit

HONEY_G_PER_L_PER_ABV = Decimal(135)
SUGAR_G_PER_L_PER_ABV = Decimal(33)
HONEY_DENSITY_G_PER_L = Decimal(1420)
HONEY_KG_PER_L = Decimal("1.42")

FRUIT_SUGAR_FRACTION = Decimal("0.12")
APPLE_JUICE_SUGAR_G_PER_L = Decimal(104)
MAPLE_SYRUP_SUGAR_FRACTION = Decimal("0.672")
GRAPE_JUICE_ABV = Decimal(12)

# Percent of honey sugar lost to caramelization
BOCHET_SUGAR_LOSS: dict[str, Decimal] = {
    "light": Decimal(5),
    "medium": Decimal(10),
    "dark": Decimal(15),
}

# g/L
SPICE_DOSAGE: dict[str, Decimal] = {
    "light": Decimal("0.5"),
    "medium": Decimal("1.0"),
    "heavy": Decimal("2.0"),
}

PEPPER_DOSAGE: dict[str, Decimal] = {
    "mild": Decimal("0.5"),
    "medium": Decimal("1.0"),
    "hot": Decimal("1.5"),
}

LACTOSE_DOSAGE: dict[str, Decimal] = {
    "light": Decimal(50),
    "medium": Decimal(100),
    "heavy": Decimal(150),
}

# Lower bound (exclusive) of vinegar:honey ratio for each balance label
OXYMEL_BALANCE: list[tuple[Decimal, str]] = [
    (Decimal(5), "Very Tart (Digestive/Medicinal)"),
    (Decimal(3), "Tart (Traditional Oxymel)"),
    (Decimal(2), "Balanced Tart-Sweet"),
    (Decimal(1), "Mildly Tart"),
]


def kg(grams: Decimal) -> str:
    return f"{grams / 1000:.2f} kg"


def volume_and_abv(input: CalcInput, default_abv: Optional[str] = None) -> tuple[Decimal, Decimal]:
    """Read the ``volume`` (L) and ``target_abv`` (%) shared by every style."""
    volume = require_decimal(input, "volume")
    if default_abv is None:
        abv = require_decimal(input, "target_abv")
    else:
        abv = optional_decimal(input, "target_abv", default_abv)
    if volume <= 0:
        raise CalcValidationError("Volume must be positive")
    if abv < 0:
        raise CalcValidationError("Target ABV cannot be negative")
    return volume, abv


class MelomelCalculator(Calculator):
    id = "melomel"
    name = "Melomel Calculator"
    description = "Calculate ingredients for fruit mead (melomel)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input, default_abv="12")
        fruit_ratio = optional_decimal(input, "fruit_ratio", "0.2")
        if fruit_ratio < 0:
            raise CalcValidationError("Fruit ratio cannot be negative")

        fruit_kg = volume * fruit_ratio
        fruit_sugar_g = fruit_kg * FRUIT_SUGAR_FRACTION * 1000
        honey_g = max(volume * abv * HONEY_G_PER_L_PER_ABV - fruit_sugar_g, Decimal(0))

        return (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_meta("honey", kg(honey_g))
            .with_meta("fruit", f"{fruit_kg:.2f} kg")
            .with_meta("fruit_ratio", f"{fruit_ratio} kg/L")
            .with_meta("target_abv", f"{abv}%")
        )


class BochetCalculator(Calculator):
    id = "bochet"
    name = "Bochet Calculator"
    description = "Calculate ingredients for caramelized honey mead (bochet) with sugar loss"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        level = param_choice(input, "bochet_level", "medium")
        loss = BOCHET_SUGAR_LOSS.get(level, BOCHET_SUGAR_LOSS["medium"])

        honey_g = volume * abv * HONEY_G_PER_L_PER_ABV * (1 + loss / 100)

        return (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_warning(
                "Caramelize honey BEFORE measuring - sugar loss accounted for in calculation"
            )
            .with_meta("caramel_level", level)
            .with_meta("sugar_loss", f"{loss}%")
            .with_meta("honey_before_caramel_kg", kg(honey_g))
            .with_meta("expected_abv", f"{abv}%")
        )


class CyserCalculator(Calculator):
    id = "cyser"
    name = "Cyser Calculator"
    description = "Calculate ingredients for apple juice mead (cyser)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        juice_pct = optional_decimal(input, "juice_percent", "50")
        if not 0 <= juice_pct <= 100:
            raise CalcValidationError("Juice percent must be between 0 and 100")

        juice_l = volume * juice_pct / 100
        juice_abv = juice_l * APPLE_JUICE_SUGAR_G_PER_L / (volume * HONEY_G_PER_L_PER_ABV)
        honey_g = max(volume * (abv - juice_abv) * HONEY_G_PER_L_PER_ABV, Decimal(0))

        result = (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_meta("juice_volume_L", f"{juice_l:.2f} L")
            .with_meta("water_volume_L", f"{volume - juice_l:.2f} L")
            .with_meta("juice_abv", f"{juice_abv:.1f}%")
            .with_meta("honey_kg", kg(honey_g))
        )
        if juice_pct < 30:
            result = result.with_warning("Low juice ratio - may lack apple character")
        if juice_pct > 70:
            result = result.with_warning("High juice ratio - may be more cider than mead")
        return result


class MetheglinCalculator(Calculator):
    id = "metheglin"
    name = "Metheglin Calculator"
    description = "Calculate ingredients for spiced mead (metheglin) with spice dosage"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        level = param_choice(input, "spice_level", "medium")
        dosage = SPICE_DOSAGE.get(level, SPICE_DOSAGE["medium"])

        honey_g = volume * abv * HONEY_G_PER_L_PER_ABV

        return (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_warning("Dosage varies by spice - start conservative, can always add more")
            .with_meta("honey_kg", kg(honey_g))
            .with_meta("spice_g", f"{volume * dosage:.1f} g")
            .with_meta("spice_level", level)
            .with_meta("dosage", f"{dosage:.1f} g/L")
        )


class AcerglynCalculator(Calculator):
    id = "acerglyn"
    name = "Acerglyn Calculator"
    description = "Calculate ingredients for maple mead"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv", "maple_percent")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        maple_pct = require_decimal(input, "maple_percent")
        if not 0 <= maple_pct <= 100:
            raise CalcValidationError("Maple percent must be between 0 and 100")

        total_sugar = volume * abv * SUGAR_G_PER_L_PER_ABV
        maple_sugar = total_sugar * maple_pct / 100
        honey_g = total_sugar - maple_sugar
        syrup_g = maple_sugar / MAPLE_SYRUP_SUGAR_FRACTION

        return (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_meta("honey_g", f"{honey_g:.0f} g")
            .with_meta("maple_syrup_g", f"{syrup_g:.0f} g")
        )


class BraggotCalculator(Calculator):
    id = "braggot"
    name = "Braggot Calculator"
    description = "Calculate ingredients for honey-malt hybrid mead"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv", "honey_percent")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        honey_pct = require_decimal(input, "honey_percent")
        if not 0 <= honey_pct <= 100:
            raise CalcValidationError("Honey percent must be between 0 and 100")

        honey_g = volume * abv * SUGAR_G_PER_L_PER_ABV * honey_pct / 100

        return (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_meta("honey_kg", kg(honey_g))
            .with_meta("honey_g", f"{honey_g:.0f} g")
        )


class CapsicumelCalculator(Calculator):
    id = "capsicumel"
    name = "Capsicumel Calculator"
    description = "Calculate ingredients for pepper mead (capsicumel) with heat dosage"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        level = param_choice(input, "heat_level", "medium")
        dosage = PEPPER_DOSAGE.get(level, PEPPER_DOSAGE["medium"])

        honey_g = volume * abv * HONEY_G_PER_L_PER_ABV

        return (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_warning(
                "Add peppers in secondary, taste frequently - heat develops over time"
            )
            .with_meta("honey_kg", kg(honey_g))
            .with_meta("pepper_g", f"{volume * dosage:.1f} g")
            .with_meta("heat_level", level)
            .with_meta("dosage", f"{dosage:.1f} g/L")
        )


class HydromelCalculator(Calculator):
    id = "hydromel"
    name = "Hydromel Calculator"
    description = "Calculate ingredients for session mead (low ABV 3.5-7.5%)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        honey_g = volume * abv * SUGAR_G_PER_L_PER_ABV

        result = CalcResult.new(Measurement.new(honey_g, Unit.GRAMS)).with_meta(
            "honey_kg", kg(honey_g)
        )
        if abv < Decimal("3.5"):
            result = result.with_warning("Very low ABV - may have fermentation issues")
        if abv > Decimal("7.5"):
            result = result.with_warning("High for hydromel - consider traditional mead")
        return result


class SackCalculator(Calculator):
    id = "sack"
    name = "Sack Mead Calculator"
    description = "Calculate ingredients for high-gravity dessert mead (14-18% ABV)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        honey_g = volume * abv * SUGAR_G_PER_L_PER_ABV

        result = CalcResult.new(Measurement.new(honey_g, Unit.GRAMS)).with_meta(
            "honey_kg", kg(honey_g)
        )
        if abv < 14:
            result = result.with_warning("Below typical sack mead range (14-18%)")
        if abv > 18:
            result = result.with_warning("Very high ABV - ensure yeast tolerance")
        return result


class GreatMeadCalculator(Calculator):
    id = "great_mead"
    name = "Great Mead Calculator"
    description = "Calculate ingredients for traditional mead (great mead)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input, default_abv="14")
        honey_g = volume * abv * HONEY_G_PER_L_PER_ABV
        water_l = volume - honey_g / HONEY_DENSITY_G_PER_L

        result = (
            CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
            .with_meta("honey", kg(honey_g))
            .with_meta("water", f"{water_l:.2f} L")
            .with_meta("target_abv", f"{abv}%")
            .with_meta("style", "Traditional Great Mead")
        )
        if water_l < 0:
            result = result.with_warning("Honey volume exceeds batch volume - lower target ABV")
        return result


class LactomelCalculator(Calculator):
    id = "lactomel"
    name = "Lactomel (Milk Mead)"
    description = "Calculate ingredients for lactomel (milk/lactose mead)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        level = param_choice(input, "lactose_level", "medium")
        lactose_gpl = LACTOSE_DOSAGE.get(level, LACTOSE_DOSAGE["medium"])

        lactose_g = volume * lactose_gpl
        honey_g = volume * abv * SUGAR_G_PER_L_PER_ABV

        result = CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
        if abv < 8:
            result = result.with_warning("Low ABV (<8%) - lactomel typically 10-14% for balance")
        if abv > 16:
            result = result.with_warning("High ABV (>16%) - may require strong yeast strain")
        if lactose_gpl > 120:
            result = result.with_warning("High lactose (>120 g/L) - may be overly sweet and creamy")

        return (
            result.with_meta("honey_g", f"{honey_g:.0f} g")
            .with_meta("honey_kg", kg(honey_g))
            .with_meta("lactose_g", f"{lactose_g:.0f} g")
            .with_meta("lactose_kg", kg(lactose_g))
            .with_meta("lactose_level", level)
            .with_meta("lactose_gpl", f"{lactose_gpl} g/L")
            .with_meta("volume", f"{volume:.2f} L")
            .with_meta("target_abv", f"{abv:.1f}%")
            .with_meta(
                "tip",
                "Lactose is non-fermentable. Add after fermentation or during boil. "
                "Creates creamy mouthfeel.",
            )
        )


class OxymelCalculator(Calculator):
    id = "oxymel"
    name = "Oxymel (Vinegar-Honey)"
    description = "Calculate ingredients for oxymel (vinegar-honey beverage)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "vinegar_percent", "honey_percent")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        vinegar_pct = require_decimal(input, "vinegar_percent")
        honey_pct = require_decimal(input, "honey_percent")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if vinegar_pct < 0 or honey_pct < 0:
            raise CalcValidationError("Percentages cannot be negative")
        if vinegar_pct + honey_pct > 100:
            raise CalcValidationError("Vinegar + honey percentages cannot exceed 100%")

        vinegar_l = volume * vinegar_pct / 100
        honey_l = volume * honey_pct / 100
        honey_kg = honey_l * HONEY_KG_PER_L
        honey_g = honey_kg * 1000
        water_l = volume - vinegar_l - honey_l

        result = CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
        if vinegar_pct < 10:
            result = result.with_warning("Low vinegar (<10%) - may lack characteristic tang")
        if vinegar_pct > 60:
            result = result.with_warning("High vinegar (>60%) - may be too acidic")
        if honey_pct < 10:
            result = result.with_warning("Low honey (<10%) - may lack sweetness and body")
        if honey_pct > 40:
            result = result.with_warning("High honey (>40%) - may be overly sweet")

        ratio = vinegar_pct / honey_pct if honey_pct > 0 else Decimal(999)
        balance = "Sweet-Tart (Modern Style)"
        for floor, label in OXYMEL_BALANCE:
            if ratio > floor:
                balance = label
                break

        return (
            result.with_meta("honey_g", f"{honey_g:.0f} g")
            .with_meta("honey_kg", f"{honey_kg:.2f} kg")
            .with_meta("vinegar_L", f"{vinegar_l:.2f} L")
            .with_meta("water_L", f"{water_l:.2f} L")
            .with_meta("vinegar_percent", f"{vinegar_pct:.0f}%")
            .with_meta("honey_percent", f"{honey_pct:.0f}%")
            .with_meta("ratio", f"{ratio:.1f}:1 (vinegar:honey)")
            .with_meta("balance", balance)
            .with_meta(
                "tip",
                "Use quality vinegar (apple cider, wine, or balsamic). "
                "Mix honey with water first, then add vinegar.",
            )
        )


class PymentCalculator(Calculator):
    """Grape juice is assumed to carry 12% ABV on its own; honey covers the rest."""

    id = "pyment"
    name = "Pyment (Grape-Honey Wine)"
    description = "Calculate ingredients for pyment (grape-honey wine)"
    category = "Mead Styles"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")

    def compute(self, input: CalcInput) -> CalcResult:
        volume, abv = volume_and_abv(input)
        juice_pct = optional_decimal(input, "juice_percent", "40")
        if not 0 <= juice_pct <= 100:
            raise CalcValidationError("Juice percent must be between 0 and 100")

        juice_l = volume * juice_pct / 100
        honey_abv = max(abv - GRAPE_JUICE_ABV, Decimal(0))
        honey_g = volume * honey_abv * SUGAR_G_PER_L_PER_ABV

        result = CalcResult.new(Measurement.new(honey_g, Unit.GRAMS))
        if abv < 8:
            result = result.with_warning(
                "Low ABV (<8%) - consider increasing target or juice percentage"
            )
        if abv > 18:
            result = result.with_warning("Very high ABV (>18%) - may require strong yeast strain")
        if juice_pct < 30:
            result = result.with_warning("Low juice percentage (<30%) - may lack grape character")
        if juice_pct > 60:
            result = result.with_warning("High juice percentage (>60%) - may lack honey character")

        return (
            result.with_meta("honey_g", f"{honey_g:.0f} g")
            .with_meta("honey_kg", kg(honey_g))
            .with_meta("juice_volume_L", f"{juice_l:.2f} L")
            .with_meta("juice_percent", f"{juice_pct:.0f}%")
            .with_meta("abv_from_juice", f"{GRAPE_JUICE_ABV:.1f}%")
            .with_meta("abv_from_honey", f"{honey_abv:.1f}%")
            .with_meta("total_abv", f"{abv:.1f}%")
            .with_meta("volume", f"{volume:.2f} L")
            .with_meta("tip", "Use quality grape juice or wine must. Red or white grapes both work.")
        )
