"""
Beer calculators: bitterness, color, mash strike water and brewhouse
efficiency.
"""

from decimal import Decimal

from mazerion.core.calculator import Calculator, require_decimal, require_params
from mazerion.core.errors import CalcValidationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit, celsius_to_fahrenheit, liters_to_gallons

# Upper SRM bound (inclusive) for each color description
SRM_COLORS: list[tuple[int, str]] = [
    (3, "Pale Straw"),
    (6, "Straw to Pale Gold"),
    (9, "Deep Gold to Pale Amber"),
    (13, "Amber"),
    (17, "Deep Amber to Copper"),
    (20, "Copper to Light Brown"),
    (24, "Brown"),
    (30, "Dark Brown"),
    (40, "Very Dark Brown"),
]

EFFICIENCY_BANDS: list[tuple[int, str]] = [
    (80, "Excellent (80%+)"),
    (75, "Very Good (75-80%)"),
    (70, "Good (70-75%)"),
    (65, "Average (65-70%)"),
    (60, "Below Average (60-65%)"),
]


def tinseth_utilization(boil_gravity: Decimal, boil_minutes: Decimal) -> tuple[Decimal, Decimal]:
    """
    Tinseth hop utilization.

    Returns:
        (bigness factor, boil time factor); utilization is their product
    """
    bigness = Decimal("1.65") * Decimal("0.000125") ** (boil_gravity - 1)
    boil_factor = (1 - (Decimal("-0.04") * boil_minutes).exp()) / Decimal("4.15")
    return bigness, boil_factor


def morey_srm(mcu: Decimal) -> Decimal:
    """Morey equation: SRM = 1.4922 × MCU^0.6859."""
    if mcu <= 0:
        return Decimal(0)
    return Decimal("1.4922") * mcu ** Decimal("0.6859")


def srm_description(srm: Decimal) -> str:
    whole = int(srm)
    for upper, label in SRM_COLORS:
        if whole <= upper:
            return label
    return "Black"


class IbuCalculator(Calculator):
    id = "ibu"
    name = "IBU Calculator (Tinseth)"
    description = "Calculate International Bitterness Units using Tinseth formula"
    category = "Beer"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "hop_weight_g", "alpha_acid", "boil_time", "volume_l", "boil_gravity")

    def compute(self, input: CalcInput) -> CalcResult:
        weight = require_decimal(input, "hop_weight_g")
        alpha = require_decimal(input, "alpha_acid")
        minutes = require_decimal(input, "boil_time")
        volume = require_decimal(input, "volume_l")
        gravity = require_decimal(input, "boil_gravity")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if minutes < 0:
            raise CalcValidationError("Boil time cannot be negative")

        bigness, boil_factor = tinseth_utilization(gravity, minutes)
        utilization = bigness * boil_factor
        ibu = weight * (alpha / 100) * utilization * 1000 / volume

        result = CalcResult.new(Measurement.new(ibu, Unit.GRAMS))
        if ibu > 100:
            result = result.with_warning("IBU > 100 is extremely bitter")
        if alpha > 20:
            result = result.with_warning("Alpha acid > 20% is unusually high - verify value")

        return (
            result.with_meta("output_unit", "IBU")
            .with_meta("ibu", f"{ibu:.1f}")
            .with_meta("utilization", f"{utilization * 100:.1f}%")
            .with_meta("bigness_factor", f"{bigness:.4f}")
            .with_meta("boil_factor", f"{boil_factor:.4f}")
            .with_meta("formula", "Tinseth")
            .with_meta("hop_weight", f"{weight:.1f} g")
            .with_meta("alpha_acid", f"{alpha:.1f}%")
            .with_meta("boil_time", f"{minutes:.0f} min")
        )


class SrmCalculator(Calculator):
    id = "srm"
    name = "SRM Color Calculator"
    description = "Calculate beer color using Morey equation"
    category = "Beer"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "grain_weight", "lovibond", "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        weight = require_decimal(input, "grain_weight")
        lovibond = require_decimal(input, "lovibond")
        volume = require_decimal(input, "volume")
        if weight <= 0:
            raise CalcValidationError("Grain weight must be positive")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if lovibond < 0:
            raise CalcValidationError("Lovibond cannot be negative")

        mcu = weight * lovibond / volume
        srm = morey_srm(mcu)

        result = (
            CalcResult.new(Measurement.new(srm, Unit.PERCENT))
            .with_meta("output_unit", "SRM")
            .with_meta("srm", f"{srm:.1f}")
            .with_meta("mcu", f"{mcu:.2f}")
            .with_meta("color_description", srm_description(srm))
            .with_meta("formula", "Morey equation")
        )
        if srm > 40:
            result = result.with_warning("SRM >40 - beer will appear black")
        return result


class MashCalculator(Calculator):
    id = "mash"
    name = "Mash Water Calculator"
    description = "Calculate strike water temperature and volume for mash"
    category = "Beer"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "target_temp", "grain_temp", "grain_weight", "ratio")

    def compute(self, input: CalcInput) -> CalcResult:
        target = require_decimal(input, "target_temp")
        grain_temp = require_decimal(input, "grain_temp")
        weight = require_decimal(input, "grain_weight")
        ratio = require_decimal(input, "ratio")
        if weight <= 0:
            raise CalcValidationError("Grain weight must be positive")
        if ratio <= 0:
            raise CalcValidationError("Ratio must be positive")

        water = weight * ratio
        strike = target + (Decimal("0.2") / ratio) * (target - grain_temp)

        result = (
            CalcResult.new(Measurement.new(strike, Unit.CELSIUS))
            .with_meta(
                "strike_temperature",
                f"{strike:.1f}°C / {celsius_to_fahrenheit(strike):.1f}°F",
            )
            .with_meta("water_volume", f"{water:.2f} L / {liters_to_gallons(water):.2f} gal")
            .with_meta("mash_ratio", f"{ratio:.2f} L/kg")
            .with_meta("target_mash_temp", f"{target:.1f}°C")
            .with_meta("grain_temperature", f"{grain_temp:.1f}°C")
        )
        if strike > 80:
            result = result.with_warning("Strike temp >80°C may extract tannins")
        if strike < 50:
            result = result.with_warning("Strike temp <50°C may be too cold")
        if ratio < Decimal("1.5"):
            result = result.with_warning("Ratio <1.5 L/kg - very thick mash")
        if ratio > 4:
            result = result.with_warning("Ratio >4 L/kg - very thin mash")
        return result


class EfficiencyCalculator(Calculator):
    id = "efficiency"
    name = "Brewhouse Efficiency"
    description = "Calculate brewhouse efficiency from grain and gravity"
    category = "Beer"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "grain_weight", "ppg", "measured_gravity", "volume")

    def compute(self, input: CalcInput) -> CalcResult:
        weight = require_decimal(input, "grain_weight")
        ppg = require_decimal(input, "ppg", "ppg (points per pound per gallon)")
        gravity = require_decimal(input, "measured_gravity")
        volume = require_decimal(input, "volume")
        if weight <= 0:
            raise CalcValidationError("Grain weight must be positive")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if ppg <= 0:
            raise CalcValidationError("PPG must be positive")

        points = (gravity - 1) * 1000
        total_points = points * volume
        potential = weight * ppg
        efficiency = total_points / potential * 100

        band = "Poor (<60%) - Check process"
        for floor, label in EFFICIENCY_BANDS:
            if efficiency >= floor:
                band = label
                break

        result = (
            CalcResult.new(Measurement.new(efficiency, Unit.PERCENT))
            .with_meta("efficiency", f"{efficiency:.1f}%")
            .with_meta("category", band)
            .with_meta("gravity_points", f"{points:.1f}")
            .with_meta("total_points", f"{total_points:.1f}")
            .with_meta("potential_points", f"{potential:.1f}")
            .with_meta("formula", "Brewhouse efficiency")
        )
        if efficiency < 60:
            result = result.with_warning("Efficiency <60% - check crush, mash pH, water chemistry")
        if efficiency > 85:
            result = result.with_warning("Efficiency >85% - unusually high, verify measurements")
        if gravity < 1:
            result = result.with_warning("Gravity <1.000 - check hydrometer calibration")
        return result
