"""
Fermentation management calculators: TOSNA nutrient schedules, yeast pitch
rate, starters, fermentation timeline and carbonation.

Outputs that have no unit in the closed Unit set (days, PSI) are
reported in the nearest available unit and the real unit is named in the
``output_unit`` metadata entry.
"""

from decimal import Decimal
from typing import Optional

from mazerion.core.calculator import (
    Calculator,
    optional_decimal,
    param_choice,
    parse_decimal,
    require_decimal,
    require_params,
)
from mazerion.core.errors import CalcValidationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit, celsius_to_fahrenheit

# ABV points per gravity unit used to back out an OG from a target ABV
OG_FROM_ABV_DIVISOR = Decimal("111.5625")

YAN_PPM_PER_POINT: dict[str, Decimal] = {
    "low": Decimal("0.90"),
    "medium": Decimal("1.20"),
    "high": Decimal("1.50"),
}

# Fermaid-O delivers roughly 24 ppm YAN per g/L once the 4x organic
# nitrogen multiplier is applied
FERMAID_O_PPM_PER_G_L = Decimal("24")

# (metadata key, share, label, timing) per TOSNA protocol; a share of None
# takes the remainder
TOSNA_SCHEDULES: dict[str, tuple[str, list[tuple[str, Optional[Decimal], str, str]]]] = {
    "tosna_1": ("TOSNA 1.0", [
        ("addition_1_24hrs", Decimal("0.333"), "33%", "At pitch + 24 hours"),
        ("addition_2_day_3", Decimal("0.333"), "33%", "Day 3"),
        ("addition_3_day_7", None, "34%", "Day 7"),
    ]),
    "tosna_2": ("TOSNA 2.0", [
        ("addition_1_24hrs", Decimal("0.25"), "25%", "24 hours after pitch"),
        ("addition_2_1/3_break", Decimal("0.50"), "50%", "1/3 sugar break (~1.070)"),
        ("addition_3_2/3_break", Decimal("0.25"), "25%", "2/3 sugar break (~1.040)"),
    ]),
    "tosna_3": ("TOSNA 3.0", [
        ("addition_1_24hrs", Decimal("0.05"), "5%", "24 hours after pitch"),
        ("addition_2_48hrs", Decimal("0.20"), "20%", "48 hours after pitch"),
        ("addition_3_1/3_break", Decimal("0.50"), "50%", "1/3 sugar break (~1.070)"),
        ("addition_4_2/3_break", Decimal("0.25"), "25%", "2/3 sugar break (~1.040)"),
    ]),
}

# Million cells per mL per °P
PITCH_RATES: dict[str, Decimal] = {
    "ale": Decimal("0.75"),
    "lager": Decimal("1.5"),
    "mead": Decimal("0.5"),
}
CELLS_PER_PACKET_BILLION = Decimal("200")
PACKET_GRAMS = Decimal("5")

# Grams per liter per volume of CO2
PRIMING_FACTORS: dict[str, Decimal] = {
    "table_sugar": Decimal("4.0"),
    "corn_sugar": Decimal("3.86"),
    "honey": Decimal("5.0"),
    "dme": Decimal("4.6"),
}


def estimated_og_for_abv(abv: Decimal) -> Decimal:
    return 1 + abv / OG_FROM_ABV_DIVISOR


def residual_co2(temp_f: Decimal) -> Decimal:
    """Volumes of CO2 left in solution after fermentation at ``temp_f``."""
    return Decimal("3.0378") - Decimal("0.050062") * temp_f + Decimal("0.00026555") * temp_f ** 2


def keg_psi(temp_f: Decimal, volumes: Decimal) -> Decimal:
    """Regulator pressure for force carbonation, floored at zero."""
    psi = (
        Decimal("-16.6999")
        - Decimal("0.0101059") * temp_f
        + Decimal("0.00116512") * temp_f ** 2
        + Decimal("0.173354") * temp_f * volumes
        + Decimal("4.24267") * volumes
        - Decimal("0.0684226") * volumes ** 2
    )
    return max(psi, Decimal(0))


class NutritionCalculator(Calculator):
    id = "nutrition"
    name = "TOSNA Nutrition"
    description = "Calculate TOSNA yeast nutrition schedule (1.0, 2.0, or 3.0 protocol)"
    category = "Brewing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "target_abv")
        abv = parse_decimal("target_abv", input.get_param("target_abv"))
        if abv < 5 or abv > 20:
            raise CalcValidationError("ABV should be between 5-20%")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        abv = require_decimal(input, "target_abv")
        requirement = param_choice(input, "yn_requirement", "medium")
        protocol = param_choice(input, "protocol", "tosna_2")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")

        og = estimated_og_for_abv(abv)
        points = (og - 1) * 1000
        yan_ppm = points * YAN_PPM_PER_POINT.get(requirement, YAN_PPM_PER_POINT["medium"])
        total = yan_ppm / FERMAID_O_PPM_PER_G_L * volume

        if protocol not in TOSNA_SCHEDULES:
            protocol = "tosna_2"
        protocol_name, schedule = TOSNA_SCHEDULES[protocol]

        result = (
            CalcResult.new(Measurement.new(total, Unit.GRAMS))
            .with_meta("protocol", protocol_name)
            .with_meta("estimated_og", f"{og:.3f}")
            .with_meta("target_yan_ppm", f"{yan_ppm:.0f}")
        )
        allocated = Decimal(0)
        for key, share, label, timing in schedule:
            amount = total - allocated if share is None else total * share
            allocated += amount
            if amount > 0:
                result = result.with_meta(key, f"{amount:.2f} g ({label}) - {timing}")
        result = result.with_meta("total_fermaid_o", f"{total:.2f} g")

        if protocol == "tosna_3" and og < Decimal("1.100"):
            result = result.with_warning(
                "TOSNA 3.0 designed for high-gravity (OG >1.100) - consider TOSNA 2.0"
            )
        if protocol == "tosna_1":
            result = result.with_warning(
                "TOSNA 1.0 is older protocol - TOSNA 2.0 or 3.0 recommended for better results"
            )
        if abv > 18:
            result = result.with_warning("ABV >18% - consider staggered yeast pitch or TOSNA 3.0")
        if yan_ppm > 400:
            result = result.with_warning("YAN >400ppm - high nitrogen may cause off-flavors")
        if yan_ppm < 150:
            result = result.with_warning("YAN <150ppm - may result in sluggish fermentation")
        return result


class YeastPitchCalculator(Calculator):
    id = "yeast_pitch"
    name = "Yeast Pitch Rate"
    description = "Calculate yeast pitch rate for optimal fermentation"
    category = "Brewing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "og")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        og = require_decimal(input, "og")
        yeast_type = param_choice(input, "yeast_type", "ale")
        if volume <= 0:
            raise CalcValidationError("Volume must be positive")
        if og <= 1:
            raise CalcValidationError("OG must be greater than 1.000")

        plato = (og - 1) * 250
        rate = PITCH_RATES.get(yeast_type, PITCH_RATES["ale"])
        cells_billion = volume * 1000 * plato * rate / 1000
        packets = cells_billion / CELLS_PER_PACKET_BILLION
        dry_grams = packets * PACKET_GRAMS

        result = (
            CalcResult.new(Measurement.new(dry_grams, Unit.GRAMS))
            .with_meta("yeast_type", yeast_type)
            .with_meta("cells_billion", f"{cells_billion:.0f} billion cells")
            .with_meta("packets_5g", f"{packets:.1f} packets (5g ea)")
            .with_meta("grams_dry", f"{dry_grams:.1f} g")
            .with_meta("pitch_rate", f"{rate:.2f} M cells/mL/°P")
            .with_meta("plato", f"{plato:.1f}°P")
        )
        if packets > 5:
            result = result.with_warning("High cell count needed - consider making a starter")
        return result


class YeastStarterCalculator(Calculator):
    id = "yeast_starter"
    name = "Yeast Starter"
    description = "Calculate yeast starter size and DME requirements"
    category = "Brewing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "cells_needed")

    def compute(self, input: CalcInput) -> CalcResult:
        target = require_decimal(input, "cells_needed")
        available = optional_decimal(input, "cells_available", "100")

        to_grow = target - available
        if to_grow <= 0:
            raise CalcValidationError("Already have enough cells, no starter needed")

        starter_l = to_grow / 100
        dme_g = starter_l * 100
        final_cells = available * 3

        result = (
            CalcResult.new(Measurement.new(starter_l * 1000, Unit.MILLILITERS))
            .with_meta("starter_volume_L", f"{starter_l:.1f} L")
            .with_meta("dme_needed_g", f"{dme_g:.0f} g ({dme_g / Decimal('28.35'):.2f} oz)")
            .with_meta("starting_cells", f"{available} billion")
            .with_meta("target_cells", f"{target} billion")
            .with_meta("expected_final", f"{final_cells:.0f} billion")
            .with_meta("target_sg", "1.040")
        )
        if final_cells < target:
            result = result.with_warning(
                "May need multiple starter steps to reach target cell count"
            )
        if starter_l > 5:
            result = result.with_warning(
                "Large starter volume - consider stepped starter approach"
            )
        return result


class FermentationTimelineCalculator(Calculator):
    id = "fermentation_timeline"
    name = "Fermentation Timeline"
    description = "Estimate fermentation duration based on parameters"
    category = "Brewing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "og", "fg")

    def compute(self, input: CalcInput) -> CalcResult:
        og = require_decimal(input, "og")
        fg = require_decimal(input, "fg")
        temp = optional_decimal(input, "temperature", "20")
        speed = param_choice(input, "yeast_speed", "medium")
        if og < fg:
            raise CalcValidationError("OG must be >= FG")

        points = (og - fg) * 1000
        if temp < 18:
            temp_factor = Decimal("1.4")
        elif temp > 22:
            temp_factor = Decimal("0.8")
        else:
            temp_factor = Decimal(1)
        speed_factor = {"fast": Decimal("0.8"), "slow": Decimal("1.2")}.get(speed, Decimal(1))

        days = points / 10 * temp_factor * speed_factor
        conditioning = Decimal(5)

        result = CalcResult.new(Measurement.new(days, Unit.GRAMS))
        if days > 21:
            result = result.with_warning("Long fermentation - check for stuck fermentation")
        if temp < 15:
            result = result.with_warning("Temperature is low - fermentation may be very slow")

        return (
            result.with_meta("output_unit", "days")
            .with_meta("primary_fermentation", f"{days:.0f} days")
            .with_meta("conditioning", f"{conditioning} days")
            .with_meta("total_time", f"{days + conditioning:.0f} days")
            .with_meta("gravity_points", f"{points:.0f}")
            .with_meta("temperature", f"{temp}°C")
        )


class CarbonationCalculator(Calculator):
    id = "carbonation"
    name = "Carbonation Calculator"
    description = "Calculate priming sugar or keg PSI for target carbonation"
    category = "Brewing"

    def validate(self, input: CalcInput) -> None:
        require_params(input, "volume", "temperature", "target_co2")

    def compute(self, input: CalcInput) -> CalcResult:
        volume = require_decimal(input, "volume")
        temp_c = require_decimal(input, "temperature")
        target = require_decimal(input, "target_co2")
        method = param_choice(input, "method", "priming")

        temp_f = celsius_to_fahrenheit(temp_c)
        residual = residual_co2(temp_f)
        needed = target - residual
        if needed < 0:
            raise CalcValidationError("Target CO2 already present at this temperature")

        if method == "keg":
            psi = keg_psi(temp_f, target)
            return (
                CalcResult.new(Measurement.new(psi, Unit.GRAMS))
                .with_meta("output_unit", "psi")
                .with_meta("method", "Force Carbonation (Keg)")
                .with_meta("psi", f"{psi:.1f}")
                .with_meta("target_co2", input.get_param("target_co2"))
                .with_meta("residual_co2", f"{residual:.2f} volumes")
                .with_meta("temp_c", f"{temp_c:.1f}°C")
                .with_meta("temp_f", f"{temp_f:.1f}°F")
            )

        sugar_type = param_choice(input, "sugar_type", "table_sugar")
        factor = PRIMING_FACTORS.get(sugar_type, PRIMING_FACTORS["table_sugar"])
        sugar = needed * factor * volume

        result = (
            CalcResult.new(Measurement.new(sugar, Unit.GRAMS))
            .with_meta("method", "Bottle Priming")
            .with_meta("sugar_type", sugar_type)
            .with_meta("priming_sugar_g", f"{sugar:.1f} g")
            .with_meta("target_co2", f"{target:.1f} volumes")
            .with_meta("residual_co2", f"{residual:.2f} volumes")
            .with_meta("co2_to_add", f"{needed:.2f} volumes")
            .with_meta("temp_c", f"{temp_c:.1f}°C")
            .with_meta("temp_f", f"{temp_f:.1f}°F")
        )
        if sugar > volume * 10:
            result = result.with_warning("Very high priming sugar - double-check target CO2")
        if target > Decimal("4.5"):
            result = result.with_warning("High carbonation (>4.5 vol) - risk of bottle bombs")
        return result
