"""
Unit definitions and conversions for beverage calculations.

The ``Unit`` enumeration is the closed set of quantities a Measurement can
carry. Physical conversions between volume, mass and temperature units go
through a shared pint registry so the dimensional bookkeeping stays in one
place. Values enter and leave as Decimal.
"""

from decimal import Decimal
from enum import Enum

import pint

from mazerion.core.errors import CalcValidationError

# Shared unit registry for the entire application
ureg = pint.UnitRegistry()

# Shorthand for creating quantities
Q_ = ureg.Quantity


class Unit(str, Enum):
    """Physical quantity attached to a measurement."""
    SPECIFIC_GRAVITY = "specific_gravity"
    PH = "ph"
    BRIX = "brix"
    PLATO = "plato"
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    PERCENT = "percent"
    ABV = "abv"
    GRAMS = "grams"
    OUNCES = "ounces"
    POUNDS = "pounds"
    LITERS = "liters"
    MILLILITERS = "milliliters"
    GALLONS = "gallons"
    QUARTS = "quarts"
    PINTS = "pints"
    FLUID_OUNCES = "fluid_ounces"
    PPM = "ppm"

    @property
    def precision(self) -> int:
        """Number of fractional digits used when displaying this unit."""
        return _UNIT_INFO[self][0]

    @property
    def symbol(self) -> str:
        """Display symbol for this unit."""
        return _UNIT_INFO[self][1]


_UNIT_INFO: dict[Unit, tuple[int, str]] = {
    Unit.SPECIFIC_GRAVITY: (4, "SG"),
    Unit.PH: (3, "pH"),
    Unit.BRIX: (2, "°Bx"),
    Unit.PLATO: (2, "°P"),
    Unit.CELSIUS: (1, "°C"),
    Unit.FAHRENHEIT: (1, "°F"),
    Unit.PERCENT: (2, "%"),
    Unit.ABV: (2, "% ABV"),
    Unit.GRAMS: (2, "g"),
    Unit.OUNCES: (2, "oz"),
    Unit.POUNDS: (2, "lb"),
    Unit.LITERS: (2, "L"),
    Unit.MILLILITERS: (2, "mL"),
    Unit.GALLONS: (2, "gal"),
    Unit.QUARTS: (2, "qt"),
    Unit.PINTS: (2, "pt"),
    Unit.FLUID_OUNCES: (2, "fl oz"),
    Unit.PPM: (1, "ppm"),
}

# pint names for the units that have a physical dimension
_PINT_NAMES: dict[Unit, str] = {
    Unit.CELSIUS: "degC",
    Unit.FAHRENHEIT: "degF",
    Unit.GRAMS: "gram",
    Unit.OUNCES: "ounce",
    Unit.POUNDS: "pound",
    Unit.LITERS: "liter",
    Unit.MILLILITERS: "milliliter",
    Unit.GALLONS: "gallon",
    Unit.QUARTS: "quart",
    Unit.PINTS: "pint",
    Unit.FLUID_OUNCES: "fluid_ounce",
}


def is_convertible(from_unit: Unit, to_unit: Unit) -> bool:
    """Check whether two units share a physical dimension."""
    if from_unit == to_unit:
        return True
    if from_unit not in _PINT_NAMES or to_unit not in _PINT_NAMES:
        return False
    src = ureg.Unit(_PINT_NAMES[from_unit])
    dst = ureg.Unit(_PINT_NAMES[to_unit])
    return src.dimensionality == dst.dimensionality


def convert(value: Decimal, from_unit: Unit, to_unit: Unit) -> Decimal:
    """
    Convert a value between two physical units.

    Args:
        value: Magnitude in ``from_unit``
        from_unit: Source unit
        to_unit: Target unit

    Returns:
        Magnitude in ``to_unit`` as a Decimal

    Raises:
        CalcValidationError: If the units do not share a dimension
    """
    if from_unit == to_unit:
        return value
    if not is_convertible(from_unit, to_unit):
        raise CalcValidationError(
            f"Cannot convert {from_unit.symbol} to {to_unit.symbol}"
        )
    quantity = Q_(float(value), _PINT_NAMES[from_unit])
    magnitude = quantity.to(_PINT_NAMES[to_unit]).magnitude
    # Trim binary float noise beyond what any display precision needs
    return Decimal(str(round(magnitude, 9)))


def gallons_to_liters(gallons: Decimal) -> Decimal:
    """Convert US gallons to liters."""
    return convert(gallons, Unit.GALLONS, Unit.LITERS)


def liters_to_gallons(liters: Decimal) -> Decimal:
    """Convert liters to US gallons."""
    return convert(liters, Unit.LITERS, Unit.GALLONS)


def fahrenheit_to_celsius(fahrenheit: Decimal) -> Decimal:
    """Convert °F to °C."""
    return convert(fahrenheit, Unit.FAHRENHEIT, Unit.CELSIUS)


def celsius_to_fahrenheit(celsius: Decimal) -> Decimal:
    """Convert °C to °F."""
    return convert(celsius, Unit.CELSIUS, Unit.FAHRENHEIT)


def ounces_to_grams(ounces: Decimal) -> Decimal:
    return convert(ounces, Unit.OUNCES, Unit.GRAMS)


def grams_to_ounces(grams: Decimal) -> Decimal:
    return convert(grams, Unit.GRAMS, Unit.OUNCES)


def pounds_to_kilograms(pounds: Decimal) -> Decimal:
    return convert(pounds, Unit.POUNDS, Unit.GRAMS) / Decimal("1000")


def kilograms_to_pounds(kilograms: Decimal) -> Decimal:
    return convert(kilograms * Decimal("1000"), Unit.GRAMS, Unit.POUNDS)


def normalize_volume(value: Decimal, unit: Unit) -> Decimal:
    """Bring any volume to liters."""
    return convert(value, unit, Unit.LITERS)


def normalize_temperature(value: Decimal, unit: Unit) -> Decimal:
    """Bring any temperature to °C."""
    return convert(value, unit, Unit.CELSIUS)


def display_volume(liters: Decimal, unit: Unit) -> str:
    """Render a liter figure in the requested volume unit."""
    converted = convert(liters, Unit.LITERS, unit)
    return f"{converted:.{unit.precision}f} {unit.symbol}"
