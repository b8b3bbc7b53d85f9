"""
Per-unit range rules shared by every measurement constructor and calculator.

Ranges are domain facts. A value outside its range is rejected with
CalcOutOfRangeError; Brix and Plato additionally have an advisory threshold
that produces a warning string without rejecting the value.
"""

from decimal import Decimal
from typing import Callable, Optional

from mazerion.core.errors import CalcOutOfRangeError
from mazerion.core.units import Unit

SG_MIN, SG_MAX = Decimal("0.6000"), Decimal("2.0000")
PH_MIN, PH_MAX = Decimal("1.50"), Decimal("8.50")
BRIX_MIN, BRIX_MAX = Decimal("0"), Decimal("70")
BRIX_TYPICAL_MAX = Decimal("45")
TEMP_C_MIN, TEMP_C_MAX = Decimal("-5"), Decimal("100")
TEMP_F_MIN, TEMP_F_MAX = Decimal("23"), Decimal("212")
PERCENT_MIN, PERCENT_MAX = Decimal("0"), Decimal("100")

RANGES: dict[Unit, tuple[Decimal, Decimal]] = {
    Unit.SPECIFIC_GRAVITY: (SG_MIN, SG_MAX),
    Unit.PH: (PH_MIN, PH_MAX),
    Unit.BRIX: (BRIX_MIN, BRIX_MAX),
    Unit.PLATO: (BRIX_MIN, BRIX_MAX),
    Unit.CELSIUS: (TEMP_C_MIN, TEMP_C_MAX),
    Unit.FAHRENHEIT: (TEMP_F_MIN, TEMP_F_MAX),
    Unit.PERCENT: (PERCENT_MIN, PERCENT_MAX),
}


def _check(value: Decimal, label: str, low: Decimal, high: Decimal, places: int) -> None:
    if not value.is_finite() or value < low or value > high:
        raise CalcOutOfRangeError(
            f"{label} {value} outside range {low:.{places}f}–{high:.{places}f}"
        )


def validate_sg(value: Decimal) -> None:
    """Specific gravity must lie in [0.6000, 2.0000]."""
    _check(value, "SG", SG_MIN, SG_MAX, 4)


def validate_ph(value: Decimal) -> None:
    """pH must lie in [1.50, 8.50]."""
    _check(value, "pH", PH_MIN, PH_MAX, 2)


def validate_brix(value: Decimal) -> None:
    _check(value, "Brix", BRIX_MIN, BRIX_MAX, 0)


def validate_plato(value: Decimal) -> None:
    _check(value, "Plato", BRIX_MIN, BRIX_MAX, 0)


def validate_celsius(value: Decimal) -> None:
    _check(value, "Temperature", TEMP_C_MIN, TEMP_C_MAX, 0)


def validate_fahrenheit(value: Decimal) -> None:
    _check(value, "Temperature", TEMP_F_MIN, TEMP_F_MAX, 0)


def validate_percent(value: Decimal) -> None:
    _check(value, "Percent", PERCENT_MIN, PERCENT_MAX, 0)


def brix_warning(value: Decimal) -> Optional[str]:
    """Return an advisory when Brix is legal but above the typical range."""
    if value > BRIX_TYPICAL_MAX:
        return f"Brix {value} above typical range (0–45)"
    return None


def plato_warning(value: Decimal) -> Optional[str]:
    """Return an advisory when Plato is legal but above the typical range."""
    if value > BRIX_TYPICAL_MAX:
        return f"Plato {value} above typical range (0–45)"
    return None


_VALIDATORS: dict[Unit, Callable[[Decimal], None]] = {
    Unit.SPECIFIC_GRAVITY: validate_sg,
    Unit.PH: validate_ph,
    Unit.BRIX: validate_brix,
    Unit.PLATO: validate_plato,
    Unit.CELSIUS: validate_celsius,
    Unit.FAHRENHEIT: validate_fahrenheit,
    Unit.PERCENT: validate_percent,
}


def validate_for(unit: Unit, value: Decimal) -> None:
    """
    Apply the range rule for ``unit``.

    Units without a declared range (volumes, masses, ppm) accept any
    finite value.
    """
    validator = _VALIDATORS.get(unit)
    if validator is not None:
        validator(value)
    elif not value.is_finite():
        raise CalcOutOfRangeError(f"{unit.symbol} value must be finite")
