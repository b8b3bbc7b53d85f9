"""
Calculator contract and shared parameter parsing.

A calculator is a stateless object with an id, display metadata, a
pre-flight ``validate`` and a ``calculate`` that turns a CalcInput into a
CalcResult. ``calculate`` always runs ``validate`` first, so a failed
pre-check can never be followed by a successful calculation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Optional

from mazerion.core.errors import CalcMissingInputError, CalcParseError, CalculationError
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit

DEFAULT_CATEGORY = "Utilities"

# Largest decimal exponent, either sign, accepted for a parameter value
MAX_EXPONENT = 15


def parse_decimal(field: str, text: str) -> Decimal:
    """
    Parse a parameter value as a finite Decimal.

    Raises:
        CalcParseError: If the text is not a finite number, or its
            magnitude is beyond 1e15 or below 1e-15
    """
    try:
        value = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        raise CalcParseError(field, text)
    if not value.is_finite():
        raise CalcParseError(field, text)
    if value and abs(value.adjusted()) > MAX_EXPONENT:
        raise CalcParseError(field, text, f"Invalid {field}: '{text}' is out of scale")
    return value


def require_decimal(input: CalcInput, key: str, label: Optional[str] = None) -> Decimal:
    """Read a required numeric parameter."""
    raw = input.get_param(key)
    if raw is None:
        raise CalcMissingInputError(f"{label or key} required")
    return parse_decimal(key, raw)


def optional_decimal(input: CalcInput, key: str, default: str) -> Decimal:
    """Read a numeric parameter, falling back to ``default`` when absent."""
    raw = input.get_param(key)
    if raw is None:
        return Decimal(default)
    return parse_decimal(key, raw)


def param_choice(input: CalcInput, key: str, default: str) -> str:
    """Read a text option, lower-cased and stripped."""
    raw = input.get_param(key)
    if raw is None:
        return default
    return raw.strip().lower()


def require_params(input: CalcInput, *keys: str) -> None:
    """Fail with CalcMissingInputError naming the first absent key."""
    for key in keys:
        if input.get_param(key) is None:
            raise CalcMissingInputError(f"{key} required")


class Calculator(ABC):
    """
    Base class for every calculator.

    Subclasses set the class attributes and implement ``compute``.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    category: str = DEFAULT_CATEGORY

    def validate(self, input: CalcInput) -> None:
        """
        Pre-flight check. Raises a CalcError subclass on failure.

        The default only rejects a completely empty input; calculators with
        required parameters override this.
        """
        if input.is_empty():
            raise CalcMissingInputError("No measurements or parameters provided")

    def calculate(self, input: CalcInput) -> CalcResult:
        """
        Validate ``input`` and run the calculation.

        Raises:
            CalcError: Any failure; decimal arithmetic faults surface as
                CalculationError
        """
        try:
            self.validate(input)
            return self.compute(input)
        except DecimalException as e:
            raise CalculationError(f"{self.id}: numeric failure ({type(e).__name__})") from e

    @abstractmethod
    def compute(self, input: CalcInput) -> CalcResult:
        """Perform the calculation on an already validated input."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def measurement_input(input: CalcInput, unit: Unit, key: str) -> Measurement:
    """
    Read a typed measurement, falling back to a numeric parameter.

    The first measurement carrying ``unit`` wins. Otherwise the parameter
    ``key`` is parsed and range-checked for ``unit``.
    """
    measurement = input.find_measurement(unit)
    if measurement is not None:
        return measurement
    raw = input.get_param(key)
    if raw is None:
        raise CalcMissingInputError(f"No measurement with unit {unit.symbol}")
    return Measurement.checked(parse_decimal(key, raw), unit)


def require_measurement(input: CalcInput, unit: Unit, key: str) -> None:
    """Fail unless a ``unit`` measurement or a ``key`` parameter is present."""
    if input.find_measurement(unit) is None and input.get_param(key) is None:
        raise CalcMissingInputError(f"No measurement with unit {unit.symbol}")
