"""
Core model for beverage calculations.

Units and measurements, range validation, the input/output carriers, the
calculator contract and the registry.
"""

from mazerion.core.units import Unit, ureg, Q_, convert
from mazerion.core.measurement import Measurement
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.calculator import Calculator
from mazerion.core.registry import (
    CalculatorEntry,
    CalculatorRegistry,
    VALID_CATEGORIES,
    validate_category,
)
from mazerion.core.errors import (
    CalcError,
    CalcValidationError,
    CalcOutOfRangeError,
    CalcMissingInputError,
    CalcParseError,
    CalculationError,
    CalculatorNotFoundError,
    InputTooLargeError,
)

__all__ = [
    # Units
    "Unit",
    "ureg",
    "Q_",
    "convert",
    # Values
    "Measurement",
    "CalcInput",
    "CalcResult",
    # Contract
    "Calculator",
    "CalculatorEntry",
    "CalculatorRegistry",
    "VALID_CATEGORIES",
    "validate_category",
    # Errors
    "CalcError",
    "CalcValidationError",
    "CalcOutOfRangeError",
    "CalcMissingInputError",
    "CalcParseError",
    "CalculationError",
    "CalculatorNotFoundError",
    "InputTooLargeError",
]
