"""
Error types raised by measurements, calculators and the execution engine.

Every calculator failure is one of the kinds below. Callers that need a
boundary-specific representation (HTTP status, exit code) translate from
``CalcError.kind``.
"""

from typing import Optional


class CalcError(Exception):
    """Base class for all calculation errors."""

    kind = "calculation"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CalcValidationError(CalcError):
    """A domain relationship between inputs is violated."""

    kind = "validation"


class CalcOutOfRangeError(CalcError):
    """A typed value falls outside its unit's legal range."""

    kind = "out_of_range"


class CalcMissingInputError(CalcError):
    """A required parameter or measurement was not supplied."""

    kind = "missing_input"


class CalcParseError(CalcError):
    """
    A textual parameter could not be read as a number.

    Attributes:
        field: Name of the offending parameter
        value: The raw text that failed to parse
    """

    kind = "parse"

    def __init__(self, field: str, value: str, message: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid {field}: '{value}'")


class CalculationError(CalcError):
    """Computation failed for a reason not covered by the other kinds."""

    kind = "calculation"


class CalculatorNotFoundError(CalcError):
    """No calculator is registered under the requested id."""

    kind = "not_found"

    def __init__(self, calculator_id: str) -> None:
        self.calculator_id = calculator_id
        super().__init__(f"Calculator not found: {calculator_id}")


class InputTooLargeError(CalcError):
    """A request exceeds one of the boundary size limits."""

    kind = "input_too_large"


class ConfigError(Exception):
    """Configuration file could not be read or parsed."""
