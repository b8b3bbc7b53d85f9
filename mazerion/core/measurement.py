"""
Typed measurement values.

A Measurement pairs a Decimal with a Unit. The checked constructors run the
unit's range rule, so a Measurement built through them never holds a value
outside its unit's legal domain.
"""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

from mazerion.core import validation
from mazerion.core.units import Unit


class Measurement(BaseModel):
    """A decimal value tagged with its unit."""

    model_config = ConfigDict(frozen=True)

    value: Decimal
    unit: Unit

    @classmethod
    def new(cls, value: Decimal, unit: Unit) -> "Measurement":
        """Build without range checking. Use only for values known to be legal."""
        return cls(value=value, unit=unit)

    @classmethod
    def checked(cls, value: Decimal, unit: Unit) -> "Measurement":
        """Build after applying the range rule for ``unit``."""
        validation.validate_for(unit, value)
        return cls(value=value, unit=unit)

    @classmethod
    def sg(cls, value: Decimal) -> "Measurement":
        validation.validate_sg(value)
        return cls(value=value, unit=Unit.SPECIFIC_GRAVITY)

    @classmethod
    def ph(cls, value: Decimal) -> "Measurement":
        validation.validate_ph(value)
        return cls(value=value, unit=Unit.PH)

    @classmethod
    def brix(cls, value: Decimal) -> "Measurement":
        validation.validate_brix(value)
        return cls(value=value, unit=Unit.BRIX)

    @classmethod
    def plato(cls, value: Decimal) -> "Measurement":
        validation.validate_plato(value)
        return cls(value=value, unit=Unit.PLATO)

    @classmethod
    def celsius(cls, value: Decimal) -> "Measurement":
        validation.validate_celsius(value)
        return cls(value=value, unit=Unit.CELSIUS)

    @classmethod
    def fahrenheit(cls, value: Decimal) -> "Measurement":
        validation.validate_fahrenheit(value)
        return cls(value=value, unit=Unit.FAHRENHEIT)

    @classmethod
    def percent(cls, value: Decimal) -> "Measurement":
        validation.validate_percent(value)
        return cls(value=value, unit=Unit.PERCENT)

    def rounded(self) -> Decimal:
        """Value rounded to the unit's display precision."""
        quantum = Decimal(1).scaleb(-self.unit.precision)
        return self.value.quantize(quantum, rounding=ROUND_HALF_UP)

    def display(self) -> str:
        return f"{self.rounded()} {self.unit.symbol}"

    def __str__(self) -> str:
        return self.display()
