"""
Request models for the calculation surfaces.

These are the shapes accepted by the API and the CLI batch command. Size
limits are enforced by the engine, not here, so they stay configurable.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit


class MeasurementIn(BaseModel):
    """A typed reading supplied alongside the string parameters."""
    value: Decimal = Field(..., description="Numeric value")
    unit: Unit = Field(..., description="Unit of the value, e.g. 'brix' or 'specific_gravity'")

    def to_measurement(self) -> Measurement:
        """Range-checked core measurement."""
        return Measurement.checked(self.value, self.unit)


class CalcRequest(BaseModel):
    """
    One calculation request.

    Parameter values are carried as text; JSON numbers and booleans are
    accepted and converted to their string form.
    """
    calculator_id: str = Field(..., description="Calculator id, e.g. 'abv'")
    params: dict[str, str] = Field(default_factory=dict, description="Named input values")
    measurements: list[MeasurementIn] = Field(
        default_factory=list,
        description="Typed measurements, used before same-unit params",
    )

    @field_validator("params", mode="before")
    @classmethod
    def stringify_params(cls, v: Any) -> Any:
        """Accept scalar JSON values and keep them as text."""
        if not isinstance(v, dict):
            return v
        out = {}
        for key, value in v.items():
            if isinstance(value, bool):
                out[key] = "true" if value else "false"
            elif isinstance(value, (int, float, Decimal)):
                out[key] = str(value)
            else:
                out[key] = value
        return out

    def core_measurements(self) -> list[Measurement]:
        return [m.to_measurement() for m in self.measurements]


class BatchRequest(BaseModel):
    """Several independent calculations run in one call."""
    requests: list[CalcRequest] = Field(..., description="Calculations to run, in order")
