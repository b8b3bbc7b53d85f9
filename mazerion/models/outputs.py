"""
Response models for the calculation surfaces.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from mazerion.core.calculator import Calculator
from mazerion.core.io import CalcResult


class CalculatorInfo(BaseModel):
    """Catalog entry for one calculator."""
    id: str
    name: str
    description: str
    category: str

    @classmethod
    def from_calculator(cls, calc: Calculator) -> "CalculatorInfo":
        return cls(
            id=calc.id,
            name=calc.name,
            description=calc.description,
            category=calc.category,
        )


class CalcResponse(BaseModel):
    """
    Result of a single calculation.

    ``value`` is the unrounded output; ``display`` is rounded to the unit's
    precision. Metadata keys repeated by a calculator keep their first value.
    """
    calculator_id: str = Field(..., description="Id of the calculator that ran")
    value: Decimal = Field(..., description="Primary output value")
    unit: str = Field(..., description="Unit of the primary output")
    symbol: str = Field(..., description="Display symbol of the unit")
    display: str = Field(..., description="Rounded value with symbol")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal advisories")
    metadata: dict[str, str] = Field(default_factory=dict, description="Supplementary details")

    @classmethod
    def from_result(cls, calculator_id: str, result: CalcResult) -> "CalcResponse":
        output = result.output
        return cls(
            calculator_id=calculator_id,
            value=output.value,
            unit=output.unit.value,
            symbol=output.unit.symbol,
            display=output.display(),
            warnings=list(result.warnings),
            metadata=result.metadata_dict(),
        )


class BatchItemResult(BaseModel):
    """Outcome of one batch entry: exactly one of ``result`` or ``error`` is set."""
    calculator_id: str
    result: Optional[CalcResponse] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchResponse(BaseModel):
    """Results of a batch, in request order."""
    results: list[BatchItemResult]
    succeeded: int = Field(..., description="Number of entries that produced a result")
    failed: int = Field(..., description="Number of entries that raised an error")

    @classmethod
    def from_items(cls, items: list[BatchItemResult]) -> "BatchResponse":
        succeeded = sum(1 for item in items if item.ok)
        return cls(results=items, succeeded=succeeded, failed=len(items) - succeeded)


class CategoryListing(BaseModel):
    """Calculators grouped under one category."""
    category: str
    calculators: list[CalculatorInfo]
