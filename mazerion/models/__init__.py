"""
Pydantic models for calculation requests and responses.
"""

from mazerion.models.inputs import CalcRequest, MeasurementIn, BatchRequest
from mazerion.models.outputs import (
    CalculatorInfo,
    CalcResponse,
    BatchItemResult,
    BatchResponse,
    CategoryListing,
)

__all__ = [
    "CalcRequest",
    "MeasurementIn",
    "BatchRequest",
    "CalculatorInfo",
    "CalcResponse",
    "BatchItemResult",
    "BatchResponse",
    "CategoryListing",
]
