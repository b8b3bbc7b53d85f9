"""
Calculation engine.

Every outer surface (API, CLI, batch files) goes through ``CalcEngine``. It
enforces request size limits, resolves the calculator, and runs it. Errors
propagate as CalcError subclasses; only ``run_batch`` captures them, per
entry.
"""

import logging
import re
from typing import Iterable, Mapping, Optional, Sequence

from mazerion.calculators import default_registry
from mazerion.config import Limits, Settings
from mazerion.core.errors import (
    CalcError,
    CalcValidationError,
    CalculatorNotFoundError,
    InputTooLargeError,
)
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.measurement import Measurement
from mazerion.core.registry import CalculatorRegistry, validate_category
from mazerion.models.inputs import CalcRequest
from mazerion.models.outputs import BatchItemResult, CalcResponse, CalculatorInfo

logger = logging.getLogger(__name__)

CALCULATOR_ID_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


class CalcEngine:
    """
    Facade over a calculator registry.

    Args:
        registry: Calculators to serve; the process-wide default if omitted
        settings: Source of the request limits; defaults apply if omitted
    """

    def __init__(
        self,
        registry: Optional[CalculatorRegistry] = None,
        settings: Optional[Settings] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings if settings is not None else Settings()

    @property
    def limits(self) -> Limits:
        return self.settings.limits

    def list_calculators(self) -> list[CalculatorInfo]:
        return [CalculatorInfo.from_calculator(c) for c in self.registry.get_all()]

    def get_info(self, calc_id: str) -> CalculatorInfo:
        calc = self.registry.get(calc_id)
        if calc is None:
            raise CalculatorNotFoundError(calc_id)
        return CalculatorInfo.from_calculator(calc)

    def calculators_by_category(self, category: str) -> list[CalculatorInfo]:
        validate_category(category)
        return [
            CalculatorInfo.from_calculator(c) for c in self.registry.get_by_category(category)
        ]

    def categories(self) -> list[str]:
        return self.registry.categories()

    def check_limits(self, calc_id: str, params: Mapping[str, str]) -> None:
        """
        Reject oversized or malformed requests before any lookup.

        Raises:
            InputTooLargeError: If a size limit is exceeded
            CalcValidationError: If the id has illegal characters
        """
        limits = self.limits
        if len(calc_id) > limits.max_id_length:
            raise InputTooLargeError(
                f"Calculator id exceeds {limits.max_id_length} characters"
            )
        if not CALCULATOR_ID_PATTERN.match(calc_id):
            raise CalcValidationError(
                "Calculator id may only contain letters, digits and underscores"
            )
        if len(params) > limits.max_params:
            raise InputTooLargeError(f"Too many parameters (max {limits.max_params})")
        for key, value in params.items():
            if len(key) > limits.max_key_length:
                raise InputTooLargeError(
                    f"Parameter name exceeds {limits.max_key_length} characters"
                )
            if len(value) > limits.max_value_length:
                raise InputTooLargeError(
                    f"Value of '{key}' exceeds {limits.max_value_length} characters"
                )

    def run(
        self,
        calc_id: str,
        params: Mapping[str, str],
        measurements: Iterable[Measurement] = (),
    ) -> CalcResult:
        """
        Run one calculator.

        Raises:
            CalculatorNotFoundError: If no calculator has ``calc_id``
            CalcError: Any failure reported by the calculator
        """
        self.check_limits(calc_id, params)
        calc = self.registry.get(calc_id)
        if calc is None:
            raise CalculatorNotFoundError(calc_id)

        input = CalcInput.from_mapping(params, measurements)
        logger.debug("Running %s with %d params", calc_id, len(params))
        result = calc.calculate(input)
        if result.warnings:
            logger.info("%s produced %d warnings", calc_id, len(result.warnings))
        return result

    def run_request(self, request: CalcRequest) -> CalcResponse:
        result = self.run(request.calculator_id, request.params, request.core_measurements())
        return CalcResponse.from_result(request.calculator_id, result)

    def run_batch(self, requests: Sequence[CalcRequest]) -> list[BatchItemResult]:
        """
        Run each request independently; a failure is recorded on its entry
        and does not stop the rest.

        Raises:
            CalcValidationError: If the batch is empty
            InputTooLargeError: If the batch exceeds the configured size
        """
        if not requests:
            raise CalcValidationError("Batch must contain at least one request")
        if len(requests) > self.limits.max_batch_size:
            raise InputTooLargeError(
                f"Batch too large (max {self.limits.max_batch_size} requests)"
            )

        items = []
        for request in requests:
            try:
                response = self.run_request(request)
            except CalcError as e:
                logger.debug("Batch entry %s failed: %s", request.calculator_id, e)
                items.append(
                    BatchItemResult(
                        calculator_id=request.calculator_id,
                        error=str(e),
                        error_kind=e.kind,
                    )
                )
            else:
                items.append(BatchItemResult(calculator_id=request.calculator_id, result=response))
        return items
