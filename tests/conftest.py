"""
Pytest configuration and shared fixtures.
"""

from typing import Mapping

import pytest

from mazerion.calculators import build_registry
from mazerion.config import Settings
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.registry import CalculatorRegistry
from mazerion.engine import CalcEngine


@pytest.fixture
def registry() -> CalculatorRegistry:
    """Provide a freshly built calculator registry."""
    return build_registry()


@pytest.fixture
def engine(registry) -> CalcEngine:
    """Provide an engine with default limits."""
    return CalcEngine(registry=registry, settings=Settings())


@pytest.fixture
def run(registry):
    """Run a calculator by id with string parameters."""

    def _run(calc_id: str, params: Mapping[str, str], measurements=()) -> CalcResult:
        calc = registry.get(calc_id)
        assert calc is not None, f"unknown calculator {calc_id}"
        return calc.calculate(CalcInput.from_mapping(params, measurements))

    return _run


@pytest.fixture
def abv_params() -> dict[str, str]:
    """A typical mead: 1.050 down to 1.010."""
    return {"og": "1.050", "fg": "1.010"}
