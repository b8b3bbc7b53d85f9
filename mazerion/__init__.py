"""
Mazerion

Calculators for brewing, mead-making and winemaking: gravity and alcohol,
nutrients and yeast, beer color and bitterness, finishing additions, mead
styles and batch utilities. Values are carried as Decimal.

Usage:
    python -m mazerion list
    python -m mazerion calc abv -p og=1.050 -p fg=1.010
    python -m mazerion convert 5 gallons liters
    python -m mazerion serve --port 8000
"""

__version__ = "0.1.0"
__author__ = "Mazerion Project"

from mazerion.core.units import Unit
from mazerion.core.measurement import Measurement
from mazerion.core.io import CalcInput, CalcResult
from mazerion.core.calculator import Calculator
from mazerion.core.registry import CalculatorRegistry
from mazerion.core.errors import CalcError
from mazerion.calculators import build_registry, default_registry
from mazerion.engine import CalcEngine

__all__ = [
    # Core
    "Unit",
    "Measurement",
    "CalcInput",
    "CalcResult",
    "Calculator",
    "CalculatorRegistry",
    "CalcError",
    # Catalog
    "build_registry",
    "default_registry",
    # Execution
    "CalcEngine",
]
