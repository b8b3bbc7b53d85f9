"""
Execution engine shared by the API and the CLI.
"""

from mazerion.engine.runner import CalcEngine, CALCULATOR_ID_PATTERN

__all__ = [
    "CalcEngine",
    "CALCULATOR_ID_PATTERN",
]
