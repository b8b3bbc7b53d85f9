"""
Calculator catalog.

``build_registry`` is the single registration step; ``default_registry``
builds it once per process.
"""

from functools import lru_cache

from mazerion.core.calculator import Calculator
from mazerion.core.registry import CalculatorRegistry
from mazerion.calculators.basic import (
    AbvCalculator,
    BrixToSgCalculator,
    PlatoToSgCalculator,
    SgToBrixCalculator,
    SgCorrectionCalculator,
    HydrometerCorrectionCalculator,
    DilutionCalculator,
    BlendingCalculator,
    GravityFromIngredientsCalculator,
)
from mazerion.calculators.advanced import (
    VolumeAdjustmentCalculator,
    RefractometerCalculator,
    AttenuationCalculator,
    AlcoholToleranceCalculator,
    BenchTrialsCalculator,
)
from mazerion.calculators.brewing import (
    NutritionCalculator,
    YeastPitchCalculator,
    YeastStarterCalculator,
    FermentationTimelineCalculator,
    CarbonationCalculator,
)
from mazerion.calculators.beer import (
    IbuCalculator,
    SrmCalculator,
    MashCalculator,
    EfficiencyCalculator,
)
from mazerion.calculators.finishing import (
    BottlingCalculator,
    StabilizationCalculator,
    AcidAdditionCalculator,
    SulfiteCalculator,
    BacksweeteningCalculator,
    TanninCalculator,
    PasteurizationCalculator,
)
from mazerion.calculators.styles import (
    MelomelCalculator,
    BochetCalculator,
    CyserCalculator,
    MetheglinCalculator,
    AcerglynCalculator,
    BraggotCalculator,
    CapsicumelCalculator,
    HydromelCalculator,
    SackCalculator,
    GreatMeadCalculator,
    LactomelCalculator,
    OxymelCalculator,
    PymentCalculator,
)
from mazerion.calculators.utilities import (
    PrimingAlternativesCalculator,
    CostCalculator,
    BatchCostCalculator,
    WaterChemistryCalculator,
    UpscalingCalculator,
    WasteCalculator,
    GallonsToBottlesCalculator,
    GallonsToBottlesWithLossesCalculator,
)

ALL_CALCULATORS: tuple[type[Calculator], ...] = (
    # Basic
    AbvCalculator,
    BrixToSgCalculator,
    PlatoToSgCalculator,
    SgToBrixCalculator,
    SgCorrectionCalculator,
    HydrometerCorrectionCalculator,
    DilutionCalculator,
    BlendingCalculator,
    GravityFromIngredientsCalculator,
    # Advanced
    VolumeAdjustmentCalculator,
    RefractometerCalculator,
    AttenuationCalculator,
    AlcoholToleranceCalculator,
    BenchTrialsCalculator,
    # Brewing
    NutritionCalculator,
    YeastPitchCalculator,
    YeastStarterCalculator,
    FermentationTimelineCalculator,
    CarbonationCalculator,
    # Beer
    IbuCalculator,
    SrmCalculator,
    MashCalculator,
    EfficiencyCalculator,
    # Finishing
    BottlingCalculator,
    StabilizationCalculator,
    AcidAdditionCalculator,
    SulfiteCalculator,
    BacksweeteningCalculator,
    TanninCalculator,
    PasteurizationCalculator,
    # Mead Styles
    MelomelCalculator,
    BochetCalculator,
    CyserCalculator,
    MetheglinCalculator,
    AcerglynCalculator,
    BraggotCalculator,
    CapsicumelCalculator,
    HydromelCalculator,
    SackCalculator,
    GreatMeadCalculator,
    LactomelCalculator,
    OxymelCalculator,
    PymentCalculator,
    # Utilities
    PrimingAlternativesCalculator,
    CostCalculator,
    BatchCostCalculator,
    WaterChemistryCalculator,
    UpscalingCalculator,
    WasteCalculator,
    GallonsToBottlesCalculator,
    GallonsToBottlesWithLossesCalculator,
)


def build_registry() -> CalculatorRegistry:
    """Register every built-in calculator, grouped by category."""
    registry = CalculatorRegistry()
    for calc_cls in ALL_CALCULATORS:
        registry.register_class(calc_cls)
    return registry


@lru_cache(maxsize=1)
def default_registry() -> CalculatorRegistry:
    """Process-wide registry, built on first use."""
    return build_registry()


__all__ = [
    "ALL_CALCULATORS",
    "build_registry",
    "default_registry",
]
