"""
Calculator registry.

The registry is an ordered list of ``(id, factory)`` entries. It is filled by
one explicit registration call at startup (see
``mazerion.calculators.build_registry``) and only read afterwards. Lookups
construct a fresh calculator each time; calculators hold no state.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from mazerion.core.calculator import Calculator
from mazerion.core.errors import CalcValidationError

logger = logging.getLogger(__name__)

VALID_CATEGORIES: tuple[str, ...] = (
    "Basic",
    "Advanced",
    "Brewing",
    "Beer",
    "Finishing",
    "Mead Styles",
    "Utilities",
)


def validate_category(category: str) -> None:
    """Raise CalcValidationError for a category outside VALID_CATEGORIES."""
    if category not in VALID_CATEGORIES:
        raise CalcValidationError(
            f"Invalid category '{category}'. Valid: {', '.join(VALID_CATEGORIES)}"
        )


@dataclass(frozen=True)
class CalculatorEntry:
    """A stable id and the zero-argument factory that builds the calculator."""

    id: str
    factory: Callable[[], Calculator]


class CalculatorRegistry:
    """Ordered catalog of calculator factories keyed by id."""

    def __init__(self) -> None:
        self._entries: list[CalculatorEntry] = []

    def register(self, calc_id: str, factory: Callable[[], Calculator]) -> None:
        """
        Append an entry.

        Duplicate ids are not rejected here; lookups resolve to the first
        entry registered under an id.
        """
        if any(entry.id == calc_id for entry in self._entries):
            logger.warning("Calculator id registered twice: %s", calc_id)
        self._entries.append(CalculatorEntry(id=calc_id, factory=factory))

    def register_class(self, calc_cls: type[Calculator]) -> None:
        """Register a Calculator subclass under its own ``id``."""
        self.register(calc_cls.id, calc_cls)

    def get(self, calc_id: str) -> Optional[Calculator]:
        """Return a new calculator for ``calc_id``, or None if unknown."""
        for entry in self._entries:
            if entry.id == calc_id:
                return entry.factory()
        return None

    def list_ids(self) -> list[str]:
        """Ids in registration order."""
        return [entry.id for entry in self._entries]

    def get_all(self) -> list[Calculator]:
        """One fresh instance per entry, in registration order."""
        return [entry.factory() for entry in self._entries]

    def get_by_category(self, category: str) -> list[Calculator]:
        return [calc for calc in self.get_all() if calc.category == category]

    def categories(self) -> list[str]:
        """Categories in use, in VALID_CATEGORIES order."""
        used = {calc.category for calc in self.get_all()}
        return [c for c in VALID_CATEGORIES if c in used]

    def count(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, calc_id: object) -> bool:
        return any(entry.id == calc_id for entry in self._entries)
