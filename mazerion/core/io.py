"""
Input and output carriers for a single calculation.

Both types are immutable: every ``add_*`` / ``with_*`` call returns a new
instance and leaves the original untouched. Parameters and metadata are
ordered pairs rather than mappings, so duplicate keys are kept and lookups
return the first match.
"""

from collections.abc import Iterable, Mapping
from typing import Optional

from pydantic import BaseModel, ConfigDict

from mazerion.core.errors import CalcMissingInputError
from mazerion.core.measurement import Measurement
from mazerion.core.units import Unit


class CalcInput(BaseModel):
    """Ordered string parameters plus typed measurements."""

    model_config = ConfigDict(frozen=True)

    params: tuple[tuple[str, str], ...] = ()
    measurements: tuple[Measurement, ...] = ()

    @classmethod
    def from_mapping(
        cls,
        params: Mapping[str, str],
        measurements: Iterable[Measurement] = (),
    ) -> "CalcInput":
        """Build an input from a plain mapping, keeping its iteration order."""
        return cls(
            params=tuple((str(k), str(v)) for k, v in params.items()),
            measurements=tuple(measurements),
        )

    def add_param(self, key: str, value: str) -> "CalcInput":
        return self.model_copy(update={"params": self.params + ((key, str(value)),)})

    def add_measurement(self, measurement: Measurement) -> "CalcInput":
        return self.model_copy(
            update={"measurements": self.measurements + (measurement,)}
        )

    def get_param(self, key: str) -> Optional[str]:
        """Return the value of the first parameter named ``key``."""
        for name, value in self.params:
            if name == key:
                return value
        return None

    def has_param(self, key: str) -> bool:
        return self.get_param(key) is not None

    def get_measurement(self, unit: Unit) -> Measurement:
        """
        Return the first measurement carrying ``unit``.

        Raises:
            CalcMissingInputError: If no measurement has that unit
        """
        for measurement in self.measurements:
            if measurement.unit == unit:
                return measurement
        raise CalcMissingInputError(f"No measurement with unit {unit.symbol}")

    def find_measurement(self, unit: Unit) -> Optional[Measurement]:
        """Like ``get_measurement`` but returns None on a miss."""
        for measurement in self.measurements:
            if measurement.unit == unit:
                return measurement
        return None

    def is_empty(self) -> bool:
        return not self.params and not self.measurements


class CalcResult(BaseModel):
    """Primary output measurement with ordered warnings and metadata."""

    model_config = ConfigDict(frozen=True)

    output: Measurement
    warnings: tuple[str, ...] = ()
    metadata: tuple[tuple[str, str], ...] = ()

    @classmethod
    def new(cls, output: Measurement) -> "CalcResult":
        return cls(output=output)

    def with_warning(self, text: str) -> "CalcResult":
        return self.model_copy(update={"warnings": self.warnings + (text,)})

    def with_meta(self, key: str, value: object) -> "CalcResult":
        return self.model_copy(
            update={"metadata": self.metadata + ((key, str(value)),)}
        )

    def get_meta(self, key: str) -> Optional[str]:
        """Return the first metadata value recorded under ``key``."""
        for name, value in self.metadata:
            if name == key:
                return value
        return None

    def metadata_dict(self) -> dict[str, str]:
        """Collapse metadata to a mapping. The first value for a key wins."""
        collapsed: dict[str, str] = {}
        for name, value in self.metadata:
            collapsed.setdefault(name, value)
        return collapsed
