"""Unit systems for parcel measurements.

This module centralizes the measurement systems a package can be declared
in, together with the conversion factors used across the application.
Keeping it in the domain layer lets both the protocol adapters and the
CLI share a single source of truth.
"""

from __future__ import annotations

from enum import Enum

GRAMS_PER_OUNCE = 28.349523125
GRAMS_PER_POUND = 453.59237
GRAMS_PER_KILOGRAM = 1000.0
CENTIMETRES_PER_INCH = 2.54


class UnitSystem(str, Enum):
    """Measurement systems accepted for package weight and dimensions."""

    METRIC = "metric"
    IMPERIAL = "imperial"

    @classmethod
    def default(cls) -> "UnitSystem":
        """Return the unit system assumed when none is given."""

        return cls.METRIC

    @classmethod
    def from_bool(cls, imperial: bool) -> "UnitSystem":
        """Derive a unit system from a boolean flag."""

        return cls.IMPERIAL if imperial else cls.METRIC

    @property
    def is_imperial(self) -> bool:
        return self is UnitSystem.IMPERIAL

    @property
    def weight_unit(self) -> str:
        """Weight unit code as transmitted on the wire."""

        return "LB" if self.is_imperial else "KG"

    @property
    def dimension_unit(self) -> str:
        """Linear unit code as transmitted on the wire."""

        return "IN" if self.is_imperial else "CM"
