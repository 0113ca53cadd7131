"""Package weight and dimension conversion for the wire.

Rules:
- Weight is rounded to 3 decimals and never goes below 0.1 (a parcel is
  never billed at zero weight).
- Each dimension is rounded to 3 decimals and then ceiled to a whole unit.
"""

from __future__ import annotations

import math

from core.domain.models import Axis, Package

MINIMUM_WEIGHT = 0.1
AXES: tuple[Axis, Axis, Axis] = ("length", "width", "height")


def round_half_up(value: float, digits: int = 3) -> float:
    """Round half away from zero, as the gateway's reference client does."""

    factor = 10**digits
    scaled = value * factor
    rounded = math.floor(scaled + 0.5) if scaled >= 0 else math.ceil(scaled - 0.5)
    return rounded / factor


def billable_weight(package: Package, imperial: bool) -> float:
    weight = package.pounds() if imperial else package.kilograms()
    return max(round_half_up(weight), MINIMUM_WEIGHT)


def billable_dimensions(package: Package, imperial: bool) -> dict[Axis, int] | None:
    """Whole-unit dimensions, or None when every dimension is zero."""

    if all(package.cm(axis) == 0 for axis in AXES):
        return None

    dimensions: dict[Axis, int] = {}
    for axis in AXES:
        value = package.inches(axis) if imperial else package.cm(axis)
        dimensions[axis] = math.ceil(round_half_up(value))
    return dimensions
