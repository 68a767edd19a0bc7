"""Length quantities for Eagle (mm or mil) and gEDA pcb (centimil) coordinates.

1 inch = 25.4 mm = 1000 mil, and 1 mil = 100 centimil, so one centimil is
1/100000 inch.  Conversion to centimils rounds half away from zero so that
large boards do not drift the way truncation would.
"""
import math
from dataclasses import dataclass

MM_PER_INCH = 25.4
MILS_PER_INCH = 1000
CENTIMILS_PER_MIL = 100
CENTIMILS_PER_MM = MILS_PER_INCH * CENTIMILS_PER_MIL / MM_PER_INCH

SUPPORTED_UNITS = ("mm", "mil")


class UnitError(ValueError):
    """Raised for non-finite quantities or unknown unit names."""

    pass


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def _check_finite(value: float, unit: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise UnitError(f"Non-finite {unit} value: {value}")
    return value


@dataclass(frozen=True)
class CentiMil:
    """gEDA pcb's native integer length unit."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, float):
            _check_finite(self.value, "centimil")
            object.__setattr__(self, "value", _round_half_away(self.value))

    def to_centimils(self) -> "CentiMil":
        return self


@dataclass(frozen=True)
class Millimeter:
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", _check_finite(self.value, "mm"))

    def to_centimils(self) -> CentiMil:
        return CentiMil(_round_half_away(self.value * CENTIMILS_PER_MM))


@dataclass(frozen=True)
class Mil:
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", _check_finite(self.value, "mil"))

    def to_centimils(self) -> CentiMil:
        return CentiMil(_round_half_away(self.value * CENTIMILS_PER_MIL))


def validate_unit(unit: str) -> str:
    """Validate and return a source unit name.

    Raises UnitError if the unit is not supported.
    """
    unit = unit.strip().lower()
    if unit not in SUPPORTED_UNITS:
        raise UnitError(f"Unsupported unit: {unit}. Supported: {SUPPORTED_UNITS}")
    return unit


def length(value: float, unit: str = "mm"):
    """Build a Millimeter or Mil quantity from a raw value and a unit name."""
    unit = validate_unit(unit)
    if unit == "mil":
        return Mil(value)
    return Millimeter(value)


def mm_to_centimils(mm: float) -> int:
    """Convert a raw mm value to a raw centimil integer."""
    return Millimeter(mm).to_centimils().value
