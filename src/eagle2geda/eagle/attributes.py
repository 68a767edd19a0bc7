"""Single (name, value) attribute pairs read from an Eagle element."""
import math
import re
from dataclasses import dataclass
from typing import Iterator, Mapping

from ..errors import MalformedInputError
from ..units import length

_ROTATION_RE = re.compile(r"^(S?)(M?)R(-?(?:\d+(?:\.\d*)?|\.\d+))$")

_BOOL_VALUES = {"yes": True, "no": False}


@dataclass(frozen=True)
class Attribute:
    """One attribute of an element, with typed conversions of its value."""

    name: str
    value: str

    def as_float(self) -> float:
        try:
            result = float(self.value)
        except ValueError:
            raise MalformedInputError(f"attribute '{self.name}' is not a number: {self.value!r}") from None
        if not math.isfinite(result):
            raise MalformedInputError(f"attribute '{self.name}' is not finite: {self.value!r}")
        return result

    def as_int(self) -> int:
        try:
            return int(self.value)
        except ValueError:
            raise MalformedInputError(f"attribute '{self.name}' is not an integer: {self.value!r}") from None

    def as_length(self, unit: str = "mm"):
        """Interpret the value as a length in the given source unit."""
        return length(self.as_float(), unit)

    def as_bool(self) -> bool:
        try:
            return _BOOL_VALUES[self.value.strip().lower()]
        except KeyError:
            raise MalformedInputError(f"attribute '{self.name}' is not yes/no: {self.value!r}") from None

    def as_rotation(self) -> "Rotation":
        return parse_rotation(self.value)


@dataclass(frozen=True)
class Rotation:
    """An Eagle rotation value such as ``R90``, ``MR180`` or ``SR45``."""

    raw: str
    degrees: float = 0.0
    mirrored: bool = False
    spin: bool = False


def parse_rotation(value: str) -> Rotation:
    """Parse an Eagle ``rot`` attribute value.

    Raises MalformedInputError if the value doesn't look like ``[S][M]R<deg>``.
    """
    m = _ROTATION_RE.match(value.strip())
    if not m:
        raise MalformedInputError(f"invalid rotation {value!r}")
    degrees = float(m.group(3))
    if not math.isfinite(degrees):
        raise MalformedInputError(f"invalid rotation {value!r}")
    return Rotation(raw=value, degrees=degrees, mirrored=bool(m.group(2)), spin=bool(m.group(1)))


def iter_attributes(attrib: Mapping[str, str]) -> Iterator[Attribute]:
    """Yield Attribute pairs in document order from an lxml attribute mapping."""
    for name, value in attrib.items():
        yield Attribute(name, value)
