"""Reusable attribute-consuming capabilities shared by several element kinds.

An element holds one capability object per concern (layer, width, pose,
endpoints) and offers each attribute to them in a fixed order.  Every
capability follows the same protocol: ``try_consume(attribute)`` returns True
after recording a recognized attribute, and False (leaving itself untouched)
for any other name.  Fields are set at most once; a second set raises
DuplicateAttributeError, and reading a field that was never set raises
UnsetFieldError.
"""
from typing import Any, Dict

from ..errors import DuplicateAttributeError, UnsetFieldError
from .attributes import Attribute


class Capability:
    """Set-once field store behind every capability."""

    def __init__(self, owner: str):
        self.owner = owner
        self._values: Dict[str, Any] = {}

    def is_set(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise UnsetFieldError(name, self.owner) from None

    def get_or(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        if name in self._values:
            raise DuplicateAttributeError(name, self.owner)
        self._values[name] = value

    def try_consume(self, attribute: Attribute) -> bool:
        return False


class LayerCapability(Capability):
    """Eagle layer number."""

    def try_consume(self, attribute: Attribute) -> bool:
        if attribute.name == "layer":
            self.set("layer", attribute.as_int())
            return True
        return False

    @property
    def layer(self) -> int:
        return self.get("layer")


class WidthCapability(Capability):
    """Line width."""

    def __init__(self, owner: str, unit: str = "mm"):
        super().__init__(owner)
        self.unit = unit

    def try_consume(self, attribute: Attribute) -> bool:
        if attribute.name == "width":
            self.set("width", attribute.as_length(self.unit))
            return True
        return False

    @property
    def width(self):
        return self.get("width")


class PoseCapability(Capability):
    """Position plus rotation.

    The rotation attribute is spelled ``rot`` in Eagle files.
    """

    def __init__(self, owner: str, unit: str = "mm"):
        super().__init__(owner)
        self.unit = unit

    def try_consume(self, attribute: Attribute) -> bool:
        if attribute.name in ("x", "y"):
            self.set(attribute.name, attribute.as_length(self.unit))
            return True
        if attribute.name == "rot":
            self.set("rotation", attribute.as_rotation())
            return True
        return False

    @property
    def x(self):
        return self.get("x")

    @property
    def y(self):
        return self.get("y")

    @property
    def rotation(self):
        return self.get("rotation")


class EndpointsCapability(Capability):
    """The two end points of a segment, or opposite corners of a rectangle."""

    _NAMES = ("x1", "y1", "x2", "y2")

    def __init__(self, owner: str, unit: str = "mm"):
        super().__init__(owner)
        self.unit = unit

    def try_consume(self, attribute: Attribute) -> bool:
        if attribute.name in self._NAMES:
            self.set(attribute.name, attribute.as_length(self.unit))
            return True
        return False

    @property
    def x1(self):
        return self.get("x1")

    @property
    def y1(self):
        return self.get("y1")

    @property
    def x2(self):
        return self.get("x2")

    @property
    def y2(self):
        return self.get("y2")
