"""Eagle board elements and the Board/Package containers that own them.

Each element is built from the attributes of one XML start tag.  Attributes
are offered to the element's capabilities in a fixed order and then to the
element's own fields; ``try_consume`` returns False for names nobody knows so
the caller can report them.  Once ``complete()`` is called the element is
frozen.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..errors import ContractViolation, DuplicateAttributeError, UnsetFieldError
from .attributes import Attribute
from .capabilities import (
    Capability,
    EndpointsCapability,
    LayerCapability,
    PoseCapability,
    WidthCapability,
)

logger = logging.getLogger(__name__)


class Language(Enum):
    ENGLISH = "en"
    GERMAN = "de"


@dataclass(frozen=True)
class LayerDefinition:
    """One ``<layer>`` entry of the document's layer table."""

    number: int
    name: str
    active: bool = True


class Element:
    """Base class for everything an Eagle start tag can describe."""

    kind = "element"

    def __init__(self, unit: str = "mm"):
        self.unit = unit
        self.fields = Capability(self.kind)
        self._completed = False

    def capabilities(self) -> Tuple[Capability, ...]:
        """Capabilities in the order attributes are offered to them."""
        return ()

    def try_consume(self, attribute: Attribute) -> bool:
        if self._completed:
            raise ContractViolation(f"attribute '{attribute.name}' given to completed {self.kind}")
        for capability in self.capabilities():
            if capability.try_consume(attribute):
                return True
        return self._consume_own(attribute)

    def _consume_own(self, attribute: Attribute) -> bool:
        return False

    def complete(self) -> None:
        self._completed = True

    @property
    def completed(self) -> bool:
        return self._completed

    def __repr__(self):
        return f"<{type(self).__name__} {self.fields._values!r}>"


class _PlacedElement(Element):
    """Element with a layer and a pose."""

    def __init__(self, unit: str = "mm"):
        super().__init__(unit)
        self.layer_cap = LayerCapability(self.kind)
        self.pose = PoseCapability(self.kind, unit)

    def capabilities(self):
        return (self.layer_cap, self.pose)

    @property
    def layer(self) -> int:
        return self.layer_cap.layer

    @property
    def x(self):
        return self.pose.x

    @property
    def y(self):
        return self.pose.y

    @property
    def rotation(self):
        return self.pose.rotation


class Text(_PlacedElement):
    """A text label (or a package description).

    The string value is not an attribute: it arrives as character data after
    all attributes and is set exactly once through ``set_value``.
    """

    kind = "text"

    def __init__(self, unit: str = "mm"):
        super().__init__(unit)
        self.language = Language.ENGLISH
        self._value: Optional[str] = None

    def _consume_own(self, attribute: Attribute) -> bool:
        name = attribute.name
        if name == "size":
            self.fields.set("size", attribute.as_length(self.unit))
            return True
        if name == "ratio":
            self.fields.set("ratio", attribute.as_float())
            return True
        if name == "language":
            self.fields.set("language", attribute.value)
            try:
                self.language = Language(attribute.value)
            except ValueError:
                logger.warning("unknown language type '%s'", attribute.value)
            return True
        if name in ("font", "align", "distance"):
            # Presentation hints, kept but not converted
            self.fields.set(name, attribute.value)
            return True
        return False

    def set_value(self, value: str) -> None:
        if self._completed:
            raise ContractViolation("text value given to completed text")
        if self._value is not None:
            raise DuplicateAttributeError("value", self.kind)
        self._value = value

    @property
    def has_value(self) -> bool:
        return self._value is not None

    @property
    def value(self) -> str:
        if self._value is None:
            raise UnsetFieldError("value", self.kind)
        return self._value

    @property
    def size(self):
        return self.fields.get("size")

    @property
    def ratio(self) -> float:
        return self.fields.get("ratio")


class Hole(_PlacedElement):
    """A drilled hole, or a via when ``is_via`` is set.

    Holes never carry a layer or rotation in practice, but the pose
    capability is shared with the other placed elements anyway.
    """

    kind = "hole"

    def __init__(self, is_via: bool = False, unit: str = "mm"):
        self.is_via = is_via
        self.kind = "via" if is_via else "hole"
        super().__init__(unit)

    def _consume_own(self, attribute: Attribute) -> bool:
        name = attribute.name
        if name in ("drill", "diameter"):
            self.fields.set(name, attribute.as_length(self.unit))
            return True
        if self.is_via and name in ("extent", "shape"):
            self.fields.set(name, attribute.value)
            return True
        if self.is_via and name == "alwaysstop":
            self.fields.set(name, attribute.as_bool())
            return True
        return False

    @property
    def drill(self):
        return self.fields.get("drill")

    @property
    def diameter(self):
        return self.fields.get_or("diameter")

    @property
    def shape(self) -> str:
        return self.fields.get_or("shape", "round")


class _SegmentElement(Element):
    """Element with a layer, a width and two end points."""

    def __init__(self, unit: str = "mm"):
        super().__init__(unit)
        self.layer_cap = LayerCapability(self.kind)
        self.width_cap = WidthCapability(self.kind, unit)
        self.endpoints = EndpointsCapability(self.kind, unit)

    def capabilities(self):
        return (self.layer_cap, self.width_cap, self.endpoints)

    @property
    def layer(self) -> int:
        return self.layer_cap.layer

    @property
    def width(self):
        return self.width_cap.width

    @property
    def has_width(self) -> bool:
        return self.width_cap.is_set("width")

    @property
    def x1(self):
        return self.endpoints.x1

    @property
    def y1(self):
        return self.endpoints.y1

    @property
    def x2(self):
        return self.endpoints.x2

    @property
    def y2(self):
        return self.endpoints.y2


class Wire(_SegmentElement):
    kind = "wire"

    def _consume_own(self, attribute: Attribute) -> bool:
        if attribute.name == "curve":
            self.fields.set("curve", attribute.as_float())
            return True
        return False

    @property
    def curve(self) -> float:
        """Included arc angle in degrees, 0 for a straight wire."""
        return self.fields.get_or("curve", 0.0)


class Rectangle(_SegmentElement):
    """An axis-aligned filled rectangle given by opposite corners."""

    kind = "rectangle"

    def _consume_own(self, attribute: Attribute) -> bool:
        if attribute.name == "rot":
            self.fields.set("rotation", attribute.as_rotation())
            return True
        return False

    @property
    def rotation(self):
        return self.fields.get("rotation")


class Circle(_PlacedElement):
    kind = "circle"

    def __init__(self, unit: str = "mm"):
        super().__init__(unit)
        self.width_cap = WidthCapability(self.kind, unit)

    def capabilities(self):
        return (self.layer_cap, self.pose, self.width_cap)

    def _consume_own(self, attribute: Attribute) -> bool:
        if attribute.name == "radius":
            self.fields.set("radius", attribute.as_length(self.unit))
            return True
        return False

    @property
    def width(self):
        return self.width_cap.width

    @property
    def radius(self):
        return self.fields.get("radius")


class Pad(_PlacedElement):
    """A through-hole pad of a package."""

    kind = "pad"

    def _consume_own(self, attribute: Attribute) -> bool:
        name = attribute.name
        if name in ("name", "shape"):
            self.fields.set(name, attribute.value)
            return True
        if name in ("drill", "diameter"):
            self.fields.set(name, attribute.as_length(self.unit))
            return True
        if name in ("stop", "thermals", "first"):
            self.fields.set(name, attribute.as_bool())
            return True
        return False

    @property
    def name(self) -> str:
        return self.fields.get("name")

    @property
    def drill(self):
        return self.fields.get("drill")

    @property
    def diameter(self):
        return self.fields.get_or("diameter")

    @property
    def shape(self) -> str:
        return self.fields.get_or("shape", "round")


class Smd(_PlacedElement):
    """A surface-mount pad of a package."""

    kind = "smd"

    def _consume_own(self, attribute: Attribute) -> bool:
        name = attribute.name
        if name == "name":
            self.fields.set(name, attribute.value)
            return True
        if name in ("dx", "dy"):
            self.fields.set(name, attribute.as_length(self.unit))
            return True
        if name == "roundness":
            self.fields.set(name, attribute.as_float())
            return True
        if name in ("stop", "thermals", "cream"):
            self.fields.set(name, attribute.as_bool())
            return True
        return False

    @property
    def name(self) -> str:
        return self.fields.get("name")

    @property
    def dx(self):
        return self.fields.get("dx")

    @property
    def dy(self):
        return self.fields.get("dy")

    @property
    def roundness(self) -> float:
        return self.fields.get_or("roundness", 0.0)


# Element kind -> Board attribute holding that kind
_COLLECTIONS = {
    "text": "texts",
    "hole": "holes",
    "via": "holes",
    "wire": "wires",
    "rectangle": "rectangles",
    "circle": "circles",
    "pad": "pads",
    "smd": "smds",
}


class Board:
    """Ordered, per-kind collections of completed elements."""

    kind = "board"

    def __init__(self):
        self.texts: List[Text] = []
        self.holes: List[Hole] = []
        self.wires: List[Wire] = []
        self.rectangles: List[Rectangle] = []
        self.circles: List[Circle] = []
        self.pads: List[Pad] = []
        self.smds: List[Smd] = []
        self._frozen = False

    def add(self, element: Element) -> None:
        if self._frozen:
            raise ContractViolation(f"{element.kind} added to closed {self.kind}")
        element.complete()
        getattr(self, _COLLECTIONS[element.kind]).append(element)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen


class Package(Board):
    """A library footprint: its own geometry plus a name and description."""

    kind = "package"

    def __init__(self):
        super().__init__()
        self.fields = Capability(self.kind)
        self.description = ""

    def try_consume(self, attribute: Attribute) -> bool:
        if attribute.name == "name":
            self.fields.set("name", attribute.value)
            return True
        return False

    @property
    def name(self) -> str:
        return self.fields.get("name")

    @property
    def has_name(self) -> bool:
        return self.fields.is_set("name")

    def set_description(self, description: Text) -> None:
        """Keep the description only if it is the English variant."""
        if self._frozen:
            raise ContractViolation("description given to closed package")
        if description.language is Language.ENGLISH:
            self.description = description.value
        else:
            logger.debug("discarding %s description of package", description.language.value)
