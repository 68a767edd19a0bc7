"""Streaming grammar handler for Eagle board documents.

``BoardHandler`` is an lxml parser target: the parser calls ``start``,
``end``, ``data`` and ``close`` in document order and the handler builds the
board model as the events arrive.

Nesting is tracked with a stack of frames, one per open element, each holding
the structural ``Region`` in force inside it.  Entering a new region is only
legal through ``_OPEN_TRANSITIONS``; every other tag either keeps the current
region (containers such as ``signals`` or ``element`` that carry nothing this
converter needs) or switches to ``Region.SKIPPED`` for whole subtrees that are
dropped.  Text, description and note content is tracked separately by
``Leaf`` since those can appear inside several regions.

Every illegal open or close raises GrammarError; nothing is auto-repaired.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, NamedTuple, Optional

from ..errors import GrammarError
from .attributes import iter_attributes
from .ee_types import (
    Board,
    Circle,
    Element,
    Hole,
    LayerDefinition,
    Package,
    Pad,
    Rectangle,
    Smd,
    Text,
    Wire,
)

logger = logging.getLogger(__name__)


class Region(Enum):
    OUTSIDE = "outside"
    LAYERS = "layers"
    BOARD = "board"
    PLAIN = "plain"
    LIBRARIES = "libraries"
    LIBRARY = "library"
    PACKAGES = "packages"
    PACKAGE = "package"
    SKIPPED = "skipped"


class Leaf(Enum):
    NONE = "none"
    TEXT = "text"
    DESCRIPTION = "description"
    NOTE = "note"


# (current region, tag) -> region entered by that tag
_OPEN_TRANSITIONS: Dict[tuple, Region] = {
    (Region.OUTSIDE, "layers"): Region.LAYERS,
    (Region.OUTSIDE, "board"): Region.BOARD,
    (Region.BOARD, "plain"): Region.PLAIN,
    (Region.BOARD, "libraries"): Region.LIBRARIES,
    (Region.LIBRARIES, "library"): Region.LIBRARY,
    # Stand-alone library documents (.lbr) have no <board>
    (Region.OUTSIDE, "library"): Region.LIBRARY,
    (Region.LIBRARY, "packages"): Region.PACKAGES,
    (Region.OUTSIDE, "packages"): Region.PACKAGES,
    (Region.PACKAGES, "package"): Region.PACKAGE,
}

STRUCTURAL_TAGS = frozenset(tag for _, tag in _OPEN_TRANSITIONS)

# Subtrees whose content has no place in a pcb layout
SKIPPED_TAGS = frozenset({"schematic", "symbols", "devicesets", "packages3d"})

# Leaf geometry built entirely from the start tag
_SHAPE_FACTORIES = {
    "wire": lambda unit: Wire(unit),
    "hole": lambda unit: Hole(is_via=False, unit=unit),
    "via": lambda unit: Hole(is_via=True, unit=unit),
    "rectangle": lambda unit: Rectangle(unit),
    "circle": lambda unit: Circle(unit),
    "pad": lambda unit: Pad(unit),
    "smd": lambda unit: Smd(unit),
}

# Regions where text and shapes may appear
_GEOMETRY_REGIONS = frozenset({Region.OUTSIDE, Region.BOARD, Region.PLAIN, Region.PACKAGE})

# Regions where a <description> is accepted but thrown away
_DISCARDED_DESCRIPTION_REGIONS = frozenset({Region.BOARD, Region.LIBRARY})


class _Frame(NamedTuple):
    tag: str
    region: Region


@dataclass
class ParseResult:
    """Everything the handler hands over at the end of the document."""

    board: Board
    packages: List[Package] = field(default_factory=list)
    layers: Dict[int, LayerDefinition] = field(default_factory=dict)
    element_counts: Counter = field(default_factory=Counter)


class BoardHandler:
    """lxml parser target that turns Eagle XML events into a ParseResult."""

    def __init__(self, unit: str = "mm"):
        self.unit = unit
        # Approximate input line, kept current by the reader
        self.line: Optional[int] = None
        self.board = Board()
        self.packages: List[Package] = []
        self.layers: Dict[int, LayerDefinition] = {}
        self.element_counts: Counter = Counter()
        self._frames: List[_Frame] = [_Frame("", Region.OUTSIDE)]
        self._leaf = Leaf.NONE
        self._text: Optional[Text] = None
        self._text_chunks: List[str] = []
        self._package: Optional[Package] = None
        self._discard_description = False
        # Set once a callback has raised; lxml still calls close() afterwards
        self._aborted = False

    # --- State queries ---

    @property
    def region(self) -> Region:
        return self._frames[-1].region

    @property
    def leaf(self) -> Leaf:
        return self._leaf

    @property
    def depth(self) -> int:
        return len(self._frames) - 1

    def _error(self, tag: str, message: str) -> GrammarError:
        return GrammarError(tag, f"{message} (in {self.region.value})", region=self.region.value, line=self.line)

    # --- Parser target interface ---

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        try:
            self._start(tag, attrib)
        except Exception:
            self._aborted = True
            raise

    def end(self, tag: str) -> None:
        try:
            self._end(tag)
        except Exception:
            self._aborted = True
            raise

    def _start(self, tag: str, attrib: Mapping[str, str]) -> None:
        self.element_counts[tag] += 1
        region = self.region

        if self._leaf is not Leaf.NONE:
            raise self._error(tag, f"element not allowed inside <{self._leaf.value}>")

        if region is Region.SKIPPED or tag in SKIPPED_TAGS:
            self._frames.append(_Frame(tag, Region.SKIPPED))
            return

        if tag in STRUCTURAL_TAGS:
            self._open_region(tag, attrib)
        elif tag == "layer":
            self._handle_layer_definition(tag, attrib)
        elif tag == "text":
            self._open_text(tag, attrib)
        elif tag == "description":
            self._open_description(tag, attrib)
        elif tag == "note":
            if region is Region.LAYERS:
                raise self._error(tag, "note inside layer table")
            self._leaf = Leaf.NOTE
        elif tag in _SHAPE_FACTORIES:
            self._handle_shape(tag, attrib)
        else:
            logger.debug("passing through <%s>", tag)

        if tag not in STRUCTURAL_TAGS:
            self._frames.append(_Frame(tag, region))

    def _end(self, tag: str) -> None:
        top = self._frames[-1]
        if top.tag != tag:
            if top.tag:
                raise self._error(tag, f"closed while <{top.tag}> is open")
            raise self._error(tag, "closed without being opened")

        if top.region is Region.SKIPPED:
            self._frames.pop()
            return

        if tag == "text":
            self._close_text(tag)
        elif tag == "description":
            self._close_description(tag)
        elif tag == "note":
            self._leaf = Leaf.NONE
        elif tag == "package":
            self._close_package(tag)
        self._frames.pop()

    def data(self, content: str) -> None:
        if self._leaf in (Leaf.TEXT, Leaf.DESCRIPTION):
            self._text_chunks.append(content)
        elif self._leaf is Leaf.NOTE or self.region is Region.SKIPPED:
            pass
        elif content.strip():
            logger.warning("%d unexpected characters: '%s'", len(content), content.strip())

    def comment(self, text: str) -> None:
        pass

    def pi(self, target: str, data: str) -> None:
        logger.debug("processing instruction <?%s %s?>", target, data)

    def close(self) -> Optional[ParseResult]:
        """End of the event stream.

        lxml also calls this while unwinding a failed parse.  After a callback
        has raised, nothing is returned so that the original error propagates.
        """
        if self._aborted:
            return None
        self.board.freeze()
        return ParseResult(
            board=self.board,
            packages=self.packages,
            layers=self.layers,
            element_counts=self.element_counts,
        )

    def finish(self) -> None:
        """Check that the document closed everything it opened, then log counts.

        Called once the parser itself has accepted the whole document.
        """
        if len(self._frames) > 1 or self._leaf is not Leaf.NONE:
            open_tags = ", ".join(f"<{f.tag}>" for f in self._frames[1:])
            raise GrammarError(open_tags or self._leaf.value, "document ended while still open", line=self.line)
        for tag, count in sorted(self.element_counts.items()):
            logger.info("element %s -> %d", tag, count)

    # --- Regions ---

    def _open_region(self, tag: str, attrib: Mapping[str, str]) -> None:
        entered = _OPEN_TRANSITIONS.get((self.region, tag))
        if entered is None:
            raise self._error(tag, "not allowed here")
        if entered is Region.PACKAGE:
            self._package = Package()
            for attribute in iter_attributes(attrib):
                if not self._package.try_consume(attribute):
                    logger.warning("unexpected attribute '%s' in package definition", attribute.name)
            logger.debug("starting package %s", self._package.fields.get_or("name", "?"))
        self._frames.append(_Frame(tag, entered))

    def _close_package(self, tag: str) -> None:
        package = self._package
        if package is None:
            raise self._error(tag, "closed without a package under construction")
        package.freeze()
        self.packages.append(package)
        self._package = None

    def _handle_layer_definition(self, tag: str, attrib: Mapping[str, str]) -> None:
        if self.region is not Region.LAYERS:
            raise self._error(tag, "layer definition outside <layers>")
        number: Optional[int] = None
        name = ""
        active = True
        for attribute in iter_attributes(attrib):
            if attribute.name == "number":
                number = attribute.as_int()
            elif attribute.name == "name":
                name = attribute.value
            elif attribute.name == "active":
                active = attribute.as_bool()
        if number is None:
            raise self._error(tag, "layer definition without a number")
        self.layers[number] = LayerDefinition(number=number, name=name, active=active)

    # --- Text and description ---

    def _open_text(self, tag: str, attrib: Mapping[str, str]) -> None:
        if self.region not in _GEOMETRY_REGIONS:
            raise self._error(tag, "text not allowed here")
        logger.debug("starting text at line %s", self.line)
        self._text = Text(self.unit)
        self._text_chunks = []
        self._leaf = Leaf.TEXT
        self._consume(self._text, attrib)

    def _close_text(self, tag: str) -> None:
        if self._leaf is not Leaf.TEXT or self._text is None:
            raise self._error(tag, "closed without an open text")
        text = self._text
        text.set_value("".join(self._text_chunks))
        self._route(text)
        self._text = None
        self._text_chunks = []
        self._leaf = Leaf.NONE

    def _open_description(self, tag: str, attrib: Mapping[str, str]) -> None:
        region = self.region
        if region is Region.PACKAGE:
            self._discard_description = False
        elif region in _DISCARDED_DESCRIPTION_REGIONS:
            self._discard_description = True
        else:
            raise self._error(tag, "description not allowed here")
        self._text = Text(self.unit)
        self._text_chunks = []
        self._leaf = Leaf.DESCRIPTION
        self._consume(self._text, attrib)

    def _close_description(self, tag: str) -> None:
        if self._leaf is not Leaf.DESCRIPTION or self._text is None:
            raise self._error(tag, "closed without an open description")
        description = self._text
        description.set_value("".join(self._text_chunks))
        description.complete()
        if self._discard_description:
            logger.debug("discarding %s description", self.region.value)
        elif self._package is None:
            raise self._error(tag, "description without a package")
        else:
            self._package.set_description(description)
        self._text = None
        self._text_chunks = []
        self._leaf = Leaf.NONE

    # --- Leaf geometry ---

    def _handle_shape(self, tag: str, attrib: Mapping[str, str]) -> None:
        region = self.region
        if region not in _GEOMETRY_REGIONS:
            raise self._error(tag, f"{tag} not allowed here")
        if tag in ("pad", "smd") and region is not Region.PACKAGE:
            raise self._error(tag, f"{tag} outside a package")
        element = _SHAPE_FACTORIES[tag](self.unit)
        self._consume(element, attrib)
        self._route(element)

    # --- Helpers ---

    def _consume(self, element: Element, attrib: Mapping[str, str]) -> None:
        for attribute in iter_attributes(attrib):
            if not element.try_consume(attribute):
                logger.warning("unexpected attribute '%s' in %s definition", attribute.name, element.kind)

    def _route(self, element: Element) -> None:
        """Hand a finished element to the open package, or to the board."""
        if self._package is not None:
            self._package.add(element)
        else:
            self.board.add(element)
