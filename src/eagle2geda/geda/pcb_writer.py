"""Generate gEDA pcb layout files from a parsed Eagle board."""
import math
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from ..eagle.ee_types import Board, Circle, Hole, Package, Pad, Rectangle, Smd, Text, Wire
from ..eagle.handler import ParseResult
from ..units import mm_to_centimils
from ._format import cm, fmt_angle, quote
from .version import (
    ARC_FLAGS,
    DEFAULT_FONT_HEIGHT,
    DEFAULT_OUTLINE_THICKNESS,
    DEFAULT_TEXT_SCALE,
    GENERATOR,
    HOLE_FLAGS,
    LINE_FLAGS,
    OCTAGON_FLAGS,
    POLYGON_FLAGS,
    SQUARE_FLAGS,
    file_version_line,
    flags_line,
    groups_line,
    thermal_line,
)

DEFAULT_CLEARANCE = 2000
DEFAULT_MASK = 600
DEFAULT_VIA_ANNULUS = 1000


def wire_to_arc(x1: float, y1: float, x2: float, y2: float, curve: float) -> Tuple[float, float, float, float, float]:
    """Convert a curved wire to a gEDA arc.

    ``curve`` is the included angle in degrees, positive counter-clockwise
    from the first end point to the second.  Returns
    (center_x, center_y, radius, start_angle, delta_angle) where the angles
    follow pcb's convention: 0 degrees points to -X and angles grow toward +Y.
    """
    dx, dy = x2 - x1, y2 - y1
    chord = math.hypot(dx, dy)
    half = math.radians(curve) / 2
    radius = chord / (2 * abs(math.sin(half)))
    # Signed distance from the chord midpoint to the center, along the left normal
    offset = chord / (2 * math.tan(half))
    cx = (x1 + x2) / 2 - dy / chord * offset
    cy = (y1 + y2) / 2 + dx / chord * offset
    theta = math.degrees(math.atan2(y1 - cy, x1 - cx))
    start = round((180.0 - theta) % 360.0, 6) % 360.0
    return cx, cy, radius, start, -curve


def _is_curved(wire: Wire) -> bool:
    return wire.curve != 0 and (cm(wire.x1), cm(wire.y1)) != (cm(wire.x2), cm(wire.y2))


def _text_scale(text: Text) -> int:
    size = text.fields.get_or("size")
    if size is None:
        return DEFAULT_TEXT_SCALE
    return max(1, round(cm(size) * 100 / DEFAULT_FONT_HEIGHT))


def _shape_flags(shape: str) -> str:
    if shape == "square":
        return SQUARE_FLAGS
    if shape == "octagon":
        return OCTAGON_FLAGS
    return ""


def _rectangle_corners(rect: Rectangle) -> List[Tuple[int, int]]:
    x1, y1, x2, y2 = cm(rect.x1), cm(rect.y1), cm(rect.x2), cm(rect.y2)
    return [(x1, y1), (x2, y1), (x2, y2), (x1, y2)]


def _board_extent(board: Board) -> Tuple[int, int]:
    """Largest x and y (centimils) reached by the board's own geometry."""
    xs = [0]
    ys = [0]
    for wire in board.wires:
        xs += [cm(wire.x1), cm(wire.x2)]
        ys += [cm(wire.y1), cm(wire.y2)]
    for rect in board.rectangles:
        xs += [cm(rect.x1), cm(rect.x2)]
        ys += [cm(rect.y1), cm(rect.y2)]
    for circle in board.circles:
        xs.append(cm(circle.x) + cm(circle.radius))
        ys.append(cm(circle.y) + cm(circle.radius))
    for item in list(board.texts) + list(board.holes):
        xs.append(cm(item.x))
        ys.append(cm(item.y))
    return max(xs), max(ys)


class PcbWriter:
    """Renders a ParseResult as gEDA pcb text.

    Output depends only on the parse result and the writer settings.
    """

    def __init__(
        self,
        name: str = GENERATOR,
        margin_mm: float = 5.0,
        min_size_mm: float = 25.4,
        clearance: int = DEFAULT_CLEARANCE,
        mask: int = DEFAULT_MASK,
        via_annulus: int = DEFAULT_VIA_ANNULUS,
    ):
        self.name = name
        self.margin = mm_to_centimils(margin_mm)
        self.min_size = mm_to_centimils(min_size_mm)
        self.clearance = clearance
        self.mask = mask
        self.via_annulus = via_annulus

    def write(self, result: ParseResult) -> str:
        lines = [f"# Output generated from Eagle .brd file automatically by {GENERATOR}.", ""]
        lines.append(file_version_line())
        lines.append("")
        lines.append(self._pcb_line(result.board))
        lines.append("")
        lines.append(thermal_line())
        lines.append(flags_line())
        lines.append(groups_line())
        lines.append("")

        for hole in result.board.holes:
            lines.append(self.via(hole))
        if result.board.holes:
            lines.append("")

        for package in result.packages:
            lines.extend(self.element(package))
            lines.append("")

        layer_names = {number: layer.name for number, layer in result.layers.items()}
        for number, records in sorted(self._layer_records(result.board).items()):
            name = layer_names.get(number) or f"layer{number}"
            lines.append(f"Layer({number} {quote(name)})")
            lines.append("(")
            lines.extend(f"\t{record}" for record in records)
            lines.append(")")

        return "\n".join(lines) + "\n"

    # --- Header ---

    def _pcb_line(self, board: Board) -> str:
        max_x, max_y = _board_extent(board)
        width = max(max_x + self.margin, self.min_size)
        height = max(max_y + self.margin, self.min_size)
        return f"PCB[{quote(self.name)} {width} {height}]"

    # --- Board records ---

    def via(self, hole: Hole) -> str:
        drill = cm(hole.drill)
        if hole.is_via:
            thickness = cm(hole.diameter) if hole.diameter is not None else drill + 2 * self.via_annulus
            flags = _shape_flags(hole.shape)
        else:
            thickness = drill
            flags = HOLE_FLAGS
        mask = thickness + self.mask
        return f'Via[{cm(hole.x)} {cm(hole.y)} {thickness} {self.clearance} {mask} {drill} "" "{flags}"]'

    def _layer_records(self, board: Board) -> Dict[int, List[str]]:
        records: Dict[int, List[str]] = defaultdict(list)
        for wire in board.wires:
            records[wire.layer].append(self.line(wire))
        for circle in board.circles:
            records[circle.layer].append(self.arc(circle))
        for rect in board.rectangles:
            records[rect.layer].append(self.polygon(rect))
        for text in board.texts:
            records[text.layer].append(self.text(text))
        return records

    def line(self, wire: Wire) -> str:
        if _is_curved(wire):
            cx, cy, radius, start, delta = wire_to_arc(
                cm(wire.x1), cm(wire.y1), cm(wire.x2), cm(wire.y2), wire.curve
            )
            r = round(radius)
            return (
                f"Arc[{round(cx)} {round(cy)} {r} {r} {cm(wire.width)} {self.clearance}"
                f' {fmt_angle(start)} {fmt_angle(delta)} "{ARC_FLAGS}"]'
            )
        return (
            f"Line[{cm(wire.x1)} {cm(wire.y1)} {cm(wire.x2)} {cm(wire.y2)}"
            f' {cm(wire.width)} {self.clearance} "{LINE_FLAGS}"]'
        )

    def arc(self, circle: Circle) -> str:
        r = cm(circle.radius)
        return f'Arc[{cm(circle.x)} {cm(circle.y)} {r} {r} {cm(circle.width)} {self.clearance} 0 360 "{ARC_FLAGS}"]'

    def polygon(self, rect: Rectangle) -> str:
        points = " ".join(f"[{x} {y}]" for x, y in _rectangle_corners(rect))
        return f'Polygon("{POLYGON_FLAGS}")\n\t(\n\t\t{points}\n\t)'

    def text(self, text: Text) -> str:
        return f'Text[{cm(text.x)} {cm(text.y)} 0 {_text_scale(text)} {quote(text.value)} "{LINE_FLAGS}"]'

    # --- Package records ---

    def element(self, package: Package) -> List[str]:
        name = package.name if package.has_name else ""
        tx, ty, scale = 0, 0, DEFAULT_TEXT_SCALE
        label = next((t for t in package.texts if t.value == ">NAME"), None)
        if label is None and package.texts:
            label = package.texts[0]
        if label is not None:
            tx, ty, scale = cm(label.x), cm(label.y), _text_scale(label)

        lines = [f'Element["" {quote(name)} "" "" 0 0 {tx} {ty} 0 {scale} ""]', "("]
        body = []
        if package.description:
            body.append(f'Attribute("description" {quote(package.description)})')
        body.extend(f'Attribute("text" {quote(text.value)})' for text in package.texts)
        body.extend(self.hole_pin(hole) for hole in package.holes)
        body.extend(self.pin(pad) for pad in package.pads)
        body.extend(self.pad(smd) for smd in package.smds)
        for wire in package.wires:
            body.append(self.element_line(wire))
        for rect in package.rectangles:
            body.extend(self.element_outline(rect))
        body.extend(self.element_arc(circle) for circle in package.circles)
        lines.extend(f"\t{record}" for record in body)
        lines.append(")")
        return lines

    def hole_pin(self, hole: Hole) -> str:
        drill = cm(hole.drill)
        if hole.is_via:
            thickness = cm(hole.diameter) if hole.diameter is not None else drill + 2 * self.via_annulus
            flags = _shape_flags(hole.shape)
        else:
            thickness = drill
            flags = HOLE_FLAGS
        return (
            f"Pin[{cm(hole.x)} {cm(hole.y)} {thickness} {self.clearance} {thickness + self.mask}"
            f' {drill} "" "" "{flags}"]'
        )

    def pin(self, pad: Pad) -> str:
        drill = cm(pad.drill)
        thickness = cm(pad.diameter) if pad.diameter is not None else drill + 2 * self.via_annulus
        return (
            f"Pin[{cm(pad.x)} {cm(pad.y)} {thickness} {self.clearance} {thickness + self.mask} {drill}"
            f' {quote(pad.name)} {quote(pad.name)} "{_shape_flags(pad.shape)}"]'
        )

    def pad(self, smd: Smd) -> str:
        x, y, dx, dy = cm(smd.x), cm(smd.y), cm(smd.dx), cm(smd.dy)
        thickness = min(dx, dy)
        if dx >= dy:
            half = (dx - dy) // 2
            x1, y1, x2, y2 = x - half, y, x + half, y
        else:
            half = (dy - dx) // 2
            x1, y1, x2, y2 = x, y - half, x, y + half
        flags = "" if smd.roundness >= 100 else SQUARE_FLAGS
        return (
            f"Pad[{x1} {y1} {x2} {y2} {thickness} {self.clearance} {thickness + self.mask}"
            f' {quote(smd.name)} {quote(smd.name)} "{flags}"]'
        )

    def element_line(self, wire: Wire) -> str:
        if _is_curved(wire):
            cx, cy, radius, start, delta = wire_to_arc(
                cm(wire.x1), cm(wire.y1), cm(wire.x2), cm(wire.y2), wire.curve
            )
            r = round(radius)
            return f"ElementArc [{round(cx)} {round(cy)} {r} {r} {fmt_angle(start)} {fmt_angle(delta)} {cm(wire.width)}]"
        return f"ElementLine [{cm(wire.x1)} {cm(wire.y1)} {cm(wire.x2)} {cm(wire.y2)} {cm(wire.width)}]"

    def element_outline(self, rect: Rectangle) -> List[str]:
        thickness = cm(rect.width) if rect.has_width else DEFAULT_OUTLINE_THICKNESS
        corners = _rectangle_corners(rect)
        return [
            f"ElementLine [{x1} {y1} {x2} {y2} {thickness}]"
            for (x1, y1), (x2, y2) in zip(corners, corners[1:] + corners[:1])
        ]

    def element_arc(self, circle: Circle) -> str:
        r = cm(circle.radius)
        return f"ElementArc [{cm(circle.x)} {cm(circle.y)} {r} {r} 0 360 {cm(circle.width)}]"


def write_pcb(result: ParseResult, config: Optional[dict] = None) -> str:
    """Generate complete gEDA pcb file content for a parsed Eagle board.

    ``config`` supplies the board name and the size and copper settings;
    missing keys fall back to the writer defaults.
    """
    config = config or {}
    writer = PcbWriter(
        name=config.get("board_name", GENERATOR),
        margin_mm=config.get("board_margin_mm", 5.0),
        min_size_mm=config.get("min_board_size_mm", 25.4),
        clearance=config.get("clearance_centimils", DEFAULT_CLEARANCE),
        mask=config.get("mask_centimils", DEFAULT_MASK),
        via_annulus=config.get("via_annulus_centimils", DEFAULT_VIA_ANNULUS),
    )
    return writer.write(result)
