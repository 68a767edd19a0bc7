"""Fixed gEDA pcb file constants.

Comments are taken from the pcb file format manual.
"""

# File format version.  This number is the date when the pcb file format was
# last changed; any pcb built from sources equal to or newer than it can read
# the file.
FILE_VERSION = 20070407

GENERATOR = "eagle2geda"

# Relative size of thermal fingers.  0.5 gives a finger width equal to the
# clearance gap width.
THERMAL_SCALE = 0.5

# Symbolic layout flags:
#   nameonpcb  - display names of elements instead of refdes
#   uniquename - force unique names on board
#   clearnew   - new lines/arcs clear polygons
#   snappin    - crosshair snaps to pins and pads
LAYOUT_FLAGS = ("nameonpcb", "uniquename", "clearnew", "snappin")

# Layer grouping.  Groups are separated by colons and members by commas;
# "c" and "s" mark the component and solder side groups.
LAYOUT_GROUPS = "1,c:2:3:4:5:6,s:7:8"

# Object flags
LINE_FLAGS = "clearline"
ARC_FLAGS = "clearline"
POLYGON_FLAGS = "clearpoly"
HOLE_FLAGS = "hole"
SQUARE_FLAGS = "square"
OCTAGON_FLAGS = "octagon"

# Glyph height, in centimils, of the default font at Scale 100
DEFAULT_FONT_HEIGHT = 6000
DEFAULT_TEXT_SCALE = 100

# Thickness used for package outlines that carry no width (Eagle rectangles)
DEFAULT_OUTLINE_THICKNESS = 1000


def file_version_line() -> str:
    return f"FileVersion[{FILE_VERSION}]"


def thermal_line() -> str:
    return f"Thermal[{THERMAL_SCALE:.6f}]"


def flags_line() -> str:
    return f'Flags("{",".join(LAYOUT_FLAGS)}")'


def groups_line() -> str:
    return f'Groups("{LAYOUT_GROUPS}")'
