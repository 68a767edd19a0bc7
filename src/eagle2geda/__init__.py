"""eagle2geda - convert Eagle .brd board files to gEDA pcb layouts."""

__version__ = "0.1.0"
