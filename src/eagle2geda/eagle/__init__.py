"""Eagle XML board reading: attributes, element model and grammar handler."""

from .ee_types import Board, Package
from .handler import BoardHandler, ParseResult
from .reader import read_board

__all__ = ["Board", "BoardHandler", "Package", "ParseResult", "read_board"]
