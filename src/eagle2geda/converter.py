"""Shared conversion logic: Eagle document in, gEDA pcb text out."""
import logging
from typing import BinaryIO, Callable, Optional, Union

from .config import _DEFAULT_CONFIG
from .eagle.reader import read_board
from .geda.pcb_writer import write_pcb

logger = logging.getLogger(__name__)


def convert(
    source: Union[BinaryIO, bytes],
    config: Optional[dict] = None,
    log: Callable[[str], None] = logger.info,
) -> str:
    """Convert an Eagle board document to gEDA pcb file content.

    Args:
        source: Binary stream or bytes holding the Eagle XML.
        config: Settings as returned by ``load_config``; defaults when omitted.
        log: Callback for status messages.

    Returns:
        The complete pcb file as a string.
    """
    config = config or dict(_DEFAULT_CONFIG)
    unit = config.get("source_unit", "mm")

    log(f"Reading Eagle document (units: {unit})...")
    result = read_board(source, unit=unit)
    board = result.board
    log(
        f"  {len(board.wires)} wires, {len(board.holes)} holes/vias, "
        f"{len(board.texts)} texts, {len(result.packages)} packages, {len(result.layers)} layers"
    )

    log("Writing pcb layout...")
    return write_pcb(result, config)
