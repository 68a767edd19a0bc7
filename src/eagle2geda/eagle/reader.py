"""Feed an Eagle XML stream through lxml into a BoardHandler."""
import io
import logging
from typing import BinaryIO, Union

from lxml import etree

from ..errors import MalformedInputError
from ..units import validate_unit
from .handler import BoardHandler, ParseResult

logger = logging.getLogger(__name__)


def make_parser(handler: BoardHandler) -> etree.XMLParser:
    """Build an lxml parser that delivers events to ``handler``.

    External DTDs (``eagle.dtd``) are neither loaded nor validated against.
    """
    return etree.XMLParser(
        target=handler,
        load_dtd=False,
        no_network=True,
        resolve_entities=False,
        huge_tree=True,
    )


def read_board(source: Union[BinaryIO, bytes], unit: str = "mm") -> ParseResult:
    """Parse a complete Eagle document from a binary stream or bytes.

    The input is fed one line at a time so that the handler knows roughly
    where it is when it has to report a grammar error.

    Raises lxml.etree.XMLSyntaxError for documents that are not well-formed
    XML and MalformedInputError for documents that break the board grammar.
    """
    unit = validate_unit(unit)
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    handler = BoardHandler(unit=unit)
    parser = make_parser(handler)
    lineno = 0
    try:
        for lineno, line in enumerate(source, 1):
            handler.line = lineno
            parser.feed(line)
        result = parser.close()
        handler.finish()
    except MalformedInputError as e:
        if e.line is None:
            e.line = lineno or None
        raise

    logger.info("Parsing complete with %d errors", len(parser.error_log))
    return result
