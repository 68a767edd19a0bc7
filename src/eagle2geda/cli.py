"""Command-line entry point: convert an Eagle .brd file to a gEDA pcb layout."""
import argparse
import logging
import sys
from typing import List, Optional

from lxml import etree

from .config import load_config, validate_config
from .converter import convert
from .errors import (
    EXIT_HELP,
    EXIT_MALFORMED,
    EXIT_OK,
    EXIT_RESOURCE,
    EXIT_UNKNOWN,
    EXIT_USAGE,
    ConfigError,
    MalformedInputError,
)
from .units import SUPPORTED_UNITS, UnitError

logger = logging.getLogger("eagle2geda")

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(level="WARNING") -> None:
    """Send the package's log records to stderr; stdout carries the pcb output.

    Calling it again replaces the handler installed by the previous call.
    """
    for handler in list(logger.handlers):
        if getattr(handler, "_eagle2geda", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._eagle2geda = True
    logger.addHandler(handler)
    logger.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eagle2geda",
        description="Convert an Eagle .brd XML board to a gEDA pcb layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        epilog="""
examples:
  %(prog)s -i board.brd -o board.pcb
  %(prog)s --unit mil < board.brd > board.pcb
  %(prog)s -i board.brd --name "Power Supply" -v
""")
    parser.add_argument("-i", "--input", help="Eagle .brd file to read (default: stdin)")
    parser.add_argument("-o", "--output", help="pcb file to write (default: stdout)")
    parser.add_argument("--name", help="Layout name written to the PCB[] record")
    parser.add_argument("--unit", choices=SUPPORTED_UNITS, help="Unit of the Eagle coordinates (default: mm)")
    parser.add_argument("--config", help="JSON settings file (default: $EAGLE2GEDA_CONFIG)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log element counts and progress")
    parser.add_argument("-h", "--help", action="store_true", help="Show this help and exit")
    return parser


def _read_input(path: Optional[str]) -> bytes:
    if path is None:
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def _write_output(path: Optional[str], content: str) -> None:
    if path is None:
        sys.stdout.write(content)
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        # argparse has already printed the usage error
        return EXIT_USAGE

    if args.help:
        parser.print_help(sys.stderr)
        return EXIT_HELP

    try:
        config = load_config(args.config)
        if args.unit:
            config["source_unit"] = args.unit
        if args.name is not None:
            config["board_name"] = args.name
        if args.verbose and logging.getLevelName(config["log_level"]) > logging.INFO:
            config["log_level"] = "INFO"
        validate_config(config)
    except (ConfigError, UnitError) as e:
        logger.error("%s", e)
        return EXIT_USAGE
    setup_logging(config["log_level"])

    try:
        content = convert(_read_input(args.input), config)
    except etree.XMLSyntaxError as e:
        logger.error("Malformed XML: %s", e)
        return EXIT_MALFORMED
    except MalformedInputError as e:
        logger.error("Malformed Eagle document: %s", e)
        return EXIT_MALFORMED
    except UnitError as e:
        logger.error("Bad quantity: %s", e)
        return EXIT_MALFORMED
    except (MemoryError, OSError) as e:
        logger.critical("Resource failure: %s", e)
        return EXIT_RESOURCE
    except Exception:
        logger.exception("Unexpected failure")
        return EXIT_UNKNOWN

    try:
        _write_output(args.output, content)
    except OSError as e:
        logger.critical("Cannot write output: %s", e)
        return EXIT_RESOURCE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
