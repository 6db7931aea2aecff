"""Command line entry point.

Usage:
    cl-thumbnailer [-env PATH] [-w] [-a | -s -m -l -xl] [-v] <file>
"""

import argparse
import sys
from collections.abc import Sequence
from contextlib import suppress
from typing import TextIO

from loguru import logger

from . import __version__
from .config import DEFAULT_ENV, SizeSelection, load_config
from .errors import FatalError, UsageError
from .runner import run
from .utils.media_types import TypeDetector
from .utils.ownership import OwnershipChanger

LOG_FORMAT = "{time:YYYY/MM/DD HH:mm:ss} [{level}] {message}"

# Loguru's stock stderr handler
_DEFAULT_HANDLER_ID = 0


def configure_logging(verbose: bool = False, sink: TextIO | None = None) -> int:
    """Route loguru output to ``sink`` (stderr by default).

    Drops loguru's default handler if still present and returns the id of
    the new one; sinks added by the embedding application are left alone.
    """
    with suppress(ValueError):
        logger.remove(_DEFAULT_HANDLER_ID)

    return logger.add(
        sink or sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=LOG_FORMAT,
        colorize=False,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cl-thumbnailer",
        description="Resize an image into predefined size variants.",
    )
    parser.add_argument("-env", dest="env", default=DEFAULT_ENV, help="Path to the .env file")
    parser.add_argument("-w", dest="watermark", action="store_true", help="Add watermark")
    parser.add_argument("-a", dest="all_sizes", action="store_true", help="Process all sizes")
    parser.add_argument("-s", dest="small", action="store_true", help="Process small size")
    parser.add_argument("-m", dest="medium", action="store_true", help="Process medium size")
    parser.add_argument("-l", dest="large", action="store_true", help="Process large size")
    parser.add_argument("-xl", dest="xlarge", action="store_true", help="Process extra-large size")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    # Only the first positional is used; extra ones are ignored.
    parser.add_argument("files", nargs="*", metavar="file", help="Input image file")
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    detector: TypeDetector | None = None,
    ownership: OwnershipChanger | None = None,
) -> int:
    """Run the thumbnailer and return the process exit status.

    0 when the run reaches the end (even if some sizes failed), 1 on a fatal
    error, 2 on a usage error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    handler_id = configure_logging(args.verbose)
    try:
        return _run(parser, args, detector=detector, ownership=ownership)
    finally:
        logger.remove(handler_id)


def _run(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    *,
    detector: TypeDetector | None,
    ownership: OwnershipChanger | None,
) -> int:
    logger.info("########################################")
    logger.info("Starting image processing application...")

    try:
        if not args.files:
            raise UsageError(f"No input file provided. Usage: {parser.prog} [options] <file>")
        input_file = args.files[0]
        logger.info(f"Processing file: {input_file}")

        selection = SizeSelection.from_flags(
            all_sizes=args.all_sizes,
            s=args.small,
            m=args.medium,
            l=args.large,
            xl=args.xlarge,
        )

        config = load_config(args.env)

        report = run(
            config,
            selection,
            input_file,
            add_watermark=args.watermark,
            detector=detector,
            ownership=ownership,
        )
    except UsageError as exc:
        logger.error(str(exc))
        return 2
    except FatalError as exc:
        logger.error(str(exc))
        return 1

    logger.debug(
        f"Done: {len(report.processed)} processed, "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed"
    )
    return 0
