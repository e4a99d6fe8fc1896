#!/usr/bin/env python
"""
Create a simple Westerbork primary beam for the grid of an input image.

Examples
--------
Beam and weight at the image's own frequency::

    apbeam image.fits beam.fits weight.fits

Override the observing frequency (MHz)::

    apbeam -frequency 350 image.fits beam.fits
"""

from __future__ import annotations

import argparse
import logging
import sys

from wsrt_beam.beam.synthesis import synthesize_beam_files
from wsrt_beam.cli.common import add_common_arguments, configure_logging, settings_from_args
from wsrt_beam.errors import BeamToolError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apbeam",
        description=(
            "Create an output file with a simple Westerbork beam for the given input image"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-frequency",
        "--frequency",
        dest="frequency_mhz",
        type=float,
        default=None,
        help="Observing frequency in MHz (default: from the input header)",
    )
    parser.add_argument("input", help="Input FITS image defining the grid")
    parser.add_argument("outbeam", help="Output beam FITS file")
    parser.add_argument("outweight", nargs="?", default=None, help="Output weight FITS file")
    add_common_arguments(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args)

    try:
        settings = settings_from_args(args)
        frequency = None if args.frequency_mhz is None else args.frequency_mhz * 1e6
        synthesize_beam_files(
            args.input,
            args.outbeam,
            args.outweight,
            frequency=frequency,
            settings=settings,
        )
    except (BeamToolError, OSError, ValueError) as e:
        logger.error("apbeam failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
