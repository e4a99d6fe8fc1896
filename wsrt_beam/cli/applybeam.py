#!/usr/bin/env python
"""
Correct an image for the primary beam.

Examples
--------
Intensity image, beam squared (default)::

    applybeam image.fits beam.fits image-pbcor.fits

Divide by the beam itself::

    applybeam -not-squared image.fits beam.fits image-pbcor.fits

The second file is a weight map (beam squared)::

    applybeam -is-weight image.fits weight.fits image-pbcor.fits
"""

from __future__ import annotations

import argparse
import logging
import sys

from wsrt_beam.beam.correction import CorrectionMode, apply_beam_files
from wsrt_beam.cli.common import add_common_arguments, configure_logging, settings_from_args
from wsrt_beam.errors import BeamToolError
from wsrt_beam.qa.image_metrics import compute_image_metrics

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="applybeam",
        description="Divide an image by a primary beam or weight image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-not-squared",
        "--not-squared",
        dest="mode",
        action="store_const",
        const=CorrectionMode.NOT_SQUARED,
        help="Divide by the beam instead of the beam squared",
    )
    mode.add_argument(
        "-is-weight",
        "--is-weight",
        dest="mode",
        action="store_const",
        const=CorrectionMode.IS_WEIGHT,
        help="The beam file is a weight image; divide by its square root",
    )
    parser.set_defaults(mode=CorrectionMode.SQUARED)
    parser.add_argument("input", help="Input FITS image")
    parser.add_argument("beam", help="Beam (or weight) FITS image on the same grid")
    parser.add_argument("output", help="Output corrected FITS image")
    add_common_arguments(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args)

    try:
        settings = settings_from_args(args)
        corrected = apply_beam_files(
            args.input,
            args.beam,
            args.output,
            args.mode,
            settings=settings,
        )
    except (BeamToolError, OSError, ValueError) as e:
        logger.error("applybeam failed: %s", e)
        return 1

    metrics = compute_image_metrics(corrected)
    logger.info(
        "Corrected image: median=%.4g, robust std=%.4g, blanked=%.1f%%",
        metrics["median"],
        metrics["robust_std"],
        100.0 * metrics["nan_fraction"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
