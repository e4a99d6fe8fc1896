"""Shared argument handling for the command line tools."""

from __future__ import annotations

import argparse
import logging

from wsrt_beam.config import BeamToolSettings, load_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="YAML settings file (default: environment/defaults)",
    )
    parser.add_argument(
        "--lenient-ctype",
        action="store_true",
        help="Accept unknown coordinate types, assuming SIN projection",
    )
    parser.add_argument(
        "--float32",
        action="store_true",
        help="Write single-precision output",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Suppress info messages")
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Enable debug messages")


def configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.quiet:
        level = logging.WARNING
    elif args.verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def settings_from_args(args: argparse.Namespace) -> BeamToolSettings:
    settings = load_settings(args.config)
    overrides = settings.to_dict()
    if args.lenient_ctype:
        overrides["check_ctype"] = False
    if args.float32:
        overrides["output_dtype"] = "float32"
    return BeamToolSettings(**overrides)
