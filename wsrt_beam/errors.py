"""Exception hierarchy for the beam tools.

Every fatal condition raised by the library derives from ``BeamToolError``
and carries an ``ErrorKind`` so callers can branch on the category without
matching exception classes.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Categories of fatal errors."""

    INVALID_HEADER = "invalid_header"
    DIMENSION_MISMATCH = "dimension_mismatch"
    UNSUPPORTED_PROJECTION = "unsupported_projection"
    PARSE_FAILURE = "parse_failure"


class BeamToolError(Exception):
    """Base exception for beam tool errors."""

    kind: ErrorKind = ErrorKind.INVALID_HEADER


class InvalidHeaderError(BeamToolError):
    """Header metadata violates a geometry invariant."""

    kind = ErrorKind.INVALID_HEADER


class UnsupportedProjectionError(InvalidHeaderError):
    """Coordinate type or projection parameters are not supported."""

    kind = ErrorKind.UNSUPPORTED_PROJECTION


class ParseFailureError(BeamToolError):
    """A header value (date, number) could not be parsed."""

    kind = ErrorKind.PARSE_FAILURE


class DimensionMismatchError(BeamToolError):
    """Two images that must share a grid have different sizes."""

    kind = ErrorKind.DIMENSION_MISMATCH
