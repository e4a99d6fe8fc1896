"""FITS header parsing, image geometry and pixel I/O."""

from wsrt_beam.fits.geometry import BeamShape, ImageGeometry, Polarization, Projection
from wsrt_beam.fits.header import FitsHeader
from wsrt_beam.fits.loader import GeometryBuilder, load_geometry
from wsrt_beam.fits.reader import FitsReader
from wsrt_beam.fits.writer import FitsWriter, build_header

__all__ = [
    # Geometry
    "BeamShape",
    "ImageGeometry",
    "Polarization",
    "Projection",
    # Header parsing
    "FitsHeader",
    "GeometryBuilder",
    "load_geometry",
    # I/O
    "FitsReader",
    "FitsWriter",
    "build_header",
]
