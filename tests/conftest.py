"""
Shared fixtures for the beam tool tests
"""

import math

import pytest

from wsrt_beam.fits.geometry import ImageGeometry, Projection
from wsrt_beam.simulation.synthetic_fits import create_synthetic_fits, synthetic_header

PIXEL_SCALE = math.radians(30.0 / 3600.0)


@pytest.fixture
def sin_geometry():
    """64x64 SIN grid at 1.4 GHz, 30 arcsec pixels"""
    return ImageGeometry(
        width=64,
        height=64,
        phase_centre_ra=math.radians(180.0),
        phase_centre_dec=math.radians(52.0),
        pixel_size_x=PIXEL_SCALE,
        pixel_size_y=PIXEL_SCALE,
        frequency=1.4e9,
        bandwidth=10e6,
    )


@pytest.fixture
def ncp_geometry(sin_geometry):
    """Same grid in the deprecated NCP projection"""
    return ImageGeometry(
        width=sin_geometry.width,
        height=sin_geometry.height,
        phase_centre_ra=sin_geometry.phase_centre_ra,
        phase_centre_dec=sin_geometry.phase_centre_dec,
        pixel_size_x=sin_geometry.pixel_size_x,
        pixel_size_y=sin_geometry.pixel_size_y,
        projection=Projection.NCP,
        frequency=sin_geometry.frequency,
    )


@pytest.fixture
def header():
    """Default synthetic 4-axis header"""
    return synthetic_header()


@pytest.fixture
def make_fits(tmp_path):
    """Factory writing synthetic FITS files into a temporary directory"""

    def _make(name="image.fits", **kwargs):
        return create_synthetic_fits(tmp_path / name, **kwargs)

    return _make
