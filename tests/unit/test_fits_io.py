"""
Unit tests for FITS reading and writing
"""

import math
from dataclasses import replace

import numpy as np
import pytest
from astropy.io import fits

from wsrt_beam.errors import DimensionMismatchError, InvalidHeaderError
from wsrt_beam.fits.geometry import BeamShape, Polarization, Projection
from wsrt_beam.fits.reader import FitsReader
from wsrt_beam.fits.writer import FitsWriter, build_header
from wsrt_beam.image import Image


class TestFitsReader:
    """Test cases for FitsReader"""

    def test_reads_geometry_and_pixels(self, make_fits):
        path = make_fits(sources=[{"x": 10, "y": 20, "flux_jy": 5.0}])
        reader = FitsReader(path)
        assert (reader.width, reader.height) == (64, 64)
        image = reader.read()
        assert image.shape == (64, 64)
        assert image[20, 10] == 5.0
        assert image.sum() == 5.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FitsReader(tmp_path / "absent.fits")

    def test_rejects_invalid_header(self, make_fits):
        path = make_fits(extra={"EQUINOX": 1950.0})
        with pytest.raises(InvalidHeaderError):
            FitsReader(path)

    def test_multiple_planes(self, make_fits):
        cube = np.arange(2 * 8 * 6, dtype=float).reshape(2, 1, 6, 8)
        path = make_fits(data=cube, width=8, height=6, n_stokes=2)
        with pytest.raises(InvalidHeaderError):
            FitsReader(path)

        reader = FitsReader(path, allow_multiple_images=True)
        np.testing.assert_array_equal(reader.read_array(1), cube[1, 0])
        np.testing.assert_array_equal(reader.read_index(0).data, cube[0, 0])
        with pytest.raises(IndexError):
            reader.read_array(2)

    def test_single_precision_read(self, make_fits):
        data = np.full((64, 64), 0.1)
        reader = FitsReader(make_fits(data=data))
        image = reader.read(dtype=np.float32)
        assert image.data.dtype == np.float64
        assert image[0, 0] == float(np.float32(0.1))


class TestFitsWriter:
    """Test cases for FitsWriter and header reconstruction"""

    def test_round_trip_geometry(self, make_fits, tmp_path):
        source = make_fits(
            crpix=(35.0, 30.0),
            stokes=-5,
            extra={
                "BMAJ": 0.01,
                "BMIN": 0.005,
                "BPA": 30.0,
                "OBSERVER": "nobody",
                "ORIGIN": ("WSClean", "Imager"),
                "HISTORY": ["step one", "step two"],
            },
        )
        geometry = FitsReader(source).geometry
        out = FitsWriter(geometry).write(tmp_path / "out.fits", Image(64, 64, 1.0))

        g = FitsReader(out).geometry
        assert (g.width, g.height) == (geometry.width, geometry.height)
        assert g.phase_centre_ra == pytest.approx(geometry.phase_centre_ra, abs=1e-12)
        assert g.phase_centre_dec == pytest.approx(geometry.phase_centre_dec, abs=1e-12)
        assert g.pixel_size_x == pytest.approx(geometry.pixel_size_x, rel=1e-12)
        assert g.pixel_size_y == pytest.approx(geometry.pixel_size_y, rel=1e-12)
        assert g.phase_centre_dl == pytest.approx(geometry.phase_centre_dl, abs=1e-12)
        assert g.phase_centre_dm == pytest.approx(geometry.phase_centre_dm, abs=1e-12)
        assert g.frequency == geometry.frequency
        assert g.bandwidth == geometry.bandwidth
        assert g.polarization is Polarization.XX
        assert g.projection is Projection.SIN
        assert g.date_obs == pytest.approx(geometry.date_obs, abs=1e-6)
        assert g.beam.major == pytest.approx(math.radians(0.01))
        assert g.observer == "nobody"
        assert (g.origin, g.origin_comment) == ("WSClean", "Imager")
        assert g.history == ("step one", "step two")
        assert g.telescope_name == "WSRT"

    def test_pixels_written(self, sin_geometry, tmp_path):
        data = np.random.default_rng(3).normal(size=(64, 64))
        path = FitsWriter(sin_geometry).write(tmp_path / "noise.fits", data)
        np.testing.assert_array_equal(FitsReader(path).read().data, data)
        assert fits.getheader(path)["BITPIX"] == -64

    def test_float32_output(self, sin_geometry, tmp_path):
        path = FitsWriter(sin_geometry).write(
            tmp_path / "single.fits", Image(64, 64, 0.1), dtype=np.float32
        )
        header = fits.getheader(path)
        assert header["BITPIX"] == -32
        assert header["NAXIS"] == 4

    def test_accepts_flat_buffer(self, sin_geometry, tmp_path):
        path = FitsWriter(sin_geometry).write(tmp_path / "flat.fits", np.arange(64 * 64.0))
        image = FitsReader(path).read()
        assert image[1, 0] == 64.0

    def test_size_mismatch(self, sin_geometry, tmp_path):
        with pytest.raises(DimensionMismatchError):
            FitsWriter(sin_geometry).write(tmp_path / "bad.fits", Image(10, 10))

    def test_overwrites(self, sin_geometry, tmp_path):
        path = tmp_path / "twice.fits"
        FitsWriter(sin_geometry).write(path, Image(64, 64, 1.0))
        FitsWriter(sin_geometry).write(path, Image(64, 64, 2.0))
        assert FitsReader(path).read()[0, 0] == 2.0

    def test_header_keywords(self, sin_geometry):
        header = build_header(sin_geometry.with_history("made beam"))
        assert header["CTYPE1"] == "RA---SIN"
        assert header["CTYPE2"] == "DEC--SIN"
        assert header["CRPIX1"] == 33.0
        assert header["CRPIX2"] == 33.0
        assert header["CDELT1"] < 0
        assert header["CRVAL3"] == 1.4e9
        assert header["EQUINOX"] == 2000.0
        assert "BMAJ" not in header
        assert "DATE-OBS" not in header
        assert list(header["HISTORY"]) == ["made beam"]

    def test_ncp_ctypes(self, ncp_geometry):
        header = build_header(ncp_geometry)
        assert header["CTYPE1"] == "RA---NCP"
        assert header["CTYPE2"] == "DEC--NCP"

    def test_restoring_beam_in_degrees(self, sin_geometry):
        beam = BeamShape(math.radians(0.02), math.radians(0.01), 0.0)
        geometry = replace(sin_geometry, beam=beam)
        header = build_header(geometry)
        assert header["BMAJ"] == pytest.approx(0.02)
        assert header["BMIN"] == pytest.approx(0.01)
        assert header["BPA"] == 0.0
