"""
Unit tests for the beam model, beam synthesis and beam correction
"""

import logging
import math

import numpy as np
import pytest

from wsrt_beam.beam.correction import CorrectionMode, apply_beam, correction_divisor
from wsrt_beam.beam.model import BeamModel, beam_coefficient
from wsrt_beam.beam.synthesis import make_beam, offset_angles
from wsrt_beam.config import BeamToolSettings
from wsrt_beam.errors import DimensionMismatchError, InvalidHeaderError
from wsrt_beam.fits.loader import load_geometry
from wsrt_beam.image import Image


class TestBeamModel:
    """Test cases for the cos^6 beam law"""

    def test_coefficient_band_split(self):
        assert beam_coefficient(499.999) == 0.0629
        assert beam_coefficient(500.0) == 0.065
        assert beam_coefficient(1400.0) == 0.065
        assert beam_coefficient(350.0) == 0.0629

    def test_on_axis_response_is_unity(self):
        assert BeamModel(frequency_mhz=1400.0).response(0.0) == 1.0

    def test_known_value(self):
        """Argument pi/3 gives cos = 1/2, so the response is 1/64"""
        model = BeamModel(frequency_mhz=1400.0)
        angle = (math.pi / 3.0) / (0.065 * 1400.0)
        assert model.response(angle) == pytest.approx(1.0 / 64.0, rel=1e-12)

    def test_weight_is_squared_response(self):
        model = BeamModel(frequency_mhz=350.0)
        angles = np.linspace(0.0, 0.02, 11)
        np.testing.assert_allclose(model.weight(angles), model.response(angles) ** 2)

    def test_custom_coefficients(self):
        model = BeamModel(
            frequency_mhz=800.0, low_band_beta=0.05, high_band_beta=0.07, band_split_mhz=1000.0
        )
        assert model.beta == 0.05

    @pytest.mark.parametrize("frequency", [-1.0, float("nan"), float("inf")])
    def test_invalid_frequency(self, frequency):
        with pytest.raises(InvalidHeaderError):
            BeamModel(frequency_mhz=frequency)

    def test_zero_frequency_is_flat(self):
        """Without a frequency the beam has unit response everywhere"""
        model = BeamModel(frequency_mhz=0.0)
        assert model.beta == 0.0629
        np.testing.assert_array_equal(model.response(np.linspace(0.0, 0.5, 6)), 1.0)


class TestMakeBeam:
    """Test cases for beam synthesis over an image grid"""

    def test_centre_pixel_is_unity(self, sin_geometry):
        images = make_beam(sin_geometry)
        assert images.beam[32, 32] == pytest.approx(1.0, abs=1e-12)
        assert images.weight[32, 32] == pytest.approx(1.0, abs=1e-12)

    def test_shape_and_range(self, sin_geometry):
        images = make_beam(sin_geometry)
        assert images.beam.shape == (64, 64)
        assert np.all(images.beam.data <= 1.0)
        assert np.all(images.beam.data > 0.0)

    def test_weight_is_beam_squared(self, sin_geometry):
        images = make_beam(sin_geometry)
        np.testing.assert_allclose(images.weight.data, images.beam.data**2, rtol=1e-15)

    def test_decreases_with_distance(self, sin_geometry):
        beam = make_beam(sin_geometry).beam
        assert beam[32, 0] < beam[32, 16] < beam[32, 32]

    def test_matches_model_along_meridian(self, sin_geometry):
        """On the central column, the offset is asin(m) in SIN"""
        images = make_beam(sin_geometry)
        for k in (5, 20, 31):
            m = k * sin_geometry.pixel_size_y
            expected = images.model.response(math.asin(m))
            assert images.beam[32 + k, 32] == pytest.approx(expected, rel=1e-9)

    def test_symmetric_about_centre(self, sin_geometry):
        beam = make_beam(sin_geometry).beam
        for k in (1, 10, 30):
            assert beam[32, 32 + k] == pytest.approx(beam[32, 32 - k], rel=1e-9)

    def test_frequency_override_in_hz(self, sin_geometry):
        images = make_beam(sin_geometry, frequency=350e6)
        assert images.model.frequency_mhz == 350.0
        assert images.model.beta == 0.0629

    @pytest.mark.parametrize(
        "frequency, beta", [(499.999e6, 0.0629), (500e6, 0.065), (1.4e9, 0.065)]
    )
    def test_coefficient_threshold(self, sin_geometry, frequency, beta):
        assert make_beam(sin_geometry, frequency).model.beta == beta

    def test_settings_override_coefficients(self, sin_geometry):
        settings = BeamToolSettings(high_band_beta=0.1)
        images = make_beam(sin_geometry, settings=settings)
        assert images.model.beta == 0.1

    def test_offset_angles_zero_at_centre(self, sin_geometry):
        angles = offset_angles(sin_geometry)
        assert angles.shape == (64, 64)
        assert angles[32, 32] == pytest.approx(0.0, abs=1e-15)
        assert angles.max() == angles[0, 0]

    def test_header_without_frequency_axis(self):
        geometry = load_geometry(
            {"NAXIS": 2, "NAXIS1": 8, "NAXIS2": 8, "CRVAL2": 52.0, "CDELT1": -0.01, "CDELT2": 0.01}
        )
        assert geometry.frequency == 0.0
        images = make_beam(geometry)
        assert images.beam.shape == (8, 8)
        np.testing.assert_array_equal(images.beam.data, 1.0)
        np.testing.assert_array_equal(images.weight.data, 1.0)

    def test_ncp_logs_deprecation_warning(self, ncp_geometry, caplog):
        with caplog.at_level(logging.WARNING):
            images = make_beam(ncp_geometry)
        assert "deprecated NCP projection" in caplog.text
        assert images.beam[32, 32] == pytest.approx(1.0, abs=1e-12)

    def test_sin_does_not_warn(self, sin_geometry, caplog):
        with caplog.at_level(logging.WARNING):
            make_beam(sin_geometry)
        assert "deprecated" not in caplog.text


class TestApplyBeam:
    """Test cases for beam correction"""

    def _images(self, beam_value, image_value=1.0, size=4):
        image = Image(size, size, image_value)
        beam = Image(size, size, beam_value)
        return image, beam

    @pytest.mark.parametrize(
        "mode, expected",
        [
            (CorrectionMode.SQUARED, 4.0),
            (CorrectionMode.NOT_SQUARED, 2.0),
            (CorrectionMode.IS_WEIGHT, math.sqrt(2.0)),
        ],
    )
    def test_modes(self, mode, expected):
        image, beam = self._images(0.5)
        corrected = apply_beam(image, beam, mode)
        np.testing.assert_allclose(corrected.data, expected)

    def test_default_mode_is_squared(self):
        image, beam = self._images(0.5, image_value=2.0)
        np.testing.assert_allclose(apply_beam(image, beam).data, 8.0)

    @pytest.mark.parametrize("mode", list(CorrectionMode))
    def test_below_floor_is_nan(self, mode):
        image, beam = self._images(0.005)
        corrected = apply_beam(image, beam, mode)
        assert np.all(np.isnan(corrected.data))

    def test_floor_uses_absolute_value(self):
        image, beam = self._images(-0.5)
        beam[0, 0] = -0.001
        corrected = apply_beam(image, beam, CorrectionMode.NOT_SQUARED)
        assert np.isnan(corrected[0, 0])
        assert corrected[1, 1] == -2.0

    def test_value_at_floor_is_kept(self):
        image, beam = self._images(0.01)
        corrected = apply_beam(image, beam, CorrectionMode.NOT_SQUARED)
        np.testing.assert_allclose(corrected.data, 100.0)

    def test_custom_floor(self):
        image, beam = self._images(0.2)
        corrected = apply_beam(image, beam, floor=0.3)
        assert np.all(np.isnan(corrected.data))

    def test_inputs_unchanged(self):
        image, beam = self._images(0.5, image_value=3.0)
        apply_beam(image, beam)
        assert np.all(image.data == 3.0)
        assert np.all(beam.data == 0.5)

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            apply_beam(Image(4, 4, 1.0), Image(4, 5, 1.0))

    def test_nan_input_stays_nan(self):
        image, beam = self._images(0.5)
        image[2, 3] = np.nan
        corrected = apply_beam(image, beam)
        assert np.isnan(corrected[2, 3])
        assert np.count_nonzero(np.isnan(corrected.data)) == 1

    def test_correction_divisor(self):
        beam = np.array([0.25, 1.0])
        np.testing.assert_allclose(correction_divisor(beam, CorrectionMode.IS_WEIGHT), [0.5, 1.0])
        np.testing.assert_allclose(correction_divisor(beam, CorrectionMode.SQUARED), [0.0625, 1.0])
