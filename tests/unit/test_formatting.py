"""
Unit tests for log formatting of angles and positions
"""

import math

from wsrt_beam.coordinates.formatting import angle_to_nice_string, radec_to_string


class TestFormatting:
    """Test cases for angle and position strings"""

    def test_degrees(self):
        assert angle_to_nice_string(math.radians(2.5)) == "2.50 deg"

    def test_arcminutes(self):
        assert angle_to_nice_string(math.radians(1.5 / 60.0)) == "1.50 amin"

    def test_arcseconds(self):
        assert angle_to_nice_string(math.radians(30.0 / 3600.0)) == "30.00 asec"

    def test_position(self):
        text = radec_to_string(math.pi, math.radians(52.0))
        ra, dec = text.split()
        assert ra.startswith("12:00:00")
        assert dec.startswith("+52")

    def test_southern_position(self):
        _, dec = radec_to_string(0.0, math.radians(-30.5)).split()
        assert dec.startswith("-30")
