"""Empirical Westerbork primary beam model.

The WSRT dish response is well described by::

    PB(r) = cos^6(beta * nu * r)

with ``nu`` in MHz and ``beta = 0.0629`` below 500 MHz, ``0.065`` above.
The published law expresses both ``r`` and the cosine argument in degrees.
Writing ``r`` in radians and evaluating the cosine in radians scales the
argument by ``pi/180`` twice over, which cancels, so ``beta`` is used
unscaled with offsets in radians.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from wsrt_beam.config import (
    DEFAULT_BAND_SPLIT_MHZ,
    DEFAULT_HIGH_BAND_BETA,
    DEFAULT_LOW_BAND_BETA,
    BeamToolSettings,
)
from wsrt_beam.errors import InvalidHeaderError

logger = logging.getLogger(__name__)


def beam_coefficient(
    frequency_mhz: float,
    *,
    low_band_beta: float = DEFAULT_LOW_BAND_BETA,
    high_band_beta: float = DEFAULT_HIGH_BAND_BETA,
    band_split_mhz: float = DEFAULT_BAND_SPLIT_MHZ,
) -> float:
    """Return the cos^6 law coefficient for a frequency in MHz."""
    return low_band_beta if frequency_mhz < band_split_mhz else high_band_beta


@dataclass
class BeamModel:
    """Parameters of the cos^6 beam law for one observing frequency.

    Examples
    --------
    >>> model = BeamModel(frequency_mhz=1400.0)
    >>> model.beta
    0.065
    >>> float(model.response(0.0))
    1.0
    """

    frequency_mhz: float
    low_band_beta: float = DEFAULT_LOW_BAND_BETA
    high_band_beta: float = DEFAULT_HIGH_BAND_BETA
    band_split_mhz: float = DEFAULT_BAND_SPLIT_MHZ

    def __post_init__(self):
        """Validate beam model parameters."""
        if not np.isfinite(self.frequency_mhz) or self.frequency_mhz < 0:
            raise InvalidHeaderError(
                f"Invalid observing frequency: {self.frequency_mhz} MHz"
            )

    @classmethod
    def from_settings(cls, frequency_mhz: float, settings: BeamToolSettings) -> BeamModel:
        return cls(
            frequency_mhz=frequency_mhz,
            low_band_beta=settings.low_band_beta,
            high_band_beta=settings.high_band_beta,
            band_split_mhz=settings.band_split_mhz,
        )

    @property
    def beta(self) -> float:
        return beam_coefficient(
            self.frequency_mhz,
            low_band_beta=self.low_band_beta,
            high_band_beta=self.high_band_beta,
            band_split_mhz=self.band_split_mhz,
        )

    def response(self, angle):
        """Beam response for an angular offset (radians) from the pointing centre.

        Parameters
        ----------
        angle : float or array
            Offset in radians.

        Returns
        -------
            Response in [0, 1], same shape as ``angle``.
        """
        cos_term = np.cos(self.beta * self.frequency_mhz * np.asarray(angle, dtype=np.float64))
        cos2 = cos_term * cos_term
        return cos2 * cos2 * cos2

    def weight(self, angle):
        """Inverse-variance weight, the squared beam response."""
        pb = self.response(angle)
        return pb * pb
