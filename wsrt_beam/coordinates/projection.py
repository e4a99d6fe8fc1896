"""Pixel, direction-cosine and sky-coordinate transforms.

Two projections are supported:

- SIN: orthographic projection used by synthesis imaging.
- NCP: the deprecated "north celestial pole" projection of early east-west
  arrays, as defined in AIPS memo 27 (citing Brouw 1971)::

      l = cos(dec) sin(dra)
      m = (cos(dec0) - cos(dec) cos(dra)) / sin(dec0)

All functions accept scalars or numpy arrays and return the same kind.
Angles are in radians.
"""

from __future__ import annotations

import numpy as np

from wsrt_beam.errors import UnsupportedProjectionError
from wsrt_beam.fits.geometry import Projection


def xy_to_lm(x, y, pixel_size_x: float, pixel_size_y: float, width: int, height: int):
    """Pixel indices to direction cosines relative to the image centre.

    ``pixel_size_x`` is the stored (negated) X scale, so ``l`` grows towards
    lower pixel x.
    """
    mid_x = width / 2.0
    mid_y = height / 2.0
    l = (mid_x - np.asarray(x, dtype=np.float64)) * pixel_size_x
    m = (np.asarray(y, dtype=np.float64) - mid_y) * pixel_size_y
    return l, m


def lm_to_xy(l, m, pixel_size_x: float, pixel_size_y: float, width: int, height: int):
    """Inverse of ``xy_to_lm``; returns fractional pixel coordinates."""
    x = width / 2.0 - np.asarray(l, dtype=np.float64) / pixel_size_x
    y = np.asarray(m, dtype=np.float64) / pixel_size_y + height / 2.0
    return x, y


def angular_distance(ra1, dec1, ra2, dec2):
    """Great-circle separation between two directions, in [0, pi].

    Uses the haversine form, which stays accurate for small separations and
    is exactly zero for identical directions.
    """
    half_ddec = np.sin((np.asarray(dec1) - dec2) * 0.5)
    half_dra = np.sin((np.asarray(ra1) - ra2) * 0.5)
    hav = half_ddec * half_ddec + np.cos(dec1) * np.cos(dec2) * half_dra * half_dra
    return 2.0 * np.arcsin(np.sqrt(np.clip(hav, 0.0, 1.0)))


class SinProjection:
    """Orthographic (SIN) projection."""

    kind = Projection.SIN

    @staticmethod
    def forward(ra, dec, ra0: float, dec0: float):
        """Sky position to direction cosines ``(l, m)``."""
        dra = np.asarray(ra, dtype=np.float64) - ra0
        cos_dec = np.cos(dec)
        l = cos_dec * np.sin(dra)
        m = np.sin(dec) * np.cos(dec0) - cos_dec * np.sin(dec0) * np.cos(dra)
        return l, m

    @staticmethod
    def inverse(l, m, ra0: float, dec0: float):
        """Direction cosines to sky position ``(ra, dec)``."""
        l = np.asarray(l, dtype=np.float64)
        m = np.asarray(m, dtype=np.float64)
        r2 = l * l + m * m
        n = np.sqrt(np.where(r2 < 1.0, 1.0 - r2, 0.0))
        cos_dec0 = np.cos(dec0)
        sin_dec0 = np.sin(dec0)
        dra = np.arctan2(l, n * cos_dec0 - m * sin_dec0)
        dec = np.arcsin(np.clip(m * cos_dec0 + n * sin_dec0, -1.0, 1.0))
        return ra0 + dra, dec


class NcpProjection:
    """North celestial pole (NCP) projection. Deprecated, read-only support."""

    kind = Projection.NCP

    @staticmethod
    def _check_dec0(dec0: float) -> None:
        if np.sin(dec0) == 0.0:
            raise UnsupportedProjectionError(
                "NCP projection is undefined for a phase centre on the celestial equator"
            )

    @staticmethod
    def forward(ra, dec, ra0: float, dec0: float):
        NcpProjection._check_dec0(dec0)
        dra = np.asarray(ra, dtype=np.float64) - ra0
        cos_dec = np.cos(dec)
        l = cos_dec * np.sin(dra)
        m = (np.cos(dec0) - cos_dec * np.cos(dra)) / np.sin(dec0)
        return l, m

    @staticmethod
    def inverse(l, m, ra0: float, dec0: float):
        """Direction cosines to sky position.

        The arc-cosine gives |dec|; the result takes the hemisphere of the
        phase centre. Positions with no real solution come back as NaN.
        """
        NcpProjection._check_dec0(dec0)
        l = np.asarray(l, dtype=np.float64)
        m = np.asarray(m, dtype=np.float64)
        cos_dec0 = np.cos(dec0)
        sin_dec0 = np.sin(dec0)
        dra = np.arctan2(l, cos_dec0 - m * sin_dec0)
        with np.errstate(invalid="ignore"):
            dec = np.arccos((cos_dec0 - m * sin_dec0) / np.cos(dra))
        if dec0 < 0.0:
            dec = -dec
        return ra0 + dra, dec


_PROJECTIONS = {
    Projection.SIN: SinProjection,
    Projection.NCP: NcpProjection,
}


def get_projection(kind: Projection):
    """Return the transform class for a projection kind."""
    try:
        return _PROJECTIONS[kind]
    except KeyError:
        raise UnsupportedProjectionError(f"Unsupported projection: {kind}") from None


def lm_to_radec(l, m, ra0: float, dec0: float, projection: Projection = Projection.SIN):
    return get_projection(projection).inverse(l, m, ra0, dec0)


def radec_to_lm(ra, dec, ra0: float, dec0: float, projection: Projection = Projection.SIN):
    return get_projection(projection).forward(ra, dec, ra0, dec0)
