"""Validated astrometric description of a FITS image.

All angles are in radians and frequencies in Hz. ``ImageGeometry`` is
immutable; build it with ``wsrt_beam.fits.loader.load_geometry``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

import numpy as np


class Projection(Enum):
    """Supported sky projections."""

    SIN = "SIN"
    NCP = "NCP"  # deprecated

    @property
    def deprecated(self) -> bool:
        return self is Projection.NCP


class Polarization(Enum):
    """Polarization products, valued by their FITS STOKES axis code."""

    STOKES_I = 1
    STOKES_Q = 2
    STOKES_U = 3
    STOKES_V = 4
    RR = -1
    LL = -2
    RL = -3
    LR = -4
    XX = -5
    YY = -6
    XY = -7
    YX = -8

    @property
    def fits_code(self) -> int:
        return self.value

    @classmethod
    def from_fits_code(cls, code: int) -> Polarization:
        """Map a STOKES axis value to a polarization; raises ValueError if unknown."""
        return cls(int(code))


@dataclass(frozen=True)
class BeamShape:
    """Elliptical restoring beam, axes and position angle in radians."""

    major: float
    minor: float
    position_angle: float


@dataclass(frozen=True)
class ImageGeometry:
    """Pixel grid dimensions plus the sky coordinates attached to it."""

    width: int
    height: int
    phase_centre_ra: float
    phase_centre_dec: float
    pixel_size_x: float
    pixel_size_y: float
    phase_centre_dl: float = 0.0
    phase_centre_dm: float = 0.0
    projection: Projection = Projection.SIN
    frequency: float = 0.0
    bandwidth: float = 0.0
    date_obs: float = 0.0
    beam: BeamShape | None = None
    polarization: Polarization = Polarization.STOKES_I

    # Axis lengths beyond RA/Dec
    n_polarizations: int = 1
    n_frequencies: int = 1
    n_antennas: int = 1
    n_timesteps: int = 1
    time_dimension_start: float = 0.0
    time_dimension_incr: float = 0.0

    # Descriptive keywords
    unit: str = ""
    telescope_name: str = ""
    observer: str = ""
    object_name: str = ""
    origin: str = ""
    origin_comment: str = ""
    history: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def has_beam(self) -> bool:
        return self.beam is not None

    @property
    def frequency_mhz(self) -> float:
        return self.frequency / 1e6

    @property
    def n_images(self) -> int:
        """Number of 2-D planes addressable by index."""
        return self.n_polarizations * self.n_frequencies * self.n_antennas * self.n_timesteps

    @property
    def phase_centre_ra_deg(self) -> float:
        return float(np.degrees(self.phase_centre_ra))

    @property
    def phase_centre_dec_deg(self) -> float:
        return float(np.degrees(self.phase_centre_dec))

    def with_history(self, *lines: str) -> ImageGeometry:
        """Return a copy with extra HISTORY lines appended."""
        return replace(self, history=self.history + tuple(lines))
