"""Human-readable angle and sky position strings for log output."""

from __future__ import annotations

import astropy.units as u
from astropy.coordinates import Angle, SkyCoord


def angle_to_nice_string(angle_rad: float) -> str:
    """Format an angle with the most readable unit (deg, arcmin or arcsec).

    Examples
    --------
    >>> angle_to_nice_string(0.0436332313)
    '2.50 deg'
    >>> angle_to_nice_string(0.000436332313)
    '1.50 amin'
    """
    angle = Angle(angle_rad, u.rad)
    magnitude = abs(angle.degree)
    if magnitude >= 1.0:
        return f"{angle.degree:.2f} deg"
    if magnitude >= 1.0 / 60.0:
        return f"{angle.arcminute:.2f} amin"
    return f"{angle.arcsecond:.2f} asec"


def radec_to_string(ra_rad: float, dec_rad: float) -> str:
    """Format a sky position as sexagesimal ``hh:mm:ss.s +dd.mm.ss.s``."""
    coord = SkyCoord(ra=ra_rad * u.rad, dec=dec_rad * u.rad, frame="icrs")
    ra_str = coord.ra.to_string(unit=u.hourangle, sep=":", precision=1, pad=True)
    dec_str = coord.dec.to_string(unit=u.deg, sep=".", precision=1, alwayssign=True, pad=True)
    return f"{ra_str} {dec_str}"
