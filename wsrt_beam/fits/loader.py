"""Build an ``ImageGeometry`` from FITS header keywords.

The loader validates everything up front: scaling keywords, coordinate
types, extra axes and date strings. Any violation raises before a geometry
object exists, so callers never see a partially-populated description.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from astropy.io import fits

from wsrt_beam.errors import InvalidHeaderError, UnsupportedProjectionError
from wsrt_beam.fits.geometry import BeamShape, ImageGeometry, Polarization, Projection
from wsrt_beam.fits.header import FitsHeader

logger = logging.getLogger(__name__)

DEG_TO_RAD = math.pi / 180.0

RA_CTYPES = {"RA---SIN": Projection.SIN, "RA---NCP": Projection.NCP}
DEC_CTYPES = {"DEC--SIN", "DEC--NCP"}

# Keywords that must carry exactly these values when present
FIXED_KEYWORDS = {"BSCALE": 1.0, "BZERO": 0.0, "EQUINOX": 2000.0}


class GeometryBuilder:
    """Accumulates validated geometry fields from a header.

    Each ``read_*`` step either records its fields or raises. ``build`` is
    the only way to obtain the resulting ``ImageGeometry``.
    """

    def __init__(
        self,
        header: FitsHeader,
        *,
        check_ctype: bool = True,
        allow_multiple_images: bool = False,
    ):
        self.header = header
        self.check_ctype = check_ctype
        self.allow_multiple_images = allow_multiple_images
        self._fields: dict[str, Any] = {}
        self._axis_sizes: list[int] = []

    def _fail(self, message: str) -> InvalidHeaderError:
        return InvalidHeaderError(f"{self.header.source}: {message}")

    def read_dimensions(self) -> GeometryBuilder:
        naxis = self.header.naxis()
        if naxis < 2:
            raise self._fail(f"NAXIS in image < 2 (got {naxis})")
        sizes = self.header.axis_sizes()
        if sizes[0] <= 0 or sizes[1] <= 0:
            raise self._fail(f"Image dimensions must be positive, got {sizes[0]}x{sizes[1]}")
        self._fields["width"] = sizes[0]
        self._fields["height"] = sizes[1]
        self._axis_sizes = sizes
        return self

    def read_extra_axes(self) -> GeometryBuilder:
        """Interpret axes 3..N (frequency, antenna, time, polarization)."""
        h = self.header
        counts = {"n_frequencies": 1, "n_antennas": 1, "n_timesteps": 1, "n_polarizations": 1}
        for i, size in enumerate(self._axis_sizes[2:], start=3):
            ctype = h.read_string_value_if_exists(f"CTYPE{i}")
            if ctype is None:
                continue
            if ctype.startswith("FREQ") or ctype.startswith("VRAD"):
                counts["n_frequencies"] = size
                self._fields["frequency"] = h.read_double_key(f"CRVAL{i}")
                self._fields["bandwidth"] = h.read_double_key(f"CDELT{i}")
            elif ctype == "ANTENNA":
                counts["n_antennas"] = size
            elif ctype == "TIME":
                counts["n_timesteps"] = size
                self._fields["time_dimension_start"] = h.read_double_key(f"CRVAL{i}")
                self._fields["time_dimension_incr"] = h.read_double_key(f"CDELT{i}")
            elif ctype == "STOKES":
                code = h.read_double_key(f"CRVAL{i}")
                try:
                    self._fields["polarization"] = Polarization.from_fits_code(int(code))
                except ValueError as e:
                    raise self._fail(f"Unknown polarization {code} specified in fits file") from e
                counts["n_polarizations"] = size
            elif size != 1:
                raise self._fail(f"Multiple images given in fits file (axis {i} is {ctype})")

        if not self.allow_multiple_images:
            labels = {
                "n_polarizations": "polarizations",
                "n_frequencies": "frequencies",
                "n_antennas": "antennas",
                "n_timesteps": "timesteps",
            }
            for key, label in labels.items():
                if counts[key] != 1:
                    raise self._fail(f"Multiple {label} given in fits file ({counts[key]})")
        self._fields.update(counts)
        return self

    def read_scaling(self) -> GeometryBuilder:
        for key, expected in FIXED_KEYWORDS.items():
            value = self.header.read_double_key_if_exists(key)
            if value is not None and value != expected:
                raise self._fail(f"Invalid value for {key}: {value} (expected {expected})")
        return self

    def read_projection(self) -> GeometryBuilder:
        h = self.header
        projection = Projection.SIN
        ctype1 = h.read_string_value_if_exists("CTYPE1")
        if ctype1 is not None:
            if ctype1 in RA_CTYPES:
                projection = RA_CTYPES[ctype1]
            elif self.check_ctype:
                raise UnsupportedProjectionError(
                    f"{h.source}: Invalid value for CTYPE1: {ctype1}"
                )
            else:
                logger.debug("Unrecognised CTYPE1 %s, assuming SIN projection", ctype1)
        ctype2 = h.read_string_value_if_exists("CTYPE2")
        if ctype2 is not None and ctype2 not in DEC_CTYPES and self.check_ctype:
            raise UnsupportedProjectionError(f"{h.source}: Invalid value for CTYPE2: {ctype2}")
        for key in ("CUNIT1", "CUNIT2"):
            unit = h.read_string_value_if_exists(key)
            if unit is not None and unit != "deg" and self.check_ctype:
                raise self._fail(f"Invalid value for {key}: {unit}")
        self._fields["projection"] = projection
        return self

    def read_direction(self) -> GeometryBuilder:
        """Phase centre, pixel scale and reference pixel offsets, in radians."""
        h = self.header
        width = self._fields["width"]
        height = self._fields["height"]

        ra = (h.read_double_key_if_exists("CRVAL1") or 0.0) * DEG_TO_RAD
        pixel_size_x = (h.read_double_key_if_exists("CDELT1") or 0.0) * -DEG_TO_RAD
        crpix1 = h.read_double_key_if_exists("CRPIX1")
        dl = 0.0 if crpix1 is None else (crpix1 - (width / 2.0 + 1.0)) * pixel_size_x

        dec = (h.read_double_key_if_exists("CRVAL2") or 0.0) * DEG_TO_RAD
        pixel_size_y = (h.read_double_key_if_exists("CDELT2") or 0.0) * DEG_TO_RAD
        crpix2 = h.read_double_key_if_exists("CRPIX2")
        dm = 0.0 if crpix2 is None else (height / 2.0 + 1.0 - crpix2) * pixel_size_y

        self._fields.update(
            phase_centre_ra=ra,
            phase_centre_dec=dec,
            pixel_size_x=pixel_size_x,
            pixel_size_y=pixel_size_y,
            phase_centre_dl=dl,
            phase_centre_dm=dm,
        )
        return self

    def read_date(self) -> GeometryBuilder:
        mjd = self.header.read_date_key_if_exists("DATE-OBS")
        self._fields["date_obs"] = 0.0 if mjd is None else mjd
        return self

    def read_beam(self) -> GeometryBuilder:
        """Restoring beam, only when BMAJ, BMIN and BPA are all present."""
        h = self.header
        values = [h.read_double_key_if_exists(k) for k in ("BMAJ", "BMIN", "BPA")]
        if all(v is not None for v in values):
            bmaj, bmin, bpa = values
            self._fields["beam"] = BeamShape(
                major=bmaj * DEG_TO_RAD,
                minor=bmin * DEG_TO_RAD,
                position_angle=bpa * DEG_TO_RAD,
            )
        else:
            self._fields["beam"] = None
        return self

    def read_descriptive(self) -> GeometryBuilder:
        h = self.header
        for key, name in (
            ("TELESCOP", "telescope_name"),
            ("OBSERVER", "observer"),
            ("OBJECT", "object_name"),
            ("BUNIT", "unit"),
        ):
            self._fields[name] = h.read_string_value_if_exists(key) or ""
        origin = h.read_string_key_if_exists("ORIGIN")
        self._fields["origin"], self._fields["origin_comment"] = origin or ("", "")
        self._fields["history"] = tuple(h.history())
        return self

    def build(self) -> ImageGeometry:
        return ImageGeometry(**self._fields)


def _as_fits_header(header) -> FitsHeader:
    if isinstance(header, FitsHeader):
        return header
    if isinstance(header, fits.Header):
        return FitsHeader(header)
    if isinstance(header, dict):
        return FitsHeader.from_mapping(header)
    raise TypeError(f"Unsupported header type: {type(header).__name__}")


def load_geometry(
    header: FitsHeader | fits.Header | dict,
    *,
    check_ctype: bool = True,
    allow_multiple_images: bool = False,
) -> ImageGeometry:
    """Parse and validate header keywords into an ``ImageGeometry``.

    Parameters
    ----------
    header : FitsHeader, astropy Header or dict
        Source keywords.
    check_ctype : bool
        Reject coordinate types and units other than SIN/NCP in degrees. When
        False, unrecognised types fall back to the SIN projection.
    allow_multiple_images : bool
        Accept non-unit frequency, antenna, time and polarization axes.

    Returns
    -------
        ImageGeometry

    Raises
    ------
    InvalidHeaderError
        On any invariant violation (including ``UnsupportedProjectionError``).
    ParseFailureError
        If DATE-OBS or a numeric keyword cannot be parsed.
    """
    builder = GeometryBuilder(
        _as_fits_header(header),
        check_ctype=check_ctype,
        allow_multiple_images=allow_multiple_images,
    )
    geometry = (
        builder.read_dimensions()
        .read_extra_axes()
        .read_scaling()
        .read_projection()
        .read_direction()
        .read_date()
        .read_beam()
        .read_descriptive()
        .build()
    )
    logger.debug(
        "Loaded geometry from %s: %dx%d, %s projection",
        builder.header.source,
        geometry.width,
        geometry.height,
        geometry.projection.value,
    )
    return geometry
