"""Write pixel buffers to FITS with a header rebuilt from an ``ImageGeometry``."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np
from astropy.io import fits
from astropy.time import Time

from wsrt_beam.errors import DimensionMismatchError
from wsrt_beam.fits.geometry import ImageGeometry, Projection
from wsrt_beam.image import Image

logger = logging.getLogger(__name__)

RAD_TO_DEG = 180.0 / math.pi

_CTYPES = {
    Projection.SIN: ("RA---SIN", "DEC--SIN"),
    Projection.NCP: ("RA---NCP", "DEC--NCP"),
}


def _reference_pixels(geometry: ImageGeometry) -> tuple[float, float]:
    """CRPIX1/CRPIX2 that reproduce the geometry's phase centre offsets."""
    crpix1 = geometry.width / 2.0 + 1.0
    crpix2 = geometry.height / 2.0 + 1.0
    if geometry.pixel_size_x != 0.0:
        crpix1 += geometry.phase_centre_dl / geometry.pixel_size_x
    if geometry.pixel_size_y != 0.0:
        crpix2 -= geometry.phase_centre_dm / geometry.pixel_size_y
    return crpix1, crpix2


def build_header(geometry: ImageGeometry) -> fits.Header:
    """Create a 4-axis (RA, DEC, FREQ, STOKES) header for ``geometry``."""
    header = fits.Header()
    header["BSCALE"] = 1.0
    header["BZERO"] = 0.0
    if geometry.unit:
        header["BUNIT"] = geometry.unit
    if geometry.beam is not None:
        header["BMAJ"] = geometry.beam.major * RAD_TO_DEG
        header["BMIN"] = geometry.beam.minor * RAD_TO_DEG
        header["BPA"] = geometry.beam.position_angle * RAD_TO_DEG
    header["EQUINOX"] = 2000.0
    header["LONPOLE"] = 180.0
    header["BTYPE"] = "Intensity"
    if geometry.object_name:
        header["OBJECT"] = geometry.object_name
    if geometry.origin:
        header["ORIGIN"] = (geometry.origin, geometry.origin_comment)

    ctype1, ctype2 = _CTYPES[geometry.projection]
    crpix1, crpix2 = _reference_pixels(geometry)
    header["CTYPE1"] = ctype1
    header["CRPIX1"] = crpix1
    header["CRVAL1"] = geometry.phase_centre_ra * RAD_TO_DEG
    header["CDELT1"] = -geometry.pixel_size_x * RAD_TO_DEG
    header["CUNIT1"] = "deg"
    header["CTYPE2"] = ctype2
    header["CRPIX2"] = crpix2
    header["CRVAL2"] = geometry.phase_centre_dec * RAD_TO_DEG
    header["CDELT2"] = geometry.pixel_size_y * RAD_TO_DEG
    header["CUNIT2"] = "deg"
    header["CTYPE3"] = "FREQ"
    header["CRPIX3"] = 1.0
    header["CRVAL3"] = geometry.frequency
    header["CDELT3"] = geometry.bandwidth
    header["CUNIT3"] = "Hz"
    header["CTYPE4"] = "STOKES"
    header["CRPIX4"] = 1.0
    header["CRVAL4"] = float(geometry.polarization.fits_code)
    header["CDELT4"] = 1.0
    header["CUNIT4"] = ""
    header["SPECSYS"] = "TOPOCENT"
    if geometry.date_obs != 0.0:
        header["DATE-OBS"] = Time(geometry.date_obs, format="mjd", scale="utc").fits
    if geometry.telescope_name:
        header["TELESCOP"] = geometry.telescope_name
    if geometry.observer:
        header["OBSERVER"] = geometry.observer
    for line in geometry.history:
        header.add_history(line)
    return header


class FitsWriter:
    """Persist images on the grid of a source geometry.

    Examples
    --------
    >>> writer = FitsWriter(reader.geometry)
    >>> writer.write("beam.fits", beam_image)
    """

    def __init__(self, geometry: ImageGeometry):
        self.geometry = geometry

    def write(self, path: str | Path, data, dtype=np.float64) -> Path:
        """Write ``data`` (an ``Image``, flat buffer or 2-D array).

        Samples are converted to ``dtype`` (float64 or float32) only here.
        Existing files are overwritten.
        """
        path = Path(path)
        g = self.geometry
        values = data.data if isinstance(data, Image) else np.asarray(data)
        if values.size != g.width * g.height:
            raise DimensionMismatchError(
                f"Cannot write {values.size} samples to a {g.width}x{g.height} image"
            )
        cube = np.asarray(values, dtype=dtype).reshape(1, 1, g.height, g.width)
        hdu = fits.PrimaryHDU(data=cube, header=build_header(g))
        hdu.writeto(path, overwrite=True)
        logger.debug("Wrote %dx%d %s image to %s", g.width, g.height, np.dtype(dtype).name, path)
        return path
