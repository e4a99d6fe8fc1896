"""Utilities for creating synthetic FITS images.

Produces small radio images with a chosen grid, projection and spectral
setup so the beam tools can be exercised without observational data.
"""

from pathlib import Path

import numpy as np
from astropy.io import fits


def synthetic_header(
    width: int = 64,
    height: int = 64,
    ra_deg: float = 180.0,
    dec_deg: float = 52.0,
    pixel_scale_arcsec: float = 30.0,
    frequency_hz: float = 1.4e9,
    bandwidth_hz: float = 10e6,
    projection: str = "SIN",
    stokes: int = 1,
    n_stokes: int = 1,
    n_freqs: int = 1,
    crpix: tuple | None = None,
    extra: dict | None = None,
) -> fits.Header:
    """Build a 4-axis (RA, DEC, FREQ, STOKES) image header.

    Parameters
    ----------
    width, height :
        Image size in pixels
    ra_deg, dec_deg :
        Phase centre (degrees)
    pixel_scale_arcsec :
        Pixel scale in arcseconds
    frequency_hz, bandwidth_hz :
        Reference frequency and channel width
    projection :
        "SIN" or "NCP"
    stokes :
        FITS STOKES code of the first plane
    n_stokes, n_freqs :
        Lengths of the STOKES and FREQ axes
    crpix :
        Reference pixel (1-based); defaults to the image centre ``(n/2)+1``
    extra :
        Additional keywords, applied last (may override the defaults)
    """
    if crpix is None:
        crpix = (width / 2.0 + 1.0, height / 2.0 + 1.0)

    header = fits.Header()
    header["NAXIS"] = 4
    header["NAXIS1"] = width
    header["NAXIS2"] = height
    header["NAXIS3"] = n_freqs
    header["NAXIS4"] = n_stokes
    header["BSCALE"] = 1.0
    header["BZERO"] = 0.0
    header["BUNIT"] = "JY/BEAM"
    header["EQUINOX"] = 2000.0
    header["CTYPE1"] = f"RA---{projection}"
    header["CRPIX1"] = crpix[0]
    header["CRVAL1"] = ra_deg
    header["CDELT1"] = -pixel_scale_arcsec / 3600.0  # Negative for RA
    header["CUNIT1"] = "deg"
    header["CTYPE2"] = f"DEC--{projection}"
    header["CRPIX2"] = crpix[1]
    header["CRVAL2"] = dec_deg
    header["CDELT2"] = pixel_scale_arcsec / 3600.0
    header["CUNIT2"] = "deg"
    header["CTYPE3"] = "FREQ"
    header["CRPIX3"] = 1.0
    header["CRVAL3"] = frequency_hz
    header["CDELT3"] = bandwidth_hz
    header["CUNIT3"] = "Hz"
    header["CTYPE4"] = "STOKES"
    header["CRPIX4"] = 1.0
    header["CRVAL4"] = float(stokes)
    header["CDELT4"] = 1.0
    header["TELESCOP"] = "WSRT"
    header["OBJECT"] = "Synthetic Test Image"
    header["DATE-OBS"] = "2013-01-01T12:00:00.0"

    for key, value in (extra or {}).items():
        if key == "HISTORY":
            for line in value:
                header.add_history(line)
        else:
            header[key] = value
    return header


def create_synthetic_fits(
    output_path: Path,
    data: np.ndarray | None = None,
    noise_level_jy: float = 0.0,
    sources: list = None,
    seed: int | None = None,
    **header_kwargs,
) -> Path:
    """Create a synthetic FITS image.

    Parameters
    ----------
    output_path :
        Path to output FITS file
    data :
        Optional pixel values, ``(height, width)`` or the full 4-D cube.
        When omitted, an image of Gaussian noise plus ``sources`` is made.
    noise_level_jy :
        RMS noise level in Jy
    sources :
        Optional list of dicts with keys: x, y (0-based pixels), flux_jy
    seed :
        Random seed for the noise
    **header_kwargs :
        Passed to ``synthetic_header``

    Returns
    -------
        Path to created FITS file
    """
    header = synthetic_header(**header_kwargs)
    shape = (header["NAXIS4"], header["NAXIS3"], header["NAXIS2"], header["NAXIS1"])

    if data is None:
        rng = np.random.default_rng(seed)
        cube = rng.normal(0.0, noise_level_jy, shape) if noise_level_jy > 0 else np.zeros(shape)
        for src in sources or []:
            cube[..., int(src["y"]), int(src["x"])] += src.get("flux_jy", 1.0)
    else:
        cube = np.asarray(data, dtype=np.float64).reshape(shape)

    hdu = fits.PrimaryHDU(data=cube, header=header)
    hdu.writeto(output_path, overwrite=True)

    return Path(output_path)
