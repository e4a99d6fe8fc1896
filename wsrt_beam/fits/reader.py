"""Read FITS images and their geometry."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from astropy.io import fits

from wsrt_beam.errors import InvalidHeaderError
from wsrt_beam.fits.geometry import ImageGeometry
from wsrt_beam.fits.header import FitsHeader
from wsrt_beam.fits.loader import load_geometry
from wsrt_beam.image import Image

logger = logging.getLogger(__name__)


class FitsReader:
    """Geometry and pixel access for the primary HDU of a FITS file.

    The header is parsed and validated on construction; pixel data is only
    read on request. Files with several 2-D planes (e.g. a Stokes axis) are
    addressed by plane index when ``allow_multiple_images`` is set.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        check_ctype: bool = True,
        allow_multiple_images: bool = False,
    ):
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"FITS file does not exist: {self.path}")

        with fits.open(self.path) as hdul:
            hdu = hdul[0]
            if not isinstance(hdu, (fits.PrimaryHDU, fits.ImageHDU)):
                raise InvalidHeaderError(f"{self.path}: First HDU is not an image")
            header = hdu.header.copy()

        self.header = FitsHeader(header, source=str(self.path))
        self.geometry: ImageGeometry = load_geometry(
            self.header,
            check_ctype=check_ctype,
            allow_multiple_images=allow_multiple_images,
        )

    @property
    def width(self) -> int:
        return self.geometry.width

    @property
    def height(self) -> int:
        return self.geometry.height

    def read_array(self, index: int = 0, dtype=np.float64) -> np.ndarray:
        """Return plane ``index`` as a ``(height, width)`` array of ``dtype``.

        Planes are counted over all axes beyond the first two, in file order.
        """
        n_pixels = self.width * self.height
        with fits.open(self.path, memmap=True) as hdul:
            data = hdul[0].data
            if data is None:
                raise InvalidHeaderError(f"{self.path}: Primary HDU has no data")
            planes = np.asarray(data).reshape(-1, n_pixels)
            if not 0 <= index < planes.shape[0]:
                raise IndexError(
                    f"Image index {index} out of range for {self.path} "
                    f"({planes.shape[0]} planes)"
                )
            plane = np.array(planes[index], dtype=dtype)
        return plane.reshape(self.height, self.width)

    def read_index(self, index: int, dtype=np.float64) -> Image:
        """Read plane ``index`` into an ``Image``.

        ``dtype`` selects the precision samples pass through on the way in;
        the returned image always holds float64.
        """
        return Image.from_array(self.read_array(index, dtype=dtype))

    def read(self, dtype=np.float64) -> Image:
        return self.read_index(0, dtype=dtype)
