"""Primary beam correction of science images.

Pixels where the beam response drops below a floor are blanked (NaN)
instead of being divided, so the correction never amplifies noise at the
edge of the field.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import numpy as np

from wsrt_beam.config import DEFAULT_CORRECTION_FLOOR, BeamToolSettings
from wsrt_beam.errors import DimensionMismatchError
from wsrt_beam.fits.reader import FitsReader
from wsrt_beam.fits.writer import FitsWriter
from wsrt_beam.image import Image

logger = logging.getLogger(__name__)


class CorrectionMode(Enum):
    """How the beam map enters the division."""

    SQUARED = "squared"  # divide by pb^2 (default)
    NOT_SQUARED = "not-squared"  # divide by pb
    IS_WEIGHT = "is-weight"  # map is a weight (pb^2): divide by sqrt(w)


def correction_divisor(beam: np.ndarray, mode: CorrectionMode) -> np.ndarray:
    """Per-pixel divisor for a beam (or weight) map."""
    if mode is CorrectionMode.IS_WEIGHT:
        with np.errstate(invalid="ignore"):
            return np.sqrt(beam)
    if mode is CorrectionMode.SQUARED:
        return beam * beam
    return beam


def apply_beam(
    image: Image,
    beam: Image,
    mode: CorrectionMode = CorrectionMode.SQUARED,
    *,
    floor: float = DEFAULT_CORRECTION_FLOOR,
) -> Image:
    """Divide ``image`` by a beam-derived divisor.

    Parameters
    ----------
    image : Image
        Science image.
    beam : Image
        Beam or weight map on the same grid.
    mode : CorrectionMode
        Division mode.
    floor : float
        Pixels with ``|beam| < floor`` are set to NaN.

    Returns
    -------
        Image
        Corrected image (a new buffer; the inputs are not modified).

    Raises
    ------
    DimensionMismatchError
        If the two images differ in size.
    """
    if not image.same_shape(beam):
        raise DimensionMismatchError(
            f"Beam and image do not have same size! "
            f"image={image.width}x{image.height}, beam={beam.width}x{beam.height}"
        )
    beam_values = beam.data
    usable = np.abs(beam_values) >= floor
    divisor = correction_divisor(np.where(usable, beam_values, 1.0), mode)
    corrected = np.where(usable, image.data / divisor, np.nan)

    blanked = int(np.count_nonzero(~usable))
    if blanked:
        logger.debug("Blanked %d of %d pixels below beam floor %g", blanked, image.size, floor)
    return Image.from_array(corrected)


def apply_beam_files(
    input_path: str | Path,
    beam_path: str | Path,
    output_path: str | Path,
    mode: CorrectionMode = CorrectionMode.SQUARED,
    *,
    settings: BeamToolSettings | None = None,
) -> Image:
    """Correct a FITS image with a FITS beam and write the result.

    The output keeps the science image's header geometry.
    """
    settings = settings or BeamToolSettings()
    input_reader = FitsReader(
        input_path,
        check_ctype=settings.check_ctype,
        allow_multiple_images=settings.allow_multiple_images,
    )
    beam_reader = FitsReader(
        beam_path,
        check_ctype=settings.check_ctype,
        allow_multiple_images=settings.allow_multiple_images,
    )
    if (beam_reader.width, beam_reader.height) != (input_reader.width, input_reader.height):
        raise DimensionMismatchError(
            f"Beam and image do not have same size! "
            f"{input_path}={input_reader.width}x{input_reader.height}, "
            f"{beam_path}={beam_reader.width}x{beam_reader.height}"
        )

    corrected = apply_beam(
        input_reader.read(),
        beam_reader.read(),
        mode,
        floor=settings.correction_floor,
    )
    FitsWriter(input_reader.geometry).write(
        output_path, corrected, dtype=np.dtype(settings.output_dtype)
    )
    logger.info("Wrote beam-corrected image (%s): %s", mode.value, output_path)
    return corrected
