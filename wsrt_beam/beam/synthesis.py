"""Synthesize primary beam and weight images for an image grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from wsrt_beam.beam.model import BeamModel
from wsrt_beam.config import BeamToolSettings
from wsrt_beam.coordinates.formatting import angle_to_nice_string, radec_to_string
from wsrt_beam.coordinates.projection import angular_distance, get_projection, xy_to_lm
from wsrt_beam.fits.geometry import ImageGeometry
from wsrt_beam.fits.reader import FitsReader
from wsrt_beam.fits.writer import FitsWriter
from wsrt_beam.image import Image

logger = logging.getLogger(__name__)


@dataclass
class BeamImages:
    """Beam and weight maps on the grid of ``geometry``."""

    beam: Image
    weight: Image
    model: BeamModel
    geometry: ImageGeometry


def offset_angles(geometry: ImageGeometry) -> np.ndarray:
    """Angular distance (radians) of every pixel from the phase centre.

    Returns a ``(height, width)`` array.
    """
    ys, xs = np.indices((geometry.height, geometry.width), dtype=np.float64)
    l, m = xy_to_lm(
        xs,
        ys,
        geometry.pixel_size_x,
        geometry.pixel_size_y,
        geometry.width,
        geometry.height,
    )
    ra0, dec0 = geometry.phase_centre_ra, geometry.phase_centre_dec
    ra, dec = get_projection(geometry.projection).inverse(l, m, ra0, dec0)
    return angular_distance(ra, dec, ra0, dec0)


def make_beam(
    geometry: ImageGeometry,
    frequency: float | None = None,
    *,
    settings: BeamToolSettings | None = None,
) -> BeamImages:
    """Evaluate the cos^6 beam law over the grid described by ``geometry``.

    Parameters
    ----------
    geometry : ImageGeometry
        Grid and astrometry of the image to model.
    frequency : float, optional
        Observing frequency in Hz. Defaults to ``geometry.frequency``.
    settings : BeamToolSettings, optional
        Coefficient overrides.

    Returns
    -------
        BeamImages
        Beam map and weight map (beam squared).
    """
    settings = settings or BeamToolSettings()
    if frequency is None:
        frequency = geometry.frequency
    model = BeamModel.from_settings(frequency / 1e6, settings)

    if geometry.projection.deprecated:
        logger.warning("Image is in deprecated NCP projection.")
    logger.info(
        "Making beam with freq=%g MHz (beta=%g)\nPixelscale: %s x %s\nPhase centre: %s",
        model.frequency_mhz,
        model.beta,
        angle_to_nice_string(geometry.pixel_size_x),
        angle_to_nice_string(geometry.pixel_size_y),
        radec_to_string(geometry.phase_centre_ra, geometry.phase_centre_dec),
    )

    angles = offset_angles(geometry)
    logger.info("Max angle: %s", angle_to_nice_string(float(angles[0, 0])))

    beam = Image.from_array(model.response(angles))
    weight = Image.from_array(beam.data * beam.data)
    return BeamImages(beam=beam, weight=weight, model=model, geometry=geometry)


def synthesize_beam_files(
    input_path: str | Path,
    beam_path: str | Path,
    weight_path: str | Path | None = None,
    *,
    frequency: float | None = None,
    settings: BeamToolSettings | None = None,
) -> BeamImages:
    """Read the geometry of ``input_path`` and write beam (and weight) FITS files."""
    settings = settings or BeamToolSettings()
    reader = FitsReader(
        input_path,
        check_ctype=settings.check_ctype,
        allow_multiple_images=settings.allow_multiple_images,
    )
    images = make_beam(reader.geometry, frequency, settings=settings)

    writer = FitsWriter(reader.geometry)
    dtype = np.dtype(settings.output_dtype)
    writer.write(beam_path, images.beam, dtype=dtype)
    logger.info("Wrote beam image: %s", beam_path)
    if weight_path is not None:
        writer.write(weight_path, images.weight, dtype=dtype)
        logger.info("Wrote weight image: %s", weight_path)
    return images
