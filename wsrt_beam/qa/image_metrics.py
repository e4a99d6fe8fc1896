"""Image quality metrics for beam and corrected images."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from wsrt_beam.qa import image_stats

if TYPE_CHECKING:
    from wsrt_beam.fits.geometry import ImageGeometry
    from wsrt_beam.image import Image


def compute_image_metrics(image: Image, geometry: ImageGeometry | None = None) -> dict[str, Any]:
    """Compute robust summary statistics of an image.

    Parameters
    ----------
    image : Image
        Pixel grid to summarise. NaN pixels count as blanked.
    geometry : ImageGeometry, optional
        When given, restoring beam information is included.

    Returns
    -------
        dict
        Dict with keys ``median``, ``mad``, ``robust_std``, ``rms``
        (finite pixels only), ``min``, ``max``, ``nan_fraction``,
        ``image_shape`` and, if available, ``beam_major_deg``,
        ``beam_minor_deg``, ``beam_pa_deg``.
    """
    data = image.data
    finite = data[np.isfinite(data)]

    metrics: dict[str, Any] = {
        "median": image_stats.median(data),
        "mad": image_stats.mad(data),
        "robust_std": image_stats.stddev_from_mad(data),
        "rms": image_stats.rms(finite) if finite.size else 0.0,
        "min": image_stats.minimum(data),
        "max": image_stats.maximum(data),
        "nan_fraction": float(np.mean(np.isnan(data))) if data.size else 0.0,
        "image_shape": [image.height, image.width],
    }

    if geometry is not None and geometry.beam is not None:
        metrics["beam_major_deg"] = float(np.degrees(geometry.beam.major))
        metrics["beam_minor_deg"] = float(np.degrees(geometry.beam.minor))
        metrics["beam_pa_deg"] = float(np.degrees(geometry.beam.position_angle))

    return metrics


def compute_fits_metrics(image_path: str | Path, index: int = 0) -> dict[str, Any]:
    """Compute metrics for plane ``index`` of a FITS image."""
    from wsrt_beam.fits.reader import FitsReader

    reader = FitsReader(image_path, allow_multiple_images=True)
    return compute_image_metrics(reader.read_index(index), reader.geometry)
