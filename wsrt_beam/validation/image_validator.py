"""Image validation utilities."""

from __future__ import annotations

import logging

import numpy as np

from wsrt_beam.image import Image
from wsrt_beam.qa import image_stats

logger = logging.getLogger(__name__)


def validate_beam_image(beam: Image) -> tuple[bool, list[str]]:
    """Check that a beam map is a plausible normalised response.

    Parameters
    ----------
    beam : Image
        Synthesised beam map

    Returns
    -------
        tuple
        Tuple of (is_valid, error_messages)
    """
    errors = []

    if beam.empty():
        return False, ["Beam image is empty"]

    data = beam.data
    if not np.all(np.isfinite(data)):
        errors.append(f"Beam has {int(np.count_nonzero(~np.isfinite(data)))} non-finite pixels")

    peak = image_stats.maximum(data)
    if peak > 1.0 + 1e-12:
        errors.append(f"Beam peak exceeds unity: {peak}")
    low = image_stats.minimum(data)
    if low < 0.0:
        errors.append(f"Beam has negative response: {low}")

    return len(errors) == 0, errors


def validate_image_quality(
    image: Image,
    max_flagged_fraction: float = 0.5,
    min_snr: float | None = None,
) -> tuple[bool, list[str]]:
    """Validate a corrected image.

    Parameters
    ----------
    image : Image
        Beam-corrected image
    max_flagged_fraction : float
        Maximum allowed NaN fraction
    min_snr : float, optional
        Minimum required peak over robust noise; skipped when None

    Returns
    -------
        tuple
        Tuple of (is_valid, error_messages)
    """
    errors = []
    data = image.data

    if data.size == 0:
        return False, ["Image is empty"]

    finite = data[np.isfinite(data)]
    if finite.size == 0:
        errors.append("No valid pixels")
        return False, errors

    if np.allclose(finite, 0, atol=1e-10):
        errors.append("Image is all zeros")
        return False, errors

    nan_fraction = float(np.mean(np.isnan(data)))
    if nan_fraction > max_flagged_fraction:
        errors.append(f"Too many NaN pixels: {nan_fraction:.1%}")

    if min_snr is not None:
        noise = image_stats.stddev_from_mad(finite)
        if noise > 0:
            snr = float(np.max(finite)) / noise
            if snr < min_snr:
                errors.append(f"SNR too low: {snr:.1f} < {min_snr}")
        else:
            errors.append("Cannot compute SNR (zero noise)")

    if errors:
        logger.debug("Image validation failed: %s", "; ".join(errors))

    return len(errors) == 0, errors
