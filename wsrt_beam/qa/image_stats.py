"""Robust statistics over flat pixel buffers.

Non-finite samples (NaN, inf) are treated as masked and ignored by every
estimator except ``rms``, which is computed over the raw buffer.
"""

from __future__ import annotations

import numpy as np

# norminv(0.75): scales a MAD to a normal-consistent standard deviation
MAD_TO_STDDEV = 1.48260221850560


def _finite(data) -> np.ndarray:
    flat = np.asarray(data, dtype=np.float64).ravel()
    return flat[np.isfinite(flat)]


def _median_in_place(values: np.ndarray) -> float:
    """Median by partial ordering; ``values`` must be finite and non-empty."""
    n = values.size
    mid = (n - 1) // 2
    if n % 2 == 1:
        return float(np.partition(values, mid)[mid])
    part = np.partition(values, (mid, mid + 1))
    return float((part[mid] + part[mid + 1]) * 0.5)


def median(data) -> float:
    """Sample median of the finite entries, 0.0 if there are none."""
    values = _finite(data)
    if values.size == 0:
        return 0.0
    return _median_in_place(values)


def mad(data) -> float:
    """Median absolute deviation from the median of the finite entries."""
    values = _finite(data)
    if values.size == 0:
        return 0.0
    centre = _median_in_place(values)
    return _median_in_place(np.abs(values - centre))


def stddev_from_mad(data) -> float:
    """Robust standard deviation estimate, ``1.4826 * MAD``."""
    return MAD_TO_STDDEV * mad(data)


def rms(data) -> float:
    """Root mean square over the raw buffer; NaN samples propagate."""
    flat = np.asarray(data, dtype=np.float64).ravel()
    if flat.size == 0:
        return float("nan")
    return float(np.sqrt(np.mean(flat * flat)))


def minimum(data) -> float:
    values = _finite(data)
    if values.size == 0:
        return 0.0
    return float(values.min())


def maximum(data) -> float:
    values = _finite(data)
    if values.size == 0:
        return 0.0
    return float(values.max())
