"""Quality assurance: robust statistics and image metrics."""

from wsrt_beam.qa.image_stats import mad, maximum, median, minimum, rms, stddev_from_mad

__all__ = [
    "mad",
    "maximum",
    "median",
    "minimum",
    "rms",
    "stddev_from_mad",
]
