"""Sky projections and coordinate helpers."""

from wsrt_beam.coordinates.projection import (
    NcpProjection,
    SinProjection,
    angular_distance,
    get_projection,
    lm_to_radec,
    lm_to_xy,
    radec_to_lm,
    xy_to_lm,
)

__all__ = [
    "NcpProjection",
    "SinProjection",
    "angular_distance",
    "get_projection",
    "lm_to_radec",
    "lm_to_xy",
    "radec_to_lm",
    "xy_to_lm",
]
