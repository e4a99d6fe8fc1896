"""Settings for beam synthesis and correction.

Defaults reproduce the classic Westerbork tools. Values can be overridden
from ``WSRT_BEAM_*`` environment variables or from a YAML file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Beam response below this is treated as numerically unusable.
DEFAULT_CORRECTION_FLOOR = 1e-2

# pb = cos^6(beta * freq(MHz) * angle)
DEFAULT_LOW_BAND_BETA = 0.0629
DEFAULT_HIGH_BAND_BETA = 0.065
DEFAULT_BAND_SPLIT_MHZ = 500.0

ENV_PREFIX = "WSRT_BEAM_"
VALID_OUTPUT_DTYPES = {"float32", "float64"}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Cannot interpret {value!r} as a boolean")


@dataclass
class BeamToolSettings:
    """Tunable parameters shared by the beam tools."""

    correction_floor: float = DEFAULT_CORRECTION_FLOOR
    low_band_beta: float = DEFAULT_LOW_BAND_BETA
    high_band_beta: float = DEFAULT_HIGH_BAND_BETA
    band_split_mhz: float = DEFAULT_BAND_SPLIT_MHZ

    # Header checks
    check_ctype: bool = True
    allow_multiple_images: bool = False

    # Output
    output_dtype: str = "float64"

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.correction_floor < 0:
            raise ValueError(
                f"correction_floor must be non-negative, got {self.correction_floor}"
            )
        if self.low_band_beta <= 0 or self.high_band_beta <= 0:
            raise ValueError(
                "beam coefficients must be positive, got "
                f"{self.low_band_beta} and {self.high_band_beta}"
            )
        if self.band_split_mhz <= 0:
            raise ValueError(f"band_split_mhz must be positive, got {self.band_split_mhz}")
        if self.output_dtype not in VALID_OUTPUT_DTYPES:
            raise ValueError(
                f"output_dtype must be one of {VALID_OUTPUT_DTYPES}, got '{self.output_dtype}'"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> BeamToolSettings:
        """Build settings from a mapping, ignoring unknown keys with a warning."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in values.items() if k in known})

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> BeamToolSettings:
        """Create settings from environment variables.

        Environment variables:
            WSRT_BEAM_CORRECTION_FLOOR: Minimum usable beam response (float)
            WSRT_BEAM_LOW_BAND_BETA: Coefficient below the band split (float)
            WSRT_BEAM_HIGH_BAND_BETA: Coefficient at/above the band split (float)
            WSRT_BEAM_BAND_SPLIT_MHZ: Band split frequency in MHz (float)
            WSRT_BEAM_CHECK_CTYPE: Reject unknown coordinate types (true/false)
            WSRT_BEAM_ALLOW_MULTIPLE_IMAGES: Accept multi-image files (true/false)
            WSRT_BEAM_OUTPUT_DTYPE: float32 or float64
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            if f.type in ("bool", bool):
                values[f.name] = _parse_bool(raw)
            elif f.type in ("float", float):
                values[f.name] = float(raw)
            else:
                values[f.name] = raw
        return cls(**values)


def load_settings(config_path: str | Path | None = None) -> BeamToolSettings:
    """Load settings from YAML, layered over environment overrides.

    Parameters
    ----------
    config_path : str or Path, optional
        YAML file with a flat mapping of setting names to values. When None,
        only environment variables are consulted.

    Returns
    -------
        BeamToolSettings
    """
    base = BeamToolSettings.from_env()
    if config_path is None:
        return base

    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning("Settings file not found: %s, using defaults", config_path)
        return base

    with config_path.open() as fh:
        loaded = yaml.safe_load(fh) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Settings file {config_path} did not parse to a mapping")

    merged = base.to_dict()
    merged.update(loaded)
    return BeamToolSettings.from_dict(merged)
