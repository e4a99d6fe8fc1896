"""Primary beam synthesis and correction.

The beam follows the empirical WSRT law ``cos^6(beta * nu * r)``; see
``wsrt_beam.beam.model`` for the unit convention.
"""

from wsrt_beam.beam.correction import CorrectionMode, apply_beam, apply_beam_files
from wsrt_beam.beam.model import BeamModel, beam_coefficient
from wsrt_beam.beam.synthesis import BeamImages, make_beam, offset_angles, synthesize_beam_files

__all__ = [
    # Model
    "BeamModel",
    "beam_coefficient",
    # Synthesis
    "BeamImages",
    "make_beam",
    "offset_angles",
    "synthesize_beam_files",
    # Correction
    "CorrectionMode",
    "apply_beam",
    "apply_beam_files",
]
