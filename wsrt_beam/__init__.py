# Primary beam tools for Westerbork (WSRT) radio images.
"""
Modules:

- fits: header parsing, image geometry, FITS reading and writing
- coordinates: SIN/NCP projections and angular distances
- beam: cos^6 beam model, beam synthesis and beam correction
- qa: robust image statistics and metrics
- validation: sanity checks for beam and corrected images
- simulation: synthetic FITS images
- cli: ``apbeam`` and ``applybeam`` command line tools
"""

__version__ = "0.3.0"
