"""
WSRT beam tools test suite

Structure:
- unit/: Unit tests for individual components
- conftest.py: Shared fixtures (synthetic geometries and FITS files)
"""
