"""Synthetic data for exercising the beam tools."""
