"""Visualization utilities for ray paths and travel-time curves."""

from .ray_plot import RayPlotter

__all__ = [
    "RayPlotter",
]
