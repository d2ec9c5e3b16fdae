"""
Visualization module for cbinfo.

This module provides plotting capabilities for spatial histograms.
"""

from .histogram_plotter import HistogramPlotter
from .styles import style_params, DEFAULT_STYLE, COLOR_SCHEMES

__all__ = [
    'HistogramPlotter',
    'style_params',
    'DEFAULT_STYLE',
    'COLOR_SCHEMES'
]
