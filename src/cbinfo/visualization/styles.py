"""
Plot styling module for cbinfo.

This module provides predefined styles and color schemes for histogram plots.
"""
from typing import Dict, Any, Optional

# Default style parameters
DEFAULT_STYLE = {
    'figure.dpi': 100,
    'font.size': 11,
    'axes.labelsize': 12,
    'axes.titlesize': 13,
    'xtick.labelsize': 10,
    'ytick.labelsize': 10,
    'legend.fontsize': 10,
    'image.cmap': 'viridis',
    'axes.grid': False,
    'axes.spines.top': False,
    'axes.spines.right': False
}

# Color schemes
COLOR_SCHEMES = {
    'default': {
        'primary': '#1f77b4',  # Blue
        'secondary': '#ff7f0e',  # Orange
        'background': '#ffffff',
        'text': '#000000'
    },
    'dark': {
        'primary': '#4c72b0',
        'secondary': '#dd8452',
        'background': '#2d2d2d',
        'text': '#e0e0e0'
    }
}

def style_params(style: Optional[Dict[str, Any]] = None, color_scheme: str = 'default') -> Dict[str, Any]:
    """
    Build matplotlib rc parameters for a style and color scheme.
    
    Args:
        style: Dictionary of style parameters to override defaults
        color_scheme: Name of the color scheme to use ('default' or 'dark')

    Returns:
        Dictionary usable with plt.rc_context
    """
    if color_scheme not in COLOR_SCHEMES:
        raise ValueError(f"Unknown color scheme: {color_scheme}. Must be one of: {list(COLOR_SCHEMES.keys())}")
    colors = COLOR_SCHEMES[color_scheme]

    params = dict(DEFAULT_STYLE)
    params.update({
        'axes.facecolor': colors['background'],
        'figure.facecolor': colors['background'],
        'axes.edgecolor': colors['text'],
        'axes.labelcolor': colors['text'],
        'xtick.color': colors['text'],
        'ytick.color': colors['text'],
        'text.color': colors['text']
    })
    params.update(style or {})
    return params

