"""
Visualization of the spatial histogram used by the uniformity test.
"""
import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional, Union
import logging

from ..core.binning import Histogram, GRID_SIZE, N_BINS
from ..core.uniformity import UniformityResult
from ..utils.helpers import ensure_directory
from .styles import style_params, COLOR_SCHEMES

logger = logging.getLogger(__name__)

# (title, axis summed over in the [iz, iy, ix] grid, x label, y label)
PROJECTIONS = (
    ('xy projection', 0, 'x bin', 'y bin'),
    ('xz projection', 1, 'x bin', 'z bin'),
    ('yz projection', 2, 'y bin', 'z bin'),
)


class HistogramPlotter:
    def __init__(self, histogram: Histogram, output_path: Union[str, Path],
                 result: Optional[UniformityResult] = None, **kwargs):
        """
        Initialize HistogramPlotter with histogram data and plotting parameters.

        Args:
            histogram: Histogram to plot
            output_path: Path to save the plot
            result: Optional uniformity result, shown in the figure title
            **kwargs: Additional plotting parameters (title, cmap, figsize,
                dpi, theme)
        """
        self.histogram = histogram
        self.output_path = Path(output_path)
        self.result = result
        self.default_params = {
            'title': 'Molecule distribution',
            'cmap': 'viridis',
            'figsize': (16, 4),
            'dpi': 150,
            'theme': 'default',
        }
        self.plot_params = {**self.default_params, **kwargs}

    def _validate(self):
        if self.histogram.n_molecules == 0:
            raise ValueError("Cannot plot an empty histogram.")
        if self.plot_params['theme'] not in COLOR_SCHEMES:
            raise ValueError(f"Unknown theme '{self.plot_params['theme']}'.")

    def _title(self) -> str:
        title = self.plot_params['title']
        if self.result is not None:
            title += (f" (N={self.result.molecule_count}, chi2={self.result.chi_squared:.6g}, "
                      f"{self.result.classification.value})")
        return title

    def _plot_projections(self, fig, axes) -> None:
        grid = self.histogram.grid
        for ax, (label, axis, xlabel, ylabel) in zip(axes, PROJECTIONS):
            proj = grid.sum(axis=axis)
            # rows of proj index the slower grid axis
            im = ax.imshow(proj, origin='lower', cmap=self.plot_params['cmap'],
                           extent=(-0.5, GRID_SIZE - 0.5, -0.5, GRID_SIZE - 0.5))
            ax.set_title(label)
            ax.set_xlabel(xlabel)
            ax.set_ylabel(ylabel)
            fig.colorbar(im, ax=ax, label='count')

    def _plot_count_distribution(self, ax) -> None:
        counts = self.histogram.counts
        expected = self.histogram.n_molecules / N_BINS
        colors = COLOR_SCHEMES[self.plot_params['theme']]
        ax.hist(counts, bins=min(50, max(1, int(counts.max()) + 1)), color=colors['primary'])
        ax.axvline(expected, color=colors['secondary'], linestyle='--', label=f'expected {expected:.3g}')
        ax.set_title('counts per bin')
        ax.set_xlabel('count')
        ax.set_ylabel('bins')
        ax.legend()

    def generate_plot(self) -> Path:
        self._validate()
        fig = None
        with plt.rc_context(style_params(color_scheme=self.plot_params['theme'])):
            try:
                fig, axes = plt.subplots(1, 4, figsize=self.plot_params['figsize'])
                self._plot_projections(fig, axes[:3])
                self._plot_count_distribution(axes[3])
                fig.suptitle(self._title())
                fig.tight_layout()
                ensure_directory(self.output_path.parent)
                fig.savefig(self.output_path, dpi=self.plot_params['dpi'], bbox_inches='tight')
                logger.info(f"Plot saved to: {self.output_path}")
            finally:
                if fig is not None:
                    plt.close(fig)
        return self.output_path
