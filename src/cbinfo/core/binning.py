"""
Spatial binning of molecule positions on a fixed 10x10x10 grid.
"""
from dataclasses import dataclass
from typing import Iterable, Tuple, Union
import logging

import numpy as np

from .errors import NonFinitePositionError
from .species import Point3D, SpeciesTable
from ..utils.helpers import safe_divide, validate_array_shape

logger = logging.getLogger(__name__)

GRID_SIZE = 10
N_BINS = GRID_SIZE ** 3


@dataclass(frozen=True)
class BoundingBox:
    minimum: Point3D
    maximum: Point3D
    n_molecules: int

    @property
    def extent(self) -> Point3D:
        return self.maximum - self.minimum


@dataclass(frozen=True)
class EmptySelection:
    """The selected species contain no molecules; there is nothing to bin."""
    species: Tuple[str, ...] = ()

    @property
    def n_molecules(self) -> int:
        return 0


@dataclass(frozen=True, eq=False)
class Histogram:
    """
    Molecule counts on the 10x10x10 grid.

    counts is flat, bin (ix, iy, iz) lives at ix + iy*10 + iz*100.
    """
    counts: np.ndarray
    n_molecules: int

    def __post_init__(self):
        counts = np.array(self.counts, dtype=np.int64)
        validate_array_shape(counts, (N_BINS,), "Histogram counts")
        if np.any(counts < 0):
            raise ValueError("Histogram counts must be non-negative.")
        if counts.sum() != self.n_molecules:
            raise ValueError(f"Histogram counts sum to {counts.sum()}, expected {self.n_molecules}.")
        counts.setflags(write=False)
        object.__setattr__(self, 'counts', counts)

    @property
    def grid(self) -> np.ndarray:
        """Counts as a (10, 10, 10) array indexed [iz, iy, ix]."""
        return self.counts.reshape(GRID_SIZE, GRID_SIZE, GRID_SIZE)

    def count_at(self, ix: int, iy: int, iz: int) -> int:
        for i in (ix, iy, iz):
            if not 0 <= i < GRID_SIZE:
                raise IndexError(f"Bin index {i} out of range [0, {GRID_SIZE - 1}]")
        return int(self.counts[ix + iy * GRID_SIZE + iz * GRID_SIZE * GRID_SIZE])


def _selected_positions(table: SpeciesTable, species: Iterable[str]) -> np.ndarray:
    blocks = []
    for name in species:
        positions = table[name].positions
        n_bad = int(np.count_nonzero(~np.isfinite(positions).all(axis=1)))
        if n_bad:
            raise NonFinitePositionError(name, n_bad)
        blocks.append(positions)
    if not blocks:
        return np.empty((0, 3), dtype=np.float64)
    return np.concatenate(blocks, axis=0)


def compute_bounds(table: SpeciesTable, species: Iterable[str]) -> Union[BoundingBox, EmptySelection]:
    """
    Axis-aligned bounding box of all positions of the given species.

    Args:
        table: Species table to read positions from
        species: Names of the species to include

    Returns:
        BoundingBox with the component-wise min/max and the number of
        positions visited, or EmptySelection if there were none

    Raises:
        UnknownSpeciesError: If a name is not in the table
        NonFinitePositionError: If a selected position has a NaN or inf coordinate
    """
    species = tuple(species)
    positions = _selected_positions(table, species)
    if len(positions) == 0:
        logger.info(f"No molecules found for species {list(species)}.")
        return EmptySelection(species)
    lo = positions.min(axis=0)
    hi = positions.max(axis=0)
    return BoundingBox(Point3D.from_array(lo), Point3D.from_array(hi), len(positions))


def bin_indices(positions: np.ndarray, minimum: Point3D, maximum: Point3D) -> np.ndarray:
    """
    Flat grid index of every position.

    Per axis the index is floor((p - min) / delta) with delta = (max - min) / 10,
    clamped to [0, 9]. An axis with zero extent puts every point in bin 0.
    """
    delta = (maximum - minimum) / GRID_SIZE
    v = np.asarray(positions, dtype=np.float64) - minimum.as_array()
    idx = np.floor(safe_divide(v, delta.as_array(), fill_value=0.0))
    idx = np.clip(idx, 0, GRID_SIZE - 1).astype(np.int64)
    return idx[:, 0] + idx[:, 1] * GRID_SIZE + idx[:, 2] * GRID_SIZE * GRID_SIZE


def compute_histogram(table: SpeciesTable, species: Iterable[str],
                      minimum: Point3D, maximum: Point3D) -> Histogram:
    positions = _selected_positions(table, tuple(species))
    if len(positions) == 0:
        return Histogram(np.zeros(N_BINS, dtype=np.int64), 0)
    degenerate = [axis for axis, d in zip('xyz', maximum - minimum) if d == 0]
    if degenerate:
        logger.warning(f"Bounding box has zero extent along {', '.join(degenerate)}; "
                       f"all molecules fall in bin 0 on that axis.")
    flat = bin_indices(positions, minimum, maximum)
    counts = np.bincount(flat, minlength=N_BINS)
    return Histogram(counts, len(positions))
