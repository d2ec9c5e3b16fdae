"""
Chi-squared test for spatial uniformity of molecule positions.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Union
import logging

import numpy as np

from .binning import N_BINS, BoundingBox, EmptySelection, Histogram, compute_bounds, compute_histogram
from .species import Point3D, SpeciesTable

logger = logging.getLogger(__name__)

# 0.01 percentile critical value of the chi-squared distribution for
# N_BINS - 1 degrees of freedom (bin counts must add up to the total).
DEGREES_OF_FREEDOM = N_BINS - 1
CHI2_CRITICAL_999 = 1105.91695750458


class Classification(Enum):
    UNIFORM = 'uniform'
    NOT_UNIFORM = 'not uniform'


@dataclass(frozen=True)
class UniformityResult:
    bounding_box_min: Point3D
    bounding_box_max: Point3D
    chi_squared: float
    critical_value: float
    classification: Classification
    molecule_count: int

    @property
    def is_uniform(self) -> bool:
        return self.classification is Classification.UNIFORM

    @property
    def degrees_of_freedom(self) -> int:
        return DEGREES_OF_FREEDOM

    def to_dict(self) -> Dict[str, Any]:
        return {
            'molecule_count': self.molecule_count,
            'bounding_box': {
                'min': list(self.bounding_box_min),
                'max': list(self.bounding_box_max),
            },
            'chi_squared': self.chi_squared,
            'critical_value': self.critical_value,
            'degrees_of_freedom': self.degrees_of_freedom,
            'classification': self.classification.value,
        }


def chi_squared(counts: np.ndarray, n_molecules: int) -> float:
    """Chi-squared statistic of counts against the flat expectation n_molecules / N_BINS."""
    if n_molecules <= 0:
        raise ValueError("Chi-squared statistic needs at least one molecule.")
    expected = n_molecules / float(N_BINS)
    observed = np.asarray(counts, dtype=np.float64)
    return float(np.sum((observed - expected) ** 2 / expected))


def test_uniformity(histogram: Histogram, bounds: BoundingBox) -> UniformityResult:
    """
    Classify a histogram as uniform or not.

    The statistic is compared against CHI2_CRITICAL_999; values strictly
    below it are uniform.

    Args:
        histogram: Binned molecule counts
        bounds: Bounding box the histogram was built on

    Returns:
        UniformityResult carrying the statistic, the bounding box and the
        classification
    """
    if histogram.n_molecules != bounds.n_molecules:
        raise ValueError(f"Histogram holds {histogram.n_molecules} molecules but the bounding box "
                         f"was computed from {bounds.n_molecules}.")
    chi2 = chi_squared(histogram.counts, histogram.n_molecules)
    classification = Classification.UNIFORM if chi2 < CHI2_CRITICAL_999 else Classification.NOT_UNIFORM
    logger.debug(f"chi2={chi2:.6g} critical={CHI2_CRITICAL_999} -> {classification.value}")
    return UniformityResult(
        bounding_box_min=bounds.minimum,
        bounding_box_max=bounds.maximum,
        chi_squared=chi2,
        critical_value=CHI2_CRITICAL_999,
        classification=classification,
        molecule_count=histogram.n_molecules,
    )


# keep pytest from collecting this as a test when imported into test modules
test_uniformity.__test__ = False


def analyze_uniformity(table: SpeciesTable, species: Iterable[str], return_histogram: bool = False
                       ) -> Union[UniformityResult, EmptySelection,
                                  Tuple[Union[UniformityResult, EmptySelection], Optional[Histogram]]]:
    """
    Bound, bin and test the positions of the given species.

    Returns EmptySelection without binning if the species hold no molecules.
    With return_histogram=True a (result, histogram) pair is returned, the
    histogram being None for an empty selection.
    """
    species = tuple(species)
    bounds = compute_bounds(table, species)
    if isinstance(bounds, EmptySelection):
        return (bounds, None) if return_histogram else bounds
    histogram = compute_histogram(table, species, bounds.minimum, bounds.maximum)
    result = test_uniformity(histogram, bounds)
    logger.info(f"Uniformity of {len(species)} species ({result.molecule_count} molecules): "
                f"chi2 = {result.chi_squared:.6g}, {result.classification.value}")
    return (result, histogram) if return_histogram else result
