"""
Core module for cbinfo.

This module provides the species data structures, spatial binning and the
chi-squared uniformity test.
"""

from .errors import (
    CellBlenderError,
    FileOpenError,
    DecodeError,
    TruncatedRecordError,
    InvalidCountError,
    ParseError,
    UnknownSpeciesError,
    NotSurfaceSpeciesError,
    NonFinitePositionError,
    ConfigError,
)
from .species import Point3D, SpeciesKind, SpeciesRecord, VolumeSpecies, SurfaceSpecies, SpeciesTable
from .binning import BoundingBox, EmptySelection, Histogram, GRID_SIZE, N_BINS, compute_bounds, compute_histogram
from .uniformity import (
    CHI2_CRITICAL_999,
    DEGREES_OF_FREEDOM,
    Classification,
    UniformityResult,
    analyze_uniformity,
    chi_squared,
    test_uniformity,
)

__all__ = [
    'CellBlenderError',
    'FileOpenError',
    'DecodeError',
    'TruncatedRecordError',
    'InvalidCountError',
    'ParseError',
    'UnknownSpeciesError',
    'NotSurfaceSpeciesError',
    'NonFinitePositionError',
    'ConfigError',
    'Point3D',
    'SpeciesKind',
    'SpeciesRecord',
    'VolumeSpecies',
    'SurfaceSpecies',
    'SpeciesTable',
    'BoundingBox',
    'EmptySelection',
    'Histogram',
    'GRID_SIZE',
    'N_BINS',
    'compute_bounds',
    'compute_histogram',
    'CHI2_CRITICAL_999',
    'DEGREES_OF_FREEDOM',
    'Classification',
    'UniformityResult',
    'analyze_uniformity',
    'chi_squared',
    'test_uniformity',
]
