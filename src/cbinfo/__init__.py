"""
cbinfo: reader and spatial uniformity analysis for CellBlender viz files
"""

__version__ = "0.1.0"

# Core components
from .core import (
    Point3D,
    SpeciesKind,
    SpeciesRecord,
    VolumeSpecies,
    SurfaceSpecies,
    SpeciesTable,
    BoundingBox,
    EmptySelection,
    Histogram,
    Classification,
    UniformityResult,
    compute_bounds,
    compute_histogram,
    test_uniformity,
    analyze_uniformity,
    CHI2_CRITICAL_999,
)
from .core.errors import (
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

# IO components
from .io import CellBlenderReader, decode_record, parse_file, ResultWriter

# Utility components
from .utils import ConfigManager

__all__ = [
    # Core
    'Point3D',
    'SpeciesKind',
    'SpeciesRecord',
    'VolumeSpecies',
    'SurfaceSpecies',
    'SpeciesTable',
    'BoundingBox',
    'EmptySelection',
    'Histogram',
    'Classification',
    'UniformityResult',
    'compute_bounds',
    'compute_histogram',
    'test_uniformity',
    'analyze_uniformity',
    'CHI2_CRITICAL_999',
    # Errors
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
    # IO
    'CellBlenderReader',
    'decode_record',
    'parse_file',
    'ResultWriter',
    # Utils
    'ConfigManager',
]
