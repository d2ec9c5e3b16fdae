"""
Input/Output module for cbinfo.

This module provides the CellBlender viz file reader and functionality for
printing and saving analysis results.
"""

from .reader import CellBlenderReader, decode_record, parse_file
from .writer import (
    ResultWriter,
    load_histogram,
    write_species_info,
    write_positions,
    write_orientations,
    write_analysis_report,
)

__all__ = [
    'CellBlenderReader',
    'decode_record',
    'parse_file',
    'ResultWriter',
    'load_histogram',
    'write_species_info',
    'write_positions',
    'write_orientations',
    'write_analysis_report',
]
