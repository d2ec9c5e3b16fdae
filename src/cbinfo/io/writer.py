"""
Output module for cbinfo.

This module provides the text listings printed by the command line tool and
functionality for saving analysis results to disk.
"""
import numpy as np
from pathlib import Path
import logging
from typing import Optional, Union, Dict, Any, Iterable, TextIO
import json
import sys
import yaml

from ..core.binning import EmptySelection, Histogram, GRID_SIZE
from ..core.errors import NotSurfaceSpeciesError
from ..core.species import SpeciesKind, SpeciesTable
from ..core.uniformity import UniformityResult
from ..utils.helpers import ensure_directory

logger = logging.getLogger(__name__)


def format_vector(v: Iterable[float]) -> str:
    return ' '.join(f"{float(c):g}" for c in v)


def display_name(name: str) -> str:
    """Species name with undecodable wire bytes shown as \\xNN escapes."""
    return name.encode('utf-8', errors='surrogateescape').decode('utf-8', errors='backslashreplace')


def write_species_info(table: SpeciesTable, out: Optional[TextIO] = None) -> None:
    out = sys.stdout if out is None else out
    for name, rec in table.items():
        out.write(f"{display_name(name)}  {rec.n_molecules}  {rec.kind.value}\n")


def write_positions(table: SpeciesTable, species: Iterable[str], add_separator: bool = False,
                    out: Optional[TextIO] = None) -> None:
    out = sys.stdout if out is None else out
    for name in species:
        if add_separator:
            out.write(f"--- {display_name(name)}\n")
        for p in table[name].positions:
            out.write(format_vector(p) + "\n")


def write_orientations(table: SpeciesTable, species: Iterable[str], add_separator: bool = False,
                       out: Optional[TextIO] = None) -> None:
    """
    Print the orientations of surface molecules.

    Raises:
        NotSurfaceSpeciesError: If any requested species is a volume species.
            Nothing is printed in that case.
    """
    out = sys.stdout if out is None else out
    species = list(species)
    for name in species:
        if table[name].kind is not SpeciesKind.SURFACE:
            raise NotSurfaceSpeciesError(name)
    for name in species:
        if add_separator:
            out.write(f"--- {display_name(name)}\n")
        for v in table[name].orientations:
            out.write(format_vector(v) + "\n")


def write_analysis_report(result: Union[UniformityResult, EmptySelection], out: Optional[TextIO] = None) -> None:
    out = sys.stdout if out is None else out
    if isinstance(result, EmptySelection):
        out.write("# mols: 0\n")
        out.write("no molecules in selection, skipping analysis\n")
        return
    out.write(f"# mols: {result.molecule_count}\n")
    out.write(f"llc: {format_vector(result.bounding_box_min)}\n")
    out.write(f"urc: {format_vector(result.bounding_box_max)}\n")
    out.write(f"chi2 computed : {result.chi_squared:g}\n")
    out.write(f"chi2 theor    : {result.critical_value:g}\n")
    out.write(f"result        : {result.classification.value}\n")


class ResultWriter:
    """Class for writing analysis results."""

    def __init__(self, output_dir: Union[str, Path]):
        """
        Initialize the result writer.

        Args:
            output_dir: Directory to write output files to
        """
        self.output_dir = ensure_directory(output_dir)

    def save_analysis_result(self, result: Union[UniformityResult, EmptySelection], stem: str,
                             file_format: str = 'yaml', source: Optional[str] = None) -> Path:
        """
        Save a uniformity result to a YAML or JSON file.

        Args:
            result: Analysis outcome to save
            stem: Base name of the output file
            file_format: 'yaml' or 'json'
            source: Optional name of the analyzed viz file, stored alongside

        Returns:
            Path of the written file
        """
        if file_format not in ('yaml', 'json'):
            raise ValueError(f"Unsupported result format: {file_format}. Must be 'yaml' or 'json'.")
        if isinstance(result, EmptySelection):
            data: Dict[str, Any] = {'molecule_count': 0, 'species': [display_name(s) for s in result.species],
                                    'classification': 'empty selection'}
        else:
            data = result.to_dict()
        if source is not None:
            data['source'] = source

        filepath = self.output_dir / f"{stem}_uniformity.{file_format}"
        logger.info(f"Saving analysis result to {filepath}")
        with open(filepath, 'w') as f:
            if file_format == 'json':
                json.dump(data, f, indent=4)
            else:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        return filepath

    def save_histogram(self, histogram: Histogram, stem: str) -> Path:
        """
        Save histogram counts to a .npz file.

        The counts are stored as a (10, 10, 10) array indexed [iz, iy, ix].
        """
        filepath = self.output_dir / f"{stem}_histogram.npz"
        logger.info(f"Saving histogram to {filepath}")
        np.savez(filepath, counts=histogram.grid, n_molecules=histogram.n_molecules,
                 grid_size=GRID_SIZE)
        return filepath


def load_histogram(path: Union[str, Path]) -> Histogram:
    with np.load(path) as data:
        return Histogram(data['counts'].reshape(-1), int(data['n_molecules']))
