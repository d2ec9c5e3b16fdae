import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from cbinfo import __version__
from cbinfo.core.errors import CellBlenderError
from cbinfo.core.uniformity import analyze_uniformity
from cbinfo.core.binning import EmptySelection
from cbinfo.io.reader import parse_file
from cbinfo.io.writer import (
    ResultWriter,
    display_name,
    write_analysis_report,
    write_orientations,
    write_positions,
    write_species_info,
)
from cbinfo.utils.config_manager import ConfigManager

logger = logging.getLogger(__name__)

DESCRIPTION = f"cb_info v{__version__}: inspect MCell CellBlender viz files and test molecule positions for spatial uniformity."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='cbinfo', description=DESCRIPTION)
    parser.add_argument('files', nargs='*', help='CellBlender viz files to operate on.')
    parser.add_argument('-i', '--species-info', action='store_true',
                        help='Print names of species, number of available molecules and VOL/SURF type.')
    parser.add_argument('-p', '--print-positions', action='store_true',
                        help='Print the (x,y,z) positions of all molecules of the selected species.')
    parser.add_argument('-o', '--print-orientations', action='store_true',
                        help='Print the orientations of all molecules of the selected (surface) species.')
    parser.add_argument('-s', '--add-separator', action='store_true',
                        help='Add a separator between species in printouts.')
    parser.add_argument('-a', '--analyze-positions', action='store_true',
                        help='Check if molecules are uniformly distributed.')
    parser.add_argument('-n', '--species-name', action='append', dest='species', metavar='NAME',
                        help='Name of a species to act on (repeatable; default: all species).')
    parser.add_argument('--config', type=str, help='Path to YAML configuration file.')
    parser.add_argument('--output-dir', type=str, help='Directory for saved analysis results.')
    parser.add_argument('--format', choices=['yaml', 'json'], help='Format of saved analysis results.')
    parser.add_argument('--plot', action='store_true', help='Save a histogram plot per file (requires --output-dir).')
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    return parser


def load_config(args: argparse.Namespace) -> ConfigManager:
    """Merge the YAML configuration (if any) with command line overrides."""
    config = ConfigManager(args.config)
    updates = {'actions': {}, 'output': {}, 'logging': {}}
    for flag, key in [('species_info', 'species_info'), ('print_positions', 'print_positions'),
                      ('print_orientations', 'print_orientations'), ('analyze_positions', 'analyze_positions')]:
        if getattr(args, flag):
            updates['actions'][key] = True
    if args.add_separator:
        updates['output']['add_separator'] = True
    if args.output_dir is not None:
        updates['output']['directory'] = args.output_dir
    if args.format is not None:
        updates['output']['format'] = args.format
    if args.plot:
        updates['output']['plot_histogram'] = True
    if args.species:
        updates['selection'] = {'species': list(args.species)}
    if args.verbose:
        updates['logging']['level'] = 'DEBUG'
    elif args.quiet:
        updates['logging']['level'] = 'WARNING'
    config.update_config(updates)
    return config


def process_file(path: str, config: ConfigManager, writer: Optional[ResultWriter] = None) -> None:
    """
    Run the configured actions on one viz file.

    Raises:
        CellBlenderError: On any decode or analysis failure; the caller stops the batch.
        OSError: If a result file cannot be written.
    """
    actions = config.get_actions_config()
    out_cfg = config.get_output_config()

    table = parse_file(path)
    species = table.select(config.get_species())

    if actions['species_info']:
        write_species_info(table)
    if actions['print_positions']:
        write_positions(table, species, add_separator=out_cfg['add_separator'])
    if actions['print_orientations']:
        write_orientations(table, species, add_separator=out_cfg['add_separator'])
    if actions['analyze_positions']:
        result, histogram = analyze_uniformity(table, species, return_histogram=True)
        write_analysis_report(result)
        if writer is not None:
            stem = Path(path).stem
            writer.save_analysis_result(result, stem, file_format=out_cfg['format'], source=str(path))
            if histogram is not None and out_cfg['save_histogram']:
                writer.save_histogram(histogram, stem)
            if histogram is not None and out_cfg['plot_histogram']:
                from cbinfo.visualization import HistogramPlotter
                HistogramPlotter(histogram, writer.output_dir / f"{stem}_histogram.png", result=result,
                                 title=stem).generate_plot()
        elif isinstance(result, EmptySelection):
            logger.warning(f"{path}: selected species contain no molecules.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        config = load_config(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"***** ERROR: {e}")
        return 1
    logging.getLogger('cbinfo').setLevel(config.get_log_level())

    if not args.files:
        logger.error("***** ERROR: No MCell viz files specified to operate on")
        parser.print_usage(sys.stderr)
        return 1

    out_cfg = config.get_output_config()
    if out_cfg['plot_histogram'] and out_cfg['directory'] is None:
        logger.warning("Histogram plots need an output directory; --plot is ignored.")
    writer = None
    if out_cfg['directory'] is not None:
        try:
            writer = ResultWriter(out_cfg['directory'])
        except OSError as e:
            logger.error(f"***** ERROR: cannot create output directory {out_cfg['directory']}: {e}")
            return 1

    # The first file that fails aborts the whole run.
    for path in tqdm(args.files, desc='Files', unit='file', disable=len(args.files) < 2):
        try:
            process_file(path, config, writer)
        except (CellBlenderError, OSError) as e:
            logger.error(f"***** ERROR: {display_name(str(e))}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
