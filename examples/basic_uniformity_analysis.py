#!/usr/bin/env python3
"""
Basic Uniformity Analysis Example

This script demonstrates how to load a CellBlender viz file and test
whether the molecules of selected species are spread uniformly over their
bounding box, using the cbinfo package.
"""

import sys
from pathlib import Path

from cbinfo import parse_file, analyze_uniformity, EmptySelection, ResultWriter
from cbinfo.visualization import HistogramPlotter

def main():
    if len(sys.argv) < 2:
        print(f"Usage: python {Path(sys.argv[0]).name} <viz_file> [species ...]")
        sys.exit(1)

    viz_file = Path(sys.argv[1])
    output_dir = Path("uniformity_output")

    # Load species table
    print("Loading viz file...")
    table = parse_file(viz_file)
    for name, rec in table.items():
        print(f"  {name}: {rec.n_molecules} molecules ({rec.kind.value})")

    # Select species (all of them if none given)
    species = table.select(sys.argv[2:])

    # Bin and test
    print("Analyzing positions...")
    result, histogram = analyze_uniformity(table, species, return_histogram=True)
    if isinstance(result, EmptySelection):
        print("No molecules in selection, nothing to analyze.")
        return

    print(f"chi2 = {result.chi_squared:.3f} (critical value {result.critical_value:.3f}): "
          f"{result.classification.value}")

    # Save results and a plot of the histogram projections
    writer = ResultWriter(output_dir)
    writer.save_analysis_result(result, viz_file.stem, source=str(viz_file))
    writer.save_histogram(histogram, viz_file.stem)
    HistogramPlotter(histogram, output_dir / f"{viz_file.stem}_histogram.png", result=result).generate_plot()

    print(f"Analysis complete. Results saved in {output_dir}")

if __name__ == "__main__":
    main()
