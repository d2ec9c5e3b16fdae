import numpy as np
import pytest

from cbinfo.core import uniformity
from cbinfo.core.binning import N_BINS, BoundingBox, EmptySelection, Histogram
from cbinfo.core.errors import CellBlenderError, NonFinitePositionError
from cbinfo.core.species import Point3D, SpeciesTable, VolumeSpecies
from cbinfo.core.uniformity import (
    CHI2_CRITICAL_999,
    DEGREES_OF_FREEDOM,
    Classification,
    UniformityResult,
    analyze_uniformity,
    chi_squared,
)
from cbinfo.io.reader import parse_file


def volume_table(positions, name='A'):
    return SpeciesTable({name: VolumeSpecies(name, positions)})


def test_constants():
    assert CHI2_CRITICAL_999 == 1105.91695750458
    assert DEGREES_OF_FREEDOM == 999


def test_chi_squared_flat_histogram_is_zero():
    assert chi_squared(np.full(N_BINS, 3), 3 * N_BINS) == 0.0


def test_chi_squared_requires_molecules():
    with pytest.raises(ValueError):
        chi_squared(np.zeros(N_BINS), 0)


def test_single_bin_statistic():
    counts = np.zeros(N_BINS, dtype=np.int64)
    counts[0] = 1000
    hist = Histogram(counts, 1000)
    bounds = BoundingBox(Point3D(0, 0, 0), Point3D(0, 0, 0), 1000)
    result = uniformity.test_uniformity(hist, bounds)
    assert result.chi_squared == pytest.approx(999000.0)
    assert result.classification is Classification.NOT_UNIFORM
    assert not result.is_uniform


def test_mismatched_bounds_rejected():
    hist = Histogram(np.ones(N_BINS, dtype=np.int64), N_BINS)
    bounds = BoundingBox(Point3D(0, 0, 0), Point3D(1, 1, 1), 5)
    with pytest.raises(ValueError):
        uniformity.test_uniformity(hist, bounds)


def test_clustered_file_is_not_uniform(viz_file, record_bytes):
    """1000 identical positions: one bin holds everything."""
    path = viz_file([record_bytes('A', np.tile([[0.5, 0.5, 0.5]], (1000, 1)))])
    table = parse_file(path)
    result, hist = analyze_uniformity(table, ['A'], return_histogram=True)
    assert hist.counts[0] == 1000
    assert np.count_nonzero(hist.counts) == 1
    assert result.molecule_count == 1000
    assert result.chi_squared == pytest.approx((1000 - 1) ** 2 + 999 * 1.0)
    assert result.chi_squared == pytest.approx(999000.0)
    assert result.classification is Classification.NOT_UNIFORM


def test_lattice_is_uniform():
    # 100 points per axis at cell centres; every bin receives exactly 1000
    axis = (np.arange(100) + 0.5) / 100.0
    x, y, z = np.meshgrid(axis, axis, axis, indexing='ij')
    pos = np.stack([x.ravel(), y.ravel(), z.ravel()], axis=1)
    result, hist = analyze_uniformity(volume_table(pos), ['A'], return_histogram=True)
    assert np.all(hist.counts == 1000)
    assert result.chi_squared == pytest.approx(0.0)
    assert result.is_uniform


def test_random_uniform_positions_are_uniform():
    rng = np.random.default_rng(12345)
    outcomes = []
    for _ in range(5):
        pos = rng.uniform(low=[-1.0, 0.0, 2.0], high=[1.0, 3.0, 2.5], size=(1_000_000, 3))
        result = analyze_uniformity(volume_table(pos), ['A'])
        outcomes.append(result.is_uniform)
    # each run is uniform with probability ~0.99
    assert sum(outcomes) >= 3


def test_empty_selection_skips_analysis():
    table = SpeciesTable({'A': VolumeSpecies('A', np.empty((0, 3)))})
    with np.errstate(all='raise'):
        result = analyze_uniformity(table, ['A'])
    assert isinstance(result, EmptySelection)
    result, hist = analyze_uniformity(table, ['A'], return_histogram=True)
    assert isinstance(result, EmptySelection)
    assert hist is None


def test_result_carries_bounding_box():
    result = analyze_uniformity(volume_table([[0, 0, 0], [1, 2, 3]]), ['A'])
    assert isinstance(result, UniformityResult)
    assert result.bounding_box_min == Point3D(0, 0, 0)
    assert result.bounding_box_max == Point3D(1, 2, 3)
    assert result.critical_value == CHI2_CRITICAL_999


def test_result_to_dict():
    result = analyze_uniformity(volume_table([[0, 0, 0], [1, 1, 1]]), ['A'])
    d = result.to_dict()
    assert d['molecule_count'] == 2
    assert d['bounding_box'] == {'min': [0.0, 0.0, 0.0], 'max': [1.0, 1.0, 1.0]}
    assert d['degrees_of_freedom'] == 999
    assert d['classification'] == 'not uniform'


def test_boundary_equal_to_critical_is_not_uniform(monkeypatch):
    counts = np.zeros(N_BINS, dtype=np.int64)
    counts[:2] = 1
    hist = Histogram(counts, 2)
    bounds = BoundingBox(Point3D(0, 0, 0), Point3D(1, 1, 1), 2)
    value = chi_squared(counts, 2)
    monkeypatch.setattr(uniformity, 'CHI2_CRITICAL_999', value)
    assert uniformity.test_uniformity(hist, bounds).classification is Classification.NOT_UNIFORM


def test_nan_position_is_a_typed_error():
    table = volume_table([[0, 0, 0], [1, 1, 1], [np.nan, 0.5, 0.5]])
    with pytest.raises(NonFinitePositionError, match="non-finite") as excinfo:
        analyze_uniformity(table, ['A'])
    assert isinstance(excinfo.value, CellBlenderError)
