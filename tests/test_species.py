import numpy as np
import pytest

from cbinfo.core.errors import UnknownSpeciesError
from cbinfo.core.species import (
    Point3D,
    SpeciesKind,
    SpeciesRecord,
    SpeciesTable,
    SurfaceSpecies,
    VolumeSpecies,
)


def test_point_arithmetic():
    a = Point3D(1, 2, 3)
    b = Point3D(0.5, 0.5, 0.5)
    assert a + b == Point3D(1.5, 2.5, 3.5)
    assert a - b == Point3D(0.5, 1.5, 2.5)
    assert a / 2 == Point3D(0.5, 1.0, 1.5)
    assert list(a) == [1.0, 2.0, 3.0]
    np.testing.assert_array_equal(a.as_array(), [1.0, 2.0, 3.0])


def test_point_from_array_rejects_wrong_length():
    with pytest.raises(ValueError):
        Point3D.from_array([1.0, 2.0])


def test_volume_species_has_no_orientations():
    rec = VolumeSpecies('A', [[1, 2, 3]])
    assert rec.kind is SpeciesKind.VOLUME
    assert rec.orientations.shape == (0, 3)
    assert rec.points() == [Point3D(1, 2, 3)]


def test_surface_species_requires_matching_orientations():
    with pytest.raises(ValueError, match="Orientation count mismatch"):
        SurfaceSpecies('S', [[0, 0, 0], [1, 1, 1]], [[0, 0, 1]])


def test_positions_must_be_vectors():
    with pytest.raises(ValueError, match="Positions must have shape"):
        VolumeSpecies('A', [[1, 2], [3, 4]])


def test_records_are_read_only():
    rec = SurfaceSpecies('S', [[0, 0, 0]], [[0, 0, 1]])
    with pytest.raises(ValueError):
        rec.positions[0, 0] = 5.0
    with pytest.raises(ValueError):
        rec.orientations[0, 0] = 5.0
    with pytest.raises(AttributeError):
        rec.name = 'T'


def test_record_copies_input():
    data = np.zeros((2, 3))
    rec = VolumeSpecies('A', data)
    data[0, 0] = 7.0
    assert rec.positions[0, 0] == 0.0


@pytest.fixture
def table():
    return SpeciesTable({
        'A': VolumeSpecies('A', [[0, 0, 0], [1, 1, 1]]),
        'B': VolumeSpecies('B', np.empty((0, 3))),
        'S': SurfaceSpecies('S', [[2, 2, 2]], [[0, 0, 1]]),
    }, version=1)


def test_table_mapping_interface(table):
    assert len(table) == 3
    assert list(table) == ['A', 'B', 'S']
    assert 'A' in table
    assert 'Z' not in table
    assert table.get('Z') is None
    assert table.n_molecules == 3


def test_table_unknown_species(table):
    with pytest.raises(UnknownSpeciesError, match="Unknown species Z requested"):
        table['Z']


def test_table_is_immutable(table):
    with pytest.raises(TypeError):
        table['C'] = VolumeSpecies('C', [[0, 0, 0]])


def test_table_does_not_alias_builder():
    builder = {'A': VolumeSpecies('A', [[0, 0, 0]])}
    table = SpeciesTable(builder)
    builder['B'] = VolumeSpecies('B', [[0, 0, 0]])
    assert list(table) == ['A']


def test_select_defaults_to_all(table):
    assert table.select() == ['A', 'B', 'S']
    assert table.select([]) == ['A', 'B', 'S']


def test_select_keeps_request_order_once(table):
    assert table.select(['S', 'A', 'S']) == ['S', 'A']


def test_select_unknown_species(table):
    with pytest.raises(UnknownSpeciesError) as excinfo:
        table.select(['A', 'nope'])
    assert excinfo.value.species == 'nope'


def test_base_record_is_abstract():
    with pytest.raises(TypeError):
        SpeciesRecord('x', [])
