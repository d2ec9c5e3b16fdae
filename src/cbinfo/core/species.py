"""
Species data structures for molecules read from CellBlender viz files.
"""
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .errors import UnknownSpeciesError


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float

    def __post_init__(self):
        object.__setattr__(self, 'x', float(self.x))
        object.__setattr__(self, 'y', float(self.y))
        object.__setattr__(self, 'z', float(self.z))

    def __add__(self, other: 'Point3D') -> 'Point3D':
        return Point3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'Point3D') -> 'Point3D':
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __truediv__(self, scalar: float) -> 'Point3D':
        return Point3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: Sequence[float]) -> 'Point3D':
        if len(arr) != 3:
            raise ValueError(f"Point3D needs 3 components, got {len(arr)}")
        return cls(arr[0], arr[1], arr[2])


class SpeciesKind(Enum):
    VOLUME = 'VOL'
    SURFACE = 'SURF'


def _as_vectors(data, name: str) -> np.ndarray:
    """Return a read-only float64 (N, 3) copy of data."""
    arr = np.array(data, dtype=np.float64)
    if arr.size == 0:
        arr = np.empty((0, 3), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"{name} must have shape (N, 3), got {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class SpeciesRecord(ABC):
    """Molecules of one species. Instantiate VolumeSpecies or SurfaceSpecies."""
    name: str
    positions: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, 'positions', _as_vectors(self.positions, 'Positions'))

    @property
    @abstractmethod
    def kind(self) -> SpeciesKind:
        ...

    @property
    def n_molecules(self) -> int:
        return len(self.positions)

    def points(self) -> List[Point3D]:
        return [Point3D.from_array(p) for p in self.positions]


@dataclass(frozen=True, eq=False)
class VolumeSpecies(SpeciesRecord):

    @property
    def kind(self) -> SpeciesKind:
        return SpeciesKind.VOLUME

    @property
    def orientations(self) -> np.ndarray:
        empty = np.empty((0, 3), dtype=np.float64)
        empty.setflags(write=False)
        return empty


@dataclass(frozen=True, eq=False)
class SurfaceSpecies(SpeciesRecord):
    # orientations[i] belongs to the molecule at positions[i]
    orientations: np.ndarray

    def __post_init__(self):
        super().__post_init__()
        orient = _as_vectors(self.orientations, 'Orientations')
        if orient.shape != self.positions.shape:
            raise ValueError(
                f"Orientation count mismatch for '{self.name}': "
                f"{len(orient)} orientations for {len(self.positions)} positions."
            )
        object.__setattr__(self, 'orientations', orient)

    @property
    def kind(self) -> SpeciesKind:
        return SpeciesKind.SURFACE


class SpeciesTable(Mapping):
    """
    Immutable mapping from species name to SpeciesRecord.

    The table keeps the order in which species names first appeared in the
    source file. It is built once by the reader and never changes afterwards.
    """

    def __init__(self, records: Optional[Dict[str, SpeciesRecord]] = None, version: Optional[int] = None):
        self._records = MappingProxyType(dict(records or {}))
        self.version = version

    def __getitem__(self, name: str) -> SpeciesRecord:
        try:
            return self._records[name]
        except KeyError:
            raise UnknownSpeciesError(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"SpeciesTable({list(self._records)!r}, version={self.version!r})"

    @property
    def n_molecules(self) -> int:
        return sum(rec.n_molecules for rec in self._records.values())

    def select(self, names: Optional[Iterable[str]] = None) -> List[str]:
        """
        Resolve a species selection against this table.

        Args:
            names: Requested species names. None or empty selects every
                species in table order.

        Returns:
            List of species names, each listed once

        Raises:
            UnknownSpeciesError: If a requested name is not in the table
        """
        requested = list(names or [])
        if not requested:
            return list(self._records)
        selected = []
        for name in requested:
            if name not in self._records:
                raise UnknownSpeciesError(name)
            if name not in selected:
                selected.append(name)
        return selected
