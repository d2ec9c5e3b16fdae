"""
CellBlender viz file reading module.

A viz file starts with a 4-byte format version followed by species records
until end of file. All fields are little-endian:

    u8    name length L
    L     species name
    u8    type tag (0 = volume molecule, otherwise surface molecule)
    u32   component count C (3 floats per molecule, C % 3 == 0)
    f32   C position components
    f32   C orientation components (surface molecules only)
"""
import struct
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

import numpy as np

from ..core.errors import (
    DecodeError,
    FileOpenError,
    InvalidCountError,
    ParseError,
    TruncatedRecordError,
)
from ..core.species import SpeciesRecord, SpeciesTable, SurfaceSpecies, VolumeSpecies

logger = logging.getLogger(__name__)

VERSION_FORMAT = struct.Struct('<I')
LENGTH_FORMAT = struct.Struct('<B')
TYPE_FORMAT = struct.Struct('<B')
COUNT_FORMAT = struct.Struct('<I')
FLOAT_DTYPE = np.dtype('<f4')


def _read_exact(stream: BinaryIO, n_bytes: int, field: str) -> bytes:
    offset = stream.tell()
    data = stream.read(n_bytes)
    if len(data) != n_bytes:
        raise TruncatedRecordError(field, offset, n_bytes, len(data))
    return data


def _read_scalar(stream: BinaryIO, fmt: struct.Struct, field: str) -> int:
    return fmt.unpack(_read_exact(stream, fmt.size, field))[0]


def _read_vectors(stream: BinaryIO, n_vectors: int, field: str) -> np.ndarray:
    raw = _read_exact(stream, n_vectors * 3 * FLOAT_DTYPE.itemsize, field)
    return np.frombuffer(raw, dtype=FLOAT_DTYPE).astype(np.float64).reshape(n_vectors, 3)


def read_version(stream: BinaryIO) -> int:
    return _read_scalar(stream, VERSION_FORMAT, 'format version')


def decode_record(stream: BinaryIO) -> SpeciesRecord:
    """
    Decode one species record starting at the current stream position.

    The stream is left positioned right after the record.

    Args:
        stream: Seekable binary stream

    Returns:
        VolumeSpecies or SurfaceSpecies

    Raises:
        TruncatedRecordError: If the stream ends inside the record
        InvalidCountError: If the component count is not divisible by 3
    """
    name_length = _read_scalar(stream, LENGTH_FORMAT, 'name length')
    name = _read_exact(stream, name_length, 'species name').decode('utf-8', errors='surrogateescape')
    type_tag = _read_scalar(stream, TYPE_FORMAT, f"type tag of '{name}'")
    n_components = _read_scalar(stream, COUNT_FORMAT, f"molecule count of '{name}'")
    if n_components % 3 != 0:
        raise InvalidCountError(name, n_components)
    n_mols = n_components // 3

    positions = _read_vectors(stream, n_mols, f"positions of '{name}'")
    if type_tag == 0:
        return VolumeSpecies(name, positions)
    orientations = _read_vectors(stream, n_mols, f"orientations of '{name}'")
    return SurfaceSpecies(name, positions, orientations)


def _at_eof(stream: BinaryIO) -> bool:
    pos = stream.tell()
    peek = stream.read(1)
    stream.seek(pos)
    return not peek


class CellBlenderReader:
    """Reads a CellBlender viz file into a SpeciesTable."""

    def __init__(self, filename: Union[str, Path]):
        self.filepath = Path(filename)
        self.version: Optional[int] = None

    def _open(self) -> BinaryIO:
        if not self.filepath.exists():
            raise FileOpenError(self.filepath, "no such file")
        if self.filepath.is_dir():
            raise FileOpenError(self.filepath, "is a directory")
        try:
            return open(self.filepath, 'rb')
        except OSError as e:
            raise FileOpenError(self.filepath, e.strerror or str(e)) from e

    def read_stream(self, stream: BinaryIO) -> SpeciesTable:
        """
        Parse an already opened stream.

        Raises:
            ParseError: If the header or any record fails to decode. No
                partial table is returned.
        """
        records = {}
        try:
            self.version = read_version(stream)
            logger.debug(f"{self.filepath.name}: format version {self.version}")
            while not _at_eof(stream):
                record = decode_record(stream)
                if record.name in records:
                    logger.warning(f"{self.filepath.name}: species '{record.name}' appears more than once; "
                                   f"keeping the later record.")
                records[record.name] = record
                logger.debug(f"Read {record.kind.value} species '{record.name}' "
                             f"with {record.n_molecules} molecules.")
        except DecodeError as e:
            raise ParseError(self.filepath, e) from e

        table = SpeciesTable(records, version=self.version)
        logger.info(f"Loaded {len(table)} species ({table.n_molecules} molecules) from {self.filepath.name}.")
        return table

    def load(self) -> SpeciesTable:
        with self._open() as f:
            return self.read_stream(f)


def parse_file(path: Union[str, Path]) -> SpeciesTable:
    """
    Parse a CellBlender viz file.

    Raises:
        FileOpenError: If the file cannot be opened
        ParseError: If the file content is malformed
    """
    return CellBlenderReader(path).load()
