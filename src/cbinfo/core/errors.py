"""
Error types raised while reading and analyzing CellBlender viz files.
"""
from pathlib import Path
from typing import Union


class CellBlenderError(Exception):
    """Base class for all cbinfo errors."""


class FileOpenError(CellBlenderError, OSError):
    """The viz file could not be opened for reading."""

    def __init__(self, file: Union[str, Path], reason: str = "failed to open"):
        self.file = str(file)
        self.reason = reason
        super().__init__(f"{self.file}: {reason}")


class DecodeError(CellBlenderError, ValueError):
    """A species record could not be decoded."""


class TruncatedRecordError(DecodeError):
    """The stream ended before a field was fully read."""

    def __init__(self, field: str, offset: int, wanted: int, got: int):
        self.field = field
        self.offset = offset
        self.wanted = wanted
        self.got = got
        super().__init__(
            f"stream ended while reading {field} at offset {offset} "
            f"(wanted {wanted} bytes, got {got})"
        )


class InvalidCountError(DecodeError):
    """The component count of a record is not a multiple of 3."""

    def __init__(self, species: str, count: int):
        self.species = species
        self.count = count
        super().__init__(
            f"component count {count} of species '{species}' is not divisible by 3"
        )


class ParseError(CellBlenderError):
    """Parsing a whole file failed; wraps the underlying decode error."""

    def __init__(self, file: Union[str, Path], cause: Exception):
        self.file = str(file)
        self.cause = cause
        super().__init__(f"Failed to parse CellBlender file {self.file}: {cause}")


class UnknownSpeciesError(CellBlenderError, KeyError):
    """A requested species is not present in the species table."""

    def __init__(self, species: str):
        self.species = species
        super().__init__(species)

    def __str__(self) -> str:
        return f"Unknown species {self.species} requested"


class NotSurfaceSpeciesError(CellBlenderError, ValueError):
    """Orientations were requested for a volume species."""

    def __init__(self, species: str):
        self.species = species
        super().__init__(f"Cannot list orientations for volume mol {species}")


class ConfigError(CellBlenderError, ValueError):
    """The configuration is missing keys or has values of the wrong type."""


class NonFinitePositionError(CellBlenderError, ValueError):
    """A selected species has a NaN or infinite position coordinate."""

    def __init__(self, species: str, n_bad: int):
        self.species = species
        self.n_bad = n_bad
        super().__init__(
            f"species '{species}' has {n_bad} molecule(s) with non-finite positions; "
            f"cannot bin them"
        )
