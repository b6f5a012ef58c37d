"""
Module: source

Purpose:
    Provides the SourceDescriptor dataclass - a validated reference to the
    input image, tagged with whether it is decoded directly (raster) or
    rendered first (vector).

Key Functions:
    - SourceDescriptor.from_path(path): Validate and classify a path
    - SourceDescriptor.output_path(directory): Derive the .ico destination

Dependencies:
    - pathlib (std)
    - core.errors: NotAFileError

Used By:
    - converter.validation
    - converter.decoding
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from ..errors import NotAFileError

ICON_EXTENSION = ".ico"
VECTOR_EXTENSIONS = frozenset({".svg"})


class SourceKind(str, Enum):
    """How the source is turned into pixels."""
    RASTER = "raster"
    VECTOR = "vector"


@dataclass(frozen=True, slots=True)
class SourceDescriptor:
    """
    Input image reference.

    Attributes:
        path: Path to an existing regular file
        kind: RASTER or VECTOR, from the file extension

    Example:
        >>> src = SourceDescriptor(Path("logo.SVG"), classify_source(Path("logo.SVG")))
        >>> src.kind
        <SourceKind.VECTOR: 'vector'>
        >>> src.output_path(Path("."))
        PosixPath('logo.ico')
    """

    path: Path
    kind: SourceKind

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceDescriptor":
        """
        Classify a path, rejecting anything that is not a regular file.

        Raises:
            NotAFileError: If path is missing, a directory, or special file
        """
        path = Path(path)
        if not path.is_file():
            raise NotAFileError(f"Path '{path}' isn't a file!")
        return cls(path=path, kind=classify_source(path))

    @property
    def is_vector(self) -> bool:
        return self.kind is SourceKind.VECTOR

    def output_path(self, directory: Path) -> Path:
        """Destination container: the source stem with .ico, inside directory."""
        return directory / f"{self.path.stem}{ICON_EXTENSION}"


def classify_source(path: Path) -> SourceKind:
    """Vector when the extension is a known vector format, case-insensitive."""
    if path.suffix.lower() in VECTOR_EXTENSIONS:
        return SourceKind.VECTOR
    return SourceKind.RASTER
