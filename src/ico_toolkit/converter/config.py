"""
Module: converter.config

Purpose:
    Configuration for the conversion pipeline. Provides immutable settings
    for requested sizes, resampling filter, strict mode and worker count,
    and the mapping from the tool's own filter names onto Pillow's.

Key Classes:
    - ResizeFilter: Closed set of resampling filters exposed on the CLI
    - ConversionConfig: Main configuration for a conversion

Dependencies:
    - dataclasses: For frozen dataclass support
    - PIL.Image: Resampling identifiers

Used By:
    - converter.resizing: Uses ResizeFilter.resample
    - converter.pipeline: Uses ConversionConfig
    - cli: Builds ConversionConfig from arguments
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

from ico_toolkit.core.models import DEFAULT_SIZES


class ResizeFilter(str, Enum):
    """
    Resampling filters offered on the command line.

    Kept separate from Pillow's enumeration so the CLI surface does not
    change if the backend does.
    """
    NEAREST = "nearest"
    LINEAR = "linear"
    CUBIC = "cubic"
    GAUSSIAN = "gaussian"
    LANCZOS = "lanczos"

    @property
    def resample(self) -> Image.Resampling:
        """Pillow resampling identifier for this filter."""
        return _PILLOW_RESAMPLING[self]

    @property
    def needs_prefilter(self) -> bool:
        """Gaussian is a blur pre-filter followed by a bilinear resize."""
        return self is ResizeFilter.GAUSSIAN

    @classmethod
    def parse(cls, value: str) -> "ResizeFilter":
        """
        Parse a filter name, accepting aliases.

        Raises:
            ValueError: If the name is unknown
        """
        key = value.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            names = ", ".join(f.value for f in cls)
            raise ValueError(f"unknown filter '{value}' (choose from {names})") from None


_PILLOW_RESAMPLING = {
    ResizeFilter.NEAREST: Image.Resampling.NEAREST,
    ResizeFilter.LINEAR: Image.Resampling.BILINEAR,
    ResizeFilter.CUBIC: Image.Resampling.BICUBIC,
    ResizeFilter.GAUSSIAN: Image.Resampling.BILINEAR,
    ResizeFilter.LANCZOS: Image.Resampling.LANCZOS,
}

_ALIASES = {
    "triangle": "linear",
    "bilinear": "linear",
    "catmull-rom": "cubic",
    "bicubic": "cubic",
    "lanczos3": "lanczos",
}


@dataclass(frozen=True)
class ConversionConfig:
    """
    Configuration for one image-to-icon conversion.

    Attributes:
        sizes: Requested icon sizes, unvalidated (default DEFAULT_SIZES)
        resize_filter: Resampling filter (default CUBIC)
        strict: Abort on the first warning (default False)
        max_workers: Thread pool size for resize/encode (None = executor default)
        output_dir: Directory for the .ico (None = current working directory)
    """
    sizes: Tuple[int, ...] = DEFAULT_SIZES
    resize_filter: ResizeFilter = ResizeFilter.CUBIC
    strict: bool = False
    max_workers: Optional[int] = None
    output_dir: Optional[Path] = None

    def resolved_output_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else Path(".")
