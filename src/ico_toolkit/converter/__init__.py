"""
Module: converter

Purpose:
    Conversion pipeline turning one raster or SVG image into a
    multi-resolution .ico container.

Key Functions:
    - convert_image(): Main entry point for conversion

Key Classes:
    - ConversionConfig: Configuration for conversion settings
    - ConversionResult: Container for conversion output
    - ResizeFilter: Resampling filter selection

Dependencies:
    - PIL: Decode, resize, PNG and ICO encoding
    - cairosvg: SVG rendering

Used By:
    - ico_toolkit.cli: Command-line interface
"""

from .config import ConversionConfig, ResizeFilter
from .pipeline import convert_image, ConversionResult

__all__ = [
    "convert_image",
    "ConversionConfig",
    "ConversionResult",
    "ResizeFilter",
]
