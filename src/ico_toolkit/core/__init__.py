"""
Core package: models and exceptions shared across the converter.
"""

from .errors import (
    IconToolkitError,
    NotAFileError,
    AbortedByWarning,
    DecodeError,
    SvgParseError,
    RasterizeError,
    FrameEncodeError,
    ContainerWriteError,
    describe_error,
)

__all__ = [
    "IconToolkitError",
    "NotAFileError",
    "AbortedByWarning",
    "DecodeError",
    "SvgParseError",
    "RasterizeError",
    "FrameEncodeError",
    "ContainerWriteError",
    "describe_error",
]
