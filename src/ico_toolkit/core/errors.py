"""
Module: core.errors

Purpose:
    Exception taxonomy for icon conversion. Every fatal condition raised by
    the converter derives from IconToolkitError so the CLI can catch one
    base class and report a single styled line.

Key Classes:
    - IconToolkitError: Base class
    - NotAFileError: Source path is not an existing regular file
    - AbortedByWarning: A warning escalated under strict mode
    - DecodeError / SvgParseError / RasterizeError: Decode stage failures
    - FrameEncodeError: A single frame could not be compressed
    - ContainerWriteError: The .ico file could not be written

Key Functions:
    - describe_error(): Render an exception with its cause chain

Used By:
    - core.models.ledger: Raises AbortedByWarning
    - converter.*: Raise stage errors
    - cli: Reports errors
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .models.ledger import ConversionWarning


class IconToolkitError(Exception):
    """Base class for all conversion failures."""


class NotAFileError(IconToolkitError):
    """Source path does not reference an existing regular file."""


class AbortedByWarning(IconToolkitError):
    """
    A warning-class condition was escalated because strict mode is on.

    Attributes:
        warning: The ledger entry that triggered the abort.
    """

    def __init__(self, message: str, warning: Optional["ConversionWarning"] = None):
        super().__init__(message)
        self.warning = warning


class DecodeError(IconToolkitError):
    """Source image could not be opened or decoded."""


class SvgParseError(DecodeError):
    """SVG document is malformed."""


class RasterizeError(DecodeError):
    """SVG document could not be rendered to pixels."""


class FrameEncodeError(IconToolkitError):
    """A resized raster could not be compressed into a frame."""

    def __init__(self, message: str, size: Optional[int] = None):
        super().__init__(message)
        self.size = size


class ContainerWriteError(IconToolkitError):
    """The icon container could not be created or serialized."""


def describe_error(exc: BaseException) -> str:
    """
    Render an exception followed by its chained causes.

    Example:
        >>> try:
        ...     raise DecodeError("Failed to decode image!") from OSError("truncated")
        ... except DecodeError as e:
        ...     describe_error(e)
        'Failed to decode image!: truncated'
    """
    parts: List[str] = []
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current) or type(current).__name__
        if not parts or parts[-1] != text:
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts)
