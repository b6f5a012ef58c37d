"""
Module: converter.validation

Purpose:
    First pipeline stage. Checks the source path, derives the output path,
    flags an existing output, and clamps the requested sizes. Only touches
    the filesystem to test for existence.

Key Functions:
    - validate_request(): Build a ValidatedRequest or raise

Key Classes:
    - ValidatedRequest: Source, cleaned sizes and destination

Dependencies:
    - core.models: SourceDescriptor, SizeSelection, WarningLedger

Used By:
    - converter.pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from ico_toolkit.core.models import (
    MAX_ICON_SIZE,
    MIN_ICON_SIZE,
    SizeSelection,
    SourceDescriptor,
    WarningKind,
    WarningLedger,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatedRequest:
    """
    Inputs that passed validation.

    Attributes:
        source: Validated input image
        selection: Cleaned sizes (may be empty)
        output_path: Where the .ico will be written
    """
    source: SourceDescriptor
    selection: SizeSelection
    output_path: Path


def validate_request(
    source_path: Union[str, Path],
    requested_sizes: Iterable[int],
    ledger: WarningLedger,
    *,
    output_dir: Path,
) -> ValidatedRequest:
    """
    Validate the conversion inputs.

    Checks run in a fixed order: source is a file, output collision,
    size clamping. An empty selection is returned as-is; the caller
    decides how to report it.

    Args:
        source_path: Image to convert.
        requested_sizes: Raw sizes from the user.
        ledger: Receives OUTPUT_EXISTS and SIZES_CLAMPED warnings.
        output_dir: Directory the .ico is written to.

    Returns:
        ValidatedRequest with the cleaned selection.

    Raises:
        NotAFileError: If source_path is not an existing regular file.
        AbortedByWarning: If a warning is recorded under strict mode.
    """
    source = SourceDescriptor.from_path(source_path)
    output_path = source.output_path(output_dir)
    logger.debug(f"Source {source.path} classified as {source.kind.value}")

    if output_path.exists():
        ledger.warn(
            WarningKind.OUTPUT_EXISTS,
            f"the file '{output_path}' already exists!",
        )

    selection = SizeSelection.from_requested(requested_sizes)
    if selection.rejected:
        removed = ", ".join(str(s) for s in selection.rejected)
        ledger.warn(
            WarningKind.SIZES_CLAMPED,
            "The following sizes were removed because they are too big "
            f"(or too small, valid range is {MIN_ICON_SIZE}-{MAX_ICON_SIZE}): {removed}",
        )

    return ValidatedRequest(source=source, selection=selection, output_path=output_path)
