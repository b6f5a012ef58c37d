"""
Module: converter.pipeline

Purpose:
    Main orchestrator for image-to-icon conversion. Runs the stages in a
    fixed order, Validate -> Decode -> Resize -> Encode, and stops at the
    first fatal error. Nothing is written until the encode stage.

Key Functions:
    - convert_image(): Main entry point for conversion

Key Classes:
    - ConversionResult: Container for conversion output

Dependencies:
    - converter.validation, decoding, resizing, encoding: Stage implementations
    - converter.timing: Stage timings

Used By:
    - ico_toolkit.cli: Command-line conversion
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ico_toolkit.core.models import ConversionWarning, WarningLedger

from .config import ConversionConfig
from .decoding import check_geometry, decode_source
from .encoding import encode_frames, write_icon
from .resizing import resize_all
from .timing import TimingLog, timed_phase
from .validation import validate_request

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """
    Result of converting one image.

    Attributes:
        output_path: Derived .ico path (set even if nothing was written)
        sizes: Sizes that were (or would have been) generated
        warnings: Warnings recorded, in order
        written: False only for the "no valid sizes" no-op
        timings: Per-stage and per-size durations
    """
    output_path: Optional[Path]
    sizes: List[int]
    warnings: List[ConversionWarning]
    written: bool
    timings: TimingLog = field(default_factory=TimingLog)

    @property
    def frame_count(self) -> int:
        return len(self.sizes) if self.written else 0


def convert_image(
    source_path: Union[str, Path],
    config: Optional[ConversionConfig] = None,
) -> ConversionResult:
    """
    Convert an image into a multi-resolution .ico file.

    Pipeline:
    1. Validate the source path, output collision and sizes
    2. Decode the source (rendering SVGs at the largest size)
    3. Check geometry (non-square, upscaling)
    4. Resize to every size concurrently
    5. Compress each frame concurrently and write the container

    An empty size list after clamping is reported as an error-level log
    message but is not an exception: the result has written=False and the
    CLI still exits successfully.

    Args:
        source_path: Image to convert.
        config: Optional conversion configuration.

    Returns:
        ConversionResult describing what was produced.

    Raises:
        NotAFileError: If source_path is not a regular file.
        AbortedByWarning: If any warning is recorded under strict mode.
        DecodeError: If the source cannot be decoded (including
            SvgParseError and RasterizeError).
        FrameEncodeError: If a frame cannot be compressed.
        ContainerWriteError: If the .ico cannot be written.

    Example (assuming logo.png exists in the working directory):
        >>> result = convert_image(Path("logo.png"), ConversionConfig(sizes=(16, 32)))  # doctest: +SKIP
        >>> result.output_path  # doctest: +SKIP
        PosixPath('logo.ico')
    """
    config = config or ConversionConfig()
    ledger = WarningLedger(strict=config.strict)
    timing_log = TimingLog()

    with timed_phase(timing_log, "validate"):
        request = validate_request(
            source_path,
            config.sizes,
            ledger,
            output_dir=config.resolved_output_dir(),
        )
    selection = request.selection

    if selection.is_empty:
        logger.error("No sizes were marked for the icon, aborting!")
        return ConversionResult(
            output_path=request.output_path,
            sizes=[],
            warnings=list(ledger),
            written=False,
            timings=timing_log,
        )

    with timed_phase(timing_log, "decode"):
        decoded = decode_source(request.source, selection)
    check_geometry(decoded, selection, ledger)

    sizes = list(selection)
    logger.info(
        f"Converting {request.source.path} to {request.output_path} "
        f"with sizes [{', '.join(str(s) for s in sizes)}]..."
    )

    with timed_phase(timing_log, "resize"):
        images = resize_all(
            decoded.image,
            sizes,
            config.resize_filter,
            max_workers=config.max_workers,
            timing_log=timing_log,
        )

    with timed_phase(timing_log, "encode"):
        frames = encode_frames(
            images,
            sizes,
            max_workers=config.max_workers,
            timing_log=timing_log,
        )

    with timed_phase(timing_log, "write"):
        write_icon(frames, request.output_path)

    logger.info(f"Icon saved to '{request.output_path}'!")
    logger.debug(timing_log.summary())

    return ConversionResult(
        output_path=request.output_path,
        sizes=sizes,
        warnings=list(ledger),
        written=True,
        timings=timing_log,
    )
