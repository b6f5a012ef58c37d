"""
Module: converter.encoding

Purpose:
    Final pipeline stage. Compresses each resized raster into a PNG frame
    and packs the frames into a single .ico container. The container is
    written to a temporary file next to the destination and moved into
    place, so a failed write never leaves a partial icon behind.

Key Functions:
    - encode_frame(): Compress one raster into an IconFrame
    - encode_frames(): Compress all rasters concurrently
    - write_icon(): Pack frames into the .ico file

Key Classes:
    - IconFrame: One compressed image at one size

Dependencies:
    - concurrent.futures: Thread pool execution
    - PIL.Image: PNG compression and ICO container

Used By:
    - converter.pipeline
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image

from ico_toolkit.core.errors import ContainerWriteError, FrameEncodeError

from .timing import TimingLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IconFrame:
    """
    A compressed frame destined for the container.

    Attributes:
        size: Edge length in pixels
        mode: Color mode of the encoded raster (RGBA)
        data: PNG-encoded bytes
    """
    size: int
    mode: str
    data: bytes

    def to_image(self) -> Image.Image:
        """Decode the frame back into a Pillow image."""
        img = Image.open(BytesIO(self.data))
        img.load()
        return img


def encode_frame(image: Image.Image, size: int) -> IconFrame:
    """
    Compress a resized raster into a PNG frame.

    Args:
        image: Raster of exactly size x size
        size: Size tag for the frame

    Raises:
        FrameEncodeError: If the raster has the wrong dimensions or the
            PNG encoder fails
    """
    if image.size != (size, size):
        raise FrameEncodeError(
            f"Failed to encode frame: expected {size}x{size}, got {image.width}x{image.height}",
            size=size,
        )
    buffer = BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise FrameEncodeError(f"Failed to encode {size}x{size} frame", size=size) from e
    return IconFrame(size=size, mode=image.mode, data=buffer.getvalue())


def encode_frames(
    images: Sequence[Image.Image],
    sizes: Sequence[int],
    *,
    max_workers: Optional[int] = None,
    timing_log: Optional[TimingLog] = None,
) -> List[IconFrame]:
    """
    Compress every raster concurrently, keeping the order of sizes.

    When timing_log is given, each size gets an "encode" timing.

    Raises:
        FrameEncodeError: If any frame fails
        ValueError: If images and sizes differ in length
    """
    if len(images) != len(sizes):
        raise ValueError(f"{len(images)} images for {len(sizes)} sizes")

    def _encode(image: Image.Image, size: int) -> Tuple[IconFrame, float]:
        start = time.perf_counter()
        frame = encode_frame(image, size)
        return frame, time.perf_counter() - start

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(_encode, images, sizes))

    frames = [frame for frame, _ in results]
    if timing_log is not None:
        for frame, duration in results:
            timing_log.log_size(frame.size, "encode", duration)
    logger.debug(
        "Encoded frames: " + ", ".join(f"{f.size}px={len(f.data)}B" for f in frames)
    )
    return frames


def write_icon(frames: Sequence[IconFrame], output_path: Path) -> Path:
    """
    Pack frames into an .ico file.

    Frames are stored in ascending size order. The largest frame is the
    base image handed to Pillow; the rest are supplied as append_images
    so Pillow stores them as-is instead of re-sampling.

    Args:
        frames: One frame per size, sizes unique
        output_path: Destination .ico (replaced if it exists)

    Returns:
        output_path

    Raises:
        ContainerWriteError: If there are no frames, sizes repeat, or the
            file cannot be created or serialized
    """
    if not frames:
        raise ContainerWriteError("Failed to encode .ico file: no frames")
    ordered = sorted(frames, key=lambda f: f.size)
    sizes = [f.size for f in ordered]
    if len(set(sizes)) != len(sizes):
        raise ContainerWriteError(f"Failed to encode .ico file: duplicate sizes {sizes}")

    images = [frame.to_image() for frame in ordered]
    temp_path = output_path.with_name(f".{output_path.name}.tmp")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "wb") as f:
            images[-1].save(
                f,
                format="ICO",
                sizes=[(s, s) for s in sizes],
                append_images=images[:-1],
            )
        temp_path.replace(output_path)
    except (OSError, ValueError) as e:
        temp_path.unlink(missing_ok=True)
        raise ContainerWriteError(f"Failed to create file '{output_path}'") from e

    logger.debug(f"Wrote {len(ordered)} frames to {output_path}")
    return output_path

