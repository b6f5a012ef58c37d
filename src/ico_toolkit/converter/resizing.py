"""
Module: converter.resizing

Purpose:
    Third pipeline stage. Produces one exactly square RGBA raster per
    requested size. Sizes are independent of each other, so the work is
    fanned out over a thread pool; the decoded source is only read.

Key Functions:
    - resize_to(): Resize one image to size x size
    - resize_all(): Resize to every size, preserving order

Dependencies:
    - concurrent.futures: Thread pool execution
    - PIL.Image / PIL.ImageFilter: Resampling and Gaussian pre-filter

Used By:
    - converter.pipeline
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageFilter

from .config import ResizeFilter
from .timing import TimingLog

logger = logging.getLogger(__name__)


def resize_to(image: Image.Image, size: int, resize_filter: ResizeFilter) -> Image.Image:
    """
    Resize image to exactly size x size.

    Non-square sources are stretched to fill the square.

    Args:
        image: Source raster (not modified)
        size: Target edge length in pixels
        resize_filter: Resampling filter

    Returns:
        New RGBA image of size (size, size)

    Example:
        >>> resize_to(Image.new("RGBA", (128, 64)), 16, ResizeFilter.CUBIC).size
        (16, 16)
    """
    source = image
    if resize_filter.needs_prefilter:
        radius = _gaussian_radius(image.size, size)
        if radius > 0:
            source = image.filter(ImageFilter.GaussianBlur(radius))

    resized = source.resize((size, size), resize_filter.resample)
    if resized.mode != "RGBA":
        resized = resized.convert("RGBA")
    return resized


def resize_all(
    image: Image.Image,
    sizes: Sequence[int],
    resize_filter: ResizeFilter,
    *,
    max_workers: Optional[int] = None,
    timing_log: Optional[TimingLog] = None,
) -> List[Image.Image]:
    """
    Resize image to every size concurrently.

    Args:
        image: Decoded source raster, shared read-only by workers
        sizes: Target sizes; output follows this order
        resize_filter: Resampling filter
        max_workers: Thread pool size (None = executor default)
        timing_log: Optional log receiving one "resize" timing per size

    Returns:
        One image per size, in the order of sizes
    """
    def _resize(size: int) -> Tuple[Image.Image, float]:
        start = time.perf_counter()
        resized = resize_to(image, size, resize_filter)
        return resized, time.perf_counter() - start

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(_resize, sizes))

    if timing_log is not None:
        for size, (_, duration) in zip(sizes, results):
            timing_log.log_size(size, "resize", duration)
    logger.debug(f"Resized to {len(results)} sizes with {resize_filter.value} filter")
    return [resized for resized, _ in results]


def _gaussian_radius(source_size: Sequence[int], target: int) -> float:
    """Blur radius for the Gaussian filter, zero when not downscaling."""
    scale = max(source_size) / target
    if scale <= 1:
        return 0.0
    return scale / 2
