"""
Module: converter.decoding

Purpose:
    Second pipeline stage. Loads the source into a single RGBA raster.
    Raster formats are decoded with Pillow; SVG documents are parsed and
    rendered once with CairoSVG at the largest requested size, so smaller
    sizes are downsampled from one high-fidelity render.

Key Functions:
    - decode_source(): Produce a DecodedImage from a SourceDescriptor
    - check_geometry(): Warn on non-square input or upscaling

Key Classes:
    - DecodedImage: Raster plus the source's natural size

Dependencies:
    - PIL.Image: Raster decode
    - cairosvg: SVG parse and render (imported lazily)

Used By:
    - converter.pipeline
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

from PIL import Image

from ico_toolkit.core.errors import DecodeError, RasterizeError, SvgParseError
from ico_toolkit.core.models import (
    SizeSelection,
    SourceDescriptor,
    WarningKind,
    WarningLedger,
)

logger = logging.getLogger(__name__)

# Plain number or px; other units need a DPI and fall back to the viewBox
_LENGTH_RE = re.compile(r"^\s*([+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(?:px)?\s*$")


@dataclass(frozen=True)
class DecodedImage:
    """
    Output of the decode stage.

    Attributes:
        image: RGBA raster, read-only from here on
        natural_size: (width, height) of the source before any rendering
            scale was applied. Equals image.size for raster sources.
    """
    image: Image.Image
    natural_size: Tuple[int, int]

    @property
    def is_square(self) -> bool:
        width, height = self.natural_size
        return width == height


def decode_source(source: SourceDescriptor, selection: SizeSelection) -> DecodedImage:
    """
    Decode the source image.

    Args:
        source: Validated input.
        selection: Cleaned, non-empty sizes. Vector sources are rendered
            at selection.largest.

    Returns:
        DecodedImage in RGBA mode.

    Raises:
        DecodeError: If a raster cannot be opened or decoded, or the SVG
            file cannot be read.
        SvgParseError: If the SVG document is malformed.
        RasterizeError: If the SVG document cannot be rendered.
    """
    if source.is_vector:
        return _decode_vector(source, selection.largest)
    return _decode_raster(source)


def check_geometry(
    decoded: DecodedImage,
    selection: SizeSelection,
    ledger: WarningLedger,
) -> None:
    """
    Record geometry warnings for the decoded image.

    Raises:
        AbortedByWarning: If a warning is recorded under strict mode.
    """
    if not decoded.is_square:
        ledger.warn(
            WarningKind.NON_SQUARE_INPUT,
            "your input image is not square, and will appear squished!",
        )

    if min(decoded.image.size) < selection.largest:
        ledger.warn(
            WarningKind.UPSCALE_REQUESTED,
            "You've requested sizes bigger than your input, your image will be scaled up!",
        )


def _decode_raster(source: SourceDescriptor) -> DecodedImage:
    try:
        with Image.open(source.path) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (OSError, SyntaxError, EOFError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode image '{source.path}'") from e

    logger.debug(f"Decoded {source.path.name}: {rgba.width}x{rgba.height}")
    return DecodedImage(image=rgba, natural_size=rgba.size)


def _decode_vector(source: SourceDescriptor, size: int) -> DecodedImage:
    try:
        import cairosvg.parser
        import cairosvg.surface
    except (ImportError, OSError) as e:
        raise RasterizeError("SVG support requires CairoSVG and the cairo library") from e

    try:
        data = source.path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Failed to read file '{source.path}'") from e

    # Relative hrefs resolve against the document URL, i.e. its directory
    document = source.path.resolve()
    fetcher = _make_url_fetcher(document.parent)

    try:
        tree = cairosvg.parser.Tree(
            bytestring=data,
            url=str(document),
            url_fetcher=fetcher,
        )
    except Exception as e:
        raise SvgParseError("Failed to parse SVG contents") from e
    if tree.tag != "svg":
        raise SvgParseError(f"Failed to parse SVG contents: root element is <{tree.tag}>")

    natural_size = _natural_size(tree) or (size, size)
    logger.debug(
        f"SVG natural size {natural_size[0]}x{natural_size[1]}, rendering at {size}x{size}"
    )

    output = BytesIO()
    try:
        surface = cairosvg.surface.PNGSurface(
            tree,
            output,
            96,
            output_width=size,
            output_height=size,
        )
        surface.finish()
        output.seek(0)
        with Image.open(output) as img:
            img.load()
            rgba = img.convert("RGBA")
    except Exception as e:
        raise RasterizeError("Failed to render SVG!") from e

    return DecodedImage(image=rgba, natural_size=natural_size)


def _make_url_fetcher(base_dir: Path) -> Callable[[str, str], bytes]:
    """
    Resource fetcher for one SVG document.

    data: URLs and local files inside base_dir are loaded; anything else
    (remote URLs, files outside the document's directory) is replaced by
    an empty placeholder image.
    """
    from cairosvg.url import fetch, safe_fetch

    def fetcher(url: str, resource_type: str) -> bytes:
        parsed = urlparse(url)
        if parsed.scheme == "file":
            target = Path(url2pathname(parsed.path)).resolve()
            if target.is_relative_to(base_dir):
                return fetch(url, resource_type)
        if parsed.scheme != "data":
            logger.debug(f"Not loading SVG resource {url}")
        return safe_fetch(url, resource_type)

    return fetcher


def _parse_length(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    match = _LENGTH_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    return number if number > 0 else None


def _parse_viewbox(value: Optional[str]) -> Optional[Tuple[float, float]]:
    if not value:
        return None
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        width, height = float(parts[2]), float(parts[3])
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def _natural_size(tree) -> Optional[Tuple[int, int]]:
    """Pixel size from width/height, completed from the viewBox aspect."""
    width = _parse_length(tree.get("width"))
    height = _parse_length(tree.get("height"))
    viewbox = _parse_viewbox(tree.get("viewBox"))

    if viewbox is not None:
        vb_width, vb_height = viewbox
        if width is None and height is None:
            width, height = vb_width, vb_height
        elif width is None:
            width = height * vb_width / vb_height
        elif height is None:
            height = width * vb_height / vb_width

    if width is None or height is None:
        return None
    return math.ceil(width), math.ceil(height)
