"""
Command-line entry point: convert one image into a multi-resolution .ico.

Usage:
    ico-toolkit logo.png
    ico-toolkit logo.svg --sizes 16 32 48 --filter lanczos --stop-on-warning
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ico_toolkit import __version__
from ico_toolkit.common.console import configure_logging
from ico_toolkit.core.errors import IconToolkitError, describe_error
from ico_toolkit.core.models import DEFAULT_SIZES
from ico_toolkit.converter import ConversionConfig, ResizeFilter, convert_image

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _filter_arg(value: str) -> ResizeFilter:
    try:
        return ResizeFilter.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _workers_arg(value: str) -> int:
    try:
        workers = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid worker count: '{value}'") from None
    if workers < 1:
        raise argparse.ArgumentTypeError("worker count must be at least 1")
    return workers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ico-toolkit",
        description="Convert an image (PNG, JPEG, SVG, ...) into a multi-resolution .ico file.",
    )
    parser.add_argument("image", type=Path, help="The image file to convert")
    parser.add_argument(
        "-s", "--sizes",
        type=int,
        nargs="+",
        action="extend",
        metavar="SIZE",
        help=(
            "What sizes of icon to generate (repeatable; default: "
            f"{' '.join(str(s) for s in DEFAULT_SIZES)})"
        ),
    )
    parser.add_argument(
        "-f", "--filter",
        type=_filter_arg,
        default=ResizeFilter.CUBIC,
        metavar="{" + ",".join(f.value for f in ResizeFilter) + "}",
        help="Which re-sampling filter to use when resizing the image (default: cubic)",
    )
    parser.add_argument(
        "--stop-on-warning",
        action="store_true",
        help="If enabled, any warnings will stop all processing",
    )
    parser.add_argument(
        "-w", "--workers",
        type=_workers_arg,
        default=None,
        help="Number of threads used to resize and encode frames",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug output including stage timings",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the converter.

    Returns:
        EXIT_SUCCESS on success (including when no valid sizes remain),
        EXIT_FAILURE on any validation or processing error.
    """
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    sizes: List[int] = args.sizes if args.sizes else list(DEFAULT_SIZES)
    config = ConversionConfig(
        sizes=tuple(sizes),
        resize_filter=args.filter,
        strict=args.stop_on_warning,
        max_workers=args.workers,
    )

    try:
        convert_image(args.image, config)
    except IconToolkitError as e:
        logger.error(describe_error(e))
        logger.debug("Conversion failed", exc_info=True)
        return EXIT_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())
