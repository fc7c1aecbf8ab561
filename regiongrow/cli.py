"""
regiongrow command line — segment an image and write a boundary overlay.

Usage:
  regiongrow photo.tif                         # 32x32 grid, threshold 800, writes segmented.tif
  regiongrow photo.png -n 6 -t 400 -o out.png  # 64x64 grid, custom threshold and output
  regiongrow photo.png --order hilbert --selection minimum --mode mean
"""

from __future__ import annotations

import argparse
import logging
import sys

from regiongrow.config import settings
from regiongrow.engine.config import SegmentationConfig
from regiongrow.engine.errors import SegmentationError
from regiongrow.engine.growth import segment_with_config
from regiongrow.engine.traversal import available_traversals, get_traversal
from regiongrow.imaging.overlay import write_overlay
from regiongrow.imaging.source import load_image

logger = logging.getLogger("regiongrow")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regiongrow",
        description="Region-growing segmentation of the top-left 2^N x 2^N square of an image",
    )
    parser.add_argument("image", help="Input image file")
    parser.add_argument("-n", "--grid-exponent", type=int, default=settings.grid_exponent,
                        help="Grid is 2^N x 2^N pixels (default: %(default)s)")
    parser.add_argument("-t", "--threshold", type=float, default=settings.threshold,
                        help="Merge cost threshold (default: %(default)s)")
    parser.add_argument("-o", "--output", default=settings.output,
                        help="Overlay output file (default: %(default)s)")
    parser.add_argument("--order", default=settings.traversal, choices=available_traversals(),
                        help="Sweep traversal order (default: %(default)s)")
    parser.add_argument("--selection", default=settings.selection, choices=["last", "minimum"],
                        help="Best-neighbor rule (default: %(default)s)")
    parser.add_argument("--mode", default="boundaries", choices=["boundaries", "mean"],
                        help="Overlay rendering (default: %(default)s)")
    parser.add_argument("--scale", type=int, default=settings.overlay_scale,
                        help="Overlay upscaling factor (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if args.scale < 1:
        print(f"regiongrow: --scale must be >= 1, got {args.scale}", file=sys.stderr)
        return 2
    try:
        get_traversal(args.order)
    except KeyError as e:
        print(f"regiongrow: {e.args[0]}", file=sys.stderr)
        return 2

    try:
        image = load_image(args.image)
    except (OSError, ValueError) as e:
        print(f"regiongrow: cannot read {args.image}: {e}", file=sys.stderr)
        return 2

    config = SegmentationConfig(
        grid_exponent=args.grid_exponent,
        threshold=args.threshold,
        traversal=args.order,
        selection=args.selection,
    )
    try:
        result = segment_with_config(image, config)
    except SegmentationError as e:
        print(f"regiongrow: {e}", file=sys.stderr)
        return 2

    try:
        write_overlay(args.output, image, result, scale=args.scale, mode=args.mode)
    except (OSError, ValueError) as e:
        print(f"regiongrow: cannot write {args.output}: {e}", file=sys.stderr)
        return 2
    print(f"{result.region_count} regions after {len(result.merges)} merges -> {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
