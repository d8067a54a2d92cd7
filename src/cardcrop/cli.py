"""
Command line entry point: crop a card photo from four handle positions.

Usage:
    cardcrop crop card.jpg --container 400x600 --tl 40,80 --tr 360,70 \
        --br 370,520 --bl 30,530 -o card_flat.jpg

Handle positions are given in container coordinates, as a UI would report
them. Omitted handles stay on the corners of the displayed image.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import InvalidConfiguration, MissingSourceImage, RedressFailure
from .geometry.corners import CornerRole
from .geometry.primitives import Point2D, Size
from .imaging.source_image import load_source_image, save_image
from .session.crop_session import CropSession
from .utils.config_loader import load_config, merge_cli_args, validate_config
from .utils.logger import setup_logger

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REDRESS_FAILED = 1
EXIT_NOT_CONVEX = 2

CORNER_FLAGS = {
    'tl': CornerRole.TOP_LEFT,
    'tr': CornerRole.TOP_RIGHT,
    'br': CornerRole.BOTTOM_RIGHT,
    'bl': CornerRole.BOTTOM_LEFT,
}


def parse_size(value: str) -> Size:
    """Parse 'WxH' into a Size."""
    try:
        width, height = (float(v) for v in value.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got '{value}'")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got '{value}'")
    return Size(width, height)


def parse_point(value: str) -> Point2D:
    """Parse 'X,Y' into a Point2D."""
    try:
        x, y = (float(v) for v in value.split(','))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected X,Y, got '{value}'")
    return Point2D(x, y)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cardcrop", description="Perspective crop for card photos")
    subparsers = parser.add_subparsers(dest="command", required=True)

    crop = subparsers.add_parser("crop", help="Flatten the region bounded by four handles")
    crop.add_argument("image", type=Path, help="Source photo")
    crop.add_argument("--container", type=parse_size, required=True, help="Viewport size as WxH")
    for flag, role in CORNER_FLAGS.items():
        crop.add_argument(f"--{flag}", type=parse_point, help=f"{role.value} handle as X,Y")
    crop.add_argument("-o", "--output", type=Path, help="Output path (default: <image>_cropped plus output.format)")
    crop.add_argument("--config", type=Path, help="YAML config file")
    crop.add_argument("--max-megapixels", dest="max_megapixels", type=float)
    crop.add_argument("--interpolation", choices=["LINEAR", "CUBIC", "LANCZOS4"],
                      help="Resampling method for both upsizing and downsizing")
    crop.add_argument("--quality", type=int, help="JPEG quality")
    crop.add_argument("--log-level", dest="log_level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    crop.add_argument("--log-file", dest="log_file")

    return parser


def run_crop(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    config = merge_cli_args(config, vars(args))
    validate_config(config)

    setup_logger(level=config.get('logging.level', 'INFO'), log_file=config.get('logging.log_file'))

    source = load_source_image(args.image)
    session = CropSession(source, args.container, config.to_dict())

    for flag, role in CORNER_FLAGS.items():
        position = getattr(args, flag)
        if position is not None:
            accepted = session.drag(role, position)
            if accepted != position:
                logger.info(f"{role.value} clamped to ({accepted.x:.1f}, {accepted.y:.1f})")
            session.end_drag()

    try:
        result = session.redress_now()
    except InvalidConfiguration as e:
        logger.error(str(e))
        return EXIT_NOT_CONVEX
    except (RedressFailure, MissingSourceImage) as e:
        logger.error(f"Crop failed: {e}")
        return EXIT_REDRESS_FAILED
    finally:
        session.close()

    output_format = config.get('output.format', '.jpg')
    output = args.output or args.image.with_name(f"{args.image.stem}_cropped{output_format}")
    save_image(result, output, quality=config.get('output.jpeg_quality', 92))
    print(output)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "crop":
        return run_crop(args)
    return EXIT_REDRESS_FAILED


if __name__ == "__main__":
    sys.exit(main())
