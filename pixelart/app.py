"""Pixel art converter - command line entry point."""

import argparse
import logging
import sys
from pathlib import Path

from pixelart import image_io
from pixelart.config_manager import ConfigManager, config_from_dict
from pixelart.fallback_art import DEFAULT_SIZE, FallbackArtGenerator
from pixelart.image_processing import PixelationPipeline
from pixelart.models import CONFIG_FILE, Algorithm, PixelationError

logger = logging.getLogger("pixelart")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pixelate and color-quantize an image for a retro pixel art look."
    )
    parser.add_argument("input", nargs="?", help="Path to the source image")
    parser.add_argument("output", help="Path for the output image")
    parser.add_argument(
        "-p",
        "--prompt",
        help="Generate fallback art from this text instead of reading an input image",
    )
    parser.add_argument(
        "--style",
        default="retro",
        help="Palette for --prompt: retro, gaming, pastel, monochrome (default: retro)",
    )
    parser.add_argument(
        "--size", default=DEFAULT_SIZE, help=f"Size for --prompt (default: {DEFAULT_SIZE})"
    )
    parser.add_argument(
        "-s", "--block-size", type=int, help="Averaging block size in pixels. Higher = blockier"
    )
    parser.add_argument(
        "-c", "--colors", type=int, help="Number of colors in the palette (256 keeps all)"
    )
    parser.add_argument(
        "-a",
        "--algorithm",
        choices=[a.value for a in Algorithm],
        help="Color quantization algorithm",
    )
    parser.add_argument("--no-dither", action="store_true", help="Disable the dithering pass")
    parser.add_argument("--grid", action="store_true", help="Draw a grid overlay")
    parser.add_argument("--grid-size", type=int, help="Grid cell size (default: block size)")
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help=f"Settings file (default: {CONFIG_FILE})",
    )
    parser.add_argument(
        "--save-config", action="store_true", help="Store the effective settings in --config"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    return parser


def main(argv: "list[str] | None" = None) -> int:
    """Run the converter from the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.input is None and args.prompt is None:
        parser.error("an input image or --prompt is required")

    manager = ConfigManager(args.config)
    stored = manager.load()
    overrides = {
        "block_size": args.block_size,
        "target_color_count": args.colors,
        "algorithm": args.algorithm,
        "block_grid_size": args.grid_size,
    }
    if args.no_dither:
        overrides["dithering_enabled"] = False
    if args.grid:
        overrides["grid_overlay"] = True

    try:
        config = config_from_dict({**vars(stored), **{k: v for k, v in overrides.items() if v is not None}})
        if args.prompt is not None:
            buffer = FallbackArtGenerator().generate(args.prompt, args.style, args.size)
        else:
            buffer = image_io.load(args.input)
    except PixelationError as e:
        logger.error("%s", e)
        return 1

    result = PixelationPipeline(config).process(buffer)
    if not result.success or result.buffer is None:
        logger.error("%s: %s", result.error_kind, result.error)
        return 1

    # Unknown extensions raise ValueError, unwritable paths OSError
    try:
        image_io.save(result.buffer, args.output)
    except (OSError, ValueError) as e:
        logger.error("Could not save %s: %s", args.output, e)
        return 1

    # Only settings that produced an image are stored
    if args.save_config:
        success, error = manager.save(config)
        if not success:
            logger.warning("Could not save config: %s", error)

    logger.info(
        "Settings used: Block=%dpx, Colors=%d, Algorithm=%s, Dither=%s",
        config.block_size,
        config.target_color_count,
        config.algorithm.value,
        config.dithering_enabled,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
