"""Main pixelation pipeline orchestrating the stages.

AIDEV-NOTE: Stage order is block averaging -> color quantization (only
below 256 colors) -> dithering (if enabled) -> grid overlay (if enabled).
Each stage returns a new buffer; the caller's buffer is never modified.
Configuration and dimension errors are turned into a failed
PixelationResult instead of propagating.
"""

import logging

from pixelart import image_io
from pixelart.models import (
    MAX_COLOR_COUNT,
    PixelationConfig,
    PixelationError,
    PixelationResult,
    PixelBuffer,
)

from .block_average import block_average
from .effects import apply_dithering, apply_grid_overlay
from .quantization import quantize_with_palette

logger = logging.getLogger(__name__)


class PixelationPipeline:
    """Turns decoded images into pixel art according to a PixelationConfig."""

    def __init__(self, config: PixelationConfig | None = None):
        self.config = config or PixelationConfig()

    def run(self, buffer: PixelBuffer) -> "tuple[PixelBuffer, list[tuple[int, int, int]]]":
        """Execute every stage, raising on invalid input.

        Args:
            buffer: Decoded RGBA pixels

        Returns:
            Tuple of (final buffer, palette list)

        Raises:
            InvalidConfiguration: If the config sizes are not positive ints
            DimensionMismatch: If the buffer length is inconsistent
        """
        config = self.config

        # Fail before any stage runs
        buffer.validate()
        config.validate()

        logger.info("Starting image processing pipeline...")
        logger.info("Input image: %dx%d pixels", buffer.width, buffer.height)

        logger.info("Averaging %dpx blocks...", config.block_size)
        result = block_average(buffer, config.block_size)

        palette: "list[tuple[int, int, int]]" = []
        if config.target_color_count < MAX_COLOR_COUNT:
            logger.info(
                "Reducing to %d colors with %s...",
                config.target_color_count,
                config.algorithm.value,
            )
            result, palette = quantize_with_palette(
                result, config.target_color_count, config.algorithm
            )

        if config.dithering_enabled:
            result = apply_dithering(result)

        if config.grid_overlay:
            logger.info("Drawing %dpx grid overlay...", config.effective_grid_size)
            result = apply_grid_overlay(result, config.effective_grid_size)

        logger.info("Image processing complete. Palette size: %d", len(palette))
        return result, palette

    def process(self, buffer: PixelBuffer) -> PixelationResult:
        """Execute the pipeline and return a tagged result.

        Returns:
            PixelationResult with the final buffer, or the error and its kind
        """
        try:
            result, palette = self.run(buffer)
        except PixelationError as e:
            logger.warning("Pixelation failed (%s): %s", e.kind, e)
            return PixelationResult.failure(e)
        return PixelationResult(success=True, buffer=result, palette=palette)

    def process_bytes(self, source: bytes) -> "tuple[PixelationResult, bytes | None]":
        """Decode an encoded image, pixelate it, and re-encode it as PNG.

        Returns:
            Tuple of (result, PNG bytes or None on failure)
        """
        try:
            buffer = image_io.decode(source)
        except PixelationError as e:
            logger.warning("Pixelation failed (%s): %s", e.kind, e)
            return PixelationResult.failure(e), None

        result = self.process(buffer)
        if not result.success or result.buffer is None:
            return result, None
        return result, image_io.encode(result.buffer)


def pixelate(buffer: PixelBuffer, config: PixelationConfig | None = None) -> PixelBuffer:
    """Run the full pipeline, raising PixelationError on failure."""
    result, _ = PixelationPipeline(config).run(buffer)
    return result


def apply_pixelation_effect(
    buffer: PixelBuffer,
    block_size: int,
    grid_overlay: bool = False,
    grid_size: int | None = None,
) -> PixelationResult:
    """Block averaging plus optional grid overlay, keeping every color."""
    config = PixelationConfig(
        block_size=block_size,
        target_color_count=MAX_COLOR_COUNT,
        dithering_enabled=False,
        grid_overlay=grid_overlay,
        block_grid_size=grid_size,
    )
    return PixelationPipeline(config).process(buffer)
