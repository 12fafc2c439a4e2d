"""Finishing passes applied after color reduction.

AIDEV-NOTE: Dithering is a placeholder pass-through. It must stay free of
observable effects, or golden outputs of the pipeline would change.
"""

import logging

import numpy as np

from pixelart.models import PixelBuffer, require_positive_int

logger = logging.getLogger(__name__)

# Grid lines keep this fraction of the underlying color
GRID_SHADE_NUMERATOR = 3
GRID_SHADE_DENOMINATOR = 4


def apply_dithering(buffer: PixelBuffer) -> PixelBuffer:
    """Dithering pass. Currently returns an unchanged copy."""
    buffer.validate()
    logger.debug("Dithering requested, pass-through")
    return PixelBuffer(buffer.width, buffer.height, bytes(buffer.data))


def apply_grid_overlay(buffer: PixelBuffer, grid_size: int) -> PixelBuffer:
    """Darken the first row and column of every grid cell.

    Gives the blocky "brick" look. Cells are anchored at the top-left
    corner like the averaging blocks. Alpha is left alone.

    Args:
        buffer: Input RGBA pixels
        grid_size: Side of a grid cell in pixels

    Returns:
        New buffer with grid lines shaded
    """
    require_positive_int("Grid size", grid_size)
    buffer.validate()

    pixels = buffer.to_array()
    if buffer.pixel_count == 0:
        return PixelBuffer(buffer.width, buffer.height, bytes(buffer.data))

    lines = pixels[:, :, :3].astype(np.int64)
    shaded = lines * GRID_SHADE_NUMERATOR // GRID_SHADE_DENOMINATOR

    # Row lines first, then column lines, so crossings are shaded once
    lines[::grid_size, :] = shaded[::grid_size, :]
    lines[:, ::grid_size] = shaded[:, ::grid_size]

    pixels[:, :, :3] = lines
    return PixelBuffer.from_array(pixels)
