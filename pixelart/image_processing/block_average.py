"""Block averaging: the spatial half of pixelation.

AIDEV-NOTE: Blocks are summed with np.add.reduceat along both axes, so edge
blocks clipped by the image border are handled by the same code path as
interior blocks. No padding, no wraparound.
"""

import logging

import numpy as np

from pixelart.models import PixelBuffer, require_positive_int

from .utils import round_half_up_divide

logger = logging.getLogger(__name__)


def block_average(buffer: PixelBuffer, block_size: int) -> PixelBuffer:
    """Fill each block_size x block_size block with its average color.

    Args:
        buffer: Input RGBA pixels
        block_size: Side length of the averaging block in pixels

    Returns:
        New buffer with the same dimensions as the input

    Raises:
        InvalidConfiguration: If block_size is not a positive int
        DimensionMismatch: If the buffer length is inconsistent
    """
    require_positive_int("Block size", block_size)
    buffer.validate()

    if buffer.pixel_count == 0 or block_size == 1:
        return PixelBuffer(buffer.width, buffer.height, bytes(buffer.data))

    pixels = buffer.to_array().astype(np.int64)

    # Block origins along each axis; the last block may be shorter
    row_starts = np.arange(0, buffer.height, block_size)
    col_starts = np.arange(0, buffer.width, block_size)
    row_sizes = np.diff(np.append(row_starts, buffer.height))
    col_sizes = np.diff(np.append(col_starts, buffer.width))

    totals = np.add.reduceat(np.add.reduceat(pixels, row_starts, axis=0), col_starts, axis=1)
    counts = np.outer(row_sizes, col_sizes)[:, :, np.newaxis]
    averages = round_half_up_divide(totals, counts).astype(np.uint8)

    # Spread each block's average back over the block's pixels
    expanded = np.repeat(np.repeat(averages, row_sizes, axis=0), col_sizes, axis=1)

    logger.debug(
        "Averaged %dx%d image into %dx%d blocks of %d px",
        buffer.width,
        buffer.height,
        len(col_starts),
        len(row_starts),
        block_size,
    )
    return PixelBuffer.from_array(expanded)
