"""Pixel art converter.

Turns raster images into pixel art by averaging square blocks of pixels
and reducing the color palette.
"""

from pixelart.image_processing import PixelationPipeline, block_average, pixelate, quantize
from pixelart.models import (
    Algorithm,
    DecodeError,
    DimensionMismatch,
    InvalidConfiguration,
    PixelationConfig,
    PixelationError,
    PixelationResult,
    PixelBuffer,
    ServiceError,
)

__all__ = [
    "Algorithm",
    "DecodeError",
    "DimensionMismatch",
    "InvalidConfiguration",
    "PixelBuffer",
    "PixelationConfig",
    "PixelationError",
    "PixelationPipeline",
    "PixelationResult",
    "ServiceError",
    "block_average",
    "pixelate",
    "quantize",
]
