"""Image processing pipeline for image-to-pixel-art conversion.

AIDEV-NOTE: This package handles the complete pipeline from a decoded
image to pixel art. Organized into modular components:
- processor: Main PixelationPipeline orchestrator
- block_average: Spatial pixelation into averaged blocks
- quantization: Color palette reduction
- effects: Dithering and grid overlay passes
- utils: Rounding, distinct color and nearest color helpers
"""

from .block_average import block_average
from .processor import PixelationPipeline, apply_pixelation_effect, pixelate
from .quantization import quantize, quantize_with_palette

__all__ = [
    "PixelationPipeline",
    "apply_pixelation_effect",
    "block_average",
    "pixelate",
    "quantize",
    "quantize_with_palette",
]
