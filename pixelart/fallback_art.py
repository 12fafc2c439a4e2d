"""Deterministic pixel art from a text prompt alone.

Used when no image is supplied and the generative service is unavailable.
The prompt seeds a small linear congruential generator, which scatters
palette-colored blocks over a background. A few keywords add simple shapes.

AIDEV-NOTE: The hash and LCG constants reproduce an existing web
implementation, so the same prompt yields the same picture in both.
Each generate() call owns its own SeededRandom; there is no global state.
"""

import logging

import numpy as np

from pixelart.models import InvalidConfiguration, PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_SIZE = "256x256"
DEFAULT_STYLE = "retro"

# Named palettes, background color first
PALETTES: "dict[str, list[str]]" = {
    "retro": ["#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7", "#DDA0DD", "#98D8C8", "#F7DC6F"],
    "gaming": ["#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#FF00FF", "#00FFFF", "#FFFFFF", "#000000"],
    "pastel": ["#FFB3BA", "#FFDFBA", "#FFFFBA", "#BAFFC9", "#BAE1FF", "#E6B3FF", "#FFB3E6", "#F0F0F0"],
    "monochrome": ["#000000", "#333333", "#666666", "#999999", "#CCCCCC", "#FFFFFF"],
}

# Chance threshold for painting a block
FILL_THRESHOLD = 0.7

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def hash_string(text: str) -> int:
    """Rolling hash h = h * 31 + code unit, wrapped to signed 32 bits.

    Runs over UTF-16 code units and returns the absolute value.
    """
    encoded = text.encode("utf-16-le")
    value = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        value = (value * 31 + code_unit) & 0xFFFFFFFF
        if value >= 0x80000000:
            value -= 0x100000000
    return abs(value)


class SeededRandom:
    """Linear congruential generator yielding floats in [0, 1)."""

    def __init__(self, seed: int):
        self.state = seed

    def random(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS


def parse_size(size: str) -> "tuple[int, int]":
    """Parse 'WIDTHxHEIGHT' into integers."""
    try:
        width, height = (int(part) for part in size.lower().split("x"))
    except ValueError as e:
        raise InvalidConfiguration(f"Invalid size {size!r}, expected WIDTHxHEIGHT") from e
    if width <= 0 or height <= 0:
        raise InvalidConfiguration(f"Size must be positive, got {size!r}")
    return width, height


def hex_to_rgba(color: str) -> "tuple[int, int, int, int]":
    """Convert '#RRGGBB' into an opaque RGBA tuple."""
    color = color.lstrip("#")
    return (int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16), 255)


class FallbackArtGenerator:
    """Paints a block grid seeded from the prompt text."""

    def generate(
        self,
        prompt: str,
        style: str = DEFAULT_STYLE,
        size: str = DEFAULT_SIZE,
    ) -> PixelBuffer:
        """Generate a pixel art buffer for a prompt.

        Args:
            prompt: Text description, also the random seed
            style: Palette name ('retro', 'gaming', 'pastel', 'monochrome')
            size: Output size as 'WIDTHxHEIGHT'

        Returns:
            Opaque RGBA buffer of the requested size
        """
        width, height = parse_size(size)
        colors = [hex_to_rgba(c) for c in PALETTES.get(style, PALETTES[DEFAULT_STYLE])]
        pixel_size = max(2, width // 32)
        random = SeededRandom(hash_string(prompt))

        canvas = np.empty((height, width, 4), dtype=np.uint8)
        canvas[:, :] = colors[0]

        # Columns outer, rows inner; the draw order fixes the random sequence
        for x in range(0, width, pixel_size):
            for y in range(0, height, pixel_size):
                if random.random() > FILL_THRESHOLD:
                    color_index = int(random.random() * len(colors))
                    fill_rect(canvas, x, y, pixel_size, pixel_size, colors[color_index])

        self._add_prompt_elements(canvas, prompt, colors, pixel_size)

        logger.info("Generated %dx%d fallback art for prompt %r", width, height, prompt)
        return PixelBuffer.from_array(canvas)

    def _add_prompt_elements(
        self,
        canvas: np.ndarray,
        prompt: str,
        colors: "list[tuple[int, int, int, int]]",
        pixel_size: int,
    ) -> None:
        """Draw simple shapes for recognized subjects."""
        height, width = canvas.shape[:2]
        prompt_lower = prompt.lower()
        center_x = width // 2
        center_y = height // 2

        if "cat" in prompt_lower or "animal" in prompt_lower:
            size = min(width, height) // 4
            # Ears
            fill_rect(canvas, center_x - size, center_y - size, pixel_size * 2, pixel_size * 2, colors[1])
            fill_rect(
                canvas,
                center_x + size - pixel_size * 2,
                center_y - size,
                pixel_size * 2,
                pixel_size * 2,
                colors[1],
            )
            # Face
            fill_rect(canvas, center_x - size // 2, center_y - size // 2, size, size, colors[2])
            # Eyes
            fill_rect(canvas, center_x - size // 3, center_y - size // 4, pixel_size, pixel_size, colors[3])
            fill_rect(
                canvas,
                center_x + size // 3 - pixel_size,
                center_y - size // 4,
                pixel_size,
                pixel_size,
                colors[3],
            )

        if "heart" in prompt_lower:
            # Filled disc standing in for a heart
            size = min(width, height) // 6
            for dx in range(-size, size + 1, pixel_size):
                for dy in range(-size, size + 1, pixel_size):
                    if dx * dx + dy * dy <= size * size:
                        fill_rect(canvas, center_x + dx, center_y + dy, pixel_size, pixel_size, colors[1])


def fill_rect(
    canvas: np.ndarray,
    x: int,
    y: int,
    width: int,
    height: int,
    color: "tuple[int, int, int, int]",
) -> None:
    """Fill a rectangle, clipped to the canvas bounds."""
    canvas_height, canvas_width = canvas.shape[:2]
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + width, canvas_width), min(y + height, canvas_height)
    if x0 < x1 and y0 < y1:
        canvas[y0:y1, x0:x1] = color


def generate_fallback_art(
    prompt: str, style: str = DEFAULT_STYLE, size: str = DEFAULT_SIZE
) -> PixelBuffer:
    """Convenience wrapper around FallbackArtGenerator.generate()."""
    return FallbackArtGenerator().generate(prompt, style, size)
