"""Image I/O adapter between encoded image files and PixelBuffers.

AIDEV-NOTE: Decoding always converts to RGBA. Encoding defaults to PNG,
which is lossless: pixel values written are exactly the values read back.
No color management or resampling happens here.
"""

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from pixelart.models import DecodeError, PixelBuffer

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_FORMATS = ("JPEG", "PNG", "GIF", "WEBP")


def decode(source: bytes) -> PixelBuffer:
    """Decode encoded image bytes into an RGBA buffer.

    Raises:
        DecodeError: If the bytes are not a readable image or exceed
            Pillow's decompression bomb limit
    """
    try:
        with Image.open(io.BytesIO(source)) as image:
            return image_to_buffer(image)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"Failed to load image: {e}") from e


def encode(buffer: PixelBuffer, format: str = "PNG") -> bytes:
    """Encode a buffer into an image container (PNG by default)."""
    output = io.BytesIO()
    buffer_to_image(buffer).save(output, format=format)
    return output.getvalue()


def load(file_path: "str | Path") -> PixelBuffer:
    """Load an image file from disk.

    Raises:
        DecodeError: If the file cannot be read or decoded
    """
    try:
        data = Path(file_path).read_bytes()
    except OSError as e:
        raise DecodeError(f"Failed to load image: {e}") from e
    return decode(data)


def save(buffer: PixelBuffer, file_path: "str | Path") -> None:
    """Save a buffer to disk, format chosen from the file extension."""
    buffer_to_image(buffer).save(file_path)
    logger.info("Saved %dx%d image to %s", buffer.width, buffer.height, file_path)


def image_to_buffer(image: Image.Image) -> PixelBuffer:
    """Convert a PIL image into an RGBA PixelBuffer."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return PixelBuffer.from_array(np.array(image, dtype=np.uint8))


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    """Convert a PixelBuffer into a PIL image in RGBA mode."""
    buffer.validate()
    return Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.data)


def validate_image_bytes(data: bytes) -> "tuple[bool, str | None]":
    """Check an upload before processing.

    Returns:
        Tuple of (valid: bool, error_message: Optional[str])
    """
    if len(data) > MAX_FILE_SIZE:
        return False, "File size must be less than 10MB"

    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        return False, f"Unreadable image: {e}"

    if image_format not in ALLOWED_FORMATS:
        return False, "File type must be JPEG, PNG, GIF, or WebP"

    return True, None
