"""Glue for an external pixel art generation service.

The service itself is not part of this package: callers pass any callable
that takes the prompt text and the request and returns encoded image bytes
(or raises ServiceError). When it fails, the deterministic fallback
generator takes over.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from pixelart import image_io
from pixelart.fallback_art import DEFAULT_SIZE, FallbackArtGenerator, parse_size
from pixelart.models import (
    DecodeError,
    InvalidConfiguration,
    PixelationError,
    PixelBuffer,
    ServiceError,
)

logger = logging.getLogger(__name__)

MIN_API_KEY_LENGTH = 20
DEFAULT_GENERATION_STYLE = "retro gaming"


@dataclass
class GenerationRequest:
    """A text-to-image request for the external service."""

    prompt: str
    api_key: str
    style: str = DEFAULT_GENERATION_STYLE
    size: str = DEFAULT_SIZE


@dataclass
class GenerationResult:
    """Outcome of a generation attempt."""

    success: bool
    buffer: "PixelBuffer | None" = None
    used_fallback: bool = False
    error: "str | None" = None


# (prompt text, request) -> encoded image bytes, or raises ServiceError
GenerationService = Callable[[str, GenerationRequest], "bytes | None"]


def build_pixel_art_prompt(
    user_prompt: str, style: str = DEFAULT_GENERATION_STYLE, size: str = DEFAULT_SIZE
) -> str:
    """Wrap the user's prompt in pixel art instructions for the service."""
    width, height = parse_size(size)
    return (
        f'Create a pixel art image of "{user_prompt}" in {style} style. \n\n'
        f"Make it {width}x{height} pixels with clean, blocky pixel art style. "
        f"Use a limited color palette typical of {style} games. "
        "Ensure crisp, sharp edges with no anti-aliasing. "
        "The image should be recognizable and well-composed with good contrast."
    )


def fallback_style(style: str) -> str:
    """Map a free-form style hint to a fallback palette name."""
    for name in ("gaming", "pastel", "monochrome"):
        if name in style.lower():
            return name
    return "retro"


def generate_pixel_art(
    request: GenerationRequest,
    service: GenerationService,
    fallback: FallbackArtGenerator | None = None,
) -> GenerationResult:
    """Ask the service for an image, falling back to local generation.

    Args:
        request: Prompt, credential and hints
        service: External generator callable
        fallback: Generator used when the service fails

    Returns:
        GenerationResult; only an invalid request or a failing fallback
        produce success=False
    """
    fallback = fallback or FallbackArtGenerator()

    try:
        if not request.api_key or len(request.api_key) < MIN_API_KEY_LENGTH:
            raise InvalidConfiguration("Valid API key is required")
        prompt = build_pixel_art_prompt(request.prompt, request.style, request.size)
    except InvalidConfiguration as e:
        return GenerationResult(success=False, error=str(e))

    logger.info("Generating pixel art with prompt: %s", prompt)
    try:
        encoded = service(prompt, request)
        if not encoded:
            raise ServiceError("No image data received from service")
        return GenerationResult(success=True, buffer=image_io.decode(encoded))
    except (ServiceError, DecodeError) as e:
        logger.warning("Generation failed (%s), using fallback art: %s", e.kind, e)

    try:
        buffer = fallback.generate(request.prompt, fallback_style(request.style), request.size)
    except PixelationError as e:
        logger.error("Fallback generation also failed: %s", e)
        return GenerationResult(success=False, error=f"Fallback generation failed: {e}")
    return GenerationResult(success=True, buffer=buffer, used_fallback=True)
