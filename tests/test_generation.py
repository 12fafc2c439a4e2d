"""
Tests for generation.py

The external service is replaced by plain callables.
"""

import pytest

from pixelart import image_io
from pixelart.fallback_art import generate_fallback_art
from pixelart.generation import (
    GenerationRequest,
    build_pixel_art_prompt,
    fallback_style,
    generate_pixel_art,
)
from pixelart.models import PixelBuffer, ServiceError

API_KEY = "k" * 32


def failing_service(prompt: str, request: GenerationRequest) -> bytes:
    raise ServiceError("quota exceeded")


class TestBuildPrompt:
    def test_includes_subject_style_and_size(self) -> None:
        prompt = build_pixel_art_prompt("a knight", "8-bit", "128x64")
        assert prompt.startswith('Create a pixel art image of "a knight" in 8-bit style.')
        assert "Make it 128x64 pixels" in prompt
        assert "typical of 8-bit games" in prompt


class TestGeneratePixelArt:
    def test_service_image_is_decoded(self) -> None:
        image = PixelBuffer.blank(8, 8, (1, 2, 3, 255))
        calls = []

        def service(prompt: str, request: GenerationRequest) -> bytes:
            calls.append(prompt)
            return image_io.encode(image)

        result = generate_pixel_art(GenerationRequest("a tree", API_KEY), service)

        assert result.success
        assert not result.used_fallback
        assert result.buffer == image
        assert '"a tree"' in calls[0]

    def test_service_error_uses_fallback(self) -> None:
        request = GenerationRequest("a cat", API_KEY, size="64x64")
        result = generate_pixel_art(request, failing_service)

        assert result.success
        assert result.used_fallback
        assert result.buffer == generate_fallback_art("a cat", "gaming", "64x64")

    @pytest.mark.parametrize("response", [None, b"", b"garbage"])
    def test_unusable_response_uses_fallback(self, response: "bytes | None") -> None:
        result = generate_pixel_art(
            GenerationRequest("a cat", API_KEY, size="32x32"), lambda prompt, request: response
        )
        assert result.used_fallback
        assert (result.buffer.width, result.buffer.height) == (32, 32)

    def test_short_api_key_fails(self) -> None:
        result = generate_pixel_art(GenerationRequest("a cat", "short"), failing_service)
        assert not result.success
        assert "API key" in result.error

    def test_bad_size_fails(self) -> None:
        result = generate_pixel_art(GenerationRequest("a cat", API_KEY, size="big"), failing_service)
        assert not result.success


class TestFallbackStyle:
    @pytest.mark.parametrize(
        "style, expected",
        [
            ("retro gaming", "gaming"),
            ("Pastel dream", "pastel"),
            ("monochrome", "monochrome"),
            ("watercolor", "retro"),
        ],
    )
    def test_mapping(self, style: str, expected: str) -> None:
        assert fallback_style(style) == expected
