"""
Tests for block_average.py

These tests verify block averaging on small hand-built buffers, including
clipped edge blocks and the rounding rule.
"""

import numpy as np
import pytest

from pixelart.image_processing.block_average import block_average
from pixelart.models import DimensionMismatch, InvalidConfiguration, PixelBuffer


def rgba_row(*pixels: "tuple[int, int, int, int]") -> PixelBuffer:
    """A single-row buffer from RGBA tuples."""
    return PixelBuffer.from_array(np.array([pixels], dtype=np.uint8))


# =============================================================================
# Uniform and identity cases
# =============================================================================


class TestInvariants:
    def test_uniform_region_is_unchanged(self) -> None:
        red = PixelBuffer.blank(4, 4, (255, 0, 0, 255))
        result = block_average(red, 2)
        assert result == red

    def test_block_size_one_is_identity(self, noisy_buffer: PixelBuffer) -> None:
        assert block_average(noisy_buffer, 1) == noisy_buffer

    def test_dimensions_preserved(self, noisy_buffer: PixelBuffer) -> None:
        result = block_average(noisy_buffer, 5)
        assert (result.width, result.height) == (noisy_buffer.width, noisy_buffer.height)
        assert len(result.data) == noisy_buffer.width * noisy_buffer.height * 4

    def test_deterministic(self, gradient_buffer: PixelBuffer) -> None:
        assert block_average(gradient_buffer, 3) == block_average(gradient_buffer, 3)

    def test_empty_buffer_passes_through(self) -> None:
        empty = PixelBuffer(0, 0, b"")
        assert block_average(empty, 4) == empty

    def test_input_not_modified(self, noisy_buffer: PixelBuffer) -> None:
        before = bytes(noisy_buffer.data)
        block_average(noisy_buffer, 4)
        assert noisy_buffer.data == before


# =============================================================================
# Averaging
# =============================================================================


class TestAveraging:
    def test_checkerboard_block_rounds_half_up(self) -> None:
        black = (0, 0, 0, 255)
        white = (255, 255, 255, 255)
        buffer = PixelBuffer.from_array(np.array([[black, white], [black, white]], dtype=np.uint8))

        result = block_average(buffer, 2).to_array()

        # 510 / 4 = 127.5 rounds up
        assert (result == np.array([128, 128, 128, 255], dtype=np.uint8)).all()

    def test_alpha_is_averaged(self) -> None:
        buffer = rgba_row((10, 10, 10, 0), (10, 10, 10, 255))
        result = block_average(buffer, 2).to_array()
        assert result[0, 0].tolist() == [10, 10, 10, 128]
        assert result[0, 1].tolist() == [10, 10, 10, 128]

    def test_rounds_down_below_half(self) -> None:
        buffer = rgba_row((0, 0, 0, 255), (1, 0, 0, 255), (0, 0, 0, 255))
        # 1 / 3 rounds to 0
        result = block_average(buffer, 3).to_array()
        assert result[0, :, 0].tolist() == [0, 0, 0]

    def test_rounds_up_above_half(self) -> None:
        buffer = rgba_row((0, 0, 0, 255), (1, 0, 0, 255), (1, 0, 0, 255))
        # 2 / 3 rounds to 1
        result = block_average(buffer, 3).to_array()
        assert result[0, :, 0].tolist() == [1, 1, 1]

    def test_edge_blocks_are_clipped(self) -> None:
        buffer = rgba_row((10, 0, 0, 255), (20, 0, 0, 255), (31, 0, 0, 255))
        result = block_average(buffer, 2).to_array()
        # First block covers two pixels, the edge block only one
        assert result[0, :, 0].tolist() == [15, 15, 31]
        assert result[0, :, 3].tolist() == [255, 255, 255]

    def test_clipped_blocks_in_two_dimensions(self) -> None:
        pixels = np.zeros((3, 3, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        pixels[2, 2, 0] = 200  # Bottom-right corner block is a single pixel
        pixels[0, 2, 1] = 90  # Right edge block spans rows 0-1
        buffer = PixelBuffer.from_array(pixels)

        result = block_average(buffer, 2).to_array()

        assert result[2, 2, 0] == 200
        assert result[0, 2, 1] == 45
        assert result[1, 2, 1] == 45
        assert (result[0:2, 0:2] == [0, 0, 0, 255]).all()

    def test_block_larger_than_image(self, gradient_buffer: PixelBuffer) -> None:
        result = block_average(gradient_buffer, 100).to_array()
        flat = result.reshape(-1, 4)
        assert (flat == flat[0]).all()

    def test_each_block_is_uniform(self, noisy_buffer: PixelBuffer) -> None:
        result = block_average(noisy_buffer, 4).to_array()
        for y in range(0, noisy_buffer.height, 4):
            for x in range(0, noisy_buffer.width, 4):
                block = result[y : y + 4, x : x + 4].reshape(-1, 4)
                assert (block == block[0]).all()


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
    @pytest.mark.parametrize("block_size", [0, -3])
    def test_non_positive_block_size(self, noisy_buffer: PixelBuffer, block_size: int) -> None:
        with pytest.raises(InvalidConfiguration):
            block_average(noisy_buffer, block_size)

    @pytest.mark.parametrize("block_size", [2.0, 2.5, True])
    def test_non_integer_block_size(self, noisy_buffer: PixelBuffer, block_size: object) -> None:
        with pytest.raises(InvalidConfiguration, match="integer"):
            block_average(noisy_buffer, block_size)

    def test_dimension_mismatch(self) -> None:
        with pytest.raises(DimensionMismatch):
            block_average(PixelBuffer(2, 2, bytes(15)), 2)
