"""Color quantization methods for reducing image color palettes.

AIDEV-NOTE: This module reduces the RGB palette of a PixelBuffer with one of
four algorithms (simple range steps, k-means, median cut, and the octree
step approximation). Alpha is never touched. Every algorithm is fully
deterministic: k-means is seeded from the first distinct colors and runs a
fixed number of iterations, median cut uses stable sorts.
"""

import logging
import math

import numpy as np

from pixelart.models import (
    MAX_COLOR_COUNT,
    Algorithm,
    PixelBuffer,
    require_positive_int,
)

from .utils import (
    distinct_colors,
    nearest_color_indices,
    palette_in_order,
    round_half_up,
    round_half_up_divide,
)

logger = logging.getLogger(__name__)

# Fixed refinement count, not convergence-based
KMEANS_ITERATIONS = 10


def quantize(
    buffer: PixelBuffer,
    target_color_count: int,
    algorithm: "Algorithm | str" = Algorithm.KMEANS,
) -> PixelBuffer:
    """Reduce the buffer's colors to at most target_color_count.

    Args:
        buffer: Input RGBA pixels
        target_color_count: Desired palette size
        algorithm: Algorithm or tag ('simple', 'kmeans', 'median-cut', 'octree')

    Returns:
        New buffer with the same dimensions and untouched alpha
    """
    quantized, _ = quantize_with_palette(buffer, target_color_count, algorithm)
    return quantized


def quantize_with_palette(
    buffer: PixelBuffer,
    target_color_count: int,
    algorithm: "Algorithm | str" = Algorithm.KMEANS,
) -> "tuple[PixelBuffer, list[tuple[int, int, int]]]":
    """Reduce colors and report the resulting palette.

    Returns:
        Tuple of (quantized buffer, palette list in first-appearance order)

    Raises:
        InvalidConfiguration: If target_color_count is not a positive int
        DimensionMismatch: If the buffer length is inconsistent
    """
    require_positive_int("Target color count", target_color_count)
    buffer.validate()
    algorithm = Algorithm.parse(algorithm)

    pixels = buffer.to_array().reshape(-1, 4)
    rgb = pixels[:, :3]

    if len(pixels) == 0 or target_color_count >= MAX_COLOR_COUNT:
        return PixelBuffer(buffer.width, buffer.height, bytes(buffer.data)), palette_in_order(rgb)

    if algorithm == Algorithm.KMEANS:
        new_rgb = quantize_kmeans(rgb, target_color_count)
    elif algorithm == Algorithm.MEDIAN_CUT:
        new_rgb = quantize_median_cut(rgb, target_color_count)
    elif algorithm == Algorithm.OCTREE:
        new_rgb = quantize_octree(rgb, target_color_count)
    else:
        new_rgb = quantize_simple(rgb, target_color_count)

    pixels[:, :3] = new_rgb
    palette = palette_in_order(pixels[:, :3])
    logger.debug(
        "Quantized %d pixels with %s to %d colors (target %d)",
        len(pixels),
        algorithm.value,
        len(palette),
        target_color_count,
    )

    result = PixelBuffer.from_array(pixels.reshape(buffer.height, buffer.width, 4))
    return result, palette


def floor_to_step(rgb: np.ndarray, step: int) -> np.ndarray:
    """Replace each channel value with floor(value / step) * step."""
    return (rgb.astype(np.int64) // step) * step


def quantize_simple(rgb: np.ndarray, num_colors: int) -> np.ndarray:
    """Uniform per-channel range quantization.

    step = floor(256 / sqrt(num_colors)); no color analysis at all.
    """
    step = int(256 // math.sqrt(num_colors))
    return floor_to_step(rgb, step)


def quantize_octree(rgb: np.ndarray, num_colors: int) -> np.ndarray:
    """Octree-style approximation using a bits-per-channel step.

    AIDEV-NOTE: Not a real octree. bits = floor(log2(n) / 3) and
    step = floor(256 / 2**bits) feed the same floor-to-step rounding as
    simple quantization. Keep the formula: output depends on it.
    """
    # floor(log2(n) / 3) == floor(floor(log2(n)) / 3) for n >= 1
    bits_per_channel = (int(num_colors).bit_length() - 1) // 3
    step = 256 // (2**bits_per_channel)
    return floor_to_step(rgb, step)


def kmeans_palette(
    colors: np.ndarray,
    num_colors: int,
    iterations: int = KMEANS_ITERATIONS,
) -> np.ndarray:
    """Cluster distinct colors into num_colors centroids.

    Args:
        colors: (D, 3) distinct colors in first-encountered order
        num_colors: Number of centroids
        iterations: Fixed number of refinement passes

    Returns:
        (num_colors, 3) float centroids

    AIDEV-NOTE: Centroids are seeded from the first distinct colors, cycling
    when there are fewer colors than clusters. Means are unweighted by
    frequency. A centroid with no members keeps its previous value.
    """
    seeds = np.arange(num_colors) % len(colors)
    centroids = colors[seeds].astype(np.float64)

    for _ in range(iterations):
        labels = nearest_color_indices(colors, centroids)
        counts = np.bincount(labels, minlength=num_colors)
        totals = np.zeros((num_colors, 3), dtype=np.float64)
        np.add.at(totals, labels, colors)

        occupied = counts > 0
        centroids[occupied] = totals[occupied] / counts[occupied][:, np.newaxis]

    return centroids


def quantize_kmeans(rgb: np.ndarray, num_colors: int) -> np.ndarray:
    """K-means color quantization implementation.

    Clusters the distinct colors, then maps every pixel to its nearest
    final centroid.
    """
    colors, _, inverse = distinct_colors(rgb)
    centroids = kmeans_palette(colors, num_colors)

    # Nearest centroid depends only on the color, so map distinct colors once
    labels = nearest_color_indices(colors, centroids)
    palette = round_half_up(centroids)
    return palette[labels][inverse]


def median_cut_palette(
    colors: np.ndarray,
    frequencies: np.ndarray,
    num_colors: int,
) -> np.ndarray:
    """Split distinct colors into buckets and average each one.

    Args:
        colors: (D, 3) distinct colors in first-encountered order
        frequencies: Pixel count of each distinct color
        num_colors: Maximum number of buckets

    Returns:
        (B, 3) integer representative colors, B <= num_colors
    """
    buckets = [np.arange(len(colors))]

    while len(buckets) < num_colors:
        # Widest single-channel spread among splittable buckets
        best_index = -1
        best_spread = -1
        best_channel = 0
        for index, members in enumerate(buckets):
            if len(members) < 2:
                continue
            member_colors = colors[members]
            spreads = member_colors.max(axis=0) - member_colors.min(axis=0)
            channel = int(np.argmax(spreads))
            if spreads[channel] > best_spread:
                best_index = index
                best_spread = spreads[channel]
                best_channel = channel

        if best_index < 0:
            break

        members = buckets[best_index]
        order = np.argsort(colors[members, best_channel], kind="stable")
        ordered = members[order]
        half = len(ordered) // 2
        buckets[best_index : best_index + 1] = [ordered[:half], ordered[half:]]

    representatives = np.empty((len(buckets), 3), dtype=np.int64)
    for index, members in enumerate(buckets):
        weights = frequencies[members]
        totals = (colors[members] * weights[:, np.newaxis]).sum(axis=0)
        representatives[index] = round_half_up_divide(totals, weights.sum())
    return representatives


def quantize_median_cut(rgb: np.ndarray, num_colors: int) -> np.ndarray:
    """Median cut color quantization implementation."""
    colors, frequencies, inverse = distinct_colors(rgb)
    representatives = median_cut_palette(colors, frequencies, num_colors)

    labels = nearest_color_indices(colors, representatives)
    return representatives[labels][inverse]
