"""Utility functions shared by the pixelation stages.

AIDEV-NOTE: This module contains helpers for rounding, color analysis and
nearest-color lookups used throughout the image processing pipeline.
"""

import numpy as np
from sklearn.metrics import pairwise_distances_chunked


def round_half_up_divide(totals: np.ndarray, counts: np.ndarray) -> np.ndarray:
    """Divide nonnegative integer totals by positive counts, rounding half up.

    Integer arithmetic only, so results match exact rational rounding.
    """
    totals = np.asarray(totals, dtype=np.int64)
    counts = np.asarray(counts, dtype=np.int64)
    return (2 * totals + counts) // (2 * counts)


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round nonnegative floats to the nearest integer, halves going up."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """Pack (N, 3) RGB values into single 24-bit integer keys."""
    rgb = rgb.astype(np.uint32)
    return (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]


def distinct_colors(
    rgb: np.ndarray,
) -> "tuple[np.ndarray, np.ndarray, np.ndarray]":
    """Find the distinct colors of a pixel list in first-encountered order.

    Args:
        rgb: (N, 3) array of RGB values

    Returns:
        Tuple of (colors (D, 3) int64, frequencies (D,), inverse (N,))
        where colors[inverse] reconstructs the input.

    AIDEV-NOTE: np.unique sorts by value; re-ordering by first index keeps
    seeding and bucket order tied to pixel scan order.
    """
    keys = pack_rgb(rgb)
    _, first_index, inverse, counts = np.unique(
        keys, return_index=True, return_inverse=True, return_counts=True
    )
    order = np.argsort(first_index, kind="stable")
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))

    colors = rgb[first_index[order]].astype(np.int64)
    return colors, counts[order], rank[inverse.reshape(-1)]


def nearest_color_indices(colors: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """Index of the nearest palette entry (Euclidean RGB) for each color.

    Ties resolve to the lowest palette index.

    AIDEV-NOTE: Squared distances are compared so integer colors give exact
    float64 values, and np.argmin keeps the first minimum on a tie.
    """
    if len(colors) == 0:
        return np.zeros(0, dtype=np.int64)
    chunks = pairwise_distances_chunked(
        np.asarray(colors, dtype=np.float64),
        np.asarray(palette, dtype=np.float64),
        reduce_func=lambda distances, start: np.argmin(distances, axis=1),
        metric="sqeuclidean",
    )
    return np.concatenate(list(chunks)).astype(np.int64)


def count_distinct_colors(rgba: np.ndarray) -> int:
    """Count distinct RGB triples in an (..., 4) RGBA array."""
    rgb = rgba.reshape(-1, 4)[:, :3]
    if len(rgb) == 0:
        return 0
    return len(np.unique(pack_rgb(rgb)))


def palette_in_order(rgb: np.ndarray) -> "list[tuple[int, int, int]]":
    """List the distinct colors of an (N, 3) array in first-appearance order."""
    if len(rgb) == 0:
        return []
    colors, _, _ = distinct_colors(rgb)
    return [tuple(int(c) for c in color) for color in colors]
