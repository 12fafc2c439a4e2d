"""Data models and constants for the pixel art converter."""

import logging
import numbers
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)

# Bytes per RGBA pixel
CHANNELS = 4

# Quantization is skipped at or above this palette size
MAX_COLOR_COUNT = 256

# Configuration file path
CONFIG_FILE = Path.home() / ".pixelart_config.json"


# --- Errors ---


class PixelationError(ValueError):
    """Base class for failures reported by the pixelation core."""

    kind = "PixelationError"


class InvalidConfiguration(PixelationError):
    """Non-positive block size, color count or grid size."""

    kind = "InvalidConfiguration"


class DimensionMismatch(PixelationError):
    """Buffer length does not match width * height * 4."""

    kind = "DimensionMismatch"


class DecodeError(PixelationError):
    """Source bytes could not be decoded into an image."""

    kind = "DecodeError"


class ServiceError(PixelationError):
    """The external generative service failed or returned nothing usable."""

    kind = "ServiceError"


# --- Pixel data ---


class Algorithm(Enum):
    """Color quantization algorithms.

    AIDEV-NOTE: Closed set, dispatched by quantization.quantize(). Unknown
    tags fall back to SIMPLE rather than failing.
    """

    SIMPLE = "simple"
    KMEANS = "kmeans"
    MEDIAN_CUT = "median-cut"
    OCTREE = "octree"

    @classmethod
    def parse(cls, tag: "str | Algorithm") -> "Algorithm":
        """Resolve a tag string to an Algorithm, defaulting to SIMPLE."""
        if isinstance(tag, cls):
            return tag
        normalized = str(tag).strip().lower().replace("_", "-")
        for algorithm in cls:
            if algorithm.value == normalized:
                return algorithm
        logger.warning(
            "Unrecognized quantization algorithm %r, using simple quantization", tag
        )
        return cls.SIMPLE


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA pixels with a top-left origin.

    AIDEV-NOTE: Construction does not check the length invariant so the
    pipeline can report a mismatch as a tagged failure. Call validate()
    before reading pixels.
    """

    width: int
    height: int
    data: bytes = field(repr=False)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def validate(self) -> None:
        """Raise DimensionMismatch unless len(data) == width * height * 4."""
        if self.width < 0 or self.height < 0:
            raise DimensionMismatch(
                f"Invalid dimensions {self.width}x{self.height}"
            )
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise DimensionMismatch(
                f"Buffer holds {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )

    def to_array(self) -> np.ndarray:
        """Return a fresh (height, width, 4) uint8 copy of the pixels."""
        self.validate()
        return (
            np.frombuffer(self.data, dtype=np.uint8)
            .reshape(self.height, self.width, CHANNELS)
            .copy()
        )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from a (height, width, 4) array."""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise DimensionMismatch(
                f"Expected an array of shape (height, width, 4), got {array.shape}"
            )
        height, width = array.shape[:2]
        return cls(width, height, np.ascontiguousarray(array, dtype=np.uint8).tobytes())

    @classmethod
    def blank(
        cls, width: int, height: int, rgba: "tuple[int, int, int, int]" = (0, 0, 0, 0)
    ) -> "PixelBuffer":
        """Create a buffer filled with a single color."""
        return cls(width, height, bytes(rgba) * (width * height))


# --- Configuration ---


def require_positive_int(name: str, value) -> None:
    """Raise InvalidConfiguration unless value is a positive integer.

    AIDEV-NOTE: bool is an int subclass and 2.0 compares like 2; both are
    rejected so JSON typos never reach the numpy stages.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConfiguration(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class PixelationConfig:
    """Configuration for block averaging and color reduction."""

    block_size: int = 8  # Side of the averaging block in pixels
    target_color_count: int = 16  # Desired palette size
    algorithm: Algorithm = Algorithm.KMEANS
    dithering_enabled: bool = True

    # Grid overlay ("lego" look) drawn on top of the result
    grid_overlay: bool = False
    block_grid_size: "int | None" = None  # Defaults to block_size

    def __post_init__(self):
        # Accept tag strings for convenience, e.g. from JSON or the CLI
        if not isinstance(self.algorithm, Algorithm):
            object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))

    @property
    def effective_grid_size(self) -> int:
        return self.block_grid_size if self.block_grid_size is not None else self.block_size

    def validate(self) -> None:
        """Raise InvalidConfiguration for sizes or counts that are not positive ints."""
        require_positive_int("Block size", self.block_size)
        require_positive_int("Target color count", self.target_color_count)
        if self.block_grid_size is not None:
            require_positive_int("Grid size", self.block_grid_size)
        for name in ("dithering_enabled", "grid_overlay"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidConfiguration(
                    f"{name} must be true or false, got {getattr(self, name)!r}"
                )


@dataclass
class PixelationResult:
    """Result of the pixelation pipeline.

    Either success with a buffer, or a failure carrying the error kind.
    """

    success: bool
    buffer: "PixelBuffer | None" = None

    # Representative colors present after quantization (empty if skipped)
    palette: "list[tuple[int, int, int]]" = field(default_factory=list)

    error: "str | None" = None
    error_kind: "str | None" = None

    @classmethod
    def failure(cls, error: PixelationError) -> "PixelationResult":
        return cls(success=False, error=str(error), error_kind=error.kind)
