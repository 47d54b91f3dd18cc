"""Data models and constants for the k-means color reducer."""

import math
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PIL import Image

# AIDEV-NOTE: The reference behaviour runs exactly this many iterations
DEFAULT_ITERATIONS = 10
DEFAULT_NUM_COLORS = 8
DEFAULT_OUTPUT = "out.png"

# Configuration file path
CONFIG_FILE = Path.home() / ".kquant_config.json"


class QuantizationMethod(Enum):
    """Color quantization backends.

    AIDEV-NOTE: KMEANS is the in-house RGBA engine. The others exist for
    comparing results against library implementations.
    """

    KMEANS = "kmeans"  # RGBA k-means (image_processing.kmeans)
    SKLEARN = "sklearn"  # scikit-learn KMeans on the same RGBA floats
    MEDIAN_CUT = "median_cut"  # Pillow median cut (RGB only)
    OCTREE = "octree"  # Pillow fast octree (RGB only)


@dataclass(frozen=True)
class Color:
    """A 4-channel floating-point color.

    AIDEV-NOTE: Channels are nominally 0-1 but never clamped. Alpha takes
    part in distances exactly like r, g and b, so transparency alone can
    separate clusters.
    """

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0

    def __add__(self, other: "Color") -> "Color":
        return self.add(other)

    def __iter__(self):
        return iter((self.r, self.g, self.b, self.a))

    def add(self, other: "Color") -> "Color":
        """Component-wise sum."""
        return Color(
            self.r + other.r,
            self.g + other.g,
            self.b + other.b,
            self.a + other.a,
        )

    def scale_divide(self, s: float) -> "Color":
        """Divide every channel by ``s`` (callers only pass counts > 0)."""
        return Color(self.r / s, self.g / s, self.b / s, self.a / s)

    def squared_distance(self, other: "Color") -> float:
        """Sum of squared channel differences, alpha included."""
        return (
            (self.r - other.r) ** 2
            + (self.g - other.g) ** 2
            + (self.b - other.b) ** 2
            + (self.a - other.a) ** 2
        )

    def to_8bit(self) -> "tuple[int, int, int, int]":
        """Scale by 255 and truncate each channel to a byte.

        Values outside 0-1 wrap modulo 256 instead of being clamped.
        """
        return tuple(math.trunc(c * 255) % 256 for c in self)  # type: ignore[return-value]

    def to_tuple(self) -> "tuple[float, float, float, float]":
        return (self.r, self.g, self.b, self.a)


@dataclass
class QuantizationConfig:
    """User-facing quantization settings, persisted by ConfigManager."""

    num_colors: int = DEFAULT_NUM_COLORS  # k, must be >= 1
    iterations: int = DEFAULT_ITERATIONS
    method: str = QuantizationMethod.KMEANS.value

    # None means seed from OS entropy (results differ between runs)
    seed: "int | None" = None

    # Optional early exit once no centroid moves more than this
    tolerance: "float | None" = None

    output_path: str = DEFAULT_OUTPUT


@dataclass
class QuantizedImage:
    """Result of the quantization pipeline."""

    image: "Image.Image"  # RGBA output image

    # Final palette as 8-bit RGBA tuples, one per centroid
    palette: "list[tuple[int, int, int, int]]"

    num_colors: int
    method: QuantizationMethod

    width: int = 0
    height: int = 0
    iterations: int = DEFAULT_ITERATIONS

    # Wall-clock time of clustering + quantization (I/O excluded)
    elapsed: timedelta = timedelta(0)

    output_path: "Path | None" = None
