"""RGBA k-means clustering engine.

AIDEV-NOTE: Everything here works on flat pixel buffers of shape (N, 4)
with float channels nominally in 0-1. Functions are pure: centroid sets go
in and new centroid sets come out, and the random generator is always passed
explicitly so a seeded run is fully reproducible. Nothing in this module
prints; timing and reporting belong to the processor.
"""

import math
from typing import Sequence

import numpy as np

from models import DEFAULT_ITERATIONS, Color


class InvalidArgumentError(ValueError):
    """Raised for bad k, empty pixel buffers or empty centroid sets."""


def make_rng(seed: "int | None" = None) -> np.random.Generator:
    """Create the random generator threaded through a clustering run.

    With ``seed=None`` the generator draws from OS entropy, so two runs on
    the same image may settle on different (usually similar) palettes.
    """
    return np.random.default_rng(seed)


def random_color(rng: np.random.Generator) -> Color:
    """Uniform random r, g, b in [0, 1) with a fully opaque alpha."""
    r, g, b = rng.random(3)
    return Color(float(r), float(g), float(b), 1.0)


def random_centroids(k: int, rng: np.random.Generator) -> np.ndarray:
    """Initial centroid set of ``k`` random opaque colors, shape (k, 4)."""
    if k < 1:
        raise InvalidArgumentError(f"k must be a positive integer, got {k}")
    return np.array([random_color(rng).to_tuple() for _ in range(k)], dtype=np.float64)


def as_pixel_buffer(pixels) -> np.ndarray:
    """Validate and normalize pixels into a float64 array of shape (N, 4).

    Accepts (N, 4) buffers or (height, width, 4) images.

    Raises:
        InvalidArgumentError: If the buffer is empty or not 4-channel
    """
    buffer = np.asarray(pixels, dtype=np.float64)
    if buffer.ndim == 3:
        buffer = buffer.reshape(-1, buffer.shape[-1])
    if buffer.ndim != 2 or buffer.shape[1] != 4:
        raise InvalidArgumentError(
            f"Expected RGBA pixels of shape (N, 4), got {buffer.shape}"
        )
    if buffer.shape[0] == 0:
        raise InvalidArgumentError("Pixel buffer is empty")
    return buffer


def _as_centroid_set(centroids) -> np.ndarray:
    if len(centroids) == 0:
        raise InvalidArgumentError("Centroid set is empty")
    centroid_set = np.asarray([tuple(c) for c in centroids], dtype=np.float64)
    if centroid_set.ndim != 2 or centroid_set.shape[1] != 4:
        raise InvalidArgumentError(
            f"Expected RGBA centroids of shape (k, 4), got {centroid_set.shape}"
        )
    return centroid_set


def nearest_centroid(color, centroids: Sequence) -> int:
    """Index of the centroid closest to ``color`` by squared distance.

    Centroids are scanned in order and only a strictly smaller distance
    replaces the current best, so ties go to the lowest index.

    Args:
        color: Color or any 4-item sequence
        centroids: Sequence of Color or 4-item rows

    Raises:
        InvalidArgumentError: If ``centroids`` is empty
    """
    if len(centroids) == 0:
        raise InvalidArgumentError("Centroid set is empty")

    if not isinstance(color, Color):
        color = Color(*color)

    # inf bounds any distance, including HDR values outside 0-1
    min_sq_dist = math.inf
    idx = 0
    for j, centroid in enumerate(centroids):
        if not isinstance(centroid, Color):
            centroid = Color(*centroid)
        sq_dist = color.squared_distance(centroid)
        if sq_dist < min_sq_dist:
            min_sq_dist = sq_dist
            idx = j
    return idx


def assign_labels(pixels, centroids) -> np.ndarray:
    """Vectorized nearest_centroid over a whole pixel buffer.

    AIDEV-NOTE: Loops over centroids instead of pixels with the same
    strict-less scan as nearest_centroid. Memory is O(N).
    """
    pixel_buffer = as_pixel_buffer(pixels)
    centroid_set = _as_centroid_set(centroids)

    n = pixel_buffer.shape[0]
    best = np.full(n, np.inf)
    labels = np.zeros(n, dtype=np.intp)

    for j, centroid in enumerate(centroid_set):
        diff = pixel_buffer - centroid
        sq_dist = np.einsum("ij,ij->i", diff, diff)
        closer = sq_dist < best
        best[closer] = sq_dist[closer]
        labels[closer] = j

    return labels


def kmeans_iteration(pixels, centroids, rng: np.random.Generator) -> np.ndarray:
    """Run one assignment + update step and return the new centroid set.

    Centroids that received pixels move to the mean of those pixels. A
    centroid that captured nothing is replaced by a fresh random color so
    the set always keeps exactly k entries. The input array is not mutated.
    """
    pixel_buffer = as_pixel_buffer(pixels)
    centroid_set = _as_centroid_set(centroids)
    k = centroid_set.shape[0]

    labels = assign_labels(pixel_buffer, centroid_set)

    counts = np.bincount(labels, minlength=k)
    sums = np.stack(
        [np.bincount(labels, weights=pixel_buffer[:, c], minlength=k) for c in range(4)],
        axis=1,
    )

    updated = np.empty_like(centroid_set)
    for i in range(k):
        if counts[i] > 0:
            updated[i] = sums[i] / counts[i]
        else:
            # Empty cluster: reseed rather than drop it
            updated[i] = random_color(rng).to_tuple()

    return updated


def run_kmeans(
    pixels,
    k: int,
    iterations: int = DEFAULT_ITERATIONS,
    rng: "np.random.Generator | None" = None,
    tolerance: "float | None" = None,
) -> np.ndarray:
    """Cluster ``pixels`` into ``k`` colors.

    Args:
        pixels: RGBA float buffer, (N, 4) or (height, width, 4)
        k: Number of centroids (>= 1)
        iterations: Number of update steps to run
        rng: Random generator for seeding and empty-cluster recovery;
            a fresh unseeded one is created if None
        tolerance: If set, stop early once no centroid moved further than
            this in a single step. None runs every iteration.

    Returns:
        Final centroid set, float64 array of shape (k, 4)

    Raises:
        InvalidArgumentError: For k < 1, negative iterations or bad pixels
    """
    if k < 1:
        raise InvalidArgumentError(f"k must be a positive integer, got {k}")
    if iterations < 0:
        raise InvalidArgumentError(f"iterations must be >= 0, got {iterations}")

    pixel_buffer = as_pixel_buffer(pixels)
    rng = rng if rng is not None else make_rng()

    centroids = random_centroids(k, rng)
    for _ in range(iterations):
        updated = kmeans_iteration(pixel_buffer, centroids, rng)
        if tolerance is not None:
            shift = np.sqrt(((updated - centroids) ** 2).sum(axis=1)).max()
            centroids = updated
            if shift <= tolerance:
                break
        else:
            centroids = updated

    return centroids


def centroids_to_8bit(centroids) -> np.ndarray:
    """Vectorized Color.to_8bit: truncate channel*255, wrap modulo 256."""
    centroid_set = _as_centroid_set(centroids)
    scaled = np.trunc(centroid_set * 255).astype(np.int64)
    return (scaled % 256).astype(np.uint8)


def quantize_pixels(pixels, centroids) -> np.ndarray:
    """Map every pixel to its nearest centroid's 8-bit color.

    Returns:
        uint8 array of shape (N, 4), same length as the input buffer
    """
    labels = assign_labels(pixels, centroids)
    palette = centroids_to_8bit(centroids)
    return palette[labels]
