"""Color quantization methods for reducing image color palettes.

AIDEV-NOTE: This module picks a quantization backend. The in-house RGBA
k-means engine is the default; scikit-learn and PIL's built-in methods are
kept for comparison. Every method returns an RGBA image plus its palette.
"""

import numpy as np
from PIL import Image
from sklearn.cluster import KMeans

from models import DEFAULT_ITERATIONS, QuantizationMethod

from .kmeans import (
    InvalidArgumentError,
    centroids_to_8bit,
    make_rng,
    quantize_pixels,
    run_kmeans,
)
from .utils import image_to_pixels, palette_to_tuples, pixels_to_image


def quantize_colors(
    image: Image.Image,
    num_colors: int,
    method: "QuantizationMethod | str" = QuantizationMethod.KMEANS,
    iterations: int = DEFAULT_ITERATIONS,
    seed: "int | None" = None,
    tolerance: "float | None" = None,
) -> "tuple[Image.Image, list[tuple[int, int, int, int]]]":
    """Reduce image to a limited color palette.

    Args:
        image: Input image (any mode, handled as RGBA)
        num_colors: Target number of colors (k >= 1)
        method: Quantization method ('kmeans', 'sklearn', 'median_cut'
            or 'octree')
        iterations: K-means update steps (kmeans only)
        seed: Random seed for reproducible clustering
        tolerance: Optional early-exit threshold (kmeans only)

    Returns:
        Tuple of (quantized image in RGBA mode, palette list)

    Raises:
        InvalidArgumentError: If num_colors < 1
    """
    if num_colors < 1:
        raise InvalidArgumentError(
            f"k must be a positive integer, got {num_colors}"
        )

    try:
        method = QuantizationMethod(method)
    except ValueError:
        # Default to kmeans
        method = QuantizationMethod.KMEANS

    if method == QuantizationMethod.SKLEARN:
        return quantize_sklearn(image, num_colors, seed=seed)
    elif method == QuantizationMethod.MEDIAN_CUT:
        return quantize_pillow(image, num_colors, method=Image.Quantize.MEDIANCUT)
    elif method == QuantizationMethod.OCTREE:
        return quantize_pillow(image, num_colors, method=Image.Quantize.FASTOCTREE)
    return quantize_kmeans(
        image, num_colors, iterations=iterations, seed=seed, tolerance=tolerance
    )


def quantize_kmeans(
    image: Image.Image,
    num_colors: int,
    iterations: int = DEFAULT_ITERATIONS,
    seed: "int | None" = None,
    tolerance: "float | None" = None,
) -> "tuple[Image.Image, list[tuple[int, int, int, int]]]":
    """K-means color quantization in RGBA space.

    AIDEV-NOTE: Alpha is clustered like any other channel, so an image
    with varying transparency partly clusters on opacity.
    """
    width, height = image.size
    pixels = image_to_pixels(image)

    centroids = run_kmeans(
        pixels,
        num_colors,
        iterations=iterations,
        rng=make_rng(seed),
        tolerance=tolerance,
    )

    quantized_pixels = quantize_pixels(pixels, centroids)
    palette = palette_to_tuples(centroids_to_8bit(centroids))

    return pixels_to_image(quantized_pixels, width, height), palette


def quantize_sklearn(
    image: Image.Image,
    num_colors: int,
    seed: "int | None" = None,
) -> "tuple[Image.Image, list[tuple[int, int, int, int]]]":
    """scikit-learn KMeans on the same RGBA float pixels.

    AIDEV-NOTE: Uses k-means++ seeding and 10 restarts, so results are
    usually tighter than the in-house engine but much slower on large
    images.
    """
    width, height = image.size
    pixels = image_to_pixels(image).astype(np.float64)

    if pixels.shape[0] < num_colors:
        raise InvalidArgumentError(
            f"sklearn method needs at least {num_colors} pixels, "
            f"image has {pixels.shape[0]}"
        )

    # Fit KMeans
    kmeans = KMeans(n_clusters=num_colors, random_state=seed, n_init=10)
    kmeans.fit(pixels)

    # Get cluster centers as palette
    centers = centroids_to_8bit(kmeans.cluster_centers_)
    palette = palette_to_tuples(centers)

    # Assign each pixel to nearest cluster
    quantized_pixels = centers[kmeans.labels_]

    return pixels_to_image(quantized_pixels, width, height), palette


def quantize_pillow(
    image: Image.Image,
    num_colors: int,
    method: Image.Quantize,
) -> "tuple[Image.Image, list[tuple[int, int, int, int]]]":
    """Pillow-based color quantization.

    AIDEV-NOTE: Median cut does not accept RGBA input, so both Pillow
    methods run on RGB and the result is fully opaque.
    """
    rgb_image = image.convert("RGB")

    # Quantize returns a palette image
    quantized = rgb_image.quantize(colors=num_colors, method=method)

    # Extract palette
    palette_data = quantized.getpalette()
    if palette_data is None:
        palette = [(128, 128, 128, 255)]  # Fallback gray
    else:
        entries = min(num_colors, len(palette_data) // 3)
        palette = [
            (palette_data[i], palette_data[i + 1], palette_data[i + 2], 255)
            for i in range(0, entries * 3, 3)
        ]

    return quantized.convert("RGBA"), palette
