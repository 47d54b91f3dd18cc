"""Utility functions for moving between PIL images and pixel buffers.

AIDEV-NOTE: The clustering engine only sees flat (N, 4) float buffers.
These helpers are the decode/encode boundary: PIL RGBA bytes in, floats in
0-1 out, and back again once the buffer has been quantized.
"""

import numpy as np
from PIL import Image


def image_to_pixels(image: Image.Image) -> np.ndarray:
    """Convert an image to a row-major RGBA float buffer.

    Args:
        image: PIL image in any mode (converted to RGBA)

    Returns:
        float32 array of shape (width * height, 4), channels in 0-1

    AIDEV-NOTE: Plain division by 255 (gamma 1.0). No sRGB linearization.
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    data = np.asarray(image, dtype=np.float32) / 255.0
    return data.reshape(-1, 4)


def pixels_to_image(pixels: np.ndarray, width: int, height: int) -> Image.Image:
    """Build an RGBA image from an 8-bit (width * height, 4) buffer.

    Raises:
        ValueError: If the buffer does not match the dimensions
    """
    buffer = np.asarray(pixels, dtype=np.uint8)
    if buffer.shape != (width * height, 4):
        raise ValueError(
            f"Buffer shape {buffer.shape} does not match {width}x{height} RGBA"
        )
    return Image.fromarray(buffer.reshape(height, width, 4))


def palette_to_tuples(palette: np.ndarray) -> "list[tuple[int, int, int, int]]":
    """Convert a (k, 4) uint8 palette array into a list of RGBA tuples."""
    return [tuple(int(c) for c in color) for color in palette]  # type: ignore[misc]
