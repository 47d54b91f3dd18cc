"""Image color reduction pipeline.

AIDEV-NOTE: This package handles the complete pipeline from input image
to reduced-palette image. Organized into modular components:
- processor: Main ImageProcessor orchestrator
- kmeans: RGBA k-means clustering engine
- quantization: Backend selection (kmeans, sklearn, Pillow)
- utils: Image <-> pixel buffer conversion
"""

from .kmeans import InvalidArgumentError, quantize_pixels, run_kmeans
from .processor import ImageProcessor
from .quantization import quantize_colors

__all__ = [
    "ImageProcessor",
    "InvalidArgumentError",
    "quantize_colors",
    "quantize_pixels",
    "run_kmeans",
]
