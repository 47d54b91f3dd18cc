"""Main image processor orchestrating the complete pipeline.

AIDEV-NOTE: This module handles the pipeline from input file to reduced
image: load, quantize, save. The clustering itself lives in kmeans.py and
never prints; progress and timing are reported here.
"""

import time
from datetime import timedelta
from pathlib import Path

from PIL import Image

from models import QuantizationConfig, QuantizationMethod, QuantizedImage

from .quantization import quantize_colors


class ImageProcessor:
    """Reduces images to a fixed number of colors."""

    def __init__(self, config: QuantizationConfig | None = None):
        self.config = config or QuantizationConfig()

    def load_image(self, file_path: str | Path) -> Image.Image:
        """Load and validate an image file.

        Args:
            file_path: Path to image file (PNG, JPG, etc.)

        Returns:
            PIL Image in RGBA mode

        Raises:
            ValueError: If file cannot be loaded or is invalid
        """
        try:
            image = Image.open(file_path)
            # AIDEV-NOTE: Always convert to RGBA for consistent processing
            if image.mode != "RGBA":
                image = image.convert("RGBA")
            else:
                image.load()
            return image
        except Exception as e:
            raise ValueError(f"Failed to load image: {e}") from e

    def save_image(self, image: Image.Image, file_path: str | Path) -> Path:
        """Write an RGBA image; format follows the file extension.

        Raises:
            ValueError: If the image cannot be written
        """
        path = Path(file_path)
        try:
            image.save(path)
        except Exception as e:
            raise ValueError(f"Failed to save image: {e}") from e
        return path

    def quantize_colors(
        self,
        image: Image.Image,
        num_colors: int | None = None,
        method: str | None = None,
    ) -> "tuple[Image.Image, list[tuple[int, int, int, int]]]":
        """Reduce image to a limited color palette.

        Args:
            image: Input image (RGBA)
            num_colors: Target number of colors, uses config default if None
            method: Quantization method, uses config default if None

        Returns:
            Tuple of (quantized image in RGBA mode, palette list)
        """
        num_colors = num_colors if num_colors is not None else self.config.num_colors
        method = method or self.config.method
        return quantize_colors(
            image,
            num_colors,
            method,
            iterations=self.config.iterations,
            seed=self.config.seed,
            tolerance=self.config.tolerance,
        )

    def quantize_image(self, image: Image.Image) -> QuantizedImage:
        """Quantize an already loaded image and time the work.

        Args:
            image: Input image (RGBA)

        Returns:
            QuantizedImage without an output path; elapsed covers clustering
            and quantization only
        """
        width, height = image.size

        try:
            method = QuantizationMethod(self.config.method)
        except ValueError:
            print(f"Unknown method {self.config.method!r}, using kmeans.")
            method = QuantizationMethod.KMEANS

        start = time.perf_counter()
        quantized, palette = self.quantize_colors(image, method=method.value)
        elapsed = timedelta(seconds=time.perf_counter() - start)

        return QuantizedImage(
            image=quantized,
            palette=palette,
            num_colors=self.config.num_colors,
            method=method,
            width=width,
            height=height,
            iterations=self.config.iterations,
            elapsed=elapsed,
        )


    def process(
        self,
        file_path: str | Path,
        output_path: str | Path | None = None,
    ) -> QuantizedImage:
        """Execute complete quantization pipeline.

        Args:
            file_path: Path to input image
            output_path: Where to write the result, config default if None

        Returns:
            QuantizedImage with the output image, palette and timing

        Raises:
            ValueError: If the input cannot be loaded or the output written
        """
        output_path = Path(output_path or self.config.output_path)

        print(f"Working on {file_path} ", end="")
        print(
            f"to produce an image with {self.config.num_colors} colors "
            f"in {output_path}"
        )

        image = self.load_image(file_path)
        result = self.quantize_image(image)

        delta_us = result.elapsed // timedelta(microseconds=1)
        print(f"Done! Processed in {delta_us} us")

        try:
            result.output_path = self.save_image(result.image, output_path)
        except ValueError as e:
            raise ValueError(f"Error writing to png at {output_path}: {e}") from e

        print(f"Done! Wrote output to {output_path}")
        return result
