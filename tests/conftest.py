"""Shared fixtures: small synthetic images and seeded generators."""

import numpy as np
import pytest
from PIL import Image

from image_processing.kmeans import make_rng

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def rng():
    return make_rng(1234)


@pytest.fixture
def two_color_image():
    """8x8 RGBA image, left half red, right half blue."""
    data = np.zeros((8, 8, 4), dtype=np.uint8)
    data[:, :4] = RED
    data[:, 4:] = BLUE
    return Image.fromarray(data)


@pytest.fixture
def gradient_image():
    """16x16 RGBA image with many distinct colors."""
    ramp = np.linspace(0, 255, 16).astype(np.uint8)
    data = np.zeros((16, 16, 4), dtype=np.uint8)
    data[..., 0] = ramp[None, :]
    data[..., 1] = ramp[:, None]
    data[..., 2] = 128
    data[..., 3] = 255
    return Image.fromarray(data)


@pytest.fixture
def image_file(tmp_path, two_color_image):
    path = tmp_path / "input.png"
    two_color_image.save(path)
    return path


def unique_colors(image):
    """Distinct RGBA colors present in an image."""
    data = np.asarray(image.convert("RGBA")).reshape(-1, 4)
    return {tuple(int(c) for c in color) for color in np.unique(data, axis=0)}
