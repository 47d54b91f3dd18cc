import dataclasses

import pytest

from models import Color, QuantizationConfig


def test_add_and_scale_divide():
    total = Color(0.1, 0.2, 0.3, 0.4).add(Color(0.3, 0.2, 0.1, 0.6))
    assert isinstance(total, Color)
    assert tuple(total) == pytest.approx((0.4, 0.4, 0.4, 1.0))
    assert tuple(Color(2, 4, 6, 8).scale_divide(2)) == (1, 2, 3, 4)
    assert tuple(Color(1, 1, 1, 1) + Color(1, 0, 0, 0)) == (2, 1, 1, 1)


def test_squared_distance_weights_alpha_like_color():
    opaque = Color(0.0, 0.0, 0.0, 1.0)
    transparent = Color(0.0, 0.0, 0.0, 0.0)
    red = Color(1.0, 0.0, 0.0, 1.0)
    assert opaque.squared_distance(transparent) == 1.0
    assert opaque.squared_distance(red) == 1.0
    assert Color(1, 1, 1, 1).squared_distance(Color(0, 0, 0, 0)) == 4.0


def test_to_8bit_truncates():
    assert Color(1.0, 0.0, 0.5, 0.999).to_8bit() == (255, 0, 127, 254)


def test_to_8bit_wraps_out_of_range_values():
    # 1.5 * 255 = 382.5 -> 382 % 256; -0.1 * 255 = -25.5 -> -25 % 256
    assert Color(1.5, -0.1, 0.0, 1.0).to_8bit() == (126, 231, 0, 255)


def test_color_is_immutable():
    color = Color(0.1, 0.2, 0.3, 1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        color.r = 0.5


def test_config_defaults():
    config = QuantizationConfig()
    assert config.num_colors == 8
    assert config.iterations == 10
    assert config.method == "kmeans"
    assert config.seed is None
    assert config.tolerance is None
    assert config.output_path == "out.png"
