import json

import pytest

from app import main, parse_k
from image_processing.kmeans import InvalidArgumentError
from PIL import Image

from conftest import BLUE, RED, unique_colors


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "kquant.json"


def test_reduces_image(tmp_path, image_file, config_path, capsys):
    output = tmp_path / "result.png"
    code = main([
        str(image_file), "-k", "2", "-o", str(output),
        "--seed", "3", "--iterations", "40", "--config", str(config_path),
    ])

    assert code == 0
    out = capsys.readouterr().out
    assert f"to produce an image with 2 colors in {output}" in out
    assert "Done! Processed in" in out
    assert f"Done! Wrote output to {output}" in out
    assert unique_colors(Image.open(output)) == {RED, BLUE}
    assert not config_path.exists()


@pytest.mark.parametrize("k", ["0", "-2", "abc"])
def test_rejects_bad_k(image_file, config_path, capsys, k):
    assert main([str(image_file), "-k", k, "--config", str(config_path)]) == 1
    assert "k must be a positive integer" in capsys.readouterr().err


def test_missing_input(tmp_path, config_path, capsys):
    assert main([str(tmp_path / "nope.png"), "-k", "2", "--config", str(config_path)]) == 1
    assert "No valid input file specified" in capsys.readouterr().err


def test_write_failure(tmp_path, image_file, config_path, capsys):
    output = tmp_path / "missing_dir" / "out.png"
    code = main([str(image_file), "-k", "1", "-o", str(output), "--config", str(config_path)])
    assert code == 1
    assert f"Error writing to png at {output}" in capsys.readouterr().err


def test_save_config(tmp_path, image_file, config_path):
    output = tmp_path / "o.png"
    code = main([
        str(image_file), "-k", "3", "-o", str(output), "--seed", "9",
        "--config", str(config_path), "--save-config",
    ])
    assert code == 0
    stored = json.loads(config_path.read_text())
    assert stored["num_colors"] == 3
    assert stored["seed"] == 9

    # Stored k is used when -k is omitted
    code = main([str(image_file), "-o", str(output), "--config", str(config_path)])
    assert code == 0
    assert len(unique_colors(Image.open(output))) <= 3


def test_parse_k():
    assert parse_k("4") == 4
    with pytest.raises(InvalidArgumentError):
        parse_k(None)


@pytest.mark.parametrize("stored", ['{"seed": "abc"}', '{"tolerance": "tight"}'])
def test_bad_config_values_fall_back_to_defaults(tmp_path, image_file, config_path, capsys, stored):
    config_path.write_text(stored)
    output = tmp_path / "o.png"
    code = main([str(image_file), "-k", "2", "-o", str(output), "--config", str(config_path)])
    assert code == 0
    assert output.exists()
    assert "Could not load config file" in capsys.readouterr().out


def test_numeric_string_tolerance_in_config(tmp_path, image_file, config_path):
    config_path.write_text('{"tolerance": "0.1", "seed": "3"}')
    output = tmp_path / "o.png"
    code = main([str(image_file), "-k", "2", "-o", str(output), "--config", str(config_path)])
    assert code == 0
