"""
Tests for the command-line interface.
"""

import logging

import cv2
import pytest
import numpy as np

from thresholding.cli import main
from thresholding.core.config import ConfigLoader


@pytest.fixture
def image_file(tmp_path, uneven_illumination):
	path = tmp_path / "page.png"
	cv2.imwrite(str(path), uneven_illumination)
	return path


@pytest.fixture
def output_file(tmp_path):
	return tmp_path / "out" / "result.png"


def read_gray(path):
	return cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)


class TestMain:
	"""Test suite for the CLI entry point."""

	def test_global_mean(self, tmp_path, two_level_image, output_file):
		path = tmp_path / "two.png"
		cv2.imwrite(str(path), two_level_image)

		assert main([str(path), "gmean", "-o", str(output_file)]) == 0
		assert read_gray(output_file).tolist() == [[0, 255], [0, 255]]

	@pytest.mark.parametrize("method", ["global", "gmean", "giter", "amean", "otsu", "amedian"])
	def test_all_methods(self, image_file, output_file, method):
		assert main([str(image_file), method, "--output", str(output_file)]) == 0

		result = read_gray(output_file)
		assert result.shape == (32, 64)
		assert set(np.unique(result)).issubset({0, 255})

	def test_block_size_option(self, image_file, output_file):
		assert main([str(image_file), "amedian", "--block-size", "32", "-o", str(output_file)]) == 0

		expected = np.full((32, 64), 255, dtype=np.uint8)
		expected[10:14, :] = 0
		assert np.array_equal(read_gray(output_file), expected)

	@pytest.mark.parametrize("method", ["gotsu", "global"])
	def test_block_size_ignored_for_global_methods(self, image_file, output_file, method, caplog):
		with caplog.at_level(logging.WARNING):
			code = main([str(image_file), method, "--block-size", "4", "-o", str(output_file)])

		assert code == 0
		assert output_file.exists()
		assert f"--block-size is ignored for method '{method}'" in caplog.text

	def test_block_size_no_warning_for_tiled_methods(self, image_file, output_file, caplog):
		with caplog.at_level(logging.WARNING):
			assert main([str(image_file), "otsu", "--block-size", "4", "-o", str(output_file)]) == 0

		assert "ignored" not in caplog.text

	def test_threshold_out_of_range(self, image_file, output_file, capsys):
		code = main([str(image_file), "global", "--threshold", "300", "-o", str(output_file)])

		assert code == 1
		assert "out of range" in capsys.readouterr().out
		assert not output_file.exists()

	def test_threshold_option(self, image_file, output_file, capsys):
		code = main([str(image_file), "global", "--threshold", "30", "-o", str(output_file), "--show-threshold"])

		assert code == 0
		assert "Computed threshold: 30" in capsys.readouterr().out

	def test_show_block_grid(self, image_file, output_file, capsys):
		code = main([str(image_file), "otsu", "-o", str(output_file), "--show-threshold"])

		assert code == 0
		assert "1x2 grid" in capsys.readouterr().out

	def test_unknown_method_is_noop(self, image_file, output_file, caplog):
		with caplog.at_level(logging.WARNING):
			code = main([str(image_file), "sauvola", "-o", str(output_file)])

		assert code == 0
		assert not output_file.exists()
		assert "Unknown method 'sauvola'" in caplog.text

	def test_missing_method_is_noop(self, image_file, output_file, caplog):
		with caplog.at_level(logging.WARNING):
			code = main([str(image_file), "-o", str(output_file)])

		assert code == 0
		assert not output_file.exists()
		assert "No method given" in caplog.text

	def test_missing_image_file(self, tmp_path, output_file, capsys):
		code = main([str(tmp_path / "missing.png"), "gmean", "-o", str(output_file)])

		assert code == 1
		assert "not found" in capsys.readouterr().out

	def test_no_input(self, capsys):
		assert main([]) == 1

	def test_config_file(self, tmp_path, image_file, output_file):
		config_path = tmp_path / "config.yaml"
		ConfigLoader.save_yaml({
			'method': 'amedian',
			'block_sizes': {'amedian': 32},
			'output_path': str(output_file)
		}, config_path)

		assert main(["--config", str(config_path), str(image_file)]) == 0
		assert read_gray(output_file)[12, 5] == 0

	def test_invalid_config(self, tmp_path, image_file, capsys):
		config_path = tmp_path / "config.json"
		config_path.write_text('{"iterations": -3}')

		assert main(["--config", str(config_path), str(image_file), "giter"]) == 1
		assert "invalid configuration" in capsys.readouterr().out

	def test_list_methods(self, capsys):
		assert main(["--list-methods"]) == 0

		out = capsys.readouterr().out
		for name in ["global", "gmean", "giter", "amean", "otsu", "amedian"]:
			assert f"• {name}" in out
