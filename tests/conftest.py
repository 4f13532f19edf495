import numpy as np
import pytest


@pytest.fixture
def bimodal_image():
	"""Synthetic bimodal image: dark background around 50, bright square around 200."""
	rng = np.random.default_rng(0)
	img = rng.normal(50, 10, (60, 80))
	img[15:45, 20:60] = rng.normal(200, 10, (30, 40))
	return np.clip(img, 0, 255).astype(np.uint8)


@pytest.fixture
def flat_image():
	"""Uniform image of value 128 (edge case)."""
	return np.full((37, 53), 128, dtype=np.uint8)


@pytest.fixture
def two_level_image():
	"""2x2 image with one dark and one bright column."""
	return np.array([[10, 200], [10, 200]], dtype=np.uint8)


@pytest.fixture
def uneven_illumination():
	"""Two 32x32 halves lit differently, each with a darker stripe."""
	img = np.zeros((32, 64), dtype=np.uint8)
	img[:, :32] = 60
	img[10:14, :32] = 20
	img[:, 32:] = 220
	img[10:14, 32:] = 150
	return img
