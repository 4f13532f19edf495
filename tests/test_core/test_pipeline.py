"""
Unit tests for the core pipeline functionality.
"""

import pytest
import numpy as np
from unittest.mock import Mock

from thresholding.core.pipeline import ThresholdPipeline, run_pipeline
from thresholding.core.config import get_default_config
from thresholding.core.base import ThresholdAlgorithm, ThresholdResult
from thresholding.methods.global_methods import GlobalMeanThreshold
from thresholding.methods.registry import AlgorithmRegistry, get_algorithm, get_registry, list_algorithms


METHOD_NAMES = ["amean", "amedian", "giter", "global", "gmean", "gmedian", "gotsu", "otsu"]


@pytest.fixture
def simple_image():
	"""Bright page with three dark text lines."""
	img = np.ones((100, 100), dtype=np.uint8) * 200
	img[20:30, 20:80] = 50
	img[40:50, 20:80] = 50
	img[60:70, 20:80] = 50
	return img


@pytest.fixture
def mock_algorithm():
	"""Create a mock thresholding algorithm."""
	algorithm = Mock(spec=ThresholdAlgorithm)
	algorithm.name = "mock_method"

	def mock_threshold(image, **params):
		binary = np.where(image < 128, 0, 255).astype(np.uint8)
		return ThresholdResult(
			binary_image=binary,
			method="mock_method",
			parameters=params,
			threshold=128
		)

	algorithm.threshold = mock_threshold
	return algorithm


class TestThresholdPipeline:
	"""Test suite for ThresholdPipeline class."""

	def test_default_registry(self):
		pipeline = ThresholdPipeline()
		assert sorted(pipeline.algorithm_registry) == METHOD_NAMES

	def test_register_algorithm(self, mock_algorithm):
		pipeline = ThresholdPipeline()
		pipeline.register_algorithm("test_method", mock_algorithm)

		assert pipeline.get_algorithm("test_method") is mock_algorithm

	def test_get_nonexistent_algorithm(self):
		pipeline = ThresholdPipeline()

		with pytest.raises(ValueError, match="Algorithm .* not found"):
			pipeline.get_algorithm("nonexistent")

	def test_missing_method(self, simple_image):
		pipeline = ThresholdPipeline()

		with pytest.raises(ValueError, match="not found"):
			pipeline.run(simple_image)

	def test_run_mock(self, simple_image, mock_algorithm):
		pipeline = ThresholdPipeline(algorithm_registry={})
		pipeline.register_algorithm("mock_method", mock_algorithm)

		result = pipeline.run(simple_image, method="mock_method")

		assert result['method'] == 'mock_method'
		assert result['threshold'] == 128
		assert result['binary_image'][25, 50] == 0
		assert result['binary_image'][0, 0] == 255

	def test_run_global_mean(self, two_level_image):
		result = ThresholdPipeline().run(two_level_image, method="gmean")

		assert result['threshold'] == 105
		assert result['binary_image'].tolist() == [[0, 255], [0, 255]]
		assert result['metadata']['input_shape'] == (2, 2)
		assert result['processing_time'] >= 0

	def test_config_parameters_used(self, simple_image):
		config = get_default_config()
		config.method = "otsu"
		config.block_sizes["otsu"] = 50

		result = ThresholdPipeline(config).run(simple_image)

		assert result['parameters']['block_size'] == 50
		assert result['metadata']['algorithm_metadata']['block_grid'] == (2, 2)
		assert result['threshold'] is None

	def test_explicit_params_override_config(self, two_level_image):
		config = get_default_config()
		config.fixed_threshold = 5

		result = ThresholdPipeline(config).run(
			two_level_image, method="global", method_params={'threshold': 201}
		)
		assert result['threshold'] == 201

	def test_fixed_threshold_from_config(self, simple_image):
		config = get_default_config()
		config.method = "global"
		config.fixed_threshold = 40

		result = ThresholdPipeline(config).run(simple_image)

		assert result['threshold'] == 40
		assert (result['binary_image'] == 255).all()

	def test_float_input(self):
		image = np.array([[0.0, 1.0], [0.0, 1.0]])
		result = ThresholdPipeline().run(image, method="gmean")
		assert result['binary_image'].tolist() == [[0, 255], [0, 255]]

	def test_empty_input(self):
		with pytest.raises(ValueError, match="empty"):
			ThresholdPipeline().run(np.zeros((0, 0), dtype=np.uint8), method="gmean")

	def test_run_batch(self, simple_image, two_level_image):
		results = ThresholdPipeline().run_batch([simple_image, two_level_image], method="amedian")

		assert len(results) == 2
		assert results[0]['binary_image'].shape == simple_image.shape
		assert results[1]['binary_image'].shape == two_level_image.shape


class TestRunPipeline:
	"""Test suite for the run_pipeline helper."""

	def test_dict_config(self, two_level_image):
		result = run_pipeline(two_level_image, {'method': 'gmean'})
		assert result['threshold'] == 105


class TestAlgorithmRegistry:
	"""Test suite for AlgorithmRegistry."""

	def test_global_registry_contents(self):
		assert get_registry().list_algorithms() == METHOD_NAMES

	def test_contains(self):
		registry = get_registry()
		assert "otsu" in registry
		assert "sauvola" not in registry

	def test_unknown_algorithm(self):
		with pytest.raises(KeyError, match="not found"):
			get_registry().get("sauvola")

	def test_duplicate_registration(self):
		registry = AlgorithmRegistry()
		assert registry.register_class(GlobalMeanThreshold) == "gmean"

		with pytest.raises(ValueError, match="already registered"):
			registry.register_class(GlobalMeanThreshold)

		first = registry.get("gmean")
		registry.register_class(GlobalMeanThreshold, override=True)
		assert registry.get("gmean") is not first
		assert registry.list_algorithms() == ["gmean"]

	def test_module_helpers(self, two_level_image):
		assert list_algorithms() == METHOD_NAMES
		assert get_algorithm("gmean") is get_registry().get("gmean")
		assert get_algorithm("gmean").threshold(two_level_image).threshold == 105

	def test_as_dict(self):
		algorithms = get_registry().as_dict()

		assert sorted(algorithms) == METHOD_NAMES
		assert all(algorithm.name == name for name, algorithm in algorithms.items())

	def test_get_info(self):
		info = get_registry().get_info("amean")

		assert info['name'] == "amean"
		assert info['class'] == "AdaptiveMeanThreshold"
		assert info['default_params']['block_size'] == 24

	def test_instances_cached(self):
		registry = get_registry()
		assert registry.get("gmean") is registry.get("gmean")
