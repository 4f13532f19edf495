"""
Unified pipeline for image thresholding.
This module provides the pipeline that normalises input, looks up the requested method and runs it.
"""

import time
from typing import Dict, Any, Optional, List
import numpy as np
import logging

from .base import ThresholdAlgorithm, normalize_to_uint8
from .config import ThresholdConfig


logger = logging.getLogger(__name__)


class ThresholdPipeline:
	"""
	Main pipeline for thresholding.
	This class orchestrates the workflow:
	1. Input validation and preprocessing
	2. Method lookup and parameter resolution
	3. Thresholding
	Example:
		>>> from thresholding.core.pipeline import ThresholdPipeline
		>>> from thresholding.core.config import get_default_config
		>>>
		>>> config = get_default_config()
		>>> config.method = "otsu"
		>>> pipeline = ThresholdPipeline(config)
		>>>
		>>> result = pipeline.run(image)
		>>> binary = result['binary_image']
	"""

	def __init__(
		self,
		config: Optional[ThresholdConfig] = None,
		algorithm_registry: Optional[Dict[str, ThresholdAlgorithm]] = None
	):
		"""
		Initialize the pipeline.
		Args:
			config: Thresholding configuration
			algorithm_registry: Dictionary mapping method names to algorithm instances
				(defaults to every registered method)
		"""
		from .config import get_default_config

		self.config = config or get_default_config()
		if algorithm_registry is None:
			from ..methods.registry import get_registry
			algorithm_registry = get_registry().as_dict()
		self.algorithm_registry = dict(algorithm_registry)

		logger.info(f"Initialized pipeline with method: {self.config.method}")

	def register_algorithm(self, name: str, algorithm: ThresholdAlgorithm) -> None:
		"""
		Register a thresholding algorithm.
		Args:
			name: Algorithm identifier
			algorithm: Algorithm instance
		"""
		self.algorithm_registry[name] = algorithm
		logger.debug(f"Registered algorithm: {name}")

	def has_algorithm(self, name: Optional[str]) -> bool:
		return name is not None and name in self.algorithm_registry

	def get_algorithm(self, name: str) -> ThresholdAlgorithm:
		"""
		Get registered algorithm by name.
		Args:
			name: Algorithm identifier
		Returns:
			Algorithm instance
		Raises:
			ValueError: If algorithm not found
		"""
		if not self.has_algorithm(name):
			available = sorted(self.algorithm_registry.keys())
			raise ValueError(
				f"Algorithm '{name}' not found. Available: {available}"
			)
		return self.algorithm_registry[name]

	def run(
		self,
		image: np.ndarray,
		method: Optional[str] = None,
		method_params: Optional[Dict[str, Any]] = None
	) -> Dict[str, Any]:
		"""
		Run the thresholding pipeline.
		Args:
			image: Input grayscale or BGR image
			method: Method to use (overrides config)
			method_params: Method parameters (override those derived from config)
		Returns:
			Dictionary containing:
				- binary_image: Binary output
				- method: Method used
				- parameters: Parameters used
				- threshold: Global threshold, None for block-wise methods
				- processing_time: Total time in seconds
				- metadata: Additional information
		"""
		start_time = time.time()

		method = method or self.config.method
		algorithm = self.get_algorithm(method)

		params = self.config.method_params(method)
		params.update(method_params or {})

		try:
			logger.debug("Step 1: Input validation and preprocessing")
			processed_image = self._preprocess_image(image)

			logger.debug(f"Step 2: Applying {method} thresholding")
			result = algorithm.threshold(processed_image, **params)

			processing_time = time.time() - start_time

			output = {
				'binary_image': result.binary_image,
				'method': method,
				'parameters': result.parameters,
				'threshold': result.threshold,
				'processing_time': processing_time,
				'metadata': {
					'input_shape': image.shape,
					'output_shape': result.binary_image.shape,
					'algorithm_metadata': result.metadata
				}
			}

			logger.info(f"Pipeline completed in {processing_time:.3f}s")
			return output

		except Exception as e:
			logger.error(f"Pipeline failed: {str(e)}", exc_info=True)
			raise

	def run_batch(
		self,
		images: List[np.ndarray],
		method: Optional[str] = None,
		method_params: Optional[Dict[str, Any]] = None
	) -> List[Dict[str, Any]]:
		"""
		Run pipeline on a batch of images.
		Args:
			images: List of input images
			method: Method to use
			method_params: Method parameters
		Returns:
			List of result dictionaries
		"""
		results = []
		for i, image in enumerate(images):
			logger.info(f"Processing image {i+1}/{len(images)}")
			results.append(self.run(image, method, method_params))
		return results

	def _preprocess_image(self, image: np.ndarray) -> np.ndarray:
		"""
		Preprocess input image.
		Args:
			image: Input image
		Returns:
			Grayscale uint8 image
		"""
		if image is None or image.size == 0:
			raise ValueError("Input image is empty or None")

		if len(image.shape) == 3:
			# Colour conversion is left to the algorithm's validation
			return image

		return normalize_to_uint8(image)


def run_pipeline(
	image: np.ndarray,
	config: Dict[str, Any],
	algorithm_registry: Optional[Dict[str, ThresholdAlgorithm]] = None
) -> Dict[str, Any]:
	"""
	Convenience function to run pipeline with dictionary config.
	Args:
		image: Input image
		config: Configuration dictionary
		algorithm_registry: Optional algorithm registry
	Returns:
		Pipeline result dictionary
	"""
	if isinstance(config, dict):
		config = ThresholdConfig.from_dict(config)

	pipeline = ThresholdPipeline(config, algorithm_registry)
	return pipeline.run(image)
