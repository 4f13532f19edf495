"""
Global thresholding methods.
This module implements the thresholding algorithms that compute a single threshold value for the entire image.
"""

import time
import logging
from abc import abstractmethod
from typing import Dict, Any, Tuple
import numpy as np

from ..core.base import ThresholdAlgorithm, ThresholdResult, ThresholdMethod
from .binarize import apply_threshold
from .histogram import build_histogram, is_bimodal
from .selectors import (
	DEFAULT_ITERATIONS,
	fixed_threshold,
	initial_threshold,
	iterative_mean_threshold,
	mean_threshold,
	median_threshold,
	otsu_threshold,
)


logger = logging.getLogger(__name__)


class GlobalThreshold(ThresholdAlgorithm):
	"""
	Base for methods that binarize the whole image with one threshold.
	Subclasses implement `select_threshold`. Work shared between selection and
	metadata (such as the image histogram) goes in `prepare`, whose context
	dict is handed to both `select_threshold` and `describe`.
	"""

	def threshold(self, image: np.ndarray, **params) -> ThresholdResult:
		start_time = time.time()

		image = self.validate_image(image)
		resolved = self.resolve_params(params)
		context = self.prepare(image, resolved)

		threshold_value = self.select_threshold(image, resolved, context)
		binary = np.ma.getdata(apply_threshold(image, threshold_value))

		processing_time = time.time() - start_time
		logger.debug(f"{self.name}: threshold {threshold_value} on {image.shape[0]}x{image.shape[1]} image")

		return ThresholdResult(
			binary_image=binary,
			method=self.name,
			parameters=resolved,
			threshold=threshold_value,
			processing_time=processing_time,
			metadata=self.describe(image, resolved, context)
		)

	def prepare(self, image: np.ndarray, params: Dict[str, Any]) -> Dict[str, Any]:
		return {}

	@abstractmethod
	def select_threshold(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> int:
		"""Return the single threshold for `image`."""
		pass

	def describe(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
		return {}

class FixedThreshold(GlobalThreshold):
	"""
	Thresholding with a caller-supplied constant.
	Pixels below the threshold become background (0), the others foreground (255).
	Example:
		>>> method = FixedThreshold()
		>>> result = method.threshold(image, threshold=127)
	"""

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.FIXED.value,
			description="Global threshold with a fixed value"
		)

	def get_default_params(self) -> Dict[str, Any]:
		return {'threshold': 127}

	def get_param_ranges(self) -> Dict[str, Tuple[Any, Any]]:
		return {'threshold': (0, 255)}

	def select_threshold(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> int:
		return fixed_threshold(image, params['threshold'])


class GlobalMeanThreshold(GlobalThreshold):
	"""
	Thresholding at the mean intensity of the image.
	Example:
		>>> method = GlobalMeanThreshold()
		>>> result = method.threshold(image)
	"""

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.GLOBAL_MEAN.value,
			description="Global threshold at the image mean"
		)

	def get_default_params(self) -> Dict[str, Any]:
		return {}

	def select_threshold(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> int:
		return mean_threshold(image)


class GlobalIterativeMeanThreshold(GlobalThreshold):
	"""
	Isodata-style iterative mean thresholding over the whole image.
	Starts at the midpoint of the darkest and brightest pixel and repeatedly
	moves the threshold to the average of the two class means.
	Example:
		>>> method = GlobalIterativeMeanThreshold()
		>>> result = method.threshold(image, iterations=10)
	"""

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.GLOBAL_ITERATIVE_MEAN.value,
			description="Global iterative mean (isodata) threshold"
		)

	def get_default_params(self) -> Dict[str, Any]:
		return {
			'iterations': DEFAULT_ITERATIONS,
			'initial_threshold': None  # None: midpoint of min and max
		}

	def get_param_ranges(self) -> Dict[str, Tuple[Any, Any]]:
		return {
			'iterations': (0, None),
			'initial_threshold': (0, 255)
		}

	def select_threshold(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> int:
		initial = params['initial_threshold']
		if initial is None:
			initial = initial_threshold(image)
		return iterative_mean_threshold(image, initial, params['iterations'])

	def describe(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
		return {'iterations': params['iterations']}


class GlobalOtsuThreshold(GlobalThreshold):
	"""
	Otsu's between-class variance thresholding over the whole image.
	Best for: images with a clearly bimodal histogram.
	"""

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.GLOBAL_OTSU.value,
			description="Global Otsu threshold"
		)

	def get_default_params(self) -> Dict[str, Any]:
		return {}

	def prepare(self, image: np.ndarray, params: Dict[str, Any]) -> Dict[str, Any]:
		return {'histogram': build_histogram(image)}

	def select_threshold(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> int:
		return otsu_threshold(context['histogram'])

	def describe(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> Dict[str, Any]:
		return {'histogram_bimodal': is_bimodal(context['histogram'])}


class GlobalMedianThreshold(GlobalThreshold):
	"""Thresholding at the median intensity of the image."""

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.GLOBAL_MEDIAN.value,
			description="Global threshold at the image median"
		)

	def get_default_params(self) -> Dict[str, Any]:
		return {}

	def prepare(self, image: np.ndarray, params: Dict[str, Any]) -> Dict[str, Any]:
		return {'histogram': build_histogram(image)}

	def select_threshold(self, image: np.ndarray, params: Dict[str, Any], context: Dict[str, Any]) -> int:
		return median_threshold(context['histogram'])
