"""
Adaptive (block-wise) thresholding methods.
These methods compute a separate threshold for each block of the image,
making them robust to non-uniform illumination.
"""

from typing import Dict, Any, Tuple
import numpy as np

from ..core.base import ThresholdMethod
from .histogram import build_histogram, is_bimodal
from .selectors import (
	DEFAULT_ITERATIONS,
	initial_threshold,
	iterative_mean_threshold,
	median_threshold,
	otsu_threshold,
)
from .tiling import TiledThreshold


class AdaptiveMeanThreshold(TiledThreshold):
	"""
	Block-wise iterative mean thresholding.
	Every block runs the isodata iteration on its own pixels, all starting
	from the same initial threshold computed once over the whole image.
	Best for: documents with gradual illumination changes.
	Example:
		>>> method = AdaptiveMeanThreshold()
		>>> result = method.threshold(image, block_size=24, iterations=10)
	"""

	default_block_size = 24

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.ADAPTIVE_MEAN.value,
			description="Block-wise iterative mean thresholding"
		)

	def get_default_params(self) -> Dict[str, Any]:
		params = super().get_default_params()
		params.update({
			'iterations': DEFAULT_ITERATIONS,
			'initial_threshold': None  # None: midpoint of the image min and max
		})
		return params

	def get_param_ranges(self) -> Dict[str, Tuple[Any, Any]]:
		ranges = super().get_param_ranges()
		ranges.update({
			'iterations': (0, None),
			'initial_threshold': (0, 255)
		})
		return ranges

	def prepare(self, image: np.ndarray, params: Dict[str, Any]) -> Dict[str, Any]:
		initial = params['initial_threshold']
		if initial is None:
			initial = initial_threshold(image)
		return {'initial_threshold': initial, 'iterations': params['iterations']}

	def select_block_threshold(self, block: np.ma.MaskedArray, context: Dict[str, Any]) -> int:
		return iterative_mean_threshold(
			block, context['initial_threshold'], context['iterations']
		)


class AdaptiveOtsuThreshold(TiledThreshold):
	"""
	Block-wise Otsu thresholding.
	Each block is split at the intensity maximizing the between-class variance
	of its own histogram. Uniform blocks have no valid split and use 0.
	Example:
		>>> method = AdaptiveOtsuThreshold()
		>>> result = method.threshold(image, block_size=32)
	"""

	default_block_size = 32

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.ADAPTIVE_OTSU.value,
			description="Block-wise Otsu thresholding"
		)

	def select_block_threshold(self, block: np.ma.MaskedArray, context: Dict[str, Any]) -> int:
		return otsu_threshold(build_histogram(block))

	def describe_block(self, block: np.ma.MaskedArray) -> Dict[str, Any]:
		return {'bimodal': is_bimodal(build_histogram(block))}

	def summarize(self, block_info) -> Dict[str, Any]:
		return {'bimodal_blocks': sum(1 for info in block_info if info.get('bimodal'))}


class AdaptiveMedianThreshold(TiledThreshold):
	"""
	Block-wise median thresholding.
	Each block is split at the median intensity of its own histogram.
	Example:
		>>> method = AdaptiveMedianThreshold()
		>>> result = method.threshold(image, block_size=16)
	"""

	default_block_size = 16

	def __init__(self):
		super().__init__(
			name=ThresholdMethod.ADAPTIVE_MEDIAN.value,
			description="Block-wise median thresholding"
		)

	def select_block_threshold(self, block: np.ma.MaskedArray, context: Dict[str, Any]) -> int:
		return median_threshold(build_histogram(block))
