"""
Core base classes and interfaces for thresholding algorithms.
This module defines the result container, the abstract algorithm interface and the region helpers shared by the global and block-wise engines.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple
import numpy as np
import cv2
from enum import Enum


# Sentinel used by callers that pack absent samples into plain integer grids
ABSENT = -1

MAX_INTENSITY = 255


class ThresholdMethod(Enum):
	"""Enumeration of available thresholding methods."""
	# Global methods
	FIXED = "global"
	GLOBAL_MEAN = "gmean"
	GLOBAL_ITERATIVE_MEAN = "giter"
	GLOBAL_OTSU = "gotsu"
	GLOBAL_MEDIAN = "gmedian"

	# Block-wise (adaptive) methods
	ADAPTIVE_MEAN = "amean"
	ADAPTIVE_OTSU = "otsu"
	ADAPTIVE_MEDIAN = "amedian"


class EmptyRegionError(ValueError):
	"""Raised when a statistic is requested over a region with no present samples."""


@dataclass
class ThresholdResult:
	"""
	Container for thresholding results and metadata.
	Attributes:
		binary_image: Binary output image (0/255)
		method: Name of the method used
		parameters: Parameters used for thresholding
		threshold: Computed global threshold (None for block-wise methods)
		processing_time: Time taken in seconds
		metadata: Additional algorithm-specific metadata
	"""
	binary_image: np.ndarray
	method: str
	parameters: Dict[str, Any]
	threshold: Optional[int] = None
	processing_time: float = 0.0
	metadata: Dict[str, Any] = field(default_factory=dict)

	def __post_init__(self):
		"""Validate the binary image."""
		if self.binary_image.dtype != np.uint8:
			raise ValueError(f"Binary image must be uint8, got {self.binary_image.dtype}")

		unique_vals = np.unique(self.binary_image)
		if not set(unique_vals.tolist()).issubset({0, 255}):
			raise ValueError(f"Binary image must contain only 0 and 255, got {unique_vals}")


class ThresholdAlgorithm(ABC):
	"""
	Abstract base class for all thresholding algorithms.
	Every method, global or block-wise, inherits from this class and implements
	`threshold`, so the registry, pipeline and CLI can drive them uniformly.
	"""

	def __init__(self, name: str, description: str = ""):
		"""Initialize the algorithm.

		Args:
			name: Unique name for the algorithm (the CLI method name)
			description: Human-readable description
		"""
		self.name = name
		self.description = description

	@abstractmethod
	def threshold(self, image: np.ndarray, **params) -> ThresholdResult:
		"""
		Apply thresholding to the input image.
		Args:
			image: Input grayscale image
			**params: Algorithm-specific parameters
		Returns:
			ThresholdResult containing binary image and metadata
		Raises:
			ValueError: If image format is invalid
		"""
		pass

	@abstractmethod
	def get_default_params(self) -> Dict[str, Any]:
		"""
		Return default parameters for this algorithm.
		Returns:
			Dictionary of parameter names and default values
		"""
		pass

	def get_param_ranges(self) -> Dict[str, Tuple[Any, Any]]:
		"""
		Return the accepted range of each numeric parameter.
		Both bounds are inclusive; None leaves that side open.
		Returns:
			Dictionary mapping parameter names to (min, max) tuples
		"""
		return {}

	def resolve_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
		"""
		Merge caller parameters over the defaults.
		Raises:
			ValueError: On an unknown parameter name or a value outside its range
		"""
		defaults = self.get_default_params()
		unknown = set(params) - set(defaults)
		if unknown:
			raise ValueError(
				f"Unknown parameter(s) for '{self.name}': {sorted(unknown)}. "
				f"Accepted: {sorted(defaults)}"
			)
		resolved = dict(defaults)
		resolved.update(params)

		for key, (low, high) in self.get_param_ranges().items():
			value = resolved.get(key)
			if value is None:
				continue
			if (low is not None and value < low) or (high is not None and value > high):
				raise ValueError(
					f"Parameter '{key}' of '{self.name}' out of range: {value} "
					f"not in [{low}, {'inf' if high is None else high}]"
				)
		return resolved

	def validate_image(self, image: np.ndarray) -> np.ndarray:
		"""
		Validate and preprocess input image.
		Args:
			image: Input image
		Returns:
			Validated grayscale image as uint8
		Raises:
			ValueError: If image is invalid
		"""
		if image is None or image.size == 0:
			raise ValueError("Input image is empty or None")

		if len(image.shape) == 3:
			if image.shape[2] == 3:
				image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
			elif image.shape[2] == 4:
				# RGBA - use only RGB channels
				image = cv2.cvtColor(np.ascontiguousarray(image[:, :, :3]), cv2.COLOR_BGR2GRAY)
			elif image.shape[2] == 1:
				image = image[:, :, 0]

		if image.ndim != 2:
			raise ValueError(f"Expected a 2-D grayscale image, got shape {image.shape}")

		return normalize_to_uint8(image)

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(name='{self.name}')"


def normalize_to_uint8(image: np.ndarray) -> np.ndarray:
	"""
	Normalize any image to uint8 range [0, 255].
	Args:
		image: Input image of any type
	Returns:
		Normalized uint8 image
	"""
	if image.dtype == np.uint8:
		return image

	if image.dtype in [np.float32, np.float64]:
		if image.max() <= 1.0:
			return (image * 255).astype(np.uint8)
		return np.clip(image, 0, 255).astype(np.uint8)

	if image.dtype == np.uint16:
		return (image // 256).astype(np.uint8)

	return np.clip(image, 0, 255).astype(np.uint8)


def as_region(samples) -> np.ma.MaskedArray:
	"""
	Wrap samples as a region where masked positions are absent.
	Accepts a masked array (kept as is), a signed integer grid using -1 for
	absent samples, or any plain array (every sample present).
	Args:
		samples: Array-like of intensities
	Returns:
		Integer masked array
	"""
	if isinstance(samples, np.ma.MaskedArray):
		data = np.ma.getdata(samples).astype(np.int64)
		return np.ma.MaskedArray(data, mask=np.ma.getmaskarray(samples))

	data = np.asarray(samples).astype(np.int64)
	return np.ma.MaskedArray(data, mask=data == ABSENT)


def present_samples(region) -> np.ndarray:
	"""Return the present samples of a region as a flat int64 array."""
	return as_region(region).compressed()


def clamp_threshold(value: int) -> int:
	"""Clamp a threshold into the intensity range."""
	return int(min(max(int(value), 0), MAX_INTENSITY))
