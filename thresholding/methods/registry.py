"""
Lookup of thresholding methods by their short name.
The CLI and the pipeline resolve method names such as "otsu" or "giter"
through the registry built at import time.
"""

from typing import Dict, List, Type, Any
import logging

from ..core.base import ThresholdAlgorithm

logger = logging.getLogger(__name__)


class AlgorithmRegistry:
	"""Maps method names to algorithm classes, instantiated lazily and cached."""

	def __init__(self):
		self._classes: Dict[str, Type[ThresholdAlgorithm]] = {}
		self._instances: Dict[str, ThresholdAlgorithm] = {}

	def register_class(
		self,
		algorithm_class: Type[ThresholdAlgorithm],
		override: bool = False
	) -> str:
		"""
		Register an algorithm class under the name its instances report.
		Args:
			algorithm_class: Algorithm class
			override: Whether to replace an existing registration
		Returns:
			The registered name
		Raises:
			ValueError: If the name is taken and override=False
		"""
		name = algorithm_class().name

		if name in self._classes and not override:
			raise ValueError(
				f"Method '{name}' already registered. "
				"Use override=True to replace."
			)

		self._classes[name] = algorithm_class
		self._instances.pop(name, None)
		logger.debug(f"Registered method: {name}")
		return name

	def get(self, name: str) -> ThresholdAlgorithm:
		"""
		Return the (cached) algorithm registered under `name`.
		Raises:
			KeyError: If no method has that name
		"""
		if name not in self._classes:
			raise KeyError(
				f"Algorithm '{name}' not found. "
				f"Available: {self.list_algorithms()}"
			)

		if name not in self._instances:
			self._instances[name] = self._classes[name]()
		return self._instances[name]

	def __contains__(self, name: str) -> bool:
		return name in self._classes

	def list_algorithms(self) -> List[str]:
		"""Sorted names of all registered methods."""
		return sorted(self._classes)

	def get_info(self, name: str) -> Dict[str, Any]:
		"""Name, description, defaults and parameter ranges of a method."""
		algorithm = self.get(name)
		return {
			'name': algorithm.name,
			'description': algorithm.description,
			'default_params': algorithm.get_default_params(),
			'param_ranges': algorithm.get_param_ranges(),
			'class': algorithm.__class__.__name__
		}

	def as_dict(self) -> Dict[str, ThresholdAlgorithm]:
		"""Instantiate every registered algorithm, keyed by name."""
		return {name: self.get(name) for name in self.list_algorithms()}


def _build_default_registry() -> AlgorithmRegistry:
	from .global_methods import (
		FixedThreshold,
		GlobalMeanThreshold,
		GlobalIterativeMeanThreshold,
		GlobalOtsuThreshold,
		GlobalMedianThreshold
	)
	from .adaptive_methods import (
		AdaptiveMeanThreshold,
		AdaptiveOtsuThreshold,
		AdaptiveMedianThreshold
	)

	registry = AlgorithmRegistry()
	for algorithm_class in (
		FixedThreshold,
		GlobalMeanThreshold,
		GlobalIterativeMeanThreshold,
		GlobalOtsuThreshold,
		GlobalMedianThreshold,
		AdaptiveMeanThreshold,
		AdaptiveOtsuThreshold,
		AdaptiveMedianThreshold
	):
		registry.register_class(algorithm_class)
	return registry


_default_registry = _build_default_registry()


def get_registry() -> AlgorithmRegistry:
	"""The registry holding every built-in method."""
	return _default_registry


def get_algorithm(name: str) -> ThresholdAlgorithm:
	"""Shortcut for `get_registry().get(name)`."""
	return _default_registry.get(name)


def list_algorithms() -> List[str]:
	"""Shortcut for `get_registry().list_algorithms()`."""
	return _default_registry.list_algorithms()
