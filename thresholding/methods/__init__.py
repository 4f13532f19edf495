"""Thresholding methods package.

Contains the histogram builder, threshold selectors, binarizer, the global and
block-wise engines and a registry.
"""
from .registry import get_algorithm, get_registry, list_algorithms

__all__ = ["get_algorithm", "get_registry", "list_algorithms"]
