"""Top-level package for block-adaptive image thresholding.

Expose the `core` subpackage for convenience.
"""
from .core import *

__all__ = ["ThresholdPipeline", "ThresholdConfig", "ThresholdAlgorithm", "ThresholdResult", "EmptyRegionError"]
