"""Core package for pipeline, configuration and base classes."""
from .pipeline import ThresholdPipeline
from .config import ThresholdConfig
from .base import ThresholdAlgorithm, ThresholdResult, EmptyRegionError

__all__ = ["ThresholdPipeline", "ThresholdConfig", "ThresholdAlgorithm", "ThresholdResult", "EmptyRegionError"]
