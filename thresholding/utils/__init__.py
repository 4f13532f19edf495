"""Utility helpers."""
from .image import imread, imsave
from .logger import get_logger

__all__ = ["imread", "imsave", "get_logger"]
