"""Image I/O helpers."""
from pathlib import Path
from typing import Union

import cv2
import numpy as np


def imread(path: Union[str, Path]) -> np.ndarray:
	"""
	Read an image as 8-bit grayscale.
	Raises:
		FileNotFoundError: If the file does not exist
		ValueError: If OpenCV cannot decode the file
	"""
	path = Path(path)
	if not path.exists():
		raise FileNotFoundError(f"Input file not found: {path}")

	image = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
	if image is None:
		raise ValueError(f"Could not read image {path}")
	return image


def imsave(path: Union[str, Path], image: np.ndarray) -> None:
	"""Write an image, creating parent directories as needed."""
	path = Path(path)
	path.parent.mkdir(parents=True, exist_ok=True)
	if not cv2.imwrite(str(path), image):
		raise ValueError(f"Could not write image {path}")
