"""Apply a threshold to a region and write binarized regions into an output image."""

import numpy as np

from ..core.base import as_region


FOREGROUND = 255
BACKGROUND = 0


def apply_threshold(region, threshold: int) -> np.ma.MaskedArray:
	"""
	Binarize a region with a single threshold.
	Present samples below the threshold become 0, the others 255. Absent
	samples stay masked.
	Args:
		region: Image, masked region or -1 padded grid
		threshold: Threshold value
	Returns:
		uint8 masked array with the same shape and mask as the input
	"""
	region = as_region(region)
	data = np.where(np.ma.getdata(region) < threshold, BACKGROUND, FOREGROUND).astype(np.uint8)
	return np.ma.MaskedArray(data, mask=np.ma.getmaskarray(region))


def write_region(output: np.ndarray, binary_region: np.ma.MaskedArray, row: int, col: int) -> None:
	"""
	Copy the present samples of a binarized region into `output` at (row, col).
	Positions that fall outside `output` or are masked are never written.
	"""
	height = min(binary_region.shape[0], output.shape[0] - row)
	width = min(binary_region.shape[1], output.shape[1] - col)
	if height <= 0 or width <= 0:
		return

	window = binary_region[:height, :width]
	present = ~np.ma.getmaskarray(window)
	target = output[row:row + height, col:col + width]
	target[present] = np.ma.getdata(window)[present]
