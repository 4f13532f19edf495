"""
Histogram construction for image regions.
Absent (masked) samples are skipped, so a ragged edge block only counts the
pixels that lie inside the image.
"""

import logging
import numpy as np
from scipy import ndimage

from ..core.base import MAX_INTENSITY, present_samples


logger = logging.getLogger(__name__)

# One bin per intensity, 255 included
HISTOGRAM_BINS = MAX_INTENSITY + 1


def build_histogram(region) -> np.ndarray:
	"""
	Count occurrences of each intensity in a region.
	Args:
		region: Image, masked region or -1 padded grid
	Returns:
		int64 array of HISTOGRAM_BINS counts, sum equal to the number of present samples
	Raises:
		ValueError: If a present sample lies outside [0, 255]
	"""
	samples = present_samples(region)

	if samples.size and (samples.min() < 0 or samples.max() > MAX_INTENSITY):
		raise ValueError(
			f"Samples must lie in [0, {MAX_INTENSITY}], "
			f"got range [{samples.min()}, {samples.max()}]"
		)

	return np.bincount(samples, minlength=HISTOGRAM_BINS).astype(np.int64)


def is_bimodal(histogram: np.ndarray, sigma: float = 2.0) -> bool:
	"""
	Check if histogram is approximately bimodal.
	Args:
		histogram: Intensity histogram
		sigma: Width of the smoothing kernel
	Returns:
		True if the smoothed histogram has at least two significant peaks
	"""
	hist_smooth = ndimage.gaussian_filter1d(histogram.astype(float), sigma=sigma)
	if hist_smooth.max() <= 0:
		return False

	peaks = []
	for i in range(1, len(hist_smooth) - 1):
		if hist_smooth[i] > hist_smooth[i-1] and hist_smooth[i] > hist_smooth[i+1]:
			if hist_smooth[i] > hist_smooth.max() * 0.1:  # Significant peak
				peaks.append(i)

	return len(peaks) >= 2
