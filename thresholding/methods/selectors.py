"""
Threshold selectors.
Each selector maps a region (or its histogram) to a single integer threshold.
They are pure functions: the same input always yields the same threshold and
the input is never modified. All divisions truncate, matching the integer
arithmetic the engines are specified with.
"""

import logging
import numpy as np

from ..core.base import EmptyRegionError, clamp_threshold, present_samples


logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 10


def fixed_threshold(region, value: int) -> int:
	"""Return the caller-supplied threshold, ignoring the region content."""
	return int(value)


def mean_threshold(region) -> int:
	"""
	Mean intensity of the present samples.
	Args:
		region: Image or masked region
	Returns:
		sum // count of the present samples
	Raises:
		EmptyRegionError: If the region has no present samples
	"""
	samples = present_samples(region)
	if samples.size == 0:
		raise EmptyRegionError("Cannot compute the mean of an empty region")

	return int(samples.sum()) // int(samples.size)


def initial_threshold(image) -> int:
	"""
	Midpoint of the darkest and brightest sample, used to seed iterative mean.
	Raises:
		EmptyRegionError: If the image has no present samples
	"""
	samples = present_samples(image)
	if samples.size == 0:
		raise EmptyRegionError("Cannot estimate an initial threshold for an empty image")

	return (int(samples.max()) + int(samples.min())) // 2


def iterative_mean_threshold(region, initial: int, iterations: int = DEFAULT_ITERATIONS) -> int:
	"""
	Isodata-style iterative mean threshold.
	Each pass splits the samples into those below the current threshold and
	the rest, then moves the threshold to the average of the two group means.
	Empty groups fall back as follows: both empty halves the threshold, one
	empty uses half of the other group's mean.
	Args:
		region: Image or masked region
		initial: Starting threshold
		iterations: Number of refinement passes
	Returns:
		Threshold after the last pass, clamped into [0, 255]. With
		iterations=0 this is the clamped initial value.
	"""
	if iterations < 0:
		raise ValueError(f"iterations must be non-negative, got {iterations}")

	samples = present_samples(region)
	t = int(initial)

	for _ in range(iterations):
		low = samples[samples < t]
		high = samples[samples >= t]

		if low.size == 0 and high.size == 0:
			t = t // 2
		elif low.size == 0:
			t = (int(high.sum()) // int(high.size)) // 2
		elif high.size == 0:
			t = (int(low.sum()) // int(low.size)) // 2
		else:
			mean_low = int(low.sum()) // int(low.size)
			mean_high = int(high.sum()) // int(high.size)
			t = (mean_low + mean_high) // 2

	return clamp_threshold(t)


def otsu_threshold(histogram: np.ndarray) -> int:
	"""
	Otsu threshold by between-class variance maximization.
	Candidates where one class is empty are skipped. The first candidate with
	the largest variance wins; 0 is returned when no split has positive variance.
	Args:
		histogram: Intensity histogram
	Returns:
		Selected threshold
	"""
	counts = [int(c) for c in histogram]
	total_count = sum(counts)
	total_sum = sum(i * c for i, c in enumerate(counts))

	q1 = 0
	sum_b = 0
	var_max = 0
	threshold = 0

	for t, count in enumerate(counts):
		q1 += count
		sum_b += t * count
		if q1 == 0 or q1 == total_count:
			continue

		q2 = total_count - q1
		u1 = sum_b // q1
		u2 = (total_sum - sum_b) // q2
		variance = q1 * q2 * (u1 - u2) ** 2

		if variance > var_max:
			var_max = variance
			threshold = t

	logger.debug(f"Otsu threshold {threshold} (between-class variance {var_max})")
	return threshold


def median_threshold(histogram: np.ndarray) -> int:
	"""
	Median intensity from a histogram.
	Returns the smallest intensity whose cumulative count reaches N // 2.
	"""
	counts = np.asarray(histogram, dtype=np.int64)
	half = int(counts.sum()) // 2
	cumulative = np.cumsum(counts)
	return int(np.argmax(cumulative >= half))
