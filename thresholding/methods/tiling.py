"""
Block tiling for adaptive thresholding.
The image is cut into non-overlapping square blocks starting at (0, 0). Blocks
that overhang the image are padded with absent samples so every block is
logically block_size x block_size. Each block picks its own threshold and
only its in-bounds pixels are written back, so blocks are independent and can
be processed in any order or in parallel.
"""

import math
import time
import logging
from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Any, Iterator, Tuple
import numpy as np

from ..core.base import ThresholdAlgorithm, ThresholdResult
from .binarize import apply_threshold, write_region


logger = logging.getLogger(__name__)


def block_grid(shape: Tuple[int, int], block_size: int) -> Tuple[int, int]:
	"""Number of block rows and columns needed to cover an image."""
	if block_size <= 0:
		raise ValueError(f"block_size must be positive, got {block_size}")
	rows, cols = shape[:2]
	return math.ceil(rows / block_size), math.ceil(cols / block_size)


def block_origins(shape: Tuple[int, int], block_size: int) -> Iterator[Tuple[int, int]]:
	"""
	Yield the (row, col) origin of every block, row by row.
	Args:
		shape: Image shape
		block_size: Side length of a block
	"""
	grid_rows, grid_cols = block_grid(shape, block_size)
	for i in range(grid_rows):
		for j in range(grid_cols):
			yield i * block_size, j * block_size


def extract_block(image: np.ndarray, row: int, col: int, block_size: int) -> np.ma.MaskedArray:
	"""
	Copy one block of the image.
	Positions beyond the image bounds are masked (absent).
	Returns:
		int64 masked array of shape (block_size, block_size)
	"""
	data = np.zeros((block_size, block_size), dtype=np.int64)
	mask = np.ones((block_size, block_size), dtype=bool)

	window = image[row:row + block_size, col:col + block_size]
	height, width = window.shape
	data[:height, :width] = window
	mask[:height, :width] = False

	return np.ma.MaskedArray(data, mask=mask)


class TiledThreshold(ThresholdAlgorithm):
	"""
	Base class for block-wise (adaptive) thresholding.
	Subclasses choose the threshold of a single block in
	`select_block_threshold`; this class handles tiling, padding, parallel
	execution and reassembly.
	"""

	default_block_size = 32

	def get_default_params(self) -> Dict[str, Any]:
		return {
			'block_size': self.default_block_size,
			'num_workers': 1
		}

	def get_param_ranges(self) -> Dict[str, Tuple[Any, Any]]:
		return {
			'block_size': (1, None),
			'num_workers': (1, None)
		}

	def prepare(self, image: np.ndarray, params: Dict[str, Any]) -> Dict[str, Any]:
		"""
		Compute values shared by every block before tiling starts.
		Returns:
			Context dictionary passed to `select_block_threshold`
		"""
		return {}

	@abstractmethod
	def select_block_threshold(self, block: np.ma.MaskedArray, context: Dict[str, Any]) -> int:
		"""
		Choose the threshold of one block.
		Args:
			block: Masked block, absent samples masked
			context: Values from `prepare`
		Returns:
			Threshold for this block
		"""
		pass

	def describe_block(self, block: np.ma.MaskedArray) -> Dict[str, Any]:
		"""Per-block metadata, empty by default."""
		return {}

	def threshold(self, image: np.ndarray, **params) -> ThresholdResult:
		start_time = time.time()

		image = self.validate_image(image)
		resolved = self.resolve_params(params)
		block_size = int(resolved['block_size'])
		num_workers = int(resolved['num_workers'])

		grid = block_grid(image.shape, block_size)
		context = self.prepare(image, resolved)

		output = np.zeros(image.shape, dtype=np.uint8)
		thresholds = np.zeros(grid, dtype=np.int64)

		def process(origin: Tuple[int, int]) -> Dict[str, Any]:
			row, col = origin
			block = extract_block(image, row, col, block_size)
			block_threshold = self.select_block_threshold(block, context)
			write_region(output, apply_threshold(block, block_threshold), row, col)
			thresholds[row // block_size, col // block_size] = block_threshold
			return self.describe_block(block)

		origins = list(block_origins(image.shape, block_size))
		logger.debug(
			f"{self.name}: {len(origins)} blocks of {block_size}x{block_size} "
			f"({grid[0]}x{grid[1]} grid, {num_workers} worker(s))"
		)

		if num_workers > 1:
			with ThreadPoolExecutor(max_workers=num_workers) as executor:
				block_info = list(executor.map(process, origins))
		else:
			block_info = [process(origin) for origin in origins]

		processing_time = time.time() - start_time

		metadata = {
			'block_size': block_size,
			'block_grid': grid,
			'block_thresholds': thresholds,
			'num_workers': num_workers
		}
		metadata.update(self.summarize(block_info))

		return ThresholdResult(
			binary_image=output,
			method=self.name,
			parameters=resolved,
			threshold=None,  # Varies per block
			processing_time=processing_time,
			metadata=metadata
		)

	def summarize(self, block_info) -> Dict[str, Any]:
		"""Fold per-block metadata into the result metadata."""
		return {}
