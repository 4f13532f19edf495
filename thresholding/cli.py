"""
Command-line interface for image thresholding.
Usage:
	threshold document.png otsu
	threshold document.png amean --block-size 32 --output result.png
	threshold --list-methods
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional

from .core.config import ConfigLoader, ThresholdConfig, get_default_config
from .core.pipeline import ThresholdPipeline
from .methods.registry import get_registry
from .utils.image import imread, imsave
from .utils.logger import get_logger


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
	"""Parse command line arguments."""
	parser = argparse.ArgumentParser(
		prog='threshold',
		description='Grayscale image thresholding tool',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Methods:
  global   fixed threshold (default 127)
  gmean    global mean
  giter    global iterative mean
  amean    block-wise iterative mean (24x24 blocks)
  otsu     block-wise Otsu (32x32 blocks)
  amedian  block-wise median (16x16 blocks)
  gotsu    global Otsu
  gmedian  global median

Examples:
  %(prog)s document.png otsu
  %(prog)s document.png global --threshold 90 --output result.png
  %(prog)s document.png amean --block-size 32 --workers 4
  %(prog)s --config config.yaml document.png
		"""
	)

	parser.add_argument('image', nargs='?', help='Input image path')
	parser.add_argument('method', nargs='?', help='Thresholding method')

	parser.add_argument('-o', '--output', type=str, help='Output image path (default: output.png)')
	parser.add_argument('-c', '--config', type=str, help='Configuration file (YAML or JSON)')
	parser.add_argument('--list-methods', action='store_true', help='List all available methods and exit')

	parser.add_argument('--threshold', type=int, help='Threshold value for the global method (0-255)')
	parser.add_argument('--iterations', type=int, help='Iterations for giter and amean')
	parser.add_argument('--block-size', type=int, help='Block side length for block-wise methods')
	parser.add_argument('--workers', type=int, help='Worker threads for block-wise methods')

	parser.add_argument('--show-threshold', action='store_true', help='Print computed threshold value')
	parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

	return parser.parse_args(argv)


def list_methods_info() -> None:
	"""Print information about all available methods."""
	registry = get_registry()

	print("\n" + "="*60)
	print("Available Thresholding Methods")
	print("="*60 + "\n")

	for method_name in registry.list_algorithms():
		info = registry.get_info(method_name)
		print(f"• {method_name}")
		print(f"  Description: {info['description']}")

		if info['default_params']:
			print("  Default parameters:")
			for param, value in info['default_params'].items():
				print(f"    - {param}: {value}")

		print()


def build_config(args: argparse.Namespace) -> ThresholdConfig:
	"""Load the configuration file if given and apply command-line overrides."""
	if args.config:
		config = ConfigLoader.load_config(Path(args.config))
	else:
		config = get_default_config()

	if args.method:
		config.method = args.method
	if args.image:
		config.input_path = args.image
	if args.output:
		config.output_path = args.output
	if args.threshold is not None:
		config.fixed_threshold = args.threshold
	if args.iterations is not None:
		config.iterations = args.iterations
	if args.workers is not None:
		config.num_workers = args.workers
	if args.block_size is not None and config.method in config.block_sizes:
		config.block_sizes[config.method] = args.block_size
	if args.verbose:
		config.log_level = "DEBUG"

	return config


def process_image(config: ThresholdConfig) -> Dict[str, Any]:
	"""
	Threshold the configured input image and save the result.
	Returns:
		Pipeline result dictionary
	"""
	image = imread(config.input_path)

	pipeline = ThresholdPipeline(config)
	result = pipeline.run(image)

	imsave(config.output_path, result['binary_image'])
	logger.info(f"Saved {config.method} result to {config.output_path}")
	return result


def main(argv: Optional[List[str]] = None) -> int:
	"""Main entry point."""
	args = parse_args(argv)

	if args.list_methods:
		list_methods_info()
		return 0

	try:
		config = build_config(args)
	except (OSError, ValueError, TypeError) as e:
		print(f"Error: invalid configuration: {e}")
		return 1

	get_logger("thresholding", config.log_level)

	if not config.input_path:
		print("Error: an input image must be specified")
		return 1

	# An unknown or missing method is not an error: report it and do nothing
	if config.method is None:
		logger.warning("No method given; nothing to do")
		return 0
	if config.method not in get_registry():
		logger.warning(
			f"Unknown method '{config.method}'; nothing to do. "
			f"Available: {get_registry().list_algorithms()}"
		)
		return 0
	if args.block_size is not None and config.method not in config.block_sizes:
		logger.warning(f"--block-size is ignored for method '{config.method}' (not block-wise)")

	try:
		result = process_image(config)
	except KeyboardInterrupt:
		print("\n\nInterrupted by user")
		return 130
	except Exception as e:
		print(f"Error: {e}")
		if args.verbose:
			import traceback
			traceback.print_exc()
		return 1

	if args.show_threshold:
		if result['threshold'] is None:
			grid = result['metadata']['algorithm_metadata']['block_grid']
			print(f"Block-wise thresholds over a {grid[0]}x{grid[1]} grid")
		else:
			print(f"Computed threshold: {result['threshold']}")

	return 0


if __name__ == '__main__':
	sys.exit(main())
