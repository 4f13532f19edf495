"""
Configuration management for the thresholding system.
Handles loading, validation, and merging of configuration files.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional
from pathlib import Path
import yaml
import json
from copy import deepcopy


DEFAULT_BLOCK_SIZES = {
	"amean": 24,
	"otsu": 32,
	"amedian": 16,
}


@dataclass
class ThresholdConfig:
	"""Complete thresholding configuration."""
	# Input/output settings
	input_path: Optional[str] = None
	output_path: str = "output.png"

	# Method selection
	method: Optional[str] = None
	fixed_threshold: int = 127
	iterations: int = 10
	initial_threshold: Optional[int] = None
	block_sizes: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_BLOCK_SIZES))

	# Performance settings
	num_workers: int = 1

	# Logging
	log_level: str = "INFO"

	def __post_init__(self):
		if self.iterations < 0:
			raise ValueError(f"iterations must be non-negative, got {self.iterations}")
		if self.num_workers < 1:
			raise ValueError(f"num_workers must be at least 1, got {self.num_workers}")
		for name, size in self.block_sizes.items():
			if size <= 0:
				raise ValueError(f"Block size for '{name}' must be positive, got {size}")

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, config_dict: Dict[str, Any]) -> 'ThresholdConfig':
		"""Create ThresholdConfig from dictionary."""
		config_dict = deepcopy(config_dict or {})

		# Partial block size tables extend the defaults
		if 'block_sizes' in config_dict:
			block_sizes = dict(DEFAULT_BLOCK_SIZES)
			block_sizes.update(config_dict['block_sizes'] or {})
			config_dict['block_sizes'] = block_sizes

		return cls(**config_dict)

	def method_params(self, method: Optional[str] = None) -> Dict[str, Any]:
		"""
		Keyword parameters for a method, derived from this configuration.
		Args:
			method: Method name (defaults to the configured method)
		Returns:
			Parameters accepted by the method's `threshold`
		"""
		method = method or self.method

		if method == "global":
			return {'threshold': self.fixed_threshold}
		if method == "giter":
			return {'iterations': self.iterations, 'initial_threshold': self.initial_threshold}
		if method == "amean":
			return {
				'block_size': self.block_sizes[method],
				'num_workers': self.num_workers,
				'iterations': self.iterations,
				'initial_threshold': self.initial_threshold
			}
		if method in self.block_sizes:
			return {'block_size': self.block_sizes[method], 'num_workers': self.num_workers}
		return {}


class ConfigLoader:
	"""Load and manage configuration files."""

	@staticmethod
	def load_yaml(path: Path) -> Dict[str, Any]:
		"""
		Load configuration from YAML file.
		Args:
			path: Path to YAML file
		Returns:
			Configuration dictionary
		"""
		with open(path, 'r') as f:
			return yaml.safe_load(f) or {}

	@staticmethod
	def load_json(path: Path) -> Dict[str, Any]:
		"""
		Load configuration from JSON file.
		Args:
			path: Path to JSON file
		Returns:
			Configuration dictionary
		"""
		with open(path, 'r') as f:
			return json.load(f)

	@staticmethod
	def save_yaml(config: Dict[str, Any], path: Path) -> None:
		"""
		Save configuration to YAML file.
		Args:
			config: Configuration dictionary
			path: Output path
		"""
		path = Path(path)
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w') as f:
			yaml.dump(config, f, default_flow_style=False, sort_keys=False)

	@staticmethod
	def save_json(config: Dict[str, Any], path: Path) -> None:
		"""
		Save configuration to JSON file.
		Args:
			config: Configuration dictionary
			path: Output path
		"""
		path = Path(path)
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w') as f:
			json.dump(config, f, indent=2)

	@classmethod
	def load_config(cls, path: Path) -> ThresholdConfig:
		"""
		Load ThresholdConfig from file.
		Args:
			path: Path to config file (YAML or JSON)
		Returns:
			ThresholdConfig object
		"""
		path = Path(path)

		if path.suffix in ['.yaml', '.yml']:
			config_dict = cls.load_yaml(path)
		elif path.suffix == '.json':
			config_dict = cls.load_json(path)
		else:
			raise ValueError(f"Unsupported config format: {path.suffix}")

		return ThresholdConfig.from_dict(config_dict)

	@classmethod
	def merge_configs(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
		"""
		Merge two configuration dictionaries.
		Args:
			base: Base configuration
			override: Override configuration
		Returns:
			Merged configuration
		"""
		result = deepcopy(base)

		for key, value in override.items():
			if key in result and isinstance(result[key], dict) and isinstance(value, dict):
				result[key] = cls.merge_configs(result[key], value)
			else:
				result[key] = deepcopy(value)

		return result


def get_default_config() -> ThresholdConfig:
	"""
	Get default thresholding configuration.
	Returns:
		Default ThresholdConfig
	"""
	return ThresholdConfig()


# Example default configuration as YAML string
DEFAULT_CONFIG_YAML = """
# Default Thresholding Configuration

# Method selection: global, gmean, giter, amean, otsu, amedian, gotsu, gmedian
method: "otsu"
fixed_threshold: 127
iterations: 10
initial_threshold: null  # null: midpoint of the image min and max

# Block side length per block-wise method
block_sizes:
  amean: 24
  otsu: 32
  amedian: 16

# Performance settings
num_workers: 1

# Output
output_path: "output.png"

# Logging
log_level: "INFO"
"""
