"""
Configuration loader for the card crop tool.
"""
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from copy import deepcopy

from ..redress.perspective_redress import SUPPORTED_INTERPOLATIONS

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "defaults.yaml"

SUPPORTED_OUTPUT_FORMATS = (".jpg", ".jpeg", ".png")


class Config:
    """Configuration container with dot-notation access and nested updates."""

    def __init__(self, config_dict: Dict[str, Any]):
        """
        Initialize config from dictionary.

        Args:
            config_dict: Configuration dictionary
        """
        self._config = deepcopy(config_dict)

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., "redress.max_output_megapixels")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value
            value: Value to set
        """
        keys = key_path.split('.')
        config = self._config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    def update(self, updates: Dict[str, Any]) -> None:
        """
        Update configuration with dictionary of values.

        Args:
            updates: Dictionary of updates (supports nested dicts or dot notation keys)
        """
        for key, value in updates.items():
            if '.' in key:
                self.set(key, value)
            elif isinstance(value, dict) and isinstance(self._config.get(key), dict):
                self._config[key].update(value)
            else:
                self._config[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert config to dictionary.

        Returns:
            Configuration dictionary
        """
        return deepcopy(self._config)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file (defaults to the packaged defaults.yaml)

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        config_dict = {}

    return Config(config_dict)


def merge_cli_args(config: Config, cli_args: Dict[str, Any]) -> Config:
    """
    Merge command-line arguments into configuration.

    Args:
        config: Base configuration
        cli_args: Dictionary of CLI arguments (None values are ignored)

    Returns:
        Updated Config object
    """
    updates = {k: v for k, v in cli_args.items() if v is not None}

    # Map CLI argument names to config paths
    mapping = {
        'max_megapixels': ['redress.max_output_megapixels'],
        # One resampling method for both directions
        'interpolation': ['redress.interpolation_downsize', 'redress.interpolation_upsize'],
        'quality': ['output.jpeg_quality'],
        'log_level': ['logging.level'],
        'log_file': ['logging.log_file'],
    }

    mapped_updates = {}
    for cli_key, config_keys in mapping.items():
        if cli_key in updates:
            for config_key in config_keys:
                mapped_updates[config_key] = updates[cli_key]

    config.update(mapped_updates)
    return config


def validate_config(config: Config) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        ValueError: If configuration is invalid
    """
    radius = config.get('crop.handle_hit_radius', 20)
    if radius <= 0:
        raise ValueError("crop.handle_hit_radius must be positive")

    magnification = config.get('crop.magnifier.magnification', 2.0)
    if magnification < 1.0:
        raise ValueError("crop.magnifier.magnification must be >= 1.0")

    size = config.get('crop.magnifier.size', 100)
    if size < 2:
        raise ValueError("crop.magnifier.size must be at least 2 pixels")

    max_mp = config.get('redress.max_output_megapixels', 24.0)
    if max_mp <= 0:
        raise ValueError("redress.max_output_megapixels must be positive")

    for key in ('redress.interpolation_downsize', 'redress.interpolation_upsize'):
        method = config.get(key, 'LINEAR')
        if method not in SUPPORTED_INTERPOLATIONS:
            raise ValueError(f"{key} must be one of {list(SUPPORTED_INTERPOLATIONS)}")

    min_det = config.get('redress.min_transformation_determinant', 0.01)
    max_det = config.get('redress.max_transformation_determinant', 100.0)
    if min_det >= max_det:
        raise ValueError(f"min_transformation_determinant ({min_det}) must be < max_transformation_determinant ({max_det})")

    quality = config.get('output.jpeg_quality', 92)
    if not 0 <= quality <= 100:
        raise ValueError("output.jpeg_quality must be between 0 and 100")

    output_format = config.get('output.format', '.jpg')
    if output_format not in SUPPORTED_OUTPUT_FORMATS:
        raise ValueError(f"output.format must be one of {list(SUPPORTED_OUTPUT_FORMATS)}")
