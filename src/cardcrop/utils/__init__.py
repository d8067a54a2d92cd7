"""
Logging and configuration helpers.
"""
from .logger import setup_logger
from .config_loader import Config, load_config, merge_cli_args, validate_config

__all__ = ["setup_logger", "Config", "load_config", "merge_cli_args", "validate_config"]
