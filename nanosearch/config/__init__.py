"""Configuration module for nanosearch."""

from nanosearch.config.loader import get_config_path, load_config
from nanosearch.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
