"""Configuration module for SeeingBlue."""

from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default.yaml"


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_default_config() -> dict:
    """Load the bundled default configuration."""
    return load_config(str(DEFAULT_CONFIG_PATH))


def merge_configs(base_config: dict, override_config: dict) -> dict:
    """Merge two configuration dictionaries.

    Nested dictionaries are merged recursively; any other value in the
    override (lists included) replaces the base value.

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = base_config.copy()
    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def build_config(config_path: Optional[str] = None) -> dict:
    """Load the defaults, merged with an optional user configuration file."""
    config = load_default_config()
    if config_path:
        config = merge_configs(config, load_config(config_path))
    return config
