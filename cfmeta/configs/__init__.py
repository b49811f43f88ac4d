"""
cfmeta Configuration Module

Re-exports commonly used functions for cleaner imports across the codebase.
"""

# Logging (most commonly used)
from cfmeta.configs.logging import get_logger, setup_logging

# YAML config
from cfmeta.configs.yaml_config import (
    CONFIG_FILENAME,
    get_config_path,
    load_yaml_config,
)

# Runtime
from cfmeta.configs.runtime import DEFAULT_CONFIG, get_full_config

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # YAML config
    "CONFIG_FILENAME",
    "get_config_path",
    "load_yaml_config",
    # Runtime
    "DEFAULT_CONFIG",
    "get_full_config",
]
