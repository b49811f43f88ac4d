"""
cfmeta YAML Configuration

Locating and loading the optional cfmeta.yaml settings file.
"""

import os
from pathlib import Path
from typing import Optional

import yaml

from cfmeta.exceptions import ConfigurationError

CONFIG_FILENAME = "cfmeta.yaml"


def get_config_path(explicit: Optional[str] = None) -> Optional[Path]:
    """
    Resolve which config file to read.

    Priority:
    1. Explicit path (the --config flag)
    2. CFMETA_CONFIG env var
    3. ./cfmeta.yaml if it exists

    Returns:
        Path to the config file, or None if no config file applies
    """
    if explicit:
        return Path(explicit).expanduser()

    env_path = os.environ.get("CFMETA_CONFIG")
    if env_path:
        return Path(env_path).expanduser()

    local = Path.cwd() / CONFIG_FILENAME
    if local.exists():
        return local
    return None


def load_yaml_config(config_path: Optional[Path]) -> dict:
    """
    Load configuration from a YAML file.

    Args:
        config_path: File to read; None means no file configured

    Returns:
        Configuration dictionary (empty if no file is configured)

    Raises:
        ConfigurationError: The file is missing, unreadable, not valid YAML,
            or its top level is not a mapping
    """
    if config_path is None:
        return {}

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read config file {config_path}", {"error": str(e)}
        ) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in config file {config_path}", {"error": str(e)}
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping at the top level"
        )
    return data
