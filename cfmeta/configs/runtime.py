"""
cfmeta Runtime Configuration

Combines defaults, the YAML config file, environment variables and
explicit overrides (CLI flags), in that order of increasing priority.
"""

import os
from pathlib import Path
from typing import Any, Optional

from cfmeta.configs.logging import get_logger
from cfmeta.configs.yaml_config import get_config_path, load_yaml_config
from cfmeta.exceptions import ConfigurationError

logger = get_logger("config")

DEFAULT_CONFIG = {
    "output": "functions.json",
    "indent": None,  # Compact JSON
    "debug": False,
    "log_file": None,
}

# Environment variable -> config key
ENV_VARS = {
    "CFMETA_OUTPUT": "output",
    "CFMETA_INDENT": "indent",
    "CFMETA_DEBUG": "debug",
    "CFMETA_LOG_FILE": "log_file",
}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _parse_indent(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigurationError("indent must be an integer or null", {"indent": value})
    try:
        indent = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            "indent must be an integer or null", {"indent": value}
        ) from e
    if indent < 0:
        raise ConfigurationError("indent must not be negative", {"indent": indent})
    return indent


def _normalize(config: dict) -> dict:
    """Coerce raw values from YAML/env into their runtime types."""
    output = config["output"]
    if not output:
        raise ConfigurationError("output path must not be empty")
    return {
        "output": str(output),
        "indent": _parse_indent(config["indent"]),
        "debug": _parse_bool(config["debug"]),
        "log_file": str(config["log_file"]) if config["log_file"] else None,
    }


def get_full_config(
    config_path: Optional[str] = None,
    overrides: Optional[dict] = None,
) -> dict:
    """
    Build the effective configuration.

    Args:
        config_path: Explicit config file (from --config); falls back to
            CFMETA_CONFIG and ./cfmeta.yaml
        overrides: Values from the command line; None entries are ignored

    Returns:
        Dict with output, indent, debug and log_file

    Raises:
        ConfigurationError: The config file or a value in it is invalid
    """
    config = dict(DEFAULT_CONFIG)

    path: Optional[Path] = get_config_path(config_path)
    for key, value in load_yaml_config(path).items():
        if key not in DEFAULT_CONFIG:
            logger.warning(f"Ignoring unknown config key '{key}' in {path}")
            continue
        config[key] = value

    for env_var, key in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is not None and value != "":
            config[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            config[key] = value

    return _normalize(config)
