"""
YAML config loader with environment interpolation.

Loads an optional YAML file and resolves ${VAR} and ${VAR:-default} in string
values from os.environ. Exposes get_value() for dotted-key access.

Usage:
    from review_picker.config_loader import load_yaml_config, get_value
    raw = load_yaml_config(Path("config/review_picker.yaml"))
    owner = get_value(raw, "github.owner")
"""
import os
import re
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "REVIEW_PICKER_CONFIG"

# Pattern: ${VAR} or ${VAR:-default}
_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def _resolve_env(value: Any) -> Any:
    """Recursively resolve ${VAR} and ${VAR:-default} in strings. Return as-is for non-strings."""
    if isinstance(value, str):
        def replacer(match):
            var_name = match.group(1)
            default = match.group(2)
            return os.environ.get(var_name, default if default is not None else "")
        return _ENV_PATTERN.sub(replacer, value)
    if isinstance(value, dict):
        return {k: _resolve_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_env(item) for item in value]
    return value


def _load_raw(path: Path) -> Dict[str, Any]:
    """Load YAML file. Returns empty dict if not found."""
    if not path.exists():
        logger.warning("Config not found: %s", path)
        return {}
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def load_yaml_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load and resolve the YAML config.

    With path=None the REVIEW_PICKER_CONFIG environment variable is consulted;
    if that is unset too, an empty dict is returned (environment-only setup).
    """
    if path is None:
        env_path = os.getenv(CONFIG_PATH_ENV, "")
        if not env_path:
            return {}
        path = Path(env_path)
    raw = _load_raw(path)
    resolved = _resolve_env(raw)
    logger.info("Loaded config from %s", path)
    return resolved


def get_value(data: Dict[str, Any], dotted: str, default: Any = None) -> Any:
    """Get a nested value by dotted path (e.g. 'github.owner'). Empty strings count as unset."""
    node: Any = data
    for part in dotted.split("."):
        if not isinstance(node, dict):
            return default
        node = node.get(part)
        if node is None:
            return default
    if node == "":
        return default
    return node
