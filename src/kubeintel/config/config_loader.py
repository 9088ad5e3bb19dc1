"""Load the gateway configuration file."""

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from .config_data import GatewayConfig
from .config_utils import substitute_env_vars

CONFIG_ENV_VAR = "KUBEINTEL_CONFIG"


def default_config_path() -> Path:
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    return Path.home() / ".config" / "kubeintel" / "config.yaml"


def load_config(file_path: Path | None = None) -> GatewayConfig:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file. Defaults to ``$KUBEINTEL_CONFIG``,
            then ``~/.config/kubeintel/config.yaml``.

    Returns:
        GatewayConfig. Defaults are returned when the file does not exist.

    Raises:
        ValueError: If required environment variables are missing, validation
            fails, or the YAML structure is invalid (missing 'config' key)

    YAML Structure Requirements:
        The YAML file must have a top-level 'config:' key containing the
        settings, e.g.::

            config:
              context: ${KUBE_CONTEXT:-kind-dev}
              debug_image: nicolaka/netshoot
    """
    path = file_path or default_config_path()
    if not path.is_file():
        logger.debug(f"No configuration file at {path}, using defaults")
        return GatewayConfig()

    logger.debug(f"Loading configuration from {path}")
    content = substitute_env_vars(path.read_text(encoding="utf-8"))

    try:
        loaded: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    if not isinstance(loaded, dict) or "config" not in loaded:
        raise ValueError("Invalid YAML structure: missing 'config' key")

    try:
        return GatewayConfig(**(loaded["config"] or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
