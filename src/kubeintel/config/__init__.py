from .config_data import GatewayConfig
from .config_loader import CONFIG_ENV_VAR, default_config_path, load_config
from .config_utils import substitute_env_vars

__all__ = [
    "CONFIG_ENV_VAR",
    "GatewayConfig",
    "default_config_path",
    "load_config",
    "substitute_env_vars",
]
