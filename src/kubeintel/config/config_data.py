"""Configuration model for the gateway CLI."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _default_kubeconfig() -> Path:
    env_value = os.getenv("KUBECONFIG")
    if env_value:
        # KUBECONFIG may list several files; the first one is used
        return Path(env_value.split(os.pathsep)[0]).expanduser()
    return Path.home() / ".kube" / "config"


class GatewayConfig(BaseModel):
    """User settings, loaded from the ``config:`` section of the YAML file."""

    kubeconfig: Path = Field(default_factory=_default_kubeconfig)
    context: str | None = None
    kubectl_path: str = "kubectl"
    debug_image: str = "busybox:latest"
    shell: str = "/bin/sh"
    secret_service: str = "io.kubeintel"
    log_level: str = "INFO"

    @field_validator("kubeconfig")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
