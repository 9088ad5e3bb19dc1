"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import typer

from kubeintel.config import GatewayConfig, load_config
from kubeintel.infra.k8s import (
    ClientGateway,
    ClusterContext,
    ConfigError,
    InteractiveOps,
    MutationOps,
    get_gateway,
    get_interactive_ops,
    get_mutations,
)
from kubeintel.infra.secrets import KeyringSecretStore, SecretStore

from .console import CLIConsole, console


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands.

    ``kubeconfig`` and ``context_name`` are the command-line overrides; the
    configuration file supplies the fallbacks.
    """

    console: CLIConsole
    config: GatewayConfig
    kubeconfig: Path | None = None
    context_name: str | None = None
    gateway: ClientGateway = field(default_factory=get_gateway)
    mutations: MutationOps = field(default_factory=get_mutations)

    def cluster_context(self) -> ClusterContext:
        """Build the ClusterContext for one command.

        Raises:
            ConfigError: If no context was given and none is configured
        """
        name = self.context_name or self.config.context
        if not name:
            raise ConfigError(
                "No Kubernetes context selected",
                details="Pass --context or set 'context' in the configuration file",
            )
        return ClusterContext.from_input(self.kubeconfig or self.config.kubeconfig, name)

    def interactive(self) -> InteractiveOps:
        return get_interactive_ops(
            self.cluster_context(),
            kubectl_path=self.config.kubectl_path,
            shell=self.config.shell,
            debug_image=self.config.debug_image,
        )

    def secret_store(self) -> SecretStore:
        return KeyringSecretStore(self.config.secret_service)


def build_cli_context(
    kubeconfig: Path | None = None,
    context_name: str | None = None,
    config: GatewayConfig | None = None,
) -> CLIContext:
    """Build a fresh CLIContext."""
    return CLIContext(
        console=console,
        config=config or load_config(),
        kubeconfig=kubeconfig,
        context_name=context_name,
    )


def get_cli_context(ctx: typer.Context) -> CLIContext:
    """Return the CLIContext the app callback stored on ``ctx``.

    Falls back to a new instance when a command group runs without the
    root callback, for example when invoked directly in tests.
    """
    if isinstance(ctx.obj, CLIContext):
        return ctx.obj
    return build_cli_context()
