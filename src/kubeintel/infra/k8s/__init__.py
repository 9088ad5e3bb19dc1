"""Kubernetes resource gateway.

A kind-agnostic API over a Kubernetes cluster: every operation is
parametrized by a ``ResourceType`` and routed through one generic code path.

Example:
    from kubeintel.infra.k8s import (
        ClusterContext, NamespaceSelector, ResourceType, get_gateway, run_sync,
    )

    ctx = ClusterContext.from_input("~/.kube/config", "kind-dev")
    pods = run_sync(get_gateway().list(ctx, ResourceType.POD, NamespaceSelector.all()))
"""

from .backend import ClusterBackend
from .commands import CommandBuilder, CommandSpec, TerminalCommand
from .context import ClusterContext, NamespaceSelector
from .envelope import EventResource, KubeObject, ResourceEnvelope
from .errors import (
    ApiError,
    ConfigError,
    ConflictError,
    GatewayError,
    InvalidArgumentError,
    NoTerminalFoundError,
    NotFoundError,
    ProcessSpawnError,
    UnsupportedOperationError,
)
from .gateway import ClientGateway
from .helpers import get_cluster_backend, get_gateway, get_interactive_ops, get_mutations
from .interactive import InteractiveOps
from .mutations import MutationOps
from .registry import ResourceMeta, ResourceType, Scope, lookup
from .utils import run_sync

__all__ = [
    # Core
    "ClientGateway",
    "MutationOps",
    "InteractiveOps",
    "ClusterBackend",
    # Values
    "ClusterContext",
    "NamespaceSelector",
    "ResourceType",
    "ResourceMeta",
    "Scope",
    "ResourceEnvelope",
    "KubeObject",
    "EventResource",
    "CommandSpec",
    "CommandBuilder",
    "TerminalCommand",
    # Errors
    "GatewayError",
    "ConfigError",
    "ApiError",
    "NotFoundError",
    "ConflictError",
    "UnsupportedOperationError",
    "InvalidArgumentError",
    "NoTerminalFoundError",
    "ProcessSpawnError",
    # Factories and utilities
    "get_cluster_backend",
    "get_gateway",
    "get_mutations",
    "get_interactive_ops",
    "lookup",
    "run_sync",
]
