"""Static registry of supported resource kinds.

Every supported kind has exactly one ``ResourceMeta`` entry describing its
API identity, scope and the mutating operations it allows. All scope and
capability decisions go through ``lookup()``; adding a kind or changing a
capability is a one-line edit to ``_REGISTRY``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .errors import InvalidArgumentError


class ResourceType(StrEnum):
    """Closed set of resource kinds. Values are the API kind names."""

    POD = "Pod"
    DEPLOYMENT = "Deployment"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    JOB = "Job"
    CRON_JOB = "CronJob"
    SERVICE = "Service"
    NODE = "Node"
    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"
    SERVICE_ACCOUNT = "ServiceAccount"
    ROLE = "Role"
    ROLE_BINDING = "RoleBinding"
    CLUSTER_ROLE = "ClusterRole"
    CLUSTER_ROLE_BINDING = "ClusterRoleBinding"
    PERSISTENT_VOLUME = "PersistentVolume"
    PERSISTENT_VOLUME_CLAIM = "PersistentVolumeClaim"
    EVENT = "Event"

    @classmethod
    def parse(cls, token: str) -> ResourceType:
        """Resolve a boundary token into a ResourceType.

        Accepts the kind name in any case (``Deployment``, ``deployment``),
        the plural (``deployments``) and the kubectl short name (``deploy``).

        Raises:
            InvalidArgumentError: If the token names no supported kind
        """
        normalized = token.strip().lower() if token else ""
        kind = _ALIASES.get(normalized)
        if kind is None:
            raise InvalidArgumentError(
                f"Unknown resource type: {token!r}",
                details="Supported: " + ", ".join(k.value for k in cls),
            )
        return kind

    @property
    def meta(self) -> ResourceMeta:
        return lookup(self)


class Scope(StrEnum):
    NAMESPACED = "Namespaced"
    CLUSTER = "Cluster"


@dataclass(frozen=True)
class ResourceMeta:
    """Per-kind metadata.

    Attributes:
        api_kind: API kind name (e.g., "Deployment")
        api_version: Group/version the kind is served from (e.g., "apps/v1")
        plural: Lowercase plural resource name used by kubectl and the API
        scope: Namespaced or cluster-scoped
        supports_scale: Whether the kind has a scale subresource we drive
        supports_restart: Whether a rolling restart can be triggered
        supports_delete: Whether the gateway allows deleting it
        supports_logs: Whether ``kubectl logs`` accepts it as a target
        short_names: kubectl short names accepted at the boundary
    """

    api_kind: str
    api_version: str
    plural: str
    scope: Scope
    supports_scale: bool = False
    supports_restart: bool = False
    supports_delete: bool = True
    supports_logs: bool = False
    short_names: tuple[str, ...] = ()

    @property
    def namespaced(self) -> bool:
        return self.scope is Scope.NAMESPACED

    @property
    def cli_name(self) -> str:
        """Lowercase singular name used in kubectl targets (``deployment/x``)."""
        return self.api_kind.lower()


_NS = Scope.NAMESPACED
_CLUSTER = Scope.CLUSTER

_REGISTRY: dict[ResourceType, ResourceMeta] = {
    ResourceType.POD: ResourceMeta(
        "Pod", "v1", "pods", _NS, supports_logs=True, short_names=("po",)
    ),
    ResourceType.DEPLOYMENT: ResourceMeta(
        "Deployment",
        "apps/v1",
        "deployments",
        _NS,
        supports_scale=True,
        supports_restart=True,
        supports_logs=True,
        short_names=("deploy",),
    ),
    ResourceType.STATEFUL_SET: ResourceMeta(
        "StatefulSet",
        "apps/v1",
        "statefulsets",
        _NS,
        supports_scale=True,
        supports_restart=True,
        supports_logs=True,
        short_names=("sts",),
    ),
    ResourceType.DAEMON_SET: ResourceMeta(
        "DaemonSet",
        "apps/v1",
        "daemonsets",
        _NS,
        supports_restart=True,
        supports_logs=True,
        short_names=("ds",),
    ),
    ResourceType.JOB: ResourceMeta(
        "Job", "batch/v1", "jobs", _NS, supports_logs=True
    ),
    ResourceType.CRON_JOB: ResourceMeta(
        "CronJob", "batch/v1", "cronjobs", _NS, short_names=("cj",)
    ),
    ResourceType.SERVICE: ResourceMeta(
        "Service", "v1", "services", _NS, short_names=("svc",)
    ),
    ResourceType.NODE: ResourceMeta(
        "Node", "v1", "nodes", _CLUSTER, short_names=("no",)
    ),
    ResourceType.CONFIG_MAP: ResourceMeta(
        "ConfigMap", "v1", "configmaps", _NS, short_names=("cm",)
    ),
    ResourceType.SECRET: ResourceMeta("Secret", "v1", "secrets", _NS),
    ResourceType.SERVICE_ACCOUNT: ResourceMeta(
        "ServiceAccount", "v1", "serviceaccounts", _NS, short_names=("sa",)
    ),
    ResourceType.ROLE: ResourceMeta(
        "Role", "rbac.authorization.k8s.io/v1", "roles", _NS
    ),
    ResourceType.ROLE_BINDING: ResourceMeta(
        "RoleBinding", "rbac.authorization.k8s.io/v1", "rolebindings", _NS
    ),
    ResourceType.CLUSTER_ROLE: ResourceMeta(
        "ClusterRole", "rbac.authorization.k8s.io/v1", "clusterroles", _CLUSTER
    ),
    ResourceType.CLUSTER_ROLE_BINDING: ResourceMeta(
        "ClusterRoleBinding",
        "rbac.authorization.k8s.io/v1",
        "clusterrolebindings",
        _CLUSTER,
    ),
    ResourceType.PERSISTENT_VOLUME: ResourceMeta(
        "PersistentVolume", "v1", "persistentvolumes", _CLUSTER, short_names=("pv",)
    ),
    ResourceType.PERSISTENT_VOLUME_CLAIM: ResourceMeta(
        "PersistentVolumeClaim",
        "v1",
        "persistentvolumeclaims",
        _NS,
        short_names=("pvc",),
    ),
    ResourceType.EVENT: ResourceMeta(
        "Event", "v1", "events", _NS, supports_delete=False, short_names=("ev",)
    ),
}


def lookup(kind: ResourceType) -> ResourceMeta:
    """Return the metadata for a resource kind. Total over ResourceType."""
    return _REGISTRY[kind]


def all_kinds() -> tuple[ResourceType, ...]:
    return tuple(ResourceType)


def _build_aliases() -> dict[str, ResourceType]:
    aliases: dict[str, ResourceType] = {}
    for kind, meta in _REGISTRY.items():
        for alias in (meta.api_kind.lower(), meta.plural, *meta.short_names):
            aliases[alias] = kind
    return aliases


_ALIASES = _build_aliases()

if set(_REGISTRY) != set(ResourceType):
    missing = ", ".join(k.value for k in set(ResourceType) - set(_REGISTRY))
    raise RuntimeError(f"Resource registry is missing entries for: {missing}")
