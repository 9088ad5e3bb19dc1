"""Tagged envelope for heterogeneous resource results.

Each resource kind has exactly one concrete pydantic model whose ``kind``
field is a literal tag. ``ResourceEnvelope`` is a root model over the
discriminated union of those models, so the boundary format is simply the
manifest with ``kind`` acting as the tag. Fields the models do not declare
are kept as extras, so ``unwrap()`` returns the manifest unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, RootModel

from .errors import InvalidArgumentError
from .registry import ResourceType, lookup

# =============================================================================
# Concrete resource shapes
# =============================================================================


class KubeObject(BaseModel):
    """Fields shared by every Kubernetes object."""

    model_config = ConfigDict(extra="allow")

    apiVersion: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @property
    def namespace(self) -> str | None:
        return self.metadata.get("namespace")


class _SpecStatusObject(KubeObject):
    spec: dict[str, Any] = Field(default_factory=dict)
    status: dict[str, Any] = Field(default_factory=dict)


class PodResource(_SpecStatusObject):
    kind: Literal["Pod"]


class DeploymentResource(_SpecStatusObject):
    kind: Literal["Deployment"]

    @property
    def replicas(self) -> int | None:
        return self.spec.get("replicas")


class StatefulSetResource(_SpecStatusObject):
    kind: Literal["StatefulSet"]

    @property
    def replicas(self) -> int | None:
        return self.spec.get("replicas")


class DaemonSetResource(_SpecStatusObject):
    kind: Literal["DaemonSet"]


class JobResource(_SpecStatusObject):
    kind: Literal["Job"]


class CronJobResource(_SpecStatusObject):
    kind: Literal["CronJob"]


class ServiceResource(_SpecStatusObject):
    kind: Literal["Service"]


class NodeResource(_SpecStatusObject):
    kind: Literal["Node"]

    @property
    def unschedulable(self) -> bool:
        return bool(self.spec.get("unschedulable", False))


class ConfigMapResource(KubeObject):
    kind: Literal["ConfigMap"]
    data: dict[str, str] | None = None
    binaryData: dict[str, str] | None = None
    immutable: bool | None = None


class SecretResource(KubeObject):
    kind: Literal["Secret"]
    type: str | None = None
    data: dict[str, str] | None = None
    stringData: dict[str, str] | None = None
    immutable: bool | None = None


class ServiceAccountResource(KubeObject):
    kind: Literal["ServiceAccount"]
    secrets: list[dict[str, Any]] | None = None
    imagePullSecrets: list[dict[str, Any]] | None = None
    automountServiceAccountToken: bool | None = None


class RoleResource(KubeObject):
    kind: Literal["Role"]
    rules: list[dict[str, Any]] | None = None


class RoleBindingResource(KubeObject):
    kind: Literal["RoleBinding"]
    roleRef: dict[str, Any] | None = None
    subjects: list[dict[str, Any]] | None = None


class ClusterRoleResource(KubeObject):
    kind: Literal["ClusterRole"]
    rules: list[dict[str, Any]] | None = None
    aggregationRule: dict[str, Any] | None = None


class ClusterRoleBindingResource(KubeObject):
    kind: Literal["ClusterRoleBinding"]
    roleRef: dict[str, Any] | None = None
    subjects: list[dict[str, Any]] | None = None


class PersistentVolumeResource(_SpecStatusObject):
    kind: Literal["PersistentVolume"]


class PersistentVolumeClaimResource(_SpecStatusObject):
    kind: Literal["PersistentVolumeClaim"]


class EventResource(KubeObject):
    kind: Literal["Event"]
    involvedObject: dict[str, Any] = Field(default_factory=dict)
    reason: str | None = None
    message: str | None = None
    type: str | None = None
    count: int | None = None
    firstTimestamp: str | None = None
    lastTimestamp: str | None = None
    eventTime: str | None = None
    source: dict[str, Any] | None = None


KubeResource = Annotated[
    Union[
        PodResource,
        DeploymentResource,
        StatefulSetResource,
        DaemonSetResource,
        JobResource,
        CronJobResource,
        ServiceResource,
        NodeResource,
        ConfigMapResource,
        SecretResource,
        ServiceAccountResource,
        RoleResource,
        RoleBindingResource,
        ClusterRoleResource,
        ClusterRoleBindingResource,
        PersistentVolumeResource,
        PersistentVolumeClaimResource,
        EventResource,
    ],
    Field(discriminator="kind"),
]


def _tag_of(model: type[KubeObject]) -> ResourceType:
    (tag,) = get_args(model.model_fields["kind"].annotation)
    return ResourceType(tag)


def _build_model_table() -> dict[ResourceType, type[KubeObject]]:
    union = get_args(KubeResource)[0]
    table: dict[ResourceType, type[KubeObject]] = {}
    for model in get_args(union):
        tag = _tag_of(model)
        if tag in table:
            raise RuntimeError(f"Duplicate envelope model for {tag}")
        table[tag] = model
    missing = set(ResourceType) - set(table)
    if missing:
        raise RuntimeError(
            "No envelope model for: " + ", ".join(sorted(k.value for k in missing))
        )
    return table


_MODELS = _build_model_table()


def resource_model(kind: ResourceType) -> type[KubeObject]:
    """Return the concrete model class carried under a tag."""
    return _MODELS[kind]


# =============================================================================
# Envelope
# =============================================================================


class ResourceEnvelope(RootModel[KubeResource]):
    """Exactly one concrete resource, tagged with its ResourceType.

    Example:
        env = ResourceEnvelope.wrap(ResourceType.DEPLOYMENT, manifest)
        env.kind      # ResourceType.DEPLOYMENT
        env.resource  # DeploymentResource
        env.unwrap()  # the manifest dict
    """

    @classmethod
    def wrap(cls, kind: ResourceType, obj: Any) -> ResourceEnvelope:
        """Wrap a manifest (or an object exposing ``.raw``) under ``kind``.

        List results from the API omit ``kind`` and ``apiVersion`` on their
        items; both are stamped from the registry when missing.

        Raises:
            InvalidArgumentError: If the payload is not a mapping or declares
                a different kind than the tag
        """
        manifest = getattr(obj, "raw", obj)
        if not isinstance(manifest, Mapping):
            raise InvalidArgumentError(
                f"Cannot wrap {type(obj).__name__} as {kind.value}"
            )

        meta = lookup(kind)
        payload = dict(manifest)
        declared = payload.get("kind")
        if declared is not None and declared != meta.api_kind:
            raise InvalidArgumentError(
                f"Payload kind {declared!r} does not match tag {meta.api_kind!r}"
            )
        payload["kind"] = meta.api_kind
        payload.setdefault("apiVersion", meta.api_version)
        return cls.model_validate(payload)

    @classmethod
    def from_json(cls, data: str | bytes) -> ResourceEnvelope:
        return cls.model_validate_json(data)

    @property
    def kind(self) -> ResourceType:
        return ResourceType(self.root.kind)

    @property
    def resource(self) -> KubeObject:
        return self.root

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def namespace(self) -> str | None:
        return self.root.namespace

    def unwrap(self) -> dict[str, Any]:
        """Return the manifest as it was wrapped."""
        return self.root.model_dump(exclude_unset=True)

    def to_json(self) -> str:
        return self.root.model_dump_json(exclude_unset=True)
