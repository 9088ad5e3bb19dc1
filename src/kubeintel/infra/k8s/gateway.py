"""Generic resource operations parametrized by resource kind.

A single code path serves every kind: scope and capability come from the
registry, the call goes to the backend, and results are wrapped in
``ResourceEnvelope`` with the matching tag.
"""

from __future__ import annotations

from typing import cast

from loguru import logger

from .backend import ClusterBackend
from .context import ClusterContext, NamespaceSelector
from .envelope import EventResource, ResourceEnvelope
from .errors import InvalidArgumentError, UnsupportedOperationError
from .registry import ResourceMeta, ResourceType, lookup


class ClientGateway:
    """List, get, delete and event lookup for every supported kind.

    Example:
        gateway = ClientGateway(Kr8sBackend())
        ctx = ClusterContext.from_input("~/.kube/config", "kind-dev")
        pods = run_sync(gateway.list(ctx, ResourceType.POD, NamespaceSelector.all()))
    """

    def __init__(self, backend: ClusterBackend) -> None:
        self.backend = backend

    async def list(
        self,
        ctx: ClusterContext,
        kind: ResourceType,
        namespace: NamespaceSelector,
    ) -> list[ResourceEnvelope]:
        """List every object of a kind.

        Cluster-scoped kinds ignore the namespace selector.
        """
        meta = lookup(kind)
        target = namespace.name if meta.namespaced else None
        logger.debug(f"Listing {meta.plural} in {target or 'all namespaces'}")

        items = await self.backend.list_objects(ctx, meta, target)
        return [ResourceEnvelope.wrap(kind, item) for item in items]

    async def get(
        self,
        ctx: ClusterContext,
        kind: ResourceType,
        namespace: str | None,
        name: str,
    ) -> ResourceEnvelope:
        """Fetch one object.

        Raises:
            NotFoundError: If the object does not exist
            ApiError: For any other server or transport failure
        """
        meta = lookup(kind)
        target = resolve_namespace(meta, namespace)
        _require_name(name)
        logger.debug(f"Getting {meta.cli_name}/{name} in {target or '<cluster>'}")

        manifest = await self.backend.get_object(ctx, meta, target, name)
        return ResourceEnvelope.wrap(kind, manifest)

    async def delete(
        self,
        ctx: ClusterContext,
        kind: ResourceType,
        namespace: str | None,
        name: str,
    ) -> None:
        """Delete one object.

        Raises:
            UnsupportedOperationError: If the kind cannot be deleted. Raised
                before any call reaches the cluster.
        """
        meta = lookup(kind)
        if not meta.supports_delete:
            raise UnsupportedOperationError(f"{meta.api_kind} resources cannot be deleted")
        target = resolve_namespace(meta, namespace)
        _require_name(name)

        await self.backend.delete_object(ctx, meta, target, name)
        logger.info(f"Deleted {meta.cli_name}/{name} in {target or '<cluster>'}")

    async def list_events(
        self,
        ctx: ClusterContext,
        kind: ResourceType,
        namespace: NamespaceSelector,
        name: str,
    ) -> list[EventResource]:
        """List events whose involved object matches ``kind`` and ``name``.

        Events of namespaced objects live in the object's namespace, so an
        "all namespaces" selector is rejected for namespaced kinds. Events
        of cluster-scoped objects are searched in every namespace.

        Raises:
            InvalidArgumentError: If the selector is "all" for a namespaced kind
        """
        meta = lookup(kind)
        _require_name(name)
        if meta.namespaced and namespace.is_all:
            raise InvalidArgumentError(
                f"Events for a {meta.api_kind} must be queried in a single namespace"
            )

        target = namespace.name if meta.namespaced else None
        selector = event_field_selector(meta, name)
        items = await self.backend.list_objects(
            ctx, lookup(ResourceType.EVENT), target, field_selector=selector
        )

        events = []
        for item in items:
            event = cast(EventResource, ResourceEnvelope.wrap(ResourceType.EVENT, item).resource)
            involved = event.involvedObject
            if involved.get("name") == name and involved.get("kind") == meta.api_kind:
                events.append(event)
        return events

    async def list_pods_on_node(
        self, ctx: ClusterContext, node_name: str
    ) -> list[ResourceEnvelope]:
        """List pods in every namespace scheduled onto ``node_name``."""
        _require_name(node_name)
        meta = lookup(ResourceType.POD)
        items = await self.backend.list_objects(
            ctx, meta, None, field_selector=f"spec.nodeName={node_name}"
        )
        return [ResourceEnvelope.wrap(ResourceType.POD, item) for item in items]

    async def list_namespaces(self, ctx: ClusterContext) -> list[str]:
        return sorted(await self.backend.list_namespaces(ctx))


# =============================================================================
# Helpers
# =============================================================================


def resolve_namespace(meta: ResourceMeta, namespace: str | None) -> str | None:
    """Return the namespace to address an object in.

    Cluster-scoped kinds always resolve to None. Namespaced kinds require a
    concrete namespace.

    Raises:
        InvalidArgumentError: If a namespaced kind has no namespace
    """
    if not meta.namespaced:
        return None
    if namespace is None or not namespace.strip() or namespace.strip() == "all":
        raise InvalidArgumentError(
            f"A namespace is required to address a {meta.api_kind}"
        )
    return namespace.strip()


def event_field_selector(meta: ResourceMeta, name: str) -> str:
    return f"involvedObject.name={name},involvedObject.kind={meta.api_kind}"


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidArgumentError("A resource name is required")
