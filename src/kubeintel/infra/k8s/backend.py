"""Abstract cluster backend interface.

Defines the small set of primitive API calls the gateway is built on. A
backend is handed the ``ClusterContext`` on every call and resolves it into
a live connection itself; nothing is cached between calls.

All methods are async. Use ``run_sync()`` to call from synchronous code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Literal

from .context import ClusterContext
from .registry import ResourceMeta

Manifest = dict[str, Any]
PatchType = Literal["merge", "json"]


class ClusterBackend(ABC):
    """Primitive object operations against one cluster API server.

    Implementations translate their transport's failures into the gateway
    error taxonomy (``ConfigError``, ``ApiError``, ``NotFoundError``,
    ``ConflictError``).
    """

    @abstractmethod
    async def list_objects(
        self,
        ctx: ClusterContext,
        meta: ResourceMeta,
        namespace: str | None,
        *,
        field_selector: str | None = None,
    ) -> list[Manifest]:
        """List objects of one kind.

        Args:
            ctx: Cluster to talk to
            meta: Kind to list
            namespace: Namespace to list in, or None for every namespace
                (always None for cluster-scoped kinds)
            field_selector: Optional server-side field selector

        Returns:
            Manifests of every matching object
        """
        ...

    @abstractmethod
    async def get_object(
        self,
        ctx: ClusterContext,
        meta: ResourceMeta,
        namespace: str | None,
        name: str,
    ) -> Manifest:
        """Fetch a single object.

        Raises:
            NotFoundError: If the object does not exist
        """
        ...

    @abstractmethod
    async def delete_object(
        self,
        ctx: ClusterContext,
        meta: ResourceMeta,
        namespace: str | None,
        name: str,
    ) -> None:
        """Delete a single object with foreground propagation.

        Raises:
            NotFoundError: If the object does not exist
        """
        ...

    @abstractmethod
    async def patch_object(
        self,
        ctx: ClusterContext,
        meta: ResourceMeta,
        namespace: str | None,
        name: str,
        patch: Any,
        *,
        patch_type: PatchType = "merge",
    ) -> Manifest:
        """Patch a single object and return the updated manifest.

        Args:
            patch: Merge-patch document, or a list of JSON-patch operations
            patch_type: "merge" (RFC 7386) or "json" (RFC 6902)

        Raises:
            NotFoundError: If the object does not exist
            ConflictError: If a JSON-patch ``test`` operation fails or the
                server reports a conflict
        """
        ...

    @abstractmethod
    async def list_namespaces(self, ctx: ClusterContext) -> list[str]:
        """Return the names of all namespaces in the cluster."""
        ...
