"""Kr8s-based implementation of ClusterBackend.

Uses the kr8s library for native async Kubernetes operations. The kr8s
object class for each kind is resolved from ``ResourceMeta.api_kind``, so
the registry stays the only per-kind table.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
import kr8s
from kr8s.asyncio import objects as kr8s_objects
from loguru import logger

from .backend import ClusterBackend, Manifest, PatchType
from .context import ClusterContext
from .errors import ApiError, ConfigError, ConflictError, NotFoundError
from .registry import ResourceMeta


class Kr8sBackend(ClusterBackend):
    """Cluster backend using the kr8s async API.

    Note: The kr8s API client is NOT held on the instance. Clients are bound
    to the event loop they were created in, and ``run_sync()`` may create a
    new loop per call, so a client is resolved from the ClusterContext on
    every operation.
    """

    async def _get_api(self, ctx: ClusterContext) -> Any:  # Returns kr8s._api.Api
        """Resolve a ClusterContext into a kr8s API client.

        Raises:
            ConfigError: If the kubeconfig is missing or the context cannot
                be selected
        """
        if not ctx.config_locator.is_file():
            raise ConfigError(
                f"Kubeconfig not found: {ctx.config_locator}",
            )
        try:
            return await kr8s.asyncio.api(
                kubeconfig=str(ctx.config_locator),
                context=ctx.context_name,
            )
        except Exception as e:
            raise ConfigError(
                f"Could not load context '{ctx.context_name}' "
                f"from {ctx.config_locator}",
                details=str(e),
            ) from e

    @staticmethod
    def _object_class(meta: ResourceMeta) -> Any:
        return getattr(kr8s_objects, meta.api_kind)

    # =========================================================================
    # Object Operations
    # =========================================================================

    async def list_objects(
        self,
        ctx: ClusterContext,
        meta: ResourceMeta,
        namespace: str | None,
        *,
        field_selector: str | None = None,
    ) -> list[Manifest]:
        """List objects of one kind."""
        api = await self._get_api(ctx)
        cls = self._object_class(meta)
        target = namespace if namespace is not None else kr8s.ALL

        kwargs: dict[str, Any] = {"namespace": target, "api": api}
        if field_selector:
            kwargs["field_selector"] = field_selector

        async with _api_errors(f"list {meta.plural}"):
            return [obj.raw async for obj in cls.list(**kwargs)]

    async def get_object(
        self,
        ctx: ClusterContext,
        meta: ResourceMeta,
        namespace: str | None,
        name: str,
    ) -> Manifest:
        """Fetch a single object."""
        api = await self._get_api(ctx)
        async with _api_errors(f"get {meta.cli_name} {name}"):
            obj = await self._object_class(meta).get(name, namespace=namespace, api=api)
            return obj.raw

    async def delete_object(
        self,
        ctx: ClusterContext,
        meta: ResourceMeta,
        namespace: str | None,
        name: str,
    ) -> None:
        """Delete a single object with foreground propagation."""
        api = await self._get_api(ctx)
        async with _api_errors(f"delete {meta.cli_name} {name}"):
            obj = await self._object_class(meta).get(name, namespace=namespace, api=api)
            await obj.delete(propagation_policy="Foreground")

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
        """Patch a single object and return the updated manifest."""
        api = await self._get_api(ctx)
        async with _api_errors(
            f"patch {meta.cli_name} {name}",
            json_patch=patch_type == "json",
        ):
            obj = await self._object_class(meta).get(name, namespace=namespace, api=api)
            if patch_type == "json":
                await obj.patch(patch, type="json")
            else:
                await obj.patch(patch)
            return obj.raw

    async def list_namespaces(self, ctx: ClusterContext) -> list[str]:
        """Return the names of all namespaces in the cluster."""
        api = await self._get_api(ctx)
        async with _api_errors("list namespaces"):
            return [ns.name async for ns in kr8s_objects.Namespace.list(api=api)]


# =============================================================================
# Error Translation
# =============================================================================


@asynccontextmanager
async def _api_errors(
    action: str,
    *,
    json_patch: bool = False,
) -> AsyncIterator[None]:
    """Translate kr8s and httpx failures into the gateway error taxonomy.

    Args:
        action: Short description of the call, used in error messages
        json_patch: The call sent a JSON patch. A 422 whose message reports a
            failed ``test`` operation is then a ConflictError; any other 422
            is a validation rejection and stays an ApiError.
    """
    try:
        yield
    except kr8s.NotFoundError as e:
        raise NotFoundError(f"Failed to {action}: not found", details=str(e)) from e
    except kr8s.ServerError as e:
        status_code = e.response.status_code if e.response is not None else None
        message = _server_message(e)
        logger.debug(f"API server rejected '{action}' ({status_code}): {message}")
        if status_code == 404:
            raise NotFoundError(f"Failed to {action}: not found", details=message) from e
        if status_code == 409 or (
            json_patch and status_code == 422 and _is_failed_test(message)
        ):
            raise ConflictError(f"Failed to {action}: conflict", details=message) from e
        raise ApiError(
            f"Failed to {action}", details=message, status_code=status_code
        ) from e
    except httpx.HTTPError as e:
        raise ApiError(f"Failed to {action}: transport error", details=str(e)) from e


def _server_message(error: Any) -> str:
    status = getattr(error, "status", None)
    if isinstance(status, dict) and status.get("message"):
        return str(status["message"])
    return str(error)


# Wording used by the API server's JSON-patch engine for a failed test op
_FAILED_TEST_MARKERS = ("testing value", "test failed", "test operation failed")


def _is_failed_test(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _FAILED_TEST_MARKERS)
