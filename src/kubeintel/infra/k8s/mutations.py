"""Capability-gated mutating operations: scale and restart.

Capability checks run against the registry before anything is sent to the
cluster, so an unsupported request fails without a network call.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from loguru import logger

from .backend import ClusterBackend
from .context import ClusterContext
from .errors import ConflictError, InvalidArgumentError, UnsupportedOperationError
from .gateway import resolve_namespace
from .registry import ResourceType, lookup

RESTARTED_AT_ANNOTATION = "kubectl.kubernetes.io/restartedAt"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MutationOps:
    """Scale and rolling-restart for workload kinds."""

    def __init__(
        self,
        backend: ClusterBackend,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.backend = backend
        self._clock = clock

    async def scale(
        self,
        ctx: ClusterContext,
        kind: ResourceType,
        namespace: str,
        name: str,
        current_replicas: int,
        desired_replicas: int,
    ) -> None:
        """Set the replica count, provided it still equals ``current_replicas``.

        The precondition is checked against the live object first, then
        re-checked server-side by a JSON-patch ``test`` operation so that a
        concurrent scale by another actor between the read and the write
        also fails instead of being overwritten.

        Args:
            current_replicas: Replica count the caller last observed
            desired_replicas: Replica count to apply

        Raises:
            UnsupportedOperationError: If the kind cannot be scaled
            InvalidArgumentError: If a replica count is negative
            ConflictError: If the live replica count differs from
                ``current_replicas``. The object is left untouched.
        """
        meta = lookup(kind)
        if not meta.supports_scale:
            raise UnsupportedOperationError(f"{meta.api_kind} resources cannot be scaled")
        if current_replicas < 0 or desired_replicas < 0:
            raise InvalidArgumentError("Replica counts must not be negative")
        target = resolve_namespace(meta, namespace)

        live = await self.backend.get_object(ctx, meta, target, name)
        live_replicas = live.get("spec", {}).get("replicas")
        if live_replicas != current_replicas:
            raise ConflictError(
                f"{meta.cli_name}/{name} has {live_replicas} replicas, "
                f"expected {current_replicas}",
                details="Refresh the object and retry the scale",
            )

        await self.backend.patch_object(
            ctx,
            meta,
            target,
            name,
            [
                {"op": "test", "path": "/spec/replicas", "value": current_replicas},
                {"op": "replace", "path": "/spec/replicas", "value": desired_replicas},
            ],
            patch_type="json",
        )
        logger.info(
            f"Scaled {meta.cli_name}/{name} in {target} "
            f"from {current_replicas} to {desired_replicas}"
        )

    async def restart(
        self,
        ctx: ClusterContext,
        kind: ResourceType,
        namespace: str,
        name: str,
    ) -> str:
        """Trigger a rolling restart by stamping the pod template.

        The workload controller performs the rollout; this only changes the
        ``restartedAt`` template annotation. Every call stamps a fresh
        timestamp, so repeating it starts a new rollout.

        Returns:
            The RFC 3339 timestamp that was stamped

        Raises:
            UnsupportedOperationError: If the kind cannot be restarted
        """
        meta = lookup(kind)
        if not meta.supports_restart:
            raise UnsupportedOperationError(
                f"{meta.api_kind} resources cannot be restarted"
            )
        target = resolve_namespace(meta, namespace)

        restarted_at = self._clock().isoformat()
        patch = {
            "spec": {
                "template": {
                    "metadata": {"annotations": {RESTARTED_AT_ANNOTATION: restarted_at}}
                }
            }
        }
        await self.backend.patch_object(ctx, meta, target, name, patch)
        logger.info(f"Restarted {meta.cli_name}/{name} in {target} at {restarted_at}")
        return restarted_at
