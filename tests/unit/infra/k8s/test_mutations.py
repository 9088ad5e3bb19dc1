"""Tests for scale and restart."""

import copy
from datetime import UTC, datetime

import pytest

from kubeintel.infra.k8s.errors import (
    ConflictError,
    InvalidArgumentError,
    UnsupportedOperationError,
)
from kubeintel.infra.k8s.mutations import RESTARTED_AT_ANNOTATION, MutationOps
from kubeintel.infra.k8s.registry import ResourceType
from tests.fakes import FakeClusterBackend, deployment, pod


class RacingBackend(FakeClusterBackend):
    """Changes the replica count between the read and the write."""

    async def get_object(self, ctx, meta, namespace, name):
        manifest = await super().get_object(ctx, meta, namespace, name)
        self._find(meta, namespace, name)["spec"]["replicas"] = 9
        return manifest


class TestScale:
    @pytest.mark.asyncio
    async def test_scales_when_precondition_holds(self, ctx, backend, mutations):
        backend.add(ResourceType.DEPLOYMENT, deployment("web", "shop", 1))

        await mutations.scale(ctx, ResourceType.DEPLOYMENT, "shop", "web", 1, 2)

        assert backend.stored(ResourceType.DEPLOYMENT, "shop", "web")["spec"]["replicas"] == 2
        _, (_, _, _, patch_type, ops) = backend.calls[-1]
        assert patch_type == "json"
        assert ops == [
            {"op": "test", "path": "/spec/replicas", "value": 1},
            {"op": "replace", "path": "/spec/replicas", "value": 2},
        ]

    @pytest.mark.asyncio
    async def test_stale_replica_count_conflicts_without_writing(self, ctx, backend, mutations):
        backend.add(ResourceType.STATEFUL_SET, {
            "metadata": {"name": "db", "namespace": "shop"},
            "spec": {"replicas": 3},
        })

        with pytest.raises(ConflictError):
            await mutations.scale(ctx, ResourceType.STATEFUL_SET, "shop", "db", 1, 2)

        assert backend.stored(ResourceType.STATEFUL_SET, "shop", "db")["spec"]["replicas"] == 3
        assert [call for call, _ in backend.calls] == ["get"]

    @pytest.mark.asyncio
    async def test_concurrent_change_is_caught_by_patch_test(self, ctx):
        backend = RacingBackend()
        backend.add(ResourceType.DEPLOYMENT, deployment("web", "shop", 1))
        ops = MutationOps(backend)

        with pytest.raises(ConflictError):
            await ops.scale(ctx, ResourceType.DEPLOYMENT, "shop", "web", 1, 2)

        assert backend.stored(ResourceType.DEPLOYMENT, "shop", "web")["spec"]["replicas"] == 9

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind", [ResourceType.POD, ResourceType.DAEMON_SET, ResourceType.SERVICE]
    )
    async def test_unsupported_kind_makes_no_call(self, ctx, backend, mutations, kind):
        with pytest.raises(UnsupportedOperationError):
            await mutations.scale(ctx, kind, "shop", "web", 1, 2)
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_negative_replicas_rejected(self, ctx, backend, mutations):
        with pytest.raises(InvalidArgumentError):
            await mutations.scale(ctx, ResourceType.DEPLOYMENT, "shop", "web", 1, -1)
        assert backend.calls == []


class TestRestart:
    @pytest.mark.asyncio
    async def test_stamps_restarted_at_annotation(self, ctx, backend, mutations):
        backend.add(ResourceType.DEPLOYMENT, deployment("web", "shop", 2))

        stamped = await mutations.restart(ctx, ResourceType.DEPLOYMENT, "shop", "web")

        assert stamped == "2024-05-01T12:30:00+00:00"
        template = backend.stored(ResourceType.DEPLOYMENT, "shop", "web")["spec"]["template"]
        assert template["metadata"]["annotations"][RESTARTED_AT_ANNOTATION] == stamped
        assert template["metadata"]["labels"] == {"app": "web"}
        assert backend.calls[-1][1][3] == "merge"

    @pytest.mark.asyncio
    async def test_repeated_restart_stamps_new_timestamp(self, ctx, backend):
        backend.add(ResourceType.DAEMON_SET, {
            "metadata": {"name": "agent", "namespace": "kube-system"},
            "spec": {"template": {}},
        })
        times = iter([
            datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
            datetime(2024, 5, 1, 12, 5, tzinfo=UTC),
        ])
        ops = MutationOps(backend, clock=lambda: next(times))

        first = await ops.restart(ctx, ResourceType.DAEMON_SET, "kube-system", "agent")
        second = await ops.restart(ctx, ResourceType.DAEMON_SET, "kube-system", "agent")

        assert first != second
        annotations = backend.stored(ResourceType.DAEMON_SET, "kube-system", "agent")[
            "spec"
        ]["template"]["metadata"]["annotations"]
        assert annotations[RESTARTED_AT_ANNOTATION] == second

    @pytest.mark.asyncio
    async def test_unsupported_kind_makes_no_call(self, ctx, backend, mutations):
        backend.add(ResourceType.POD, pod("web-0", "shop"))

        with pytest.raises(UnsupportedOperationError):
            await mutations.restart(ctx, ResourceType.POD, "shop", "web-0")
        assert backend.calls == []


@pytest.mark.asyncio
async def test_stale_scale_leaves_fixture_unchanged(ctx, backend, mutations):
    fixture = backend.add(ResourceType.DEPLOYMENT, deployment("web", "shop", 4))
    before = copy.deepcopy(fixture)

    with pytest.raises(ConflictError):
        await mutations.scale(ctx, ResourceType.DEPLOYMENT, "shop", "web", 3, 5)

    assert backend.stored(ResourceType.DEPLOYMENT, "shop", "web") == before
