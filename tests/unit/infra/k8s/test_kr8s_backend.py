"""Tests for the kr8s backend's context resolution and error translation."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import kr8s
import pytest

from kubeintel.infra.k8s.context import ClusterContext
from kubeintel.infra.k8s.errors import ApiError, ConfigError, ConflictError, NotFoundError
from kubeintel.infra.k8s.kr8s_backend import Kr8sBackend, _api_errors
from kubeintel.infra.k8s.registry import ResourceType, lookup


def _server_error(status_code: int, message: str = "rejected") -> kr8s.ServerError:
    return kr8s.ServerError(
        message,
        status={"message": message},
        response=MagicMock(status_code=status_code),
    )


class _FakeObjects:
    """Stands in for a kr8s object class."""

    seen: dict = {}
    last: MagicMock | None = None

    @classmethod
    async def list(cls, **kwargs):
        cls.seen = kwargs
        yield SimpleNamespace(raw={"metadata": {"name": "web-0"}})

    @classmethod
    async def get(cls, name, namespace=None, api=None):
        obj = MagicMock()
        obj.raw = {"metadata": {"name": name, "namespace": namespace}}
        obj.patch = AsyncMock()
        obj.delete = AsyncMock()
        cls.last = obj
        return obj


@pytest.fixture
def kubeconfig(tmp_path):
    path = tmp_path / "config"
    path.write_text("apiVersion: v1\nkind: Config\n")
    return path


class TestGetApi:
    @pytest.mark.asyncio
    async def test_missing_kubeconfig_is_config_error(self, tmp_path):
        ctx = ClusterContext(tmp_path / "missing", "dev")

        with pytest.raises(ConfigError):
            await Kr8sBackend()._get_api(ctx)

    @pytest.mark.asyncio
    async def test_unknown_context_is_config_error(self, kubeconfig):
        ctx = ClusterContext(kubeconfig, "nope")

        with patch("kr8s.asyncio.api", new=AsyncMock(side_effect=ValueError("no context"))):
            with pytest.raises(ConfigError) as excinfo:
                await Kr8sBackend()._get_api(ctx)

        assert "no context" in excinfo.value.details

    @pytest.mark.asyncio
    async def test_passes_path_and_context(self, kubeconfig):
        ctx = ClusterContext(kubeconfig, "dev")

        with patch("kr8s.asyncio.api", new=AsyncMock(return_value="api")) as api:
            assert await Kr8sBackend()._get_api(ctx) == "api"

        api.assert_awaited_once_with(kubeconfig=str(kubeconfig), context="dev")


class TestApiErrors:
    @pytest.mark.asyncio
    async def test_not_found(self):
        with pytest.raises(NotFoundError):
            async with _api_errors("get pod web-0"):
                raise kr8s.NotFoundError("gone")

    @pytest.mark.asyncio
    async def test_server_404_is_not_found(self):
        with pytest.raises(NotFoundError):
            async with _api_errors("get pod web-0"):
                raise _server_error(404)

    @pytest.mark.asyncio
    async def test_conflict_keeps_server_message(self):
        with pytest.raises(ConflictError) as excinfo:
            async with _api_errors("patch deployment web"):
                raise _server_error(409, "the object has been modified")
        assert excinfo.value.details == "the object has been modified"

    @pytest.mark.asyncio
    async def test_failed_json_patch_test_is_conflict(self):
        message = "testing value /spec/replicas failed: test failed"
        with pytest.raises(ConflictError) as excinfo:
            async with _api_errors("patch", json_patch=True):
                raise _server_error(422, message)
        assert excinfo.value.details == message

    @pytest.mark.asyncio
    async def test_json_patch_validation_rejection_is_api_error(self):
        message = "spec.selector: Invalid value: field is immutable"
        with pytest.raises(ApiError) as excinfo:
            async with _api_errors("patch", json_patch=True):
                raise _server_error(422, message)
        assert excinfo.value.status_code == 422

    @pytest.mark.asyncio
    async def test_422_outside_json_patch_is_api_error(self):
        with pytest.raises(ApiError) as excinfo:
            async with _api_errors("patch"):
                raise _server_error(422, "testing value /spec/replicas failed")
        assert excinfo.value.status_code == 422

    @pytest.mark.asyncio
    async def test_transport_error_is_api_error(self):
        with pytest.raises(ApiError) as excinfo:
            async with _api_errors("list pods"):
                raise httpx.ConnectError("connection refused")
        assert excinfo.value.status_code is None


class TestObjectOperations:
    @pytest.fixture
    def backend(self):
        backend = Kr8sBackend()
        backend._get_api = AsyncMock(return_value="api")  # type: ignore[method-assign]
        backend._object_class = MagicMock(return_value=_FakeObjects)  # type: ignore[method-assign]
        return backend

    @pytest.mark.asyncio
    async def test_list_all_namespaces_uses_kr8s_all(self, backend, ctx):
        items = await backend.list_objects(
            ctx, lookup(ResourceType.POD), None, field_selector="spec.nodeName=w1"
        )

        assert items == [{"metadata": {"name": "web-0"}}]
        assert _FakeObjects.seen == {
            "namespace": kr8s.ALL,
            "api": "api",
            "field_selector": "spec.nodeName=w1",
        }

    @pytest.mark.asyncio
    async def test_json_patch_type_is_forwarded(self, backend, ctx):
        result = await backend.patch_object(
            ctx, lookup(ResourceType.DEPLOYMENT), "shop", "web", [], patch_type="json"
        )

        assert result["metadata"] == {"name": "web", "namespace": "shop"}
        _FakeObjects.last.patch.assert_awaited_once_with([], type="json")

    @pytest.mark.asyncio
    async def test_delete_uses_foreground_propagation(self, backend, ctx):
        await backend.delete_object(ctx, lookup(ResourceType.POD), "shop", "web-0")

        _FakeObjects.last.delete.assert_awaited_once_with(propagation_policy="Foreground")

    def test_object_class_comes_from_kr8s(self):
        cls = Kr8sBackend._object_class(lookup(ResourceType.STATEFUL_SET))
        assert cls.__name__ == "StatefulSet"
