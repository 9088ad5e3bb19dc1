"""Tests for the resource registry."""

import pytest

from kubeintel.infra.k8s.errors import InvalidArgumentError
from kubeintel.infra.k8s.registry import ResourceType, Scope, all_kinds, lookup


class TestResourceTypeParse:
    @pytest.mark.parametrize(
        "token, expected",
        [
            ("Deployment", ResourceType.DEPLOYMENT),
            ("deployment", ResourceType.DEPLOYMENT),
            ("deployments", ResourceType.DEPLOYMENT),
            ("deploy", ResourceType.DEPLOYMENT),
            ("sts", ResourceType.STATEFUL_SET),
            ("  po ", ResourceType.POD),
            ("ClusterRoleBinding", ResourceType.CLUSTER_ROLE_BINDING),
            ("pvc", ResourceType.PERSISTENT_VOLUME_CLAIM),
            ("ev", ResourceType.EVENT),
        ],
    )
    def test_accepts_kind_plural_and_short_names(self, token, expected):
        assert ResourceType.parse(token) is expected

    @pytest.mark.parametrize("token", ["", "Ingress", "widgets", "deploymentx"])
    def test_unknown_token_is_invalid_argument(self, token):
        with pytest.raises(InvalidArgumentError) as excinfo:
            ResourceType.parse(token)
        assert "Deployment" in excinfo.value.details


class TestRegistryCapabilities:
    def test_every_kind_has_metadata(self):
        for kind in all_kinds():
            meta = lookup(kind)
            assert meta.api_kind == kind.value
            assert meta.plural.endswith("s")

    def test_only_deployment_and_statefulset_scale(self):
        scalable = {k for k in ResourceType if lookup(k).supports_scale}
        assert scalable == {ResourceType.DEPLOYMENT, ResourceType.STATEFUL_SET}

    def test_restart_is_limited_to_pod_template_workloads(self):
        restartable = {k for k in ResourceType if lookup(k).supports_restart}
        assert restartable == {
            ResourceType.DEPLOYMENT,
            ResourceType.STATEFUL_SET,
            ResourceType.DAEMON_SET,
        }

    def test_cronjob_has_no_logs(self):
        assert not lookup(ResourceType.CRON_JOB).supports_logs
        assert lookup(ResourceType.JOB).supports_logs

    def test_events_cannot_be_deleted(self):
        assert not lookup(ResourceType.EVENT).supports_delete
        assert all(
            lookup(k).supports_delete for k in ResourceType if k is not ResourceType.EVENT
        )

    def test_cluster_scoped_kinds(self):
        cluster = {k for k in ResourceType if lookup(k).scope is Scope.CLUSTER}
        assert cluster == {
            ResourceType.NODE,
            ResourceType.CLUSTER_ROLE,
            ResourceType.CLUSTER_ROLE_BINDING,
            ResourceType.PERSISTENT_VOLUME,
        }

    def test_cli_name_is_lowercase_kind(self):
        assert lookup(ResourceType.STATEFUL_SET).cli_name == "statefulset"
        assert ResourceType.DEPLOYMENT.meta.cli_name == "deployment"

    def test_scale_implies_namespaced_and_restart_implies_workload(self):
        for kind in ResourceType:
            meta = lookup(kind)
            if meta.supports_scale:
                assert meta.namespaced
            if meta.supports_restart:
                assert meta.api_kind in {"Deployment", "StatefulSet", "DaemonSet"}
