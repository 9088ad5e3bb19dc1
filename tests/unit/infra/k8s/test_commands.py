"""Tests for kubectl command-line construction."""

from pathlib import Path

import pytest

from kubeintel.infra.k8s import commands
from kubeintel.infra.k8s.commands import CommandBuilder, CommandSpec, cmd_quote
from kubeintel.infra.k8s.context import ClusterContext, NamespaceSelector
from kubeintel.infra.k8s.errors import InvalidArgumentError, UnsupportedOperationError
from kubeintel.infra.k8s.registry import ResourceType


@pytest.fixture
def builder() -> CommandBuilder:
    return CommandBuilder(platform="linux")


class TestCommandBuilder:
    def test_scale_line_has_fixed_order(self, ctx, builder):
        spec = commands.scale(ctx, ResourceType.DEPLOYMENT, "x", "ns", 1, 2)

        assert builder.build(spec) == (
            "--kubeconfig /a/b --context ctx scale deployment/x -n ns "
            "--current-replicas=1 --replicas=2"
        )

    def test_build_is_pure(self, ctx, builder):
        spec = commands.cordon(ctx, "worker-1")
        assert builder.build(spec) == builder.build(spec)

    def test_posix_quoting_keeps_tokens_intact(self, builder):
        ctx = ClusterContext(Path("/home/me/My Configs/kube config"), "ctx; rm -rf /")
        spec = commands.pod_shell(ctx, "web-0", "shop", "app", "/bin/sh")

        line = builder.build(spec)

        assert line == (
            "--kubeconfig '/home/me/My Configs/kube config' --context 'ctx; rm -rf /' "
            "exec web-0 -n shop -it --container app -- /bin/sh"
        )

    def test_windows_quoting_escapes_cmd_metacharacters(self):
        ctx = ClusterContext(Path("C:/Users/Jo Doe/kube config"), "dev&calc")
        spec = CommandSpec.for_context(ctx, "cluster-info")

        line = CommandBuilder(platform="win32").build(spec)

        assert line == (
            '--kubeconfig ^"C:/Users/Jo Doe/kube config^" --context dev^&calc cluster-info'
        )

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("plain", "plain"),
            ("a|b", "a^|b"),
            ("in<out>", "in^<out^>"),
            ("%PATH%", "^%PATH^%"),
            ("x^y", "x^^y"),
            ("(sub)!", "^(sub^)^!"),
            ("", '^"^"'),
            ('say "hi"', '^"say \\^"hi\\^"^"'),
        ],
    )
    def test_cmd_quote(self, token, expected):
        assert cmd_quote(token) == expected

    def test_terminal_command_prefixes_tool(self, ctx):
        builder = CommandBuilder(tool="/opt/k8s tools/kubectl", platform="linux")

        command = builder.terminal_command(commands.cluster_info(ctx))

        assert command.command_line == (
            "'/opt/k8s tools/kubectl' --kubeconfig /a/b --context ctx cluster-info"
        )


class TestInteractiveSpecs:
    def test_debug_pod_with_target(self, ctx, builder):
        spec = commands.debug_pod(ctx, "web-0", "shop", "busybox:latest", "app")

        assert builder.build(spec).endswith(
            "debug web-0 -n shop -it --image busybox:latest --target app"
        )

    def test_debug_node(self, ctx, builder):
        spec = commands.debug_node(ctx, "worker-1", "busybox:latest")

        assert builder.build(spec).endswith("debug node/worker-1 -it --image busybox:latest")

    def test_drain_flags(self, ctx, builder):
        line = builder.build(commands.drain(ctx, "worker-1"))

        assert line.endswith("drain worker-1 --ignore-daemonsets --delete-emptydir-data")

    def test_pod_logs_all_containers(self, ctx, builder):
        spec = commands.logs(ctx, ResourceType.POD, "web-0", "shop")

        assert builder.build(spec).endswith("logs web-0 -n shop -f --all-containers=true")

    def test_workload_logs_single_container(self, ctx, builder):
        spec = commands.logs(ctx, ResourceType.DEPLOYMENT, "web", "shop", "app")

        assert builder.build(spec).endswith(
            "logs deployment/web -n shop -f --all-pods=true -c app"
        )

    @pytest.mark.parametrize("kind", [ResourceType.CRON_JOB, ResourceType.SERVICE, ResourceType.NODE])
    def test_logs_unsupported(self, ctx, kind):
        with pytest.raises(UnsupportedOperationError):
            commands.logs(ctx, kind, "x", "shop")

    def test_events_in_namespace(self, ctx, builder):
        spec = commands.events(ctx, ResourceType.POD, "web-0", NamespaceSelector.named("shop"))

        assert builder.build(spec).endswith(
            "get events -n shop --field-selector "
            "involvedObject.name=web-0,involvedObject.kind=Pod"
        )

    def test_events_all_namespaces(self, ctx, builder):
        spec = commands.events(ctx, ResourceType.NODE, "worker-1", NamespaceSelector.named("shop"))

        line = builder.build(spec)

        assert "-n shop" not in line
        assert "get events --all-namespaces --field-selector" in line

    def test_scale_unsupported(self, ctx):
        with pytest.raises(UnsupportedOperationError):
            commands.scale(ctx, ResourceType.JOB, "x", "ns", 1, 2)

    def test_missing_container_rejected(self, ctx):
        with pytest.raises(InvalidArgumentError):
            commands.pod_shell(ctx, "web-0", "shop", "", "/bin/sh")
