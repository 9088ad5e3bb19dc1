"""Interactive operations that run kubectl in a new terminal window."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from . import commands
from .commands import CommandBuilder, CommandSpec
from .context import ClusterContext, NamespaceSelector
from .registry import ResourceType

if TYPE_CHECKING:
    from kubeintel.terminal import LaunchAttempt, TerminalLauncher

DEFAULT_DEBUG_IMAGE = "busybox:latest"
DEFAULT_SHELL = "/bin/sh"


class InteractiveOps:
    """Build a command for one cluster context and hand it to a terminal.

    Every method validates its input (and the kind's capabilities, where
    relevant) while building the command, so nothing is launched for an
    invalid request. Each returns the ``LaunchAttempt`` of its terminal.
    """

    def __init__(
        self,
        ctx: ClusterContext,
        builder: CommandBuilder,
        launcher: TerminalLauncher,
        *,
        shell: str = DEFAULT_SHELL,
        debug_image: str = DEFAULT_DEBUG_IMAGE,
    ) -> None:
        self.ctx = ctx
        self.builder = builder
        self.launcher = launcher
        self.shell = shell
        self.debug_image = debug_image

    def _launch(self, spec: CommandSpec) -> LaunchAttempt:
        command = self.builder.terminal_command(spec)
        logger.debug(f"Launching terminal for: {command.command_line}")
        return self.launcher.launch(command)

    def open_pod_shell(
        self, pod: str, namespace: str, container: str, shell: str | None = None
    ) -> LaunchAttempt:
        return self._launch(
            commands.pod_shell(self.ctx, pod, namespace, container, shell or self.shell)
        )

    def debug_pod(
        self,
        pod: str,
        namespace: str,
        image: str | None = None,
        target: str | None = None,
    ) -> LaunchAttempt:
        return self._launch(
            commands.debug_pod(self.ctx, pod, namespace, image or self.debug_image, target)
        )

    def debug_node(self, node: str, image: str | None = None) -> LaunchAttempt:
        return self._launch(commands.debug_node(self.ctx, node, image or self.debug_image))

    def cordon_node(self, node: str) -> LaunchAttempt:
        return self._launch(commands.cordon(self.ctx, node))

    def uncordon_node(self, node: str) -> LaunchAttempt:
        return self._launch(commands.uncordon(self.ctx, node))

    def drain_node(self, node: str) -> LaunchAttempt:
        return self._launch(commands.drain(self.ctx, node))

    def stream_logs(
        self,
        kind: ResourceType,
        name: str,
        namespace: str,
        container: str | None = None,
    ) -> LaunchAttempt:
        return self._launch(commands.logs(self.ctx, kind, name, namespace, container))

    def watch_events(
        self, kind: ResourceType, name: str, namespace: NamespaceSelector
    ) -> LaunchAttempt:
        return self._launch(commands.events(self.ctx, kind, name, namespace))

    def scale(
        self,
        kind: ResourceType,
        name: str,
        namespace: str,
        current_replicas: int,
        desired_replicas: int,
    ) -> LaunchAttempt:
        return self._launch(
            commands.scale(
                self.ctx, kind, name, namespace, current_replicas, desired_replicas
            )
        )

    def cluster_info(self) -> LaunchAttempt:
        return self._launch(commands.cluster_info(self.ctx))
