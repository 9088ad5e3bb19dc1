"""Command-line construction for interactive kubectl sessions.

Interactive operations (shells, debug containers, log streams, node
maintenance) run kubectl in a terminal window instead of going through the
API client. This module only builds the text of those command lines;
``kubeintel.terminal`` runs them.

Token order is fixed::

    --kubeconfig <path> --context <name> <verb> <args...> [-n <ns>]
        [flags...] [refinements...] [-- <command...>]
"""

from __future__ import annotations

import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from .context import ClusterContext, NamespaceSelector
from .errors import InvalidArgumentError, UnsupportedOperationError
from .gateway import resolve_namespace
from .registry import ResourceType, lookup

# Characters cmd.exe interprets outside a quoted run
CMD_METACHARACTERS = frozenset('()%!^"<>&|')


def cmd_quote(token: str) -> str:
    """Quote ``token`` for a line parsed first by cmd.exe, then by the program.

    ``list2cmdline`` produces the form the program's argv parser expects.
    Every cmd.exe metacharacter in that result, quotes included, is then
    escaped with ``^`` so cmd.exe passes it through literally.
    """
    quoted = subprocess.list2cmdline([token])
    return "".join(f"^{char}" if char in CMD_METACHARACTERS else char for char in quoted)


@dataclass(frozen=True)
class CommandSpec:
    """Structured description of one kubectl invocation.

    ``flags`` belong to the operation itself (``-it``, ``--replicas=2``).
    ``refinements`` narrow the target further (``-c <container>``).
    ``command`` is passed through after ``--``.
    """

    config_locator: Path
    context_name: str
    verb: str
    positional_args: tuple[str, ...] = ()
    namespace: str | None = None
    flags: tuple[str, ...] = ()
    refinements: tuple[str, ...] = ()
    command: tuple[str, ...] = ()

    @classmethod
    def for_context(cls, ctx: ClusterContext, verb: str, **kwargs) -> CommandSpec:
        return cls(
            config_locator=ctx.config_locator,
            context_name=ctx.context_name,
            verb=verb,
            **kwargs,
        )

    def tokens(self) -> list[str]:
        """Return the unquoted tokens in their fixed order."""
        tokens = [
            "--kubeconfig",
            str(self.config_locator),
            "--context",
            self.context_name,
            self.verb,
            *self.positional_args,
        ]
        if self.namespace:
            tokens += ["-n", self.namespace]
        tokens += [*self.flags, *self.refinements]
        if self.command:
            tokens += ["--", *self.command]
        return tokens


@dataclass(frozen=True)
class TerminalCommand:
    """A fully quoted command line, ready to hand to a terminal."""

    command_line: str

    def __str__(self) -> str:
        return self.command_line


class CommandBuilder:
    """Render CommandSpecs into shell-safe command lines.

    Every token is quoted for the target platform: ``shlex.quote`` on POSIX
    and ``cmd_quote`` on Windows, where the line is run by cmd.exe.
    """

    def __init__(self, tool: str = "kubectl", platform: str = sys.platform) -> None:
        self.tool = tool
        self.platform = platform

    @property
    def is_windows(self) -> bool:
        return self.platform.startswith("win")

    def quote(self, token: str) -> str:
        if self.is_windows:
            return cmd_quote(token)
        return shlex.quote(token)

    def build(self, spec: CommandSpec) -> str:
        """Return the argument line without the tool name."""
        return " ".join(self.quote(token) for token in spec.tokens())

    def terminal_command(self, spec: CommandSpec) -> TerminalCommand:
        return TerminalCommand(f"{self.quote(self.tool)} {self.build(spec)}")


# =============================================================================
# Interactive command specs
# =============================================================================


def pod_shell(
    ctx: ClusterContext,
    pod: str,
    namespace: str,
    container: str,
    shell: str = "/bin/sh",
) -> CommandSpec:
    """Interactive shell inside a running container."""
    _require("pod", pod)
    _require("container", container)
    _require("shell", shell)
    return CommandSpec.for_context(
        ctx,
        "exec",
        positional_args=(pod,),
        namespace=_namespace_for(ResourceType.POD, namespace),
        flags=("-it",),
        refinements=("--container", container),
        command=(shell,),
    )


def debug_pod(
    ctx: ClusterContext,
    pod: str,
    namespace: str,
    image: str,
    target: str | None = None,
) -> CommandSpec:
    """Ephemeral debug container attached to a pod."""
    _require("pod", pod)
    _require("image", image)
    refinements = ("--target", target) if target else ()
    return CommandSpec.for_context(
        ctx,
        "debug",
        positional_args=(pod,),
        namespace=_namespace_for(ResourceType.POD, namespace),
        flags=("-it", "--image", image),
        refinements=refinements,
    )


def debug_node(ctx: ClusterContext, node: str, image: str) -> CommandSpec:
    """Debug pod scheduled onto a node with the host filesystem mounted."""
    _require("node", node)
    _require("image", image)
    return CommandSpec.for_context(
        ctx,
        "debug",
        positional_args=(f"node/{node}",),
        flags=("-it", "--image", image),
    )


def cordon(ctx: ClusterContext, node: str) -> CommandSpec:
    _require("node", node)
    return CommandSpec.for_context(ctx, "cordon", positional_args=(node,))


def uncordon(ctx: ClusterContext, node: str) -> CommandSpec:
    _require("node", node)
    return CommandSpec.for_context(ctx, "uncordon", positional_args=(node,))


def drain(ctx: ClusterContext, node: str) -> CommandSpec:
    _require("node", node)
    return CommandSpec.for_context(
        ctx,
        "drain",
        positional_args=(node,),
        flags=("--ignore-daemonsets", "--delete-emptydir-data"),
    )


def logs(
    ctx: ClusterContext,
    kind: ResourceType,
    name: str,
    namespace: str,
    container: str | None = None,
) -> CommandSpec:
    """Follow logs of a pod or of every pod behind a workload.

    Raises:
        UnsupportedOperationError: If the kind has no logs
    """
    meta = lookup(kind)
    if not meta.supports_logs:
        raise UnsupportedOperationError(f"{meta.api_kind} resources have no logs")
    _require("name", name)

    if kind == ResourceType.POD:
        target = name
        flags: tuple[str, ...] = ("-f",)
    else:
        target = f"{meta.cli_name}/{name}"
        flags = ("-f", "--all-pods=true")

    refinements = ("-c", container) if container else ("--all-containers=true",)
    return CommandSpec.for_context(
        ctx,
        "logs",
        positional_args=(target,),
        namespace=_namespace_for(kind, namespace),
        flags=flags,
        refinements=refinements,
    )


def events(
    ctx: ClusterContext,
    kind: ResourceType,
    name: str,
    namespace: NamespaceSelector,
) -> CommandSpec:
    """Events involving one object, as a kubectl table."""
    meta = lookup(kind)
    _require("name", name)
    selector = (
        f"involvedObject.name={name},involvedObject.kind={meta.api_kind}"
    )
    scope: tuple[str, ...] = ()
    if namespace.is_all or not meta.namespaced:
        scope = ("--all-namespaces",)
    return CommandSpec.for_context(
        ctx,
        "get",
        positional_args=("events",),
        namespace=None if scope else namespace.name,
        flags=(*scope, "--field-selector", selector),
    )


def scale(
    ctx: ClusterContext,
    kind: ResourceType,
    name: str,
    namespace: str,
    current_replicas: int,
    desired_replicas: int,
) -> CommandSpec:
    """kubectl scale guarded by ``--current-replicas``."""
    meta = lookup(kind)
    if not meta.supports_scale:
        raise UnsupportedOperationError(f"{meta.api_kind} resources cannot be scaled")
    _require("name", name)
    if current_replicas < 0 or desired_replicas < 0:
        raise InvalidArgumentError("Replica counts must not be negative")
    return CommandSpec.for_context(
        ctx,
        "scale",
        positional_args=(f"{meta.cli_name}/{name}",),
        namespace=_namespace_for(kind, namespace),
        flags=(
            f"--current-replicas={current_replicas}",
            f"--replicas={desired_replicas}",
        ),
    )


def cluster_info(ctx: ClusterContext) -> CommandSpec:
    return CommandSpec.for_context(ctx, "cluster-info")


def _namespace_for(kind: ResourceType, namespace: str | None) -> str | None:
    return resolve_namespace(lookup(kind), namespace)


def _require(label: str, value: str | None) -> None:
    if not value or not value.strip():
        raise InvalidArgumentError(f"A {label} is required")
