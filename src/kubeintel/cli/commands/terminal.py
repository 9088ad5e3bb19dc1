"""Commands that open kubectl in a new terminal window."""

from typing import Annotated

import typer

from kubeintel.infra.k8s import NamespaceSelector, ResourceType
from kubeintel.terminal import LaunchAttempt

from ..console import with_error_handling
from ..context import CLIContext, get_cli_context

term_app = typer.Typer(
    help="Open interactive kubectl sessions in a new terminal window",
    no_args_is_help=True,
)

NamespaceOpt = Annotated[
    str,
    typer.Option("--namespace", "-n", help="Namespace of the resource"),
]
NodeArg = Annotated[str, typer.Argument(help="Node name")]
PodArg = Annotated[str, typer.Argument(help="Pod name")]
ImageOpt = Annotated[
    str | None,
    typer.Option("--image", help="Debug container image (defaults to config debug_image)"),
]
ForceOpt = Annotated[
    bool,
    typer.Option("--force", "-f", help="Skip the confirmation prompt"),
]


def _report(cli: CLIContext, attempt: LaunchAttempt) -> None:
    cli.console.ok(
        f"Opened {attempt.terminal}: [dim]{attempt.command.command_line}[/dim]"
    )


@term_app.command()
@with_error_handling
def shell(
    ctx: typer.Context,
    pod: PodArg,
    container: Annotated[str, typer.Option("--container", "-c", help="Container name")],
    namespace: NamespaceOpt = "default",
    shell_path: Annotated[
        str | None,
        typer.Option("--shell", help="Shell to run (defaults to config shell)"),
    ] = None,
) -> None:
    """
    Open a shell inside a running container.

    Examples:
        kubeintel term shell web-0 -c app -n shop
        kubeintel term shell web-0 -c app --shell /bin/bash
    """
    cli = get_cli_context(ctx)
    _report(cli, cli.interactive().open_pod_shell(pod, namespace, container, shell_path))


@term_app.command("debug-pod")
@with_error_handling
def debug_pod(
    ctx: typer.Context,
    pod: PodArg,
    namespace: NamespaceOpt = "default",
    image: ImageOpt = None,
    target: Annotated[
        str | None,
        typer.Option("--target", help="Container whose process namespace to share"),
    ] = None,
) -> None:
    """Attach an ephemeral debug container to a pod."""
    cli = get_cli_context(ctx)
    _report(cli, cli.interactive().debug_pod(pod, namespace, image, target))


@term_app.command("debug-node")
@with_error_handling
def debug_node(ctx: typer.Context, node: NodeArg, image: ImageOpt = None) -> None:
    """Start a debug pod on a node with the host filesystem mounted."""
    cli = get_cli_context(ctx)
    _report(cli, cli.interactive().debug_node(node, image))


@term_app.command()
@with_error_handling
def cordon(ctx: typer.Context, node: NodeArg) -> None:
    """Mark a node unschedulable."""
    cli = get_cli_context(ctx)
    _report(cli, cli.interactive().cordon_node(node))


@term_app.command()
@with_error_handling
def uncordon(ctx: typer.Context, node: NodeArg) -> None:
    """Mark a node schedulable again."""
    cli = get_cli_context(ctx)
    _report(cli, cli.interactive().uncordon_node(node))


@term_app.command()
@with_error_handling
def drain(ctx: typer.Context, node: NodeArg, force: ForceOpt = False) -> None:
    """
    Evict every pod from a node, ignoring DaemonSets.

    Pods using emptyDir volumes lose that data.
    """
    cli = get_cli_context(ctx)
    if not cli.console.confirm_action(
        f"Drain node '{node}'",
        details="All pods will be evicted; emptyDir data will be deleted.",
        force=force,
    ):
        raise typer.Exit(0)
    _report(cli, cli.interactive().drain_node(node))


@term_app.command()
@with_error_handling
def logs(
    ctx: typer.Context,
    kind: Annotated[str, typer.Argument(help="pod, deploy, sts, ds or job")],
    name: Annotated[str, typer.Argument(help="Resource name")],
    namespace: NamespaceOpt = "default",
    container: Annotated[
        str | None,
        typer.Option("--container", "-c", help="Only this container (default: all)"),
    ] = None,
) -> None:
    """
    Follow logs of a pod or of all pods of a workload.

    Examples:
        kubeintel term logs pod web-0 -n shop
        kubeintel term logs deploy web -n shop -c app
    """
    cli = get_cli_context(ctx)
    ops = cli.interactive()
    _report(cli, ops.stream_logs(ResourceType.parse(kind), name, namespace, container))


@term_app.command()
@with_error_handling
def events(
    ctx: typer.Context,
    kind: Annotated[str, typer.Argument(help="Resource type")],
    name: Annotated[str, typer.Argument(help="Resource name")],
    namespace: Annotated[
        str,
        typer.Option("--namespace", "-n", help="Namespace, or 'all' for every namespace"),
    ] = "default",
) -> None:
    """Show events involving an object in a terminal window."""
    cli = get_cli_context(ctx)
    ops = cli.interactive()
    _report(
        cli,
        ops.watch_events(ResourceType.parse(kind), name, NamespaceSelector.parse(namespace)),
    )


@term_app.command("cluster-info")
@with_error_handling
def cluster_info(ctx: typer.Context) -> None:
    """Show control plane and core service addresses."""
    cli = get_cli_context(ctx)
    _report(cli, cli.interactive().cluster_info())
