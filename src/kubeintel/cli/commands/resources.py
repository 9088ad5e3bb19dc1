"""Resource commands backed by the API client.

These commands talk to the API server directly through the gateway and
print results with rich.
"""

from typing import Annotated

import typer
import yaml
from rich.syntax import Syntax
from rich.table import Table

from kubeintel.infra.k8s import (
    NamespaceSelector,
    ResourceEnvelope,
    ResourceType,
    lookup,
    run_sync,
)
from kubeintel.infra.k8s.registry import all_kinds

from ..console import CLIConsole, with_error_handling
from ..context import get_cli_context

# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

KindArg = Annotated[
    str,
    typer.Argument(help="Resource type, e.g. pod, deploy, sts, svc, node"),
]
NameArg = Annotated[str, typer.Argument(help="Resource name")]
NamespaceOpt = Annotated[
    str,
    typer.Option("--namespace", "-n", help="Namespace of the resource"),
]
ForceOpt = Annotated[
    bool,
    typer.Option("--force", "-f", help="Skip the confirmation prompt"),
]


def _namespace_cell(envelope: ResourceEnvelope) -> str:
    return envelope.namespace or "[dim]-[/dim]"


def _render_list(
    console: CLIConsole, title: str, envelopes: list[ResourceEnvelope]
) -> None:
    if not envelopes:
        console.info(f"No {title} found")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Namespace")
    table.add_column("Created", style="dim")
    for envelope in sorted(envelopes, key=lambda e: (e.namespace or "", e.name)):
        created = envelope.resource.metadata.get("creationTimestamp", "")
        table.add_row(envelope.name, _namespace_cell(envelope), str(created))
    console.print(table)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@with_error_handling
def list_resources(
    ctx: typer.Context,
    kind: KindArg,
    namespace: Annotated[
        str,
        typer.Option(
            "--namespace",
            "-n",
            help="Namespace to list in, or 'all' for every namespace",
        ),
    ] = "all",
) -> None:
    """
    List every object of a resource type.

    Examples:
        kubeintel list pods -n default
        kubeintel list deploy
        kubeintel list nodes
    """
    cli = get_cli_context(ctx)
    resource_type = ResourceType.parse(kind)
    envelopes = run_sync(
        cli.gateway.list(
            cli.cluster_context(), resource_type, NamespaceSelector.parse(namespace)
        )
    )
    _render_list(cli.console, lookup(resource_type).plural, envelopes)


@with_error_handling
def get(
    ctx: typer.Context,
    kind: KindArg,
    name: NameArg,
    namespace: NamespaceOpt = "default",
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Output format: yaml or json"),
    ] = "yaml",
) -> None:
    """
    Show one object as YAML or JSON.

    Examples:
        kubeintel get deploy web -n shop
        kubeintel get node worker-1 -o json
    """
    cli = get_cli_context(ctx)
    envelope = run_sync(
        cli.gateway.get(cli.cluster_context(), ResourceType.parse(kind), namespace, name)
    )
    if output == "json":
        cli.console.print(Syntax(envelope.to_json(), "json"))
    else:
        text = yaml.safe_dump(envelope.unwrap(), sort_keys=False)
        cli.console.print(Syntax(text, "yaml"))


@with_error_handling
def delete(
    ctx: typer.Context,
    kind: KindArg,
    name: NameArg,
    namespace: NamespaceOpt = "default",
    force: ForceOpt = False,
) -> None:
    """
    Delete one object with foreground propagation.

    Examples:
        kubeintel delete pod web-0 -n shop
        kubeintel delete cm settings -n shop --force
    """
    cli = get_cli_context(ctx)
    resource_type = ResourceType.parse(kind)
    meta = lookup(resource_type)
    where = f" in namespace '{namespace}'" if meta.namespaced else ""
    if not cli.console.confirm_action(
        f"Delete {meta.cli_name} '{name}'{where}", force=force
    ):
        raise typer.Exit(0)

    with cli.console.status(f"[bold red]Deleting {meta.cli_name}/{name}..."):
        run_sync(
            cli.gateway.delete(cli.cluster_context(), resource_type, namespace, name)
        )
    cli.console.ok(f"Deleted {meta.cli_name}/{name}")


@with_error_handling
def events(
    ctx: typer.Context,
    kind: KindArg,
    name: NameArg,
    namespace: NamespaceOpt = "default",
) -> None:
    """
    Show events involving one object.

    Examples:
        kubeintel events pod web-0 -n shop
        kubeintel events node worker-1
    """
    cli = get_cli_context(ctx)
    resource_type = ResourceType.parse(kind)
    found = run_sync(
        cli.gateway.list_events(
            cli.cluster_context(),
            resource_type,
            NamespaceSelector.parse(namespace),
            name,
        )
    )
    if not found:
        cli.console.info(f"No events for {lookup(resource_type).cli_name}/{name}")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Last seen", style="dim")
    table.add_column("Type")
    table.add_column("Reason", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Message")
    for event in sorted(found, key=lambda e: e.lastTimestamp or e.eventTime or ""):
        kind_style = "yellow" if event.type == "Warning" else "green"
        table.add_row(
            event.lastTimestamp or event.eventTime or "",
            f"[{kind_style}]{event.type or ''}[/{kind_style}]",
            event.reason or "",
            str(event.count or 1),
            event.message or "",
        )
    cli.console.print(table)


@with_error_handling
def scale(
    ctx: typer.Context,
    kind: KindArg,
    name: NameArg,
    current: Annotated[
        int,
        typer.Option("--current-replicas", help="Replica count you expect right now"),
    ],
    replicas: Annotated[int, typer.Option("--replicas", help="Desired replica count")],
    namespace: NamespaceOpt = "default",
) -> None:
    """
    Scale a Deployment or StatefulSet, guarded by its current replica count.

    Fails without changing anything when the live replica count no longer
    matches --current-replicas.

    Examples:
        kubeintel scale deploy web -n shop --current-replicas 2 --replicas 4
    """
    cli = get_cli_context(ctx)
    resource_type = ResourceType.parse(kind)
    run_sync(
        cli.mutations.scale(
            cli.cluster_context(), resource_type, namespace, name, current, replicas
        )
    )
    cli.console.ok(
        f"Scaled {lookup(resource_type).cli_name}/{name} from {current} to {replicas}"
    )


@with_error_handling
def restart(
    ctx: typer.Context,
    kind: KindArg,
    name: NameArg,
    namespace: NamespaceOpt = "default",
    force: ForceOpt = False,
) -> None:
    """
    Trigger a rolling restart of a Deployment, StatefulSet or DaemonSet.

    Examples:
        kubeintel restart deploy web -n shop
    """
    cli = get_cli_context(ctx)
    resource_type = ResourceType.parse(kind)
    meta = lookup(resource_type)
    if not cli.console.confirm_action(
        f"Restart {meta.cli_name} '{name}' in namespace '{namespace}'", force=force
    ):
        raise typer.Exit(0)

    restarted_at = run_sync(
        cli.mutations.restart(cli.cluster_context(), resource_type, namespace, name)
    )
    cli.console.ok(f"Restarted {meta.cli_name}/{name} at {restarted_at}")


@with_error_handling
def namespaces(ctx: typer.Context) -> None:
    """List namespace names."""
    cli = get_cli_context(ctx)
    for name in run_sync(cli.gateway.list_namespaces(cli.cluster_context())):
        cli.console.print(name)


@with_error_handling
def kinds(ctx: typer.Context) -> None:
    """List supported resource types and what they support."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("Short names")
    table.add_column("Scope")
    table.add_column("Scale", justify="center")
    table.add_column("Restart", justify="center")
    table.add_column("Logs", justify="center")
    table.add_column("Delete", justify="center")

    def mark(flag: bool) -> str:
        return "[green]✓[/green]" if flag else "[dim]-[/dim]"

    for kind in all_kinds():
        meta = lookup(kind)
        table.add_row(
            meta.cli_name,
            ", ".join(meta.short_names),
            meta.scope.value,
            mark(meta.supports_scale),
            mark(meta.supports_restart),
            mark(meta.supports_logs),
            mark(meta.supports_delete),
        )
    get_cli_context(ctx).console.print(table)


# ---------------------------------------------------------------------------
# Node commands
# ---------------------------------------------------------------------------

nodes_app = typer.Typer(help="Node inspection commands", no_args_is_help=True)


@nodes_app.command("pods")
@with_error_handling
def node_pods(
    ctx: typer.Context,
    node: Annotated[str, typer.Argument(help="Node name")],
) -> None:
    """
    List pods scheduled onto a node.

    Examples:
        kubeintel nodes pods worker-1
    """
    cli = get_cli_context(ctx)
    envelopes = run_sync(cli.gateway.list_pods_on_node(cli.cluster_context(), node))
    _render_list(cli.console, f"pods on {node}", envelopes)
