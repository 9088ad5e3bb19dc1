"""Main CLI application module.

Command Groups:
- list, get, delete, events, scale, restart, namespaces, kinds: API client
- nodes: node inspection
- term: interactive kubectl sessions in a new terminal window
- secrets: OS credential store
"""

from pathlib import Path
from typing import Annotated

import typer

from .commands import (
    delete,
    events,
    get,
    kinds,
    list_resources,
    namespaces,
    nodes_app,
    restart,
    scale,
    secrets_app,
    term_app,
)
from .console import configure_logging, console
from .context import build_cli_context

app = typer.Typer(
    help="☸️  kubeintel - Kubernetes resource gateway",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    kubeconfig: Annotated[
        Path | None,
        typer.Option("--kubeconfig", help="Path to the kubeconfig file"),
    ] = None,
    context: Annotated[
        str | None,
        typer.Option("--context", help="Kubeconfig context to use"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    try:
        cli = build_cli_context(kubeconfig=kubeconfig, context_name=context)
    except ValueError as e:
        configure_logging("DEBUG" if verbose else "INFO")
        console.handle_error("Invalid configuration", str(e))
    configure_logging("DEBUG" if verbose else cli.config.log_level)
    ctx.obj = cli


app.command("list")(list_resources)
app.command()(get)
app.command()(delete)
app.command()(events)
app.command()(scale)
app.command()(restart)
app.command()(namespaces)
app.command()(kinds)

app.add_typer(nodes_app, name="nodes")
app.add_typer(term_app, name="term")
app.add_typer(secrets_app, name="secrets")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
