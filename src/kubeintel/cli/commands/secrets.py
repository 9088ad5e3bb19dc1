"""Secret store commands."""

from typing import Annotated

import typer

from ..console import with_error_handling
from ..context import get_cli_context

secrets_app = typer.Typer(help="🔐 Manage secrets in the OS credential store")

KeyArg = Annotated[str, typer.Argument(help="Secret key")]


@secrets_app.command("set")
@with_error_handling
def set_secret(
    ctx: typer.Context,
    key: KeyArg,
    value: Annotated[
        str,
        typer.Option(prompt=True, hide_input=True, help="Secret value"),
    ],
) -> None:
    """Store a secret, replacing any previous value."""
    cli = get_cli_context(ctx)
    cli.secret_store().put(key, value)
    cli.console.ok(f"Stored secret '{key}'")


@secrets_app.command("get")
@with_error_handling
def get_secret(
    ctx: typer.Context,
    key: KeyArg,
    reveal: Annotated[
        bool, typer.Option("--reveal", help="Print the value instead of masking it")
    ] = False,
) -> None:
    """Read a secret."""
    cli = get_cli_context(ctx)
    value = cli.secret_store().get(key)
    cli.console.print(value if reveal else "*" * min(len(value), 12))


@secrets_app.command("remove")
@with_error_handling
def remove_secret(
    ctx: typer.Context,
    key: KeyArg,
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove a secret."""
    cli = get_cli_context(ctx)
    if not cli.console.confirm_action(f"Remove secret '{key}'", force=force):
        raise typer.Exit(0)
    cli.secret_store().delete(key)
    cli.console.ok(f"Removed secret '{key}'")
