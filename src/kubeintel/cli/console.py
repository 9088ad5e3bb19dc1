"""Rich console wrapper and error rendering for CLI commands."""

import sys
from collections.abc import Callable
from functools import wraps

import typer
from loguru import logger
from rich.console import Console, ConsoleRenderable
from rich.panel import Panel
from rich.status import Status

from kubeintel.infra.k8s.errors import ConflictError, GatewayError


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def status(self, status: str) -> Status:
        return self.console.status(status)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def confirm_action(
        self,
        action: str,
        details: str | None = None,
        force: bool = False,
    ) -> bool:
        """Prompt user to confirm a destructive action.

        Args:
            action: Description of the action (e.g., "Delete pod web-0")
            details: Additional details about what will be affected
            force: If True, skip the confirmation prompt

        Returns:
            True if the user confirmed, False otherwise
        """
        if force:
            return True

        body = f"[bold red]⚠️  {action}[/bold red]"
        if details:
            body += f"\n\n{details}"
        self.console.print(Panel(body, title="Confirmation Required", border_style="red"))

        try:
            response = self.console.input(
                "\n[bold]Are you sure you want to proceed?[/bold] \\[y/N]: "
            )
            return response.strip().lower() in ("y", "yes")
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[dim]Cancelled.[/dim]")
            return False

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Print an error message and exit.

        Raises:
            typer.Exit: Always, with ``exit_code``
        """
        self.console.print(f"\n[bold red]❌ {message}[/bold red]\n")
        if details:
            self.console.print(Panel(details, title="Details", border_style="red"))
        raise typer.Exit(exit_code)


console = CLIConsole()

# Exit codes distinguish a stale precondition from other failures
EXIT_ERROR = 1
EXIT_CONFLICT = 3


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Decorator rendering gateway and configuration errors consistently."""

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except ConflictError as e:
            console.handle_error(e.message, e.details, exit_code=EXIT_CONFLICT)
        except GatewayError as e:
            logger.debug(f"{type(e).__name__}: {e.message}")
            console.handle_error(e.message, e.details)
        except ValueError as e:
            console.handle_error("Invalid input", str(e))
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


def configure_logging(level: str) -> None:
    """Send loguru output to stderr at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="<level>{level: <8}</level> {message}")
