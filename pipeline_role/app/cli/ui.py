"""Console helpers for the pipeline-role CLI."""

import importlib.metadata
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich import box

try:
    VERSION = importlib.metadata.version("pipeline-role-mapper")
except importlib.metadata.PackageNotFoundError:
    VERSION = "0.0.0.dev"

console = Console()
err_console = Console(stderr=True)

ICONS = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "arrow": "→",
    "check": "✓",
    "cross": "✗",
    "dot": "•",
}


def configure_logging(verbose: bool = False):
    # Logs go to stderr; stdout carries workflow commands.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_success(message: str):
    """Print a success message."""
    console.print(f"[green]{ICONS['success']} {message}[/green]")


def print_error(message: str):
    """Print an error message."""
    console.print(f"[red]{ICONS['error']} {message}[/red]")


def create_resolution_table(summary: dict) -> Table:
    table = Table(title="Resolved pipeline role", box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")

    table.add_row("Repository", summary["repository"])
    table.add_row("Ref", summary["ref"])
    table.add_row("Mapping", summary["mapping"])
    table.add_row("Role ARN", f"[green]{summary['role_arn']}[/green]")
    table.add_row("Account ID", summary["account_id"] or "[dim]unknown[/dim]")
    roles = "\n".join(
        f"{ICONS['dot']} {account} {ICONS['arrow']} {arn}"
        for account, arn in summary["roles"].items()
    )
    table.add_row("Available roles", roles or "[dim]none[/dim]")
    return table
