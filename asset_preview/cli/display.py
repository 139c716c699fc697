"""Display components for CLI using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from asset_preview.models.assets import CacheStats, RefreshOutcome

console = Console()


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_info(title: str, message: str) -> None:
    """Display an info message."""
    console.print()
    console.print(
        Panel(
            escape(message),
            title=f"[bold]{escape(title)}[/]",
            border_style="blue",
        )
    )


def show_stats(stats: CacheStats, outcomes: list[RefreshOutcome] | None = None) -> None:
    """Display mapping statistics after a reload.

    Args:
        stats: Aggregate cache statistics.
        outcomes: Remote fetch outcomes from the reload.
    """
    console.print()
    table = Table(title="[bold]Asset Mappings[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Total Entries", str(stats.total))
    table.add_row("Workspaces", str(stats.workspaces))
    table.add_row("Activity ID", escape(stats.activity_id) if stats.activity_id else "[dim]none[/]")
    table.add_row(
        "Last Update",
        stats.last_update.strftime("%Y-%m-%d %H:%M:%S") if stats.last_update else "[dim]never[/]",
    )

    for outcome in outcomes or []:
        table.add_section()
        if outcome.success:
            table.add_row("Remote", f"[green]OK[/] ({outcome.entries} entries)")
        else:
            table.add_row("Remote", f"[red]FAILED[/] {escape(outcome.error or 'unknown error')}")

    failed = any(not outcome.success for outcome in outcomes or [])
    console.print(Panel(table, border_style="red" if failed else "green"))
