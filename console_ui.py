#!/usr/bin/env python3
"""
Console UI Module using Rich

Provides the console interface for devcleaner: styled messages, the banner,
progress displays, the match table, the deletion summary and interactive
prompts.
"""

from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.prompt import Confirm, Prompt
from rich.table import Table

from auxiliary import format_bytes, format_date, format_path_for_display


class ConsoleUI:
    """Console UI handler using Rich"""

    def __init__(self, force_terminal: Optional[bool] = None, console: Optional[Console] = None):
        """Initialize console with optional terminal forcing or an existing Console"""
        self.console = console or Console(force_terminal=force_terminal, highlight=False)

    # Basic styled output methods
    def print_success(self, message: str):
        """Print success message in green"""
        self.console.print(message, style="green")

    def print_error(self, message: str):
        """Print error message in red"""
        self.console.print(message, style="red bold")

    def print_warning(self, message: str):
        """Print warning message in yellow"""
        self.console.print(message, style="yellow")

    def print_info(self, message: str):
        """Print info message in cyan"""
        self.console.print(message, style="cyan")

    def print_header(self, title: str, subtitle: Optional[str] = None):
        """Print a header with optional subtitle"""
        if subtitle:
            header_text = f"[bold]{title}[/bold]\n[dim]{subtitle}[/dim]"
        else:
            header_text = f"[bold]{title}[/bold]"

        panel = Panel(header_text, box=box.ROUNDED, padding=(0, 1), style="green")
        self.console.print(panel)

    def show_configuration(self, config: dict[str, Any]):
        """Display settings in a two-column table"""
        table = Table(show_header=False, box=box.SIMPLE)
        table.add_column("Setting", style="cyan dim", min_width=16, justify="right")
        table.add_column("Value", style="cyan", min_width=30)

        for key, value in config.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            table.add_row(key, escape(str(value)))

        self.console.print(table)

    # Progress bar management
    def create_progress(self):
        """Create a Rich progress context manager for batch operations"""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TextColumn("({task.completed}/{task.total})"),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )

    def create_activity_progress(self):
        """Create a Rich progress context manager for activity-only display (no counts)"""
        return Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
        )

    # Result displays
    def show_matches(self, matches: list, total_size: int, label: str = "node_modules"):
        """Show sized matches as a numbered table

        Args:
            matches: Items with path, modified_at and size attributes
            total_size: Sum of the known sizes
            label: Name of the matched directories for the title
        """
        table = Table(title=f"Found {len(matches)} {label} directories", box=box.ROUNDED)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Path", style="cyan")
        table.add_column("Modified", style="dim", justify="center")
        table.add_column("Size", style="yellow", justify="right")

        for i, item in enumerate(matches, 1):
            table.add_row(
                str(i),
                escape(format_path_for_display(item.path)),
                format_date(item.modified_at),
                format_bytes(item.size),
            )

        self.console.print(table)
        unknown = sum(1 for item in matches if item.size is None)
        note = f" ({unknown} of unknown size)" if unknown else ""
        self.print_info(f"Total: {format_bytes(total_size)}{note}")

    def show_deletion_summary(self, succeeded: int, reclaimed: int, failed: list[tuple[str, str]]):
        """Show summary of a deletion batch"""
        self.console.print()
        self.print_success(f"✓ Deleted: {succeeded} directories, reclaimed {format_bytes(reclaimed)}")

        if failed:
            self.print_error(f"✗ Failed: {len(failed)} directories")
            for path, error in failed:
                self.console.print(f"[red dim]  • {escape(format_path_for_display(path))}: {escape(error)}[/red dim]")

    # Interactive prompts
    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask for yes/no confirmation"""
        return Confirm.ask(question, default=default, console=self.console)

    def prompt(self, question: str, default: Optional[str] = None, choices: Optional[list[str]] = None) -> str:
        """Ask for text input with optional default and choices"""
        return Prompt.ask(question, default=default, choices=choices, console=self.console)
