#!/usr/bin/env python3
"""
Developer Cleaner

An interactive tool that finds node_modules directories below a workspace
root, filters them by the year they were last modified, shows how much space
they take and deletes them after confirmation.

A node_modules nested inside another node_modules belongs to its parent
install and is never listed on its own.

Usage:
    devcleaner                         # Ask for a root and a year
    devcleaner ~/Developer             # Scan a specific root
    devcleaner ~/Developer --year 2022 # Only node_modules from 2022 and earlier
    devcleaner --dry-run               # List findings without deleting
    devcleaner --config my.toml        # Override defaults from devcleaner.toml
"""

import argparse
import datetime
import pathlib
import sys
from typing import Optional

from rich.markup import escape

from auxiliary import format_path_for_display
from cleaner_errors import ConfigError, InvalidInput, PathNotFound
from console_ui import ConsoleUI
from devcleaner_config import CleanerConfig, ConfigManager
from file_operations import BatchSummary, DeletionOutcome, FileOperations, directory_size
from node_scanner import ALL_YEARS, YearBound
from node_selector import (
    CUSTOM_YEAR,
    Action,
    ScanRequest,
    SizedMatch,
    candidate_roots,
    parse_year,
    plan_action,
    resolve_year_bound,
    select_matches,
    size_matches,
    total_known_size,
    validate_root_input,
    year_choices,
)

# ---------------------------------------------------------------------------
# DevCleaner
# ---------------------------------------------------------------------------


class DevCleaner:
    """Main application class for the node_modules cleanup tool."""

    def __init__(
        self,
        args: argparse.Namespace,
        config: Optional[CleanerConfig] = None,
        ui: Optional[ConsoleUI] = None,
        file_operations: Optional[FileOperations] = None,
        timezone: Optional[datetime.tzinfo] = None,
    ):
        self.args = args
        self.config = config or CleanerConfig()
        self.ui = ui or ConsoleUI()
        self.file_operations = file_operations or FileOperations()
        self.timezone = timezone
        self.current_year = datetime.date.today().year

    # -- root and year -------------------------------------------------------

    def resolve_root(self) -> str:
        path = getattr(self.args, "path", None)
        if path is not None:
            return validate_root_input(path)

        for root in candidate_roots(self.config.candidate_roots):
            question = f"Search for {self.config.target_name} in {escape(format_path_for_display(root))}?"
            if self.ui.confirm(question, default=True):
                return root

        while True:
            answer = self.ui.prompt(
                f"Which directory should be searched for {self.config.target_name}?", default=self.config.default_root
            )
            try:
                return validate_root_input(answer)
            except InvalidInput as e:
                self.ui.print_error(str(e))

    def _choice_label(self, choice: str) -> str:
        if choice == ALL_YEARS:
            return f"All {self.config.target_name}"
        if choice == CUSTOM_YEAR:
            return "Custom year"
        return f"Only {choice} and earlier"

    def resolve_year(self) -> YearBound:
        year = getattr(self.args, "year", None)
        if year is not None:
            return resolve_year_bound(year, self.current_year, self.config.min_year)

        choices = year_choices(self.current_year, self.config.recent_years)
        self.ui.console.print()
        self.ui.print_info(f"Which {self.config.target_name} do you want to clean?")
        for choice in choices:
            self.ui.console.print(f"  [cyan]{choice:>6}[/cyan]  {self._choice_label(choice)}")

        selected = self.ui.prompt("Selection", default=ALL_YEARS, choices=choices)
        if selected != CUSTOM_YEAR:
            return resolve_year_bound(selected, self.current_year, self.config.min_year)

        while True:
            answer = self.ui.prompt(f"Enter the year (for example, {self.current_year - 1})")
            try:
                return parse_year(answer, self.current_year, self.config.min_year)
            except InvalidInput as e:
                self.ui.print_error(str(e))

    # -- scanning ------------------------------------------------------------

    def _warn(self, error: Exception):
        if isinstance(error, PathNotFound):
            self.ui.print_warning(f"Path not found: {escape(str(error))}")
        else:
            self.ui.print_warning(f"Skipped unreadable directory: {escape(str(error))}")

    def scan(self, request: ScanRequest) -> list[SizedMatch]:
        bound = "" if request.year_bound == ALL_YEARS else f" from {request.year_bound} and earlier"
        where = escape(format_path_for_display(request.root_path))
        self.ui.print_warning(f"\nSearching for {self.config.target_name}{bound} in {where}...")

        progress = self.ui.create_activity_progress()
        with progress:
            task = progress.add_task("Scanning...", total=None)
            result = select_matches(
                request,
                target_name=self.config.target_name,
                timezone=self.timezone,
                on_warning=self._warn,
                progress_callback=lambda n: progress.update(task, description=f"Scanning... {n} dirs"),
            )
            progress.update(task, description=f"Scan complete - {result.dirs_scanned} dirs")

        if not result.matches:
            return []

        probe_mode = self.config.size_mode
        progress = self.ui.create_progress()
        with progress:
            task = progress.add_task("Measuring...", total=len(result.matches))
            sized = size_matches(
                result.matches,
                probe=lambda path: directory_size(path, probe_mode),
                progress_callback=lambda _item: progress.advance(task),
            )
        return sized

    # -- deletion ------------------------------------------------------------

    def _print_start(self, path: str):
        self.ui.console.print(f"Deleting [cyan]{escape(format_path_for_display(path))}[/cyan]... ", end="")

    def _print_outcome(self, outcome: DeletionOutcome):
        if outcome.succeeded:
            self.ui.console.print("[green]OK[/green]")
        else:
            self.ui.console.print("[red]ERROR[/red]")

    def delete(self, sized: list[SizedMatch]) -> BatchSummary:
        self.ui.print_warning(f"\nDeleting {self.config.target_name} directories...\n")

        summary = self.file_operations.execute_batch_deletions(
            [(s.path, s.size) for s in sized],
            on_start=self._print_start,
            on_outcome=self._print_outcome,
        )

        failed = [(o.path, o.error_message or "unknown error") for o in summary.failed]
        self.ui.show_deletion_summary(len(summary.succeeded), summary.total_reclaimed, failed)
        return summary

    # -- main entry point ----------------------------------------------------

    def run(self) -> int:
        self.ui.print_header("Developer Cleaner", "A tool for cleaning up old node_modules")

        root = self.resolve_root()
        year_bound = self.resolve_year()
        request = ScanRequest(root_path=root, year_bound=year_bound, min_year=self.config.min_year)
        self.ui.show_configuration(
            {"Root": format_path_for_display(root), "Year": year_bound, **self.config.to_display()}
        )

        sized = self.scan(request)
        action = plan_action(sized, dry_run=getattr(self.args, "dry_run", False))

        if action is Action.NOTHING:
            self.ui.print_error(f"No {self.config.target_name} directories found.")
            return 0

        self.ui.console.print()
        self.ui.show_matches(sized, total_known_size(sized), self.config.target_name)

        if action is Action.LIST:
            self.ui.print_info("\nDry run - no directories were deleted")
            return 0

        self.ui.console.print()
        if not self.ui.confirm(f"Delete these {self.config.target_name} directories?", default=False):
            self.ui.print_info("\nOperation cancelled. No directories were deleted.")
            return 0

        self.delete(sized)
        return 0


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devcleaner",
        description="Developer Cleaner: find and delete old node_modules directories",
    )
    parser.add_argument("path", nargs="?", help="Directory to scan (asked interactively if omitted)")
    parser.add_argument("--year", default=None, help="'all' or the last year to include, e.g. 2022")
    parser.add_argument("--dry-run", action="store_true", help="List findings without deleting anything")
    parser.add_argument("--config", type=pathlib.Path, default=None, help="TOML file overriding devcleaner.toml")
    return parser


def main(argv: Optional[list[str]] = None, ui: Optional[ConsoleUI] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    ui = ui or ConsoleUI()

    try:
        config = ConfigManager(args.config).load()
        app = DevCleaner(args, config=config, ui=ui)
        return app.run()
    except ConfigError as e:
        ui.print_error(f"Configuration error: {escape(str(e))}")
        return 1
    except InvalidInput as e:
        ui.print_error(f"Invalid input '{escape(e.value)}': {e.reason}")
        return 1
    except KeyboardInterrupt:
        ui.print_warning("\nInterrupted.")
        return 1
    except Exception as e:
        ui.print_error(f"Error: {escape(str(e))}")
        return 1


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
