"""Display service for worktree results"""
from typing import List, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from worktree_manager.constants import STATUS_COLORS
from worktree_manager.formatters import (
    describe_step_error,
    format_branch,
    format_cleanup_lines,
    format_commit,
    format_completed_steps,
    format_create_summary,
    format_notes,
    get_worktree_status,
)
from worktree_manager.models.worktree import CleanupResult, WorktreeRecord, WorktreeResult


class DisplayService:
    def __init__(self, stream: Optional[TextIO] = None, debug: bool = False):
        self.console = Console(file=stream, highlight=False)
        self.debug_mode = debug

    def display_worktree_table(self, records: List[WorktreeRecord]) -> None:
        """Display a table of worktree registry entries."""
        if not records:
            self.console.print("No worktrees found")
            return

        table = Table()
        table.add_column("Status")
        table.add_column("Branch")
        table.add_column("Path")
        table.add_column("Commit")
        table.add_column("Notes")

        for record in records:
            status = get_worktree_status(record)
            table.add_row(
                status,
                escape(format_branch(record)),
                escape(record.path),
                format_commit(record.head_commit),
                escape(format_notes(record)),
                style=STATUS_COLORS.get(status),
            )

        self.console.print(table)

    def display_create_result(self, result: WorktreeResult) -> None:
        """Display the outcome of a create run."""
        summary = escape(format_create_summary(result))
        if not result.success:
            self.console.print(f"[red]✗ {summary}[/red]")
            self.console.print(f"Steps completed: {format_completed_steps(result)}")
            if result.path:
                self.console.print(f"Planned path: {escape(result.path)}")
            return

        color = "yellow" if result.advisories else "green"
        self.console.print(f"[{color}]✓ {summary}[/{color}]")
        self.console.print(f"  Branch: {escape(result.branch_name or '')}")
        self.console.print(f"  Path:   {escape(result.path or '')}")
        self.console.print(f"  Issue:  {escape(result.issue_reference.source_url)}")
        for advisory in result.advisories:
            self.console.print(f"  [yellow]⚠ {escape(describe_step_error(advisory))}[/yellow]")
        if self.debug_mode:
            self.console.print(f"  Steps:  {format_completed_steps(result)}")

    def display_cleanup_result(self, result: CleanupResult) -> None:
        """Display the outcome of a cleanup run."""
        color = "green" if result.success else "yellow"
        for line in format_cleanup_lines(result):
            self.console.print(f"[{color}]{escape(line)}[/{color}]")

    def display_error(self, message: str) -> None:
        self.console.print(f"[red]Error: {escape(message)}[/red]")

    def display_info(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")
