"""Tests for result and worktree formatting"""
import io

from worktree_manager.constants import Step, WorktreeStatus
from worktree_manager.formatters import (
    describe_step_error,
    format_branch,
    format_cleanup_lines,
    format_commit,
    format_create_summary,
    format_notes,
    get_worktree_status,
)
from worktree_manager.models.worktree import (
    CleanupResult,
    SkippedWorktree,
    StepError,
    WorktreeRecord,
    WorktreeResult,
)
from worktree_manager.services.display_service import DisplayService


class TestWorktreeFormatting:
    """Test formatting of registry entries."""

    def test_status_precedence(self):
        """Test that main wins over locked, and locked over prunable."""
        assert get_worktree_status(WorktreeRecord("/r", "main", "a", is_main=True)) == WorktreeStatus.MAIN
        locked = WorktreeRecord("/t", "x", "a", is_locked=True, is_prunable=True)
        assert get_worktree_status(locked) == WorktreeStatus.LOCKED
        assert get_worktree_status(WorktreeRecord("/t", "x", "a", is_prunable=True)) == WorktreeStatus.PRUNABLE
        assert get_worktree_status(WorktreeRecord("/t", "x", "a")) == WorktreeStatus.ACTIVE

    def test_format_commit(self):
        assert format_commit("0123456789abcdef") == "01234567"
        assert format_commit("") == "-"

    def test_format_branch_detached(self):
        assert format_branch(WorktreeRecord("/t", "", "a", is_detached=True)) == "(detached)"

    def test_format_notes(self):
        record = WorktreeRecord("/t", "x", "a", lock_reason="usb", prunable_reason="gone")
        assert format_notes(record) == "locked: usb; prunable: gone"


class TestResultFormatting:
    """Test create and cleanup summaries."""

    def test_failed_create_names_step(self, issue_ref):
        """Test that a failed run reports which step failed."""
        result = WorktreeResult(
            success=False,
            issue_reference=issue_ref,
            error=StepError(Step.CREATING_WORKTREE, "GitError", "branch already checked out"),
        )
        assert format_create_summary(result) == (
            "Could not create worktree: worktree creation failed: branch already checked out"
        )

    def test_successful_create_with_advisory(self, issue_ref):
        result = WorktreeResult(success=True, issue_reference=issue_ref, path="/trees/widgets-issue-42")
        result.advisories.append(StepError(Step.INSTALLING_DEPS, "InstallError", "exit code 1"))
        assert format_create_summary(result) == (
            "Worktree created at /trees/widgets-issue-42, but dependency install failed: exit code 1"
        )

    def test_describe_step_error(self):
        error = StepError(Step.LAUNCHING_TERMINAL, "TerminalLaunchError", "not installed")
        assert describe_step_error(error) == "terminal launch failed: not installed"

    def test_cleanup_nothing(self):
        assert format_cleanup_lines(CleanupResult(pruned=True)) == ["No worktrees to clean"]

    def test_cleanup_lines(self):
        """Test removed and skipped listings."""
        result = CleanupResult(
            removed=["/trees/a"],
            skipped=[SkippedWorktree("/trees/b", "not prunable")],
            pruned=False,
        )
        assert format_cleanup_lines(result) == [
            "Removed 1 worktree(s):",
            "  - /trees/a",
            "Skipped 1 worktree(s):",
            "  - /trees/b (not prunable)",
            "Warning: git worktree prune failed",
        ]


class TestDisplayService:
    def test_table_contains_records(self):
        """Test that list output shows branches and statuses."""
        stream = io.StringIO()
        DisplayService(stream=stream).display_worktree_table([
            WorktreeRecord("/repo", "main", "a" * 40, is_main=True),
            WorktreeRecord("/t/x", "feat", "b" * 40, is_locked=True, lock_reason="usb"),
        ])
        output = stream.getvalue()
        assert "feat" in output
        assert "locked" in output
        assert "aaaaaaaa" in output

    def test_empty_table(self):
        stream = io.StringIO()
        DisplayService(stream=stream).display_worktree_table([])
        assert "No worktrees found" in stream.getvalue()
