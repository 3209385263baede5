"""Worktree record formatting utilities."""

from worktree_manager.constants import WorktreeStatus
from worktree_manager.models.worktree import WorktreeRecord


def get_worktree_status(record: WorktreeRecord) -> str:
    """
    Determine the display status of a worktree record.

    Args:
        record: Worktree registry entry

    Returns:
        WorktreeStatus constant (main, locked, prunable or active)
    """
    if record.is_main:
        return WorktreeStatus.MAIN
    if record.is_locked:
        return WorktreeStatus.LOCKED
    if record.is_prunable:
        return WorktreeStatus.PRUNABLE
    return WorktreeStatus.ACTIVE


def format_commit(sha: str, length: int = 8) -> str:
    """Shorten a commit hash for display."""
    return sha[:length] if sha else "-"


def format_branch(record: WorktreeRecord) -> str:
    """Branch name, or a marker for detached HEAD."""
    if record.branch:
        return record.branch
    return "(detached)" if record.is_detached else "-"


def format_notes(record: WorktreeRecord) -> str:
    """Lock and prune reasons reported by git."""
    notes = []
    if record.lock_reason:
        notes.append(f"locked: {record.lock_reason}")
    if record.prunable_reason:
        notes.append(f"prunable: {record.prunable_reason}")
    return "; ".join(notes)
