"""Formatting utilities for worktree-manager.

This package provides formatting functions for displaying results:
- worktree: worktree registry entries
- results: create and cleanup results
"""

# Worktree formatters
from .worktree import get_worktree_status, format_commit, format_branch, format_notes

# Result formatters
from .results import (
    describe_step_error,
    format_create_summary,
    format_completed_steps,
    format_cleanup_lines,
)

__all__ = [
    # Worktree
    "get_worktree_status",
    "format_commit",
    "format_branch",
    "format_notes",
    # Results
    "describe_step_error",
    "format_create_summary",
    "format_completed_steps",
    "format_cleanup_lines",
]
