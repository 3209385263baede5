"""Data models for worktree-manager."""

from .issue import IssueReference, IssueDetails, parse_issue_url
from .worktree import (
    WorktreeRecord,
    WorktreePlan,
    WorktreeResult,
    StepError,
    StepOutcome,
    SkippedWorktree,
    CleanupResult,
)

__all__ = [
    "IssueReference",
    "IssueDetails",
    "parse_issue_url",
    "WorktreeRecord",
    "WorktreePlan",
    "WorktreeResult",
    "StepError",
    "StepOutcome",
    "SkippedWorktree",
    "CleanupResult",
]
