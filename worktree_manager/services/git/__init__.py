"""Git-related services for worktree-manager."""

from .bridge import GitCommandBridge
from .worktrees import WorktreeService, parse_worktree_porcelain
from .github import GitHubService

__all__ = [
    "GitCommandBridge",
    "WorktreeService",
    "GitHubService",
    "parse_worktree_porcelain",
]
