"""Version information for worktree-manager."""

__version__ = "1.0.0"
