"""
worktree-manager - Git worktrees from GitHub issues
"""

from .__version__ import __version__
from .core import WorktreeOrchestrator
from .cli.main import main

__all__ = ["WorktreeOrchestrator", "main", "__version__"]
