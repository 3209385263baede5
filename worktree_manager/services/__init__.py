"""Services used by the worktree orchestrator."""

from .branch_namer import BranchNamer, ClaudeNamingAssistant
from .dependency_installer import DependencyInstaller
from .env_files import EnvFileCopier
from .terminal_launcher import TerminalLauncher
from .display_service import DisplayService
from .git import GitCommandBridge

__all__ = [
    "BranchNamer",
    "ClaudeNamingAssistant",
    "DependencyInstaller",
    "EnvFileCopier",
    "TerminalLauncher",
    "DisplayService",
    "GitCommandBridge",
]
