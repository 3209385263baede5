"""Capability interfaces the orchestrator depends on.

Concrete implementations live next to this module; tests substitute in-memory
fakes that satisfy the same protocols.
"""

from typing import List, Optional, Protocol

from worktree_manager.models.issue import IssueDetails, IssueReference
from worktree_manager.models.worktree import StepOutcome, WorktreePlan, WorktreeRecord


class GitBridge(Protocol):
    """Everything that touches git or GitHub."""

    def fetch_issue(self, ref: IssueReference) -> IssueDetails:
        """Raises IssueFetchError."""
        ...

    def default_branch(self) -> str:
        ...

    def repository_root(self) -> str:
        ...

    def list_worktrees(self) -> List[WorktreeRecord]:
        """Raises GitError."""
        ...

    def add_worktree(self, plan: WorktreePlan) -> None:
        """Raises GitError."""
        ...

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Raises GitError."""
        ...

    def prune_worktrees(self) -> None:
        """Raises GitError."""
        ...

    def close(self) -> None:
        ...


class NamingAssistant(Protocol):
    """Suggests a branch name from an issue title."""

    def is_available(self) -> bool:
        ...

    def suggest_name(self, ref: IssueReference, details: IssueDetails) -> Optional[str]:
        """Return a suggestion or None; may raise on failure."""
        ...


class Installer(Protocol):
    def install(self, worktree_path: str, skip: bool = False, manager: str = "auto") -> StepOutcome:
        """Raises InstallError."""
        ...


class EnvCopier(Protocol):
    def copy(self, source_root: str, target_root: str) -> StepOutcome:
        ...


class Terminal(Protocol):
    def open(self, app_name: str, command: str) -> None:
        """Raises TerminalLaunchError."""
        ...
