"""Worktree data models."""

from dataclasses import dataclass, field
from typing import List, Optional

from worktree_manager.constants import Step
from worktree_manager.models.issue import IssueReference


@dataclass
class WorktreeRecord:
    """One entry of git's worktree registry."""

    path: str
    branch: str
    head_commit: str
    is_prunable: bool = False
    is_locked: bool = False
    is_main: bool = False  # Is this the main working tree?
    is_detached: bool = False
    lock_reason: Optional[str] = None
    prunable_reason: Optional[str] = None

    def __str__(self) -> str:
        """String representation of worktree."""
        if self.is_locked:
            status = "locked"
        elif self.is_prunable:
            status = "prunable"
        else:
            status = "active"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"


@dataclass(frozen=True)
class WorktreePlan:
    """Where and how a new worktree will be created."""

    branch_name: str
    target_path: str
    base_ref: str


@dataclass
class StepError:
    """A failure captured from one pipeline step."""

    step: Step
    kind: str
    message: str

    @classmethod
    def from_exception(cls, step: Step, error: Exception) -> "StepError":
        return cls(step=step, kind=type(error).__name__, message=str(error))


@dataclass
class StepOutcome:
    """Result of a best-effort step: ok, degraded(reason) or skipped(reason)."""

    OK = "ok"
    DEGRADED = "degraded"
    SKIPPED = "skipped"

    step: Step
    status: str
    reason: Optional[str] = None

    @classmethod
    def ok(cls, step: Step, reason: Optional[str] = None) -> "StepOutcome":
        return cls(step, cls.OK, reason)

    @classmethod
    def degraded(cls, step: Step, reason: str) -> "StepOutcome":
        return cls(step, cls.DEGRADED, reason)

    @classmethod
    def skipped(cls, step: Step, reason: str) -> "StepOutcome":
        return cls(step, cls.SKIPPED, reason)

    @property
    def is_degraded(self) -> bool:
        return self.status == self.DEGRADED


@dataclass
class WorktreeResult:
    """Outcome of a create-worktree pipeline run."""

    success: bool
    issue_reference: IssueReference
    path: Optional[str] = None
    branch_name: Optional[str] = None
    steps_completed: List[str] = field(default_factory=list)
    error: Optional[StepError] = None  # Fatal error; None when success is True
    advisories: List[StepError] = field(default_factory=list)
    outcomes: List[StepOutcome] = field(default_factory=list)

    def advisory_for(self, step: Step) -> Optional[StepError]:
        """Return the advisory error recorded for a step, if any."""
        for advisory in self.advisories:
            if advisory.step == step:
                return advisory
        return None


@dataclass
class SkippedWorktree:
    """A worktree that cleanup did not remove."""

    path: str
    reason: str


@dataclass
class CleanupResult:
    """Outcome of a cleanup run."""

    removed: List[str] = field(default_factory=list)
    skipped: List[SkippedWorktree] = field(default_factory=list)
    pruned: bool = False

    @property
    def success(self) -> bool:
        return not self.skipped
