"""Create and cleanup result formatting utilities."""

from typing import List

from worktree_manager.constants import STEP_DESCRIPTIONS
from worktree_manager.models.worktree import CleanupResult, StepError, WorktreeResult


def describe_step_error(error: StepError) -> str:
    """
    Format a captured step error as "<step description> failed: <message>".

    Example:
        "dependency install failed: Dependency install with pnpm failed: exit code 1"
    """
    description = STEP_DESCRIPTIONS.get(error.step, error.step.value)
    return f"{description} failed: {error.message}"


def format_create_summary(result: WorktreeResult) -> str:
    """One-line summary of a create run, naming the failed step if any."""
    if not result.success:
        if result.error is None:
            return "Worktree creation failed"
        return f"Could not create worktree: {describe_step_error(result.error)}"

    summary = f"Worktree created at {result.path}"
    if result.advisories:
        problems = "; ".join(describe_step_error(a) for a in result.advisories)
        summary += f", but {problems}"
    return summary


def format_completed_steps(result: WorktreeResult) -> str:
    """Completed steps joined with arrows, for partial-failure reports."""
    return " -> ".join(result.steps_completed) if result.steps_completed else "(none)"


def format_cleanup_lines(result: CleanupResult) -> List[str]:
    """
    Format a cleanup result as display lines.

    Returns:
        Lines listing removed paths and skipped paths with their reasons
    """
    if not result.removed and not result.skipped:
        return ["No worktrees to clean"]

    lines = []
    if result.removed:
        lines.append(f"Removed {len(result.removed)} worktree(s):")
        lines.extend(f"  - {path}" for path in result.removed)
    if result.skipped:
        lines.append(f"Skipped {len(result.skipped)} worktree(s):")
        lines.extend(f"  - {item.path} ({item.reason})" for item in result.skipped)
    if not result.pruned:
        lines.append("Warning: git worktree prune failed")
    return lines
