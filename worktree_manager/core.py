"""Core functionality for worktree-manager"""

import os
from typing import List, Optional

from worktree_manager.config import Config
from worktree_manager.constants import (
    SKIP_REASON_LOCKED,
    SKIP_REASON_NOT_PRUNABLE,
    Step,
)
from worktree_manager.exceptions import (
    GitError,
    InstallError,
    IssueFetchError,
    TerminalLaunchError,
    ValidationError,
)
from worktree_manager.logging_config import get_logger
from worktree_manager.models.issue import IssueDetails, IssueReference, parse_issue_url
from worktree_manager.models.worktree import (
    CleanupResult,
    SkippedWorktree,
    StepError,
    StepOutcome,
    WorktreePlan,
    WorktreeRecord,
    WorktreeResult,
)
from worktree_manager.services.branch_namer import BranchNamer
from worktree_manager.services.interfaces import EnvCopier, GitBridge, Installer, Terminal
from worktree_manager.services.terminal_launcher import build_worktree_command

logger = get_logger(__name__)


def _same_path(a: str, b: str) -> bool:
    return os.path.normcase(os.path.realpath(a)) == os.path.normcase(os.path.realpath(b))


class WorktreeOrchestrator:
    """Sequences issue lookup, naming, worktree creation and bootstrap steps."""

    def __init__(
        self,
        config: Config,
        git_bridge: GitBridge,
        branch_namer: Optional[BranchNamer] = None,
        installer: Optional[Installer] = None,
        env_copier: Optional[EnvCopier] = None,
        terminal: Optional[Terminal] = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Effective configuration for this run
            git_bridge: Git/GitHub capability
            branch_namer: Branch name derivation (defaults to no naming assistant)
            installer: Dependency installer; None disables the install step
            env_copier: .env file copier; None disables the copy step
            terminal: Terminal launcher; None disables the launch step
        """
        self.config = config
        self.git = git_bridge
        self.branch_namer = branch_namer or BranchNamer()
        self.installer = installer
        self.env_copier = env_copier
        self.terminal = terminal
        self.state = Step.VALIDATING

    def _transition(self, state: Step) -> None:
        logger.debug(f"State: {self.state.value} -> {state.value}")
        self.state = state

    def create_worktree(self, issue_url: str, branch_override: Optional[str] = None) -> WorktreeResult:
        """Create a worktree for a GitHub issue.

        Validation errors are raised before any git call. Every later failure is
        captured in the returned result: a CreatingWorktree failure makes it
        unsuccessful, failures of the other steps are recorded as advisories.

        Raises:
            ValidationError: If the URL or the explicit branch name is invalid
        """
        self.state = Step.VALIDATING
        try:
            ref = parse_issue_url(issue_url)
            override = self.branch_namer.sanitize_override(branch_override) if branch_override else None
        except ValidationError:
            self._transition(Step.FAILED)
            raise

        result = WorktreeResult(success=False, issue_reference=ref)
        result.steps_completed.append(Step.VALIDATING.value)

        # Issue lookup is best effort
        self._transition(Step.RESOLVING_ISSUE)
        details = self._resolve_issue(ref, result)
        result.steps_completed.append(Step.RESOLVING_ISSUE.value)

        self._transition(Step.NAMING)
        branch_name = self.branch_namer.derive_name(override, details, ref)
        result.branch_name = branch_name
        result.steps_completed.append(Step.NAMING.value)
        logger.info(f"Branch name: {branch_name}")

        self._transition(Step.CREATING_WORKTREE)
        result.steps_completed.append(Step.CREATING_WORKTREE.value)
        try:
            plan = self.plan_worktree(ref, branch_name)
            result.path = plan.target_path
            os.makedirs(os.path.dirname(plan.target_path), exist_ok=True)
            self.git.add_worktree(plan)
        except (GitError, OSError) as e:
            logger.error(f"Failed to create worktree: {e}")
            result.error = StepError.from_exception(Step.CREATING_WORKTREE, e)
            self._transition(Step.FAILED)
            return result

        result.success = True

        self._transition(Step.COPYING_ENV_FILES)
        self._copy_env_files(plan, result)

        self._transition(Step.INSTALLING_DEPS)
        self._install_dependencies(plan, result)

        self._transition(Step.LAUNCHING_TERMINAL)
        self._launch_terminal(plan, ref, result)

        self._transition(Step.DONE)
        return result

    def _resolve_issue(self, ref: IssueReference, result: WorktreeResult) -> Optional[IssueDetails]:
        try:
            details = self.git.fetch_issue(ref)
        except IssueFetchError as e:
            logger.warning(f"{e}; continuing without issue details")
            self._record_degraded(result, Step.RESOLVING_ISSUE, e)
            return None

        result.outcomes.append(StepOutcome.ok(Step.RESOLVING_ISSUE, details.title))
        return details

    def plan_worktree(self, ref: IssueReference, branch_name: str) -> WorktreePlan:
        """Compute the target path and base ref for a new worktree.

        Raises:
            GitError: If the target path is already registered or exists on disk
        """
        target_path = str(self.config.base_path / f"{ref.repo}-{branch_name}")
        base_ref = self.config.default_branch or self.git.default_branch()

        for record in self.git.list_worktrees():
            if _same_path(record.path, target_path):
                raise GitError(
                    "plan_worktree",
                    target_path,
                    f"a worktree is already registered at this path (branch '{record.branch}')",
                    reason=GitError.PATH_EXISTS,
                )
        if os.path.lexists(target_path):
            raise GitError("plan_worktree", target_path, "Target path already exists", reason=GitError.PATH_EXISTS)

        plan = WorktreePlan(branch_name=branch_name, target_path=target_path, base_ref=base_ref)
        logger.debug(f"Worktree plan: {plan}")
        return plan

    def _copy_env_files(self, plan: WorktreePlan, result: WorktreeResult) -> None:
        step = Step.COPYING_ENV_FILES
        if self.env_copier is None or not self.config.copy_env_files:
            result.outcomes.append(StepOutcome.skipped(step, "env file copy disabled"))
            return

        try:
            outcome = self.env_copier.copy(self.git.repository_root(), plan.target_path)
        except GitError as e:
            outcome = StepOutcome.degraded(step, str(e))

        result.outcomes.append(outcome)
        result.steps_completed.append(step.value)
        if outcome.is_degraded:
            logger.warning(f"Env file copy incomplete: {outcome.reason}")
            result.advisories.append(StepError(step, "EnvCopyError", outcome.reason or "unknown error"))

    def _install_dependencies(self, plan: WorktreePlan, result: WorktreeResult) -> None:
        step = Step.INSTALLING_DEPS
        if self.installer is None or not self.config.auto_install_deps:
            result.outcomes.append(StepOutcome.skipped(step, "dependency install disabled"))
            return

        try:
            outcome = self.installer.install(plan.target_path, manager=self.config.package_manager)
        except InstallError as e:
            logger.warning(f"{e}; the worktree is still usable")
            self._record_degraded(result, step, e)
            result.steps_completed.append(step.value)
            return

        result.outcomes.append(outcome)
        if outcome.status != StepOutcome.SKIPPED:
            result.steps_completed.append(step.value)

    def _launch_terminal(self, plan: WorktreePlan, ref: IssueReference, result: WorktreeResult) -> None:
        step = Step.LAUNCHING_TERMINAL
        if self.terminal is None or not self.config.open_terminal:
            result.outcomes.append(StepOutcome.skipped(step, "terminal launch disabled"))
            return

        command = build_worktree_command(
            plan.target_path, plan.branch_name, ref.source_url, self.config.terminal_command
        )
        result.steps_completed.append(step.value)
        try:
            self.terminal.open(self.config.terminal_app, command)
        except TerminalLaunchError as e:
            logger.warning(f"{e}; please navigate to {plan.target_path} manually")
            self._record_degraded(result, step, e)
            return

        result.outcomes.append(StepOutcome.ok(step, self.config.terminal_app))

    @staticmethod
    def _record_degraded(result: WorktreeResult, step: Step, error: Exception) -> None:
        result.outcomes.append(StepOutcome.degraded(step, str(error)))
        result.advisories.append(StepError.from_exception(step, error))

    def list_worktrees(self) -> List[WorktreeRecord]:
        """Return git's worktree registry, read fresh."""
        return self.git.list_worktrees()

    def cleanup_worktrees(self, force: bool = False) -> CleanupResult:
        """Remove prunable worktrees, or every non-main unlocked worktree with force.

        A failure to remove one worktree is recorded and cleanup continues.
        """
        result = CleanupResult()
        records = self.git.list_worktrees()

        candidates: List[WorktreeRecord] = []
        for record in records:
            if record.is_main:
                continue
            if force:
                if record.is_locked:
                    reason = SKIP_REASON_LOCKED
                    if record.lock_reason:
                        reason += f": {record.lock_reason}"
                    result.skipped.append(SkippedWorktree(record.path, reason))
                    continue
                candidates.append(record)
            elif record.is_prunable:
                candidates.append(record)
            else:
                result.skipped.append(SkippedWorktree(record.path, SKIP_REASON_NOT_PRUNABLE))

        logger.info(f"Cleanup: {len(candidates)} candidate(s), force={force}")
        for record in candidates:
            try:
                self.git.remove_worktree(record.path, force=force)
            except GitError as e:
                logger.error(f"Failed to remove {record.path}: {e}")
                result.skipped.append(SkippedWorktree(record.path, e.message or str(e)))
                continue
            result.removed.append(record.path)

        try:
            self.git.prune_worktrees()
            result.pruned = True
        except GitError as e:
            logger.error(f"Failed to prune worktree registry: {e}")

        return result
