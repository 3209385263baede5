"""Worktree operations service for worktree-manager."""

import os
from typing import Any, Dict, List, Mapping, Optional

import git

from worktree_manager.constants import DEFAULT_BASE_BRANCH
from worktree_manager.exceptions import GitError
from worktree_manager.logging_config import get_logger
from worktree_manager.models.worktree import WorktreePlan, WorktreeRecord

logger = get_logger(__name__)


def _command_error_details(error: git.exc.GitCommandError) -> tuple:
    """Extract (status, stderr) from a GitCommandError."""
    stderr = (error.stderr if hasattr(error, "stderr") and error.stderr else str(error)).strip()
    # GitPython prefixes captured stderr with "stderr: '...'"
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip().strip("'").strip()
    status = error.status if hasattr(error, "status") else "unknown"
    return status, stderr


def classify_git_failure(stderr: str) -> str:
    """Map git's stderr text to a GitError reason."""
    text = stderr.lower()
    if "already exists" in text and "branch" not in text:
        return GitError.PATH_EXISTS
    if "already checked out" in text or "is already used by worktree" in text:
        return GitError.BRANCH_CHECKED_OUT
    if "invalid reference" in text or "not a valid" in text or "unknown revision" in text:
        return GitError.INVALID_REF
    if "is locked" in text or "locked working tree" in text:
        return GitError.LOCKED
    if "contains modified or untracked files" in text or "is dirty" in text:
        return GitError.DIRTY
    if "not a git repository" in text:
        return GitError.NOT_A_REPOSITORY
    return GitError.OTHER


def parse_worktree_porcelain(output: str) -> List[WorktreeRecord]:
    """Parse ``git worktree list --porcelain`` output.

    Format (blank line between worktrees)::

        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name | detached
        locked [reason]
        prunable [reason]
    """
    records: List[WorktreeRecord] = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            records.append(
                WorktreeRecord(
                    path=current["path"],
                    branch=current.get("branch", ""),
                    head_commit=current.get("HEAD", ""),
                    is_prunable=current.get("prunable", False),
                    is_locked=current.get("locked", False),
                    # First worktree in list is always the main one
                    is_main=not records,
                    is_detached=current.get("detached", False),
                    lock_reason=current.get("lock_reason"),
                    prunable_reason=current.get("prunable_reason"),
                )
            )

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if not line.strip():
            flush()
            current = {}
            continue

        key, _, value = line.partition(" ")
        if key == "worktree":
            current["path"] = value
        elif key == "HEAD":
            current["HEAD"] = value
        elif key == "branch":
            if value.startswith("refs/heads/"):
                current["branch"] = value[len("refs/heads/"):]
            else:
                current["branch"] = value
        elif key == "detached":
            current["branch"] = ""
            current["detached"] = True
        elif key == "locked":
            current["locked"] = True
            current["lock_reason"] = value or None
        elif key == "prunable":
            current["prunable"] = True
            current["prunable_reason"] = value or None

    # Handle last entry if no trailing blank line
    flush()
    return records


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, repo_path: str, env: Optional[Mapping[str, str]] = None):
        """Initialize the worktree service.

        Args:
            repo_path: Path inside the git repository
            env: Extra environment variables for git processes
        """
        self.repo_path = repo_path
        self.env = dict(env or {})

    def _get_repo(self) -> git.Repo:
        """Open the repository; the registry is re-read on every call.

        Raises:
            GitError: If repo_path is not inside a git repository
        """
        try:
            return git.Repo(self.repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise GitError(
                "open_repository",
                self.repo_path,
                f"Not a git repository ({type(e).__name__})",
                reason=GitError.NOT_A_REPOSITORY,
            )

    def _run(self, operation: str, *args: str, path: Optional[str] = None) -> str:
        """Run ``git worktree <args>`` and translate failures into GitError."""
        repo = self._get_repo()
        try:
            return repo.git.worktree(*args, env=self.env)
        except git.exc.GitCommandError as e:
            status, stderr = _command_error_details(e)
            if stderr:
                error_msg = f"git worktree {args[0]} failed (exit {status}): {stderr}"
            else:
                error_msg = f"git worktree {args[0]} failed with exit code {status}"
            logger.error(error_msg)
            raise GitError(operation, path, error_msg, reason=classify_git_failure(stderr))

    def list_worktrees(self) -> List[WorktreeRecord]:
        """Get information about all worktrees.

        Returns:
            List of WorktreeRecord objects, main worktree first
        """
        output = self._run("list_worktrees", "list", "--porcelain")
        records = parse_worktree_porcelain(output)

        logger.debug(f"Found {len(records)} worktrees")
        for record in records:
            logger.debug(f"  {record}")
        return records

    def branch_exists(self, branch_name: str) -> bool:
        """Check whether a local branch exists."""
        repo = self._get_repo()
        return branch_name in [head.name for head in repo.heads]

    def add_worktree(self, plan: WorktreePlan) -> None:
        """Create a worktree for plan.branch_name at plan.target_path.

        A new branch is created from plan.base_ref unless the branch already
        exists, in which case it is checked out into the new worktree.

        Raises:
            GitError: If the target exists, the branch is checked out elsewhere,
                the base ref is missing, or git fails for any other reason
        """
        if os.path.lexists(plan.target_path):
            raise GitError(
                "add_worktree",
                plan.target_path,
                "Target path already exists",
                reason=GitError.PATH_EXISTS,
            )

        if self.branch_exists(plan.branch_name):
            logger.info(f"Branch {plan.branch_name} exists, checking it out into new worktree")
            args = ["add", plan.target_path, plan.branch_name]
        else:
            args = ["add", "-b", plan.branch_name, plan.target_path, plan.base_ref]

        self._run("add_worktree", *args, path=plan.target_path)
        logger.info(f"Created worktree at {plan.target_path} on branch {plan.branch_name}")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Remove even if the working tree is dirty or locked

        Raises:
            GitError: If git refuses or fails to remove the worktree
        """
        args = ["remove"]
        if force:
            # A single --force overrides dirty trees; locked ones need it twice
            args.extend(["--force", "--force"])
        args.append(path)

        self._run("remove_worktree", *args, path=path)
        logger.info(f"Removed worktree at {path}")

    def prune_worktrees(self) -> None:
        """Prune registry entries whose directories no longer exist."""
        self._run("prune_worktrees", "prune")
        logger.info("Pruned orphaned worktree metadata")

    def default_branch(self) -> str:
        """Branch that origin/HEAD points at, falling back to main."""
        repo = self._get_repo()
        try:
            ref = repo.git.symbolic_ref("refs/remotes/origin/HEAD", env=self.env).strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not resolve origin/HEAD, using '{DEFAULT_BASE_BRANCH}': {e}")
            return DEFAULT_BASE_BRANCH

        branch = ref.replace("refs/remotes/origin/", "", 1)
        return branch or DEFAULT_BASE_BRANCH

    def repository_root(self) -> str:
        """Path of the main worktree (the original checkout)."""
        records = self.list_worktrees()
        if records:
            return records[0].path
        repo = self._get_repo()
        return str(repo.working_tree_dir)
