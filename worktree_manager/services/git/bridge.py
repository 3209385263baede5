"""GitBridge implementation backed by GitPython and PyGithub."""

from typing import List, Optional

from worktree_manager.context import ExecutionContext
from worktree_manager.models.issue import IssueDetails, IssueReference
from worktree_manager.models.worktree import WorktreePlan, WorktreeRecord
from worktree_manager.services.git.github import GitHubService
from worktree_manager.services.git.worktrees import WorktreeService


class GitCommandBridge:
    """The only component that runs git or calls GitHub."""

    def __init__(self, context: ExecutionContext, github_token: Optional[str] = None):
        self.context = context
        self.worktree_service = WorktreeService(context.cwd, env=context.env)
        self.github_service = GitHubService(github_token, env=context.env)

    def fetch_issue(self, ref: IssueReference) -> IssueDetails:
        return self.github_service.fetch_issue(ref)

    def default_branch(self) -> str:
        return self.worktree_service.default_branch()

    def repository_root(self) -> str:
        return self.worktree_service.repository_root()

    def list_worktrees(self) -> List[WorktreeRecord]:
        return self.worktree_service.list_worktrees()

    def add_worktree(self, plan: WorktreePlan) -> None:
        self.worktree_service.add_worktree(plan)

    def remove_worktree(self, path: str, force: bool = False) -> None:
        self.worktree_service.remove_worktree(path, force=force)

    def prune_worktrees(self) -> None:
        self.worktree_service.prune_worktrees()

    def close(self) -> None:
        self.github_service.close()
