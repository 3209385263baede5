"""Pytest fixtures for worktree-manager tests"""
import io
import os
import tempfile
from pathlib import Path
from typing import List, Optional

import pytest
import git

from worktree_manager.config import Config
from worktree_manager.context import ExecutionContext
from worktree_manager.exceptions import GitError, IssueFetchError
from worktree_manager.models.issue import IssueDetails, IssueReference
from worktree_manager.models.worktree import WorktreePlan, WorktreeRecord


ISSUE_URL = "https://github.com/acme/widgets/issues/42"


class FakeGitBridge:
    """In-memory GitBridge that records every call."""

    def __init__(
        self,
        records: Optional[List[WorktreeRecord]] = None,
        issue: Optional[IssueDetails] = None,
        issue_error: Optional[Exception] = None,
        default_branch: str = "main",
        root: str = "/repo",
    ):
        self.records = list(records or [])
        self.issue = issue
        self.issue_error = issue_error
        self._default_branch = default_branch
        self.root = root
        self.calls: List[tuple] = []
        self.add_error: Optional[GitError] = None
        self.remove_errors = {}
        self.prune_error: Optional[GitError] = None

    def fetch_issue(self, ref: IssueReference) -> IssueDetails:
        self.calls.append(("fetch_issue", ref))
        if self.issue_error is not None:
            raise self.issue_error
        if self.issue is None:
            raise IssueFetchError(str(ref), "GitHub unreachable")
        return self.issue

    def default_branch(self) -> str:
        self.calls.append(("default_branch",))
        return self._default_branch

    def repository_root(self) -> str:
        self.calls.append(("repository_root",))
        return self.root

    def list_worktrees(self) -> List[WorktreeRecord]:
        self.calls.append(("list_worktrees",))
        return list(self.records)

    def add_worktree(self, plan: WorktreePlan) -> None:
        self.calls.append(("add_worktree", plan))
        if self.add_error is not None:
            raise self.add_error
        self.records.append(WorktreeRecord(plan.target_path, plan.branch_name, "f" * 40))

    def remove_worktree(self, path: str, force: bool = False) -> None:
        self.calls.append(("remove_worktree", path, force))
        if path in self.remove_errors:
            raise self.remove_errors[path]
        self.records = [r for r in self.records if r.path != path]

    def prune_worktrees(self) -> None:
        self.calls.append(("prune_worktrees",))
        if self.prune_error is not None:
            raise self.prune_error

    def close(self) -> None:
        self.calls.append(("close",))

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakeTerminal:
    """Records terminal launches; optionally fails."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.opened: List[tuple] = []

    def open(self, app_name: str, command: str) -> None:
        self.opened.append((app_name, command))
        if self.error is not None:
            raise self.error


class FakeAssistant:
    """Naming assistant returning a canned suggestion or raising."""

    def __init__(self, suggestion: Optional[str] = None, error: Optional[Exception] = None, available: bool = True):
        self.suggestion = suggestion
        self.error = error
        self.available = available
        self.requests: List[IssueReference] = []

    def is_available(self) -> bool:
        return self.available

    def suggest_name(self, ref: IssueReference, details: IssueDetails) -> Optional[str]:
        self.requests.append(ref)
        if self.error is not None:
            raise self.error
        return self.suggestion


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def issue_ref():
    return IssueReference(owner="acme", repo="widgets", number=42, source_url=ISSUE_URL)


@pytest.fixture
def base_config(temp_dir):
    """Configuration pointing worktrees into the temporary directory."""
    return Config(
        worktree_base_path=str(temp_dir / "worktrees"),
        open_terminal=False,
        auto_install_deps=False,
        copy_env_files=False,
    )


@pytest.fixture
def main_record():
    return WorktreeRecord("/repo", "main", "a" * 40, is_main=True)


@pytest.fixture
def fake_git(main_record):
    """FakeGitBridge with only the main worktree registered."""
    return FakeGitBridge(records=[main_record])


@pytest.fixture
def fake_git_factory():
    """The FakeGitBridge class, for tests that need custom registries."""
    return FakeGitBridge


@pytest.fixture
def fake_terminal_factory():
    return FakeTerminal


@pytest.fixture
def fake_assistant_factory():
    return FakeAssistant


@pytest.fixture
def context(temp_dir):
    """Execution context rooted in the temporary directory."""
    return ExecutionContext(cwd=str(temp_dir), env=dict(os.environ), stream=io.StringIO())


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "widgets"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    repo.close()
