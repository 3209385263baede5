"""Tests for package manager detection and dependency installation"""
import subprocess
from unittest.mock import Mock, patch

import pytest

from worktree_manager.exceptions import InstallError
from worktree_manager.models.worktree import StepOutcome
from worktree_manager.services.dependency_installer import DependencyInstaller, detect_package_manager


@pytest.fixture
def project(temp_dir):
    path = temp_dir / "project"
    path.mkdir()
    return path


def touch(directory, *names):
    for name in names:
        (directory / name).write_text("{}")


class TestDetectPackageManager:
    """Test lockfile-based detection."""

    @pytest.mark.parametrize(
        "lock_file,expected",
        [
            ("pnpm-lock.yaml", "pnpm"),
            ("yarn.lock", "yarn"),
            ("package-lock.json", "npm"),
            ("bun.lockb", "bun"),
            ("bun.lock", "bun"),
        ],
    )
    def test_lockfile(self, project, lock_file, expected):
        touch(project, "package.json", lock_file)
        assert detect_package_manager(str(project)).name == expected

    def test_priority_order(self, project):
        """Test that pnpm wins when several lockfiles are present."""
        touch(project, "package.json", "yarn.lock", "pnpm-lock.yaml", "package-lock.json")
        assert detect_package_manager(str(project)).name == "pnpm"

    def test_manifest_without_lockfile(self, project):
        """Test that a bare package.json defaults to npm."""
        touch(project, "package.json")
        assert detect_package_manager(str(project)).name == "npm"

    def test_no_manifest(self, project):
        """Test that non-JavaScript projects are not detected."""
        assert detect_package_manager(str(project)) is None

    def test_preferred_manager(self, project):
        """Test that a configured manager overrides lockfile detection."""
        touch(project, "package.json", "yarn.lock")
        assert detect_package_manager(str(project), "bun").name == "bun"

    def test_preferred_manager_without_manifest(self, project):
        assert detect_package_manager(str(project), "pnpm") is None


class TestDependencyInstaller:
    """Test running the install command."""

    def test_skip(self, context, project):
        """Test that skip=True does nothing."""
        outcome = DependencyInstaller(context).install(str(project), skip=True)
        assert outcome.status == StepOutcome.SKIPPED

    def test_nothing_detected(self, context, project):
        outcome = DependencyInstaller(context).install(str(project))
        assert outcome.status == StepOutcome.SKIPPED
        assert "no package manager" in outcome.reason

    @patch("worktree_manager.services.dependency_installer.subprocess.run")
    @patch("worktree_manager.services.dependency_installer.shutil.which", return_value="/usr/bin/pnpm")
    def test_successful_install(self, mock_which, mock_run, context, project):
        """Test a successful install runs in the worktree."""
        touch(project, "package.json", "pnpm-lock.yaml")
        mock_run.return_value = Mock(returncode=0, stdout="done", stderr="")

        outcome = DependencyInstaller(context).install(str(project))

        assert outcome.status == StepOutcome.OK
        assert outcome.reason == "pnpm"
        args, kwargs = mock_run.call_args
        assert args[0] == ["/usr/bin/pnpm", "install"]
        assert kwargs["cwd"] == str(project)

    @patch("worktree_manager.services.dependency_installer.shutil.which", return_value=None)
    def test_manager_not_installed(self, mock_which, context, project):
        """Test that a missing executable raises InstallError."""
        touch(project, "package.json", "yarn.lock")
        with pytest.raises(InstallError, match="not installed") as exc_info:
            DependencyInstaller(context).install(str(project))
        assert exc_info.value.manager == "yarn"

    @patch("worktree_manager.services.dependency_installer.subprocess.run")
    @patch("worktree_manager.services.dependency_installer.shutil.which", return_value="/usr/bin/npm")
    def test_install_failure(self, mock_which, mock_run, context, project):
        """Test that a non-zero exit reports the last line of output."""
        touch(project, "package.json")
        mock_run.return_value = Mock(returncode=1, stdout="", stderr="resolving\nERR! network timeout\n")

        with pytest.raises(InstallError) as exc_info:
            DependencyInstaller(context).install(str(project))
        assert "exit code 1" in str(exc_info.value)
        assert "ERR! network timeout" in str(exc_info.value)

    @patch("worktree_manager.services.dependency_installer.subprocess.run")
    @patch("worktree_manager.services.dependency_installer.shutil.which", return_value="/usr/bin/npm")
    def test_install_timeout(self, mock_which, mock_run, context, project):
        touch(project, "package.json")
        mock_run.side_effect = subprocess.TimeoutExpired("npm", 5)

        with pytest.raises(InstallError, match="timed out"):
            DependencyInstaller(context, timeout=5).install(str(project))
