"""Package manager detection and dependency installation"""

import shutil
import subprocess
from pathlib import Path
from typing import Optional

from worktree_manager.constants import (
    INSTALL_TIMEOUT,
    PACKAGE_MANAGERS,
    PACKAGE_MANIFEST,
    PackageManagerInfo,
    Step,
)
from worktree_manager.context import ExecutionContext
from worktree_manager.exceptions import InstallError
from worktree_manager.logging_config import get_logger
from worktree_manager.models.worktree import StepOutcome

logger = get_logger(__name__)


def _manager_by_name(name: str) -> PackageManagerInfo:
    for manager in PACKAGE_MANAGERS:
        if manager.name == name:
            return manager
    raise ValueError(f"Unknown package manager: {name}")


def detect_package_manager(project_path: str, preferred: str = "auto") -> Optional[PackageManagerInfo]:
    """Find the package manager for a project.

    Lockfiles are checked in priority order (pnpm, yarn, npm, bun). A bare
    package.json defaults to npm. A preferred manager other than "auto" is
    used whenever package.json exists.
    """
    root = Path(project_path)
    has_manifest = (root / PACKAGE_MANIFEST).is_file()

    if preferred != "auto":
        if has_manifest:
            return _manager_by_name(preferred)
        return None

    for manager in PACKAGE_MANAGERS:
        for lock_file in manager.lock_files:
            if (root / lock_file).is_file():
                logger.debug(f"Detected package manager: {manager.name} ({lock_file})")
                return manager

    if has_manifest:
        logger.debug("No lock file found, defaulting to npm")
        return _manager_by_name("npm")

    return None


class DependencyInstaller:
    """Runs the detected package manager's install command in a worktree."""

    def __init__(self, context: ExecutionContext, timeout: int = INSTALL_TIMEOUT):
        self.context = context
        self.timeout = timeout

    def install(self, worktree_path: str, skip: bool = False, manager: str = "auto") -> StepOutcome:
        """Install dependencies.

        Returns:
            A skipped outcome when disabled or nothing is detected, ok otherwise

        Raises:
            InstallError: If the manager is missing or the install fails
        """
        if skip:
            return StepOutcome.skipped(Step.INSTALLING_DEPS, "dependency install disabled")

        info = detect_package_manager(worktree_path, manager)
        if info is None:
            logger.info("No package.json found, skipping dependency installation")
            return StepOutcome.skipped(Step.INSTALLING_DEPS, "no package manager detected")

        executable = shutil.which(info.install_command[0], path=self.context.env.get("PATH"))
        if executable is None:
            raise InstallError(info.name, f"'{info.install_command[0]}' is not installed")

        logger.info(f"Installing dependencies with {info.name}...")
        try:
            result = subprocess.run(
                [executable, *info.install_command[1:]],
                cwd=worktree_path,
                env=self.context.env or None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise InstallError(info.name, f"timed out after {self.timeout}s")
        except OSError as e:
            raise InstallError(info.name, str(e))

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip().splitlines()
            tail = detail[-1] if detail else ""
            message = f"exit code {result.returncode}"
            if tail:
                message += f": {tail}"
            raise InstallError(info.name, message)

        logger.info(f"Dependencies installed with {info.name}")
        return StepOutcome.ok(Step.INSTALLING_DEPS, info.name)
