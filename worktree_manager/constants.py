"""Shared constants for worktree-manager."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class Step(Enum):
    """States of the worktree creation pipeline."""

    VALIDATING = "Validating"
    RESOLVING_ISSUE = "ResolvingIssue"
    NAMING = "Naming"
    CREATING_WORKTREE = "CreatingWorktree"
    COPYING_ENV_FILES = "CopyingEnvFiles"
    INSTALLING_DEPS = "InstallingDeps"
    LAUNCHING_TERMINAL = "LaunchingTerminal"
    DONE = "Done"
    FAILED = "Failed"


# Human-readable step names for result messages
STEP_DESCRIPTIONS: Dict[Step, str] = {
    Step.VALIDATING: "input validation",
    Step.RESOLVING_ISSUE: "issue fetch",
    Step.NAMING: "branch naming",
    Step.CREATING_WORKTREE: "worktree creation",
    Step.COPYING_ENV_FILES: "env file copy",
    Step.INSTALLING_DEPS: "dependency install",
    Step.LAUNCHING_TERMINAL: "terminal launch",
}


# Configuration defaults
DEFAULT_WORKTREE_BASE_PATH = "~/Developer/worktrees"
DEFAULT_BASE_BRANCH = "main"
DEFAULT_TERMINAL_APP = "Terminal"
DEFAULT_AI_COMMAND = "claude"
DEFAULT_AI_TIMEOUT = 30
DEFAULT_TERMINAL_COMMAND = "claude"
DEFAULT_CONFIG_DIR = "~/.config/worktree-manager"
CONFIG_DIR_ENV_VAR = "WORKTREE_MANAGER_CONFIG_DIR"
CONFIG_FILE_NAME = "config.json"
PROFILES_DIR_NAME = "profiles"

TERMINAL_APPS: List[str] = ["Hyper", "iTerm2", "Warp", "Terminal"]
PACKAGE_MANAGER_CHOICES: List[str] = ["auto", "pnpm", "yarn", "npm", "bun"]

MAX_BRANCH_NAME_LENGTH = 50
FALLBACK_TITLE_WORDS = 5

INSTALL_TIMEOUT = 600


@dataclass
class PackageManagerInfo:
    """A package manager and the files that identify it."""

    name: str
    lock_files: List[str]
    install_command: List[str]


# Detection order: first lockfile match wins
PACKAGE_MANAGERS: List[PackageManagerInfo] = [
    PackageManagerInfo("pnpm", ["pnpm-lock.yaml"], ["pnpm", "install"]),
    PackageManagerInfo("yarn", ["yarn.lock"], ["yarn", "install"]),
    PackageManagerInfo("npm", ["package-lock.json"], ["npm", "install"]),
    PackageManagerInfo("bun", ["bun.lockb", "bun.lock"], ["bun", "install"]),
]

PACKAGE_MANIFEST = "package.json"

# Directories never searched for .env files
ENV_FILE_IGNORED_DIRS = {"node_modules", ".git"}


# Worktree status labels for list output
class WorktreeStatus:
    """Display status of a worktree record."""

    MAIN = "main"
    LOCKED = "locked"
    PRUNABLE = "prunable"
    ACTIVE = "active"


# CLI colors (Rich color names)
STATUS_COLORS = {
    WorktreeStatus.MAIN: "cyan",
    WorktreeStatus.LOCKED: "yellow",
    WorktreeStatus.PRUNABLE: "red",
    WorktreeStatus.ACTIVE: "green",
}

SKIP_REASON_NOT_PRUNABLE = "not prunable"
SKIP_REASON_LOCKED = "locked"
