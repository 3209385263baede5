"""Custom exceptions for worktree-manager"""

from typing import Optional


class WorktreeManagerError(Exception):
    """Base exception for all worktree-manager errors."""
    pass


class ValidationError(WorktreeManagerError):
    """Exception raised for invalid user input (issue URL, branch name, profile)."""

    def __init__(self, message: str, value: Optional[str] = None):
        self.message = message
        self.value = value

        error_msg = message
        if value is not None:
            error_msg += f": {value!r}"

        super().__init__(error_msg)


class ConfigError(WorktreeManagerError):
    """Exception raised when a configuration file cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path

        error_msg = "Invalid configuration"
        if path:
            error_msg += f" in {path}"
        error_msg += f": {message}"

        super().__init__(error_msg)


class ProfileNotFoundError(ConfigError, ValidationError):
    """Exception raised when a named profile does not exist."""

    def __init__(self, profile: str, path: Optional[str] = None):
        self.profile = profile
        self.message = f"Profile '{profile}' not found"
        self.path = path
        self.value = profile

        error_msg = self.message
        if path:
            error_msg += f" (looked in {path})"

        Exception.__init__(self, error_msg)


class IssueFetchError(WorktreeManagerError):
    """Exception raised when a GitHub issue cannot be fetched."""

    def __init__(self, issue: str, message: Optional[str] = None):
        self.issue = issue
        self.message = message

        error_msg = f"Could not fetch issue {issue}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitError(WorktreeManagerError):
    """Exception raised for errors in Git operations."""

    # Failure classifications
    PATH_EXISTS = "path_exists"
    BRANCH_CHECKED_OUT = "branch_checked_out"
    INVALID_REF = "invalid_ref"
    NOT_A_REPOSITORY = "not_a_repository"
    LOCKED = "locked"
    DIRTY = "dirty"
    OTHER = "other"

    def __init__(
        self,
        operation: str,
        path: Optional[str] = None,
        message: Optional[str] = None,
        reason: str = OTHER,
    ):
        self.operation = operation
        self.path = path
        self.message = message
        self.reason = reason

        error_msg = f"Git operation '{operation}' failed"
        if path:
            error_msg += f" for '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class InstallError(WorktreeManagerError):
    """Exception raised when dependency installation fails."""

    def __init__(self, manager: str, message: Optional[str] = None):
        self.manager = manager
        self.message = message

        error_msg = f"Dependency install with {manager} failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class TerminalLaunchError(WorktreeManagerError):
    """Exception raised when a terminal application cannot be opened."""

    def __init__(self, app: str, message: Optional[str] = None):
        self.app = app
        self.message = message

        error_msg = f"Could not open {app}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)
