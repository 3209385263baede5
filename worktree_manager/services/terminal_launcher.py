"""Terminal launcher: opens a terminal app running a command (macOS only)."""

import shlex
import shutil
import subprocess
import sys
from typing import Dict

from worktree_manager.constants import TERMINAL_APPS
from worktree_manager.context import ExecutionContext
from worktree_manager.exceptions import TerminalLaunchError
from worktree_manager.logging_config import get_logger

logger = get_logger(__name__)

LAUNCH_TIMEOUT = 30

# Application bundle names, for `open -Ra`
APP_BUNDLES: Dict[str, str] = {
    "Hyper": "Hyper",
    "iTerm2": "iTerm",
    "Warp": "Warp",
    "Terminal": "Terminal",
}


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_applescript(app_name: str, command: str) -> str:
    """AppleScript that opens app_name and types/runs command."""
    cmd = _applescript_string(command)
    if app_name == "iTerm2":
        return (
            'tell application "iTerm"\n'
            "  create window with default profile\n"
            "  tell current session of current window\n"
            f"    write text {cmd}\n"
            "  end tell\n"
            "end tell"
        )
    if app_name == "Terminal":
        return (
            'tell application "Terminal"\n'
            "  activate\n"
            f"  do script {cmd}\n"
            "end tell"
        )
    if app_name in ("Hyper", "Warp"):
        return (
            f'tell application "{APP_BUNDLES[app_name]}" to activate\n'
            "delay 0.5\n"
            'tell application "System Events"\n'
            f'  tell process "{APP_BUNDLES[app_name]}"\n'
            f'    keystroke "t" using {{command down}}\n'
            "    delay 0.2\n"
            f"    keystroke {cmd}\n"
            "    keystroke return\n"
            "  end tell\n"
            "end tell"
        )
    raise ValueError(f"Unsupported terminal app: {app_name}")


def build_worktree_command(worktree_path: str, branch_name: str, issue_url: str, startup_command: str) -> str:
    """Shell command run inside the new terminal."""
    parts = [
        f"cd {shlex.quote(worktree_path)}",
        f"echo {shlex.quote('Branch: ' + branch_name)}",
        f"echo {shlex.quote('Issue: ' + issue_url)}",
        "echo",
    ]
    if startup_command:
        parts.append(startup_command)
    return " && ".join(parts)


class TerminalLauncher:
    """Opens terminal windows through osascript."""

    def __init__(self, context: ExecutionContext, platform: str = sys.platform):
        self.context = context
        self.platform = platform

    def _run(self, args, app_name: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=LAUNCH_TIMEOUT,
                env=self.context.env or None,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            raise TerminalLaunchError(app_name, str(e))

    def is_installed(self, app_name: str) -> bool:
        if app_name == "Terminal":
            # Terminal.app is always available on macOS
            return True
        result = self._run(["open", "-Ra", APP_BUNDLES[app_name]], app_name)
        return result.returncode == 0

    def open(self, app_name: str, command: str) -> None:
        """Open app_name running command.

        Raises:
            TerminalLaunchError: If the platform, app or osascript call fails
        """
        if app_name not in TERMINAL_APPS:
            raise TerminalLaunchError(app_name, f"unsupported terminal (choose from {', '.join(TERMINAL_APPS)})")
        if self.platform != "darwin":
            raise TerminalLaunchError(app_name, f"terminal launching requires macOS (running on {self.platform})")
        if shutil.which("osascript", path=self.context.env.get("PATH")) is None:
            raise TerminalLaunchError(app_name, "osascript not found")
        if not self.is_installed(app_name):
            raise TerminalLaunchError(app_name, "application is not installed")

        logger.debug(f"Launching {app_name} with command: {command}")
        result = self._run(["osascript", "-e", build_applescript(app_name, command)], app_name)
        if result.returncode != 0:
            raise TerminalLaunchError(app_name, (result.stderr or "").strip() or f"exit code {result.returncode}")

        logger.info(f"Opened {app_name} terminal")
