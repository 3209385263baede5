"""Command-line argument parsing for worktree-manager."""

import argparse
from typing import List, Optional

from worktree_manager.__version__ import __version__
from worktree_manager.constants import TERMINAL_APPS

COMMAND_LIST = "list"
COMMAND_CLEAN = "clean"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="worktree-manager",
        description="Create git worktrees from GitHub issues, list them, and clean them up",
        epilog="Examples:\n"
        "  worktree-manager https://github.com/user/repo/issues/123\n"
        "  worktree-manager https://github.com/user/repo/issues/123 --branch feature-xyz\n"
        "  worktree-manager list\n"
        "  worktree-manager clean --force\n\n"
        "Configuration is read from ~/.config/worktree-manager/config.json "
        "(override with WORKTREE_MANAGER_CONFIG_DIR); profiles live in its profiles/ directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "target",
        nargs="?",
        metavar="<issue-url>|list|clean",
        help="GitHub issue URL to create a worktree for, 'list' to show worktrees, "
        "or 'clean' to remove prunable worktrees",
    )
    parser.add_argument("-b", "--branch", help="Custom branch name (overrides auto-generation)")
    parser.add_argument("-o", "--output", metavar="DIR", help="Custom worktree base directory")
    parser.add_argument("-p", "--profile", help="Use a configuration profile")
    parser.add_argument(
        "-t", "--terminal", metavar="APP", help=f"Terminal app ({', '.join(TERMINAL_APPS)})"
    )
    parser.add_argument(
        "-f", "--force", action="store_true", help="With 'clean': remove all unlocked worktrees"
    )
    parser.add_argument("--no-deps", action="store_true", help="Skip dependency installation")
    parser.add_argument(
        "--no-terminal", action="store_true", help="Don't open a terminal automatically"
    )
    parser.add_argument("--verbose", action="store_true", help="Show progress messages")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"worktree-manager {__version__}"
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
