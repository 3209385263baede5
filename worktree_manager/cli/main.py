"""Command-line entry point for worktree-manager"""

import sys
from typing import List, Optional

from worktree_manager.cli.args import COMMAND_CLEAN, COMMAND_LIST, build_parser
from worktree_manager.config import ConfigLayer, ConfigResolver
from worktree_manager.context import ExecutionContext
from worktree_manager.core import WorktreeOrchestrator
from worktree_manager.exceptions import WorktreeManagerError
from worktree_manager.logging_config import get_logger, setup_logging
from worktree_manager.services import (
    BranchNamer,
    ClaudeNamingAssistant,
    DependencyInstaller,
    DisplayService,
    EnvFileCopier,
    GitCommandBridge,
    TerminalLauncher,
)

logger = get_logger(__name__)


def overrides_from_args(parsed_args) -> ConfigLayer:
    """Translate CLI flags into a config layer; unset flags stay None."""
    return ConfigLayer(
        worktree_base_path=parsed_args.output,
        terminal_app=parsed_args.terminal,
        auto_install_deps=False if parsed_args.no_deps else None,
        open_terminal=False if parsed_args.no_terminal else None,
        debug=True if parsed_args.debug else None,
    )


def build_orchestrator(config, context: ExecutionContext) -> WorktreeOrchestrator:
    """Wire the real collaborators for one run."""
    assistant = None
    if config.ai_branch_names:
        assistant = ClaudeNamingAssistant(config.ai_command, config.ai_timeout, env=context.env)

    return WorktreeOrchestrator(
        config,
        GitCommandBridge(context, github_token=config.github_token),
        branch_namer=BranchNamer(assistant),
        installer=DependencyInstaller(context),
        env_copier=EnvFileCopier(),
        terminal=TerminalLauncher(context),
    )


def main(argv: Optional[List[str]] = None, context: Optional[ExecutionContext] = None) -> int:
    """Main entry point for the application."""
    parser = build_parser()
    parsed_args = parser.parse_args(argv)
    context = context or ExecutionContext.from_process()
    display = DisplayService(stream=context.stream, debug=parsed_args.debug)

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    if not parsed_args.target:
        parser.print_help(context.stream)
        return 1

    try:
        resolver = ConfigResolver(env=context.env, cwd=context.cwd)
        config = resolver.resolve(parsed_args.profile, overrides_from_args(parsed_args))

        if config.debug and not parsed_args.debug:
            setup_logging(debug=True)
        if config.debug:
            display.console.print("[yellow]Debug mode enabled[/yellow]")
            display.console.print(f"  Config directory: {resolver.config_dir}")

        orchestrator = build_orchestrator(config, context)
        try:
            return run_command(orchestrator, parsed_args, display)
        finally:
            orchestrator.git.close()
    except KeyboardInterrupt:
        display.display_info("Operation cancelled by user")
        return 1
    except WorktreeManagerError as e:
        display.display_error(str(e))
        if parsed_args.debug:
            display.console.print_exception()
        return 1


def run_command(orchestrator: WorktreeOrchestrator, parsed_args, display: DisplayService) -> int:
    """Dispatch the positional command; returns the exit code."""
    target = parsed_args.target

    if target == COMMAND_LIST:
        display.display_worktree_table(orchestrator.list_worktrees())
        return 0

    if target == COMMAND_CLEAN:
        cleanup = orchestrator.cleanup_worktrees(force=parsed_args.force)
        display.display_cleanup_result(cleanup)
        return 0 if cleanup.success else 1

    result = orchestrator.create_worktree(target, branch_override=parsed_args.branch)
    display.display_create_result(result)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
