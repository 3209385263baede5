"""Copies .env files from the main checkout into a new worktree."""

import os
import shutil
from pathlib import Path
from typing import List

from worktree_manager.constants import ENV_FILE_IGNORED_DIRS, Step
from worktree_manager.logging_config import get_logger
from worktree_manager.models.worktree import StepOutcome

logger = get_logger(__name__)


def find_env_files(source_root: str) -> List[Path]:
    """Return every .env* file below source_root, skipping node_modules and .git."""
    found: List[Path] = []

    def on_error(error: OSError):
        raise error

    for dirpath, dirnames, filenames in os.walk(source_root, onerror=on_error):
        dirnames[:] = sorted(d for d in dirnames if d not in ENV_FILE_IGNORED_DIRS)
        for filename in sorted(filenames):
            if filename.startswith(".env"):
                candidate = Path(dirpath) / filename
                if candidate.is_file():
                    found.append(candidate)
    return found


class EnvFileCopier:
    def copy(self, source_root: str, target_root: str) -> StepOutcome:
        """Copy .env files preserving their relative paths.

        Individual copy failures are logged and skipped.
        """
        try:
            env_files = find_env_files(source_root)
        except OSError as e:
            return StepOutcome.degraded(Step.COPYING_ENV_FILES, f"could not scan {source_root}: {e}")

        if not env_files:
            logger.debug("No .env files found to copy")
            return StepOutcome.ok(Step.COPYING_ENV_FILES, "no .env files found")

        logger.info(f"Found {len(env_files)} .env file(s) to copy")
        copied = 0
        failed = []
        for env_file in env_files:
            relative = env_file.relative_to(source_root)
            target = Path(target_root) / relative
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(env_file, target)
                logger.debug(f"Copied: {relative}")
                copied += 1
            except OSError as e:
                logger.warning(f"Failed to copy {env_file}: {e}")
                failed.append(str(relative))

        if failed:
            return StepOutcome.degraded(
                Step.COPYING_ENV_FILES, f"copied {copied}, failed to copy {', '.join(failed)}"
            )
        return StepOutcome.ok(Step.COPYING_ENV_FILES, f"copied {copied} .env file(s)")
