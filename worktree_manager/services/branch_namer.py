"""Branch name derivation for new worktrees."""

import json
import re
import shutil
import subprocess
from typing import Mapping, Optional

from worktree_manager.constants import FALLBACK_TITLE_WORDS, MAX_BRANCH_NAME_LENGTH
from worktree_manager.exceptions import ValidationError
from worktree_manager.logging_config import get_logger
from worktree_manager.models.issue import IssueDetails, IssueReference
from worktree_manager.services.interfaces import NamingAssistant

logger = get_logger(__name__)

_INVALID_CHARS = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")

NAMING_PROMPT = """Based on this GitHub issue, generate a short kebab-case branch name (max {max_length} chars).

Issue #{number}: {title}

Description:
{body}

Return ONLY the branch name, nothing else."""


def sanitize_branch_name(name: str) -> str:
    """Lowercase, replace anything outside [a-z0-9-] with '-', collapse runs of '-'.

    Returns an empty string when nothing usable remains.
    """
    slug = _INVALID_CHARS.sub("-", name.strip().lower())
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")


def slugify_title(title: str, max_words: int = FALLBACK_TITLE_WORDS) -> str:
    """Slug of the first few words of an issue title."""
    words = [sanitize_branch_name(word) for word in title.split()]
    words = [word for word in words if word]
    return sanitize_branch_name("-".join(words[:max_words]))


def fallback_branch_name(ref: IssueReference, details: Optional[IssueDetails] = None) -> str:
    """``issue-<number>``, suffixed with a title slug when a title is known."""
    base = f"issue-{ref.number}"
    if details is None or not details.title:
        return base

    slug = slugify_title(details.title)
    if not slug:
        return base

    name = f"{base}-{slug}"[:MAX_BRANCH_NAME_LENGTH]
    return name.rstrip("-")


class ClaudeNamingAssistant:
    """Asks the Claude CLI for a branch name."""

    def __init__(self, command: str = "claude", timeout: int = 30, env: Optional[Mapping[str, str]] = None):
        self.command = command
        self.timeout = timeout
        self.env = dict(env) if env else None

    def is_available(self) -> bool:
        path = self.env.get("PATH") if self.env else None
        return shutil.which(self.command, path=path) is not None

    def suggest_name(self, ref: IssueReference, details: IssueDetails) -> Optional[str]:
        """Run the CLI and return its ``result`` field.

        Raises:
            subprocess.SubprocessError: On timeout or non-zero exit
            ValueError: If the output is not the expected JSON document
        """
        prompt = NAMING_PROMPT.format(
            max_length=MAX_BRANCH_NAME_LENGTH,
            number=ref.number,
            title=details.title,
            body=(details.body or "")[:500],
        )
        logger.info("Generating branch name with Claude CLI...")
        result = subprocess.run(
            [self.command, "-p", prompt, "--output-format", "json"],
            check=True,
            capture_output=True,
            text=True,
            timeout=self.timeout,
            env=self.env,
        )
        output = json.loads(result.stdout)
        if not isinstance(output, dict):
            raise ValueError("unexpected output from naming assistant")
        suggestion = output.get("result")
        return suggestion.strip() if isinstance(suggestion, str) else None


class BranchNamer:
    """Derives a branch name: explicit override, then assistant, then fallback."""

    def __init__(self, assistant: Optional[NamingAssistant] = None):
        self.assistant = assistant

    @staticmethod
    def sanitize_override(name: str) -> str:
        """Sanitize an explicit branch name.

        Raises:
            ValidationError: If no valid characters remain
        """
        sanitized = sanitize_branch_name(name)
        if not sanitized:
            raise ValidationError("Invalid branch name", name)
        if sanitized != name:
            logger.info(f"Branch name '{name}' sanitized to '{sanitized}'")
        return sanitized

    def derive_name(
        self,
        explicit_override: Optional[str],
        issue_details: Optional[IssueDetails],
        issue_ref: IssueReference,
    ) -> str:
        """Return the branch name for a new worktree."""
        if explicit_override:
            return self.sanitize_override(explicit_override)

        if issue_details is not None and issue_details.title:
            suggestion = self._ask_assistant(issue_ref, issue_details)
            if suggestion:
                return suggestion

        return fallback_branch_name(issue_ref, issue_details)

    def _ask_assistant(self, ref: IssueReference, details: IssueDetails) -> Optional[str]:
        """Best effort: any failure returns None so naming falls through."""
        if self.assistant is None:
            return None

        try:
            if not self.assistant.is_available():
                logger.debug("Naming assistant not available")
                return None
            raw = self.assistant.suggest_name(ref, details)
        except (subprocess.SubprocessError, OSError, ValueError) as e:
            logger.warning(f"Naming assistant failed, using fallback branch name: {e}")
            return None

        if not raw:
            logger.warning("Naming assistant returned nothing, using fallback branch name")
            return None

        suggestion = sanitize_branch_name(raw)
        if not suggestion or len(suggestion) > MAX_BRANCH_NAME_LENGTH:
            logger.warning(f"Naming assistant returned unusable name {raw!r}, using fallback")
            return None

        logger.info(f"Generated branch name: {suggestion}")
        return suggestion
