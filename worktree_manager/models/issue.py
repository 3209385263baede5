"""GitHub issue models and URL parsing."""

import re
from dataclasses import dataclass, field
from typing import List

from worktree_manager.exceptions import ValidationError

ISSUE_URL_PATTERN = re.compile(
    r"^https?://github\.com/(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+)/issues/(?P<number>[1-9][0-9]*)$"
)


@dataclass(frozen=True)
class IssueReference:
    """A parsed GitHub issue URL."""

    owner: str
    repo: str
    number: int
    source_url: str

    @property
    def full_name(self) -> str:
        """Repository in owner/name form."""
        return f"{self.owner}/{self.repo}"

    @property
    def path(self) -> str:
        """URL path of the issue, without the leading slash."""
        return f"{self.owner}/{self.repo}/issues/{self.number}"

    def __str__(self) -> str:
        return f"{self.full_name}#{self.number}"


@dataclass
class IssueDetails:
    """Issue content fetched from GitHub."""

    title: str
    body: str = ""
    labels: List[str] = field(default_factory=list)


def parse_issue_url(url: str) -> IssueReference:
    """Parse a GitHub issue URL.

    Only ``http(s)://github.com/<owner>/<repo>/issues/<number>`` is accepted;
    the whole string must match. The number is ASCII digits without a leading
    zero, so owner, repo and number always rebuild the original path.

    Raises:
        ValidationError: If the URL has any other shape
    """
    candidate = url.strip() if isinstance(url, str) else ""
    match = ISSUE_URL_PATTERN.match(candidate)
    if not match:
        raise ValidationError(
            "Invalid GitHub issue URL (expected https://github.com/<owner>/<repo>/issues/<number>)",
            url,
        )

    owner = match.group("owner")
    repo = match.group("repo")
    if owner in (".", "..") or repo in (".", ".."):
        raise ValidationError("Invalid GitHub issue URL", url)

    return IssueReference(owner=owner, repo=repo, number=int(match.group("number")), source_url=candidate)
