"""GitHub API integration service"""

from typing import Mapping, Optional

from github import Auth, Github, GithubException
from requests.exceptions import RequestException

from worktree_manager.exceptions import IssueFetchError
from worktree_manager.logging_config import get_logger
from worktree_manager.models.issue import IssueDetails, IssueReference

logger = get_logger(__name__)

GITHUB_TIMEOUT = 15
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


class GitHubService:
    """Fetches issue details through the GitHub REST API."""

    def __init__(self, token: Optional[str] = None, env: Optional[Mapping[str, str]] = None):
        """Initialize the service.

        Args:
            token: GitHub token from configuration; falls back to GITHUB_TOKEN / GH_TOKEN
            env: Environment to read the token fallback from
        """
        env = env or {}
        self.github_token = token or next((env[k] for k in TOKEN_ENV_VARS if env.get(k)), None)
        self.github: Optional[Github] = None

    def _client(self) -> Github:
        # retry=None: an issue lookup is a single request, never retried
        if self.github is None:
            if self.github_token:
                self.github = Github(auth=Auth.Token(self.github_token), timeout=GITHUB_TIMEOUT, retry=None)
            else:
                logger.debug("[GitHub] No token found, using anonymous access (public repositories only)")
                self.github = Github(timeout=GITHUB_TIMEOUT, retry=None)
        return self.github

    def fetch_issue(self, ref: IssueReference) -> IssueDetails:
        """Fetch title, body and labels of an issue.

        Raises:
            IssueFetchError: If GitHub is unreachable, auth fails, or the issue does not exist
        """
        try:
            logger.info(f"[GitHub] Fetching issue {ref}")
            gh_repo = self._client().get_repo(ref.full_name, lazy=True)
            issue = gh_repo.get_issue(ref.number)
            details = IssueDetails(
                title=issue.title or "",
                body=issue.body or "",
                labels=[label.name for label in issue.labels],
            )
        except GithubException as e:
            message = e.data.get("message") if isinstance(e.data, dict) else None
            raise IssueFetchError(str(ref), f"GitHub API returned {e.status}: {message or e}")
        except RequestException as e:
            raise IssueFetchError(str(ref), f"GitHub unreachable: {e}")

        logger.debug(f"[GitHub] Fetched issue {ref}: {details.title!r}")
        return details

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        if self.github:
            try:
                self.github.close()
                logger.debug("[GitHub] Closed GitHub API connection")
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")
