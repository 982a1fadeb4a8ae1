"""GitHub API client for pull request operations."""

import os
from dataclasses import dataclass
from typing import Optional

from github import Auth, Github, GithubException
from github.Repository import Repository

from breakcheck.core.outcome import Err, Ok, Outcome
from breakcheck.errors import (
    BreakcheckError,
    GitHubAccessDeniedError,
    GitHubAuthenticationError,
    GitHubNotFoundError,
)
from breakcheck.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"


@dataclass
class GitHubConfig:
    """Configuration for GitHub client."""

    token: Optional[str] = None
    base_url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls) -> "GitHubConfig":
        """Create config from environment variables."""
        return cls(
            token=os.environ.get("GITHUB_TOKEN"),
            base_url=os.environ.get("GITHUB_API_URL", DEFAULT_API_URL),
        )


@dataclass
class PullRequestInfo:
    """Information about a pull request."""

    number: int
    title: str
    base_sha: str
    head_sha: str
    html_url: str = ""


@dataclass
class PullRequestFile:
    """A file changed in a pull request."""

    filename: str
    status: str  # added, removed, modified, renamed
    previous_filename: Optional[str] = None


class GitHubClient:
    """Client for GitHub API operations."""

    def __init__(self, config: Optional[GitHubConfig] = None):
        """Initialize the GitHub client.

        Args:
            config: GitHub configuration. If None, reads from environment.
        """
        self._config = config or GitHubConfig.from_env()
        self._gh: Optional[Github] = None

    def _get_client(self) -> Github:
        """Get or create the GitHub client."""
        if self._gh is None:
            if self._config.token:
                auth = Auth.Token(self._config.token)
                if self._config.base_url != DEFAULT_API_URL:
                    self._gh = Github(
                        auth=auth,
                        base_url=self._config.base_url,
                    )
                else:
                    self._gh = Github(auth=auth)
            else:
                self._gh = Github()

        return self._gh

    def get_repository(self, repo_full_name: str) -> Repository:
        """Get a GitHub repository.

        Args:
            repo_full_name: Repository full name (e.g., "owner/repo").

        Returns:
            GitHub repository object.

        Raises:
            GitHubAuthenticationError: If the token is rejected.
            GitHubAccessDeniedError: If the token lacks access.
            GitHubNotFoundError: If the repository does not exist.
        """
        gh = self._get_client()
        try:
            return gh.get_repo(repo_full_name)
        except GithubException as e:
            self._raise_translated(e, repo_full_name)
            raise

    def get_pull_request(
        self,
        repo_full_name: str,
        pr_number: int,
    ) -> PullRequestInfo:
        """Get pull request information.

        Args:
            repo_full_name: Repository full name.
            pr_number: Pull request number.

        Returns:
            Pull request information.
        """
        repo = self.get_repository(repo_full_name)
        try:
            pr = repo.get_pull(pr_number)
        except GithubException as e:
            self._raise_translated(e, repo_full_name, pr_number)
            raise

        return PullRequestInfo(
            number=pr.number,
            title=pr.title,
            base_sha=pr.base.sha,
            head_sha=pr.head.sha,
            html_url=pr.html_url,
        )

    def get_pr_files(
        self,
        repo_full_name: str,
        pr_number: int,
    ) -> list[PullRequestFile]:
        """Get files changed in a pull request.

        Args:
            repo_full_name: Repository full name.
            pr_number: Pull request number.

        Returns:
            List of changed files.
        """
        repo = self.get_repository(repo_full_name)
        pr = repo.get_pull(pr_number)

        return [
            PullRequestFile(
                filename=f.filename,
                status=f.status,
                previous_filename=f.previous_filename,
            )
            for f in pr.get_files()
        ]

    def get_file_content(
        self,
        repo_full_name: str,
        file_path: str,
        ref: str,
    ) -> Outcome[str]:
        """Get file content at a revision.

        Args:
            repo_full_name: Repository full name.
            file_path: Path to file in repository.
            ref: Branch, tag, or commit SHA.

        Returns:
            ``Ok`` with the decoded text, minus any byte-order mark (empty when
            the file does not exist at ``ref`` or is a directory), ``Err`` for
            any other API error, including a failed repository lookup.
        """
        try:
            repo = self.get_repository(repo_full_name)
        except (GithubException, BreakcheckError) as e:
            return Err(e)

        try:
            content = repo.get_contents(file_path, ref=ref)
        except GithubException as e:
            if e.status == 404:
                return Ok("")
            return Err(e)

        if isinstance(content, list):
            return Ok("")  # Directory

        try:
            return Ok(content.decoded_content.decode("utf-8-sig"))
        except (AssertionError, UnicodeDecodeError) as e:
            return Err(e)

    def post_pr_comment(
        self,
        repo_full_name: str,
        pr_number: int,
        body: str,
    ) -> int:
        """Post a comment on a pull request.

        Args:
            repo_full_name: Repository full name.
            pr_number: Pull request number.
            body: Comment body.

        Returns:
            Comment ID.
        """
        repo = self.get_repository(repo_full_name)
        issue = repo.get_issue(pr_number)
        comment = issue.create_comment(body)
        return comment.id

    def update_pr_comment(
        self,
        repo_full_name: str,
        comment_id: int,
        body: str,
    ) -> None:
        """Update an existing pull request comment.

        Args:
            repo_full_name: Repository full name.
            comment_id: Comment ID to update.
            body: New comment body.
        """
        repo = self.get_repository(repo_full_name)
        comment = repo.get_issue_comment(comment_id)
        comment.edit(body)

    def find_bot_comment(
        self,
        repo_full_name: str,
        pr_number: int,
        marker: str,
    ) -> Optional[int]:
        """Find an existing bot comment by marker.

        Args:
            repo_full_name: Repository full name.
            pr_number: Pull request number.
            marker: HTML comment marker to find.

        Returns:
            Comment ID if found, None otherwise.
        """
        repo = self.get_repository(repo_full_name)
        issue = repo.get_issue(pr_number)

        for comment in issue.get_comments():
            if marker in (comment.body or ""):
                return comment.id

        return None

    @staticmethod
    def _raise_translated(
        error: GithubException,
        repo_full_name: str,
        pr_number: Optional[int] = None,
    ) -> None:
        """Re-raise well-known API statuses as breakcheck errors."""
        if error.status == 401:
            raise GitHubAuthenticationError() from error
        if error.status == 403:
            raise GitHubAccessDeniedError(repo=repo_full_name) from error
        if error.status == 404:
            raise GitHubNotFoundError(repo=repo_full_name, pr_number=pr_number) from error
