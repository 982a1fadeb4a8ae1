"""Tests for the GitHub client and pull request analyzer."""

import json
from collections.abc import Callable
from unittest.mock import MagicMock

import httpx
import pytest
from github import GithubException

from breakcheck.catalog.client import CatalogClient
from breakcheck.core.outcome import Err, Ok
from breakcheck.errors import GitHubAuthenticationError, GitHubNotFoundError
from breakcheck.git.comment_generator import DEFAULT_MARKER
from breakcheck.git.github_client import (
    GitHubClient,
    GitHubConfig,
    PullRequestFile,
    PullRequestInfo,
)
from breakcheck.git.pr_analyzer import (
    PRAnalysisConfig,
    PRAnalysisResult,
    PullRequestAnalyzer,
)
from breakcheck.manifests import parse_dependency_changes


class TestGitHubClient:
    """Tests for GitHubClient wrappers around PyGithub."""

    @pytest.fixture
    def repo(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def client(self, repo: MagicMock) -> GitHubClient:
        client = GitHubClient(GitHubConfig(token="test-token"))
        gh = MagicMock()
        gh.get_repo.return_value = repo
        client._gh = gh
        return client

    def test_get_file_content(self, client: GitHubClient, repo: MagicMock) -> None:
        content = MagicMock()
        content.decoded_content = b"requests==2.31.0\n"
        repo.get_contents.return_value = content

        outcome = client.get_file_content("owner/repo", "requirements.txt", "abc123")

        assert outcome == Ok("requests==2.31.0\n")
        repo.get_contents.assert_called_once_with("requirements.txt", ref="abc123")

    def test_missing_file_is_empty(self, client: GitHubClient, repo: MagicMock) -> None:
        """Test a 404 means the file does not exist at that revision."""
        repo.get_contents.side_effect = GithubException(404, {"message": "Not Found"}, None)

        assert client.get_file_content("owner/repo", "package.json", "abc") == Ok("")

    def test_directory_is_empty(self, client: GitHubClient, repo: MagicMock) -> None:
        repo.get_contents.return_value = [MagicMock(), MagicMock()]

        assert client.get_file_content("owner/repo", "src", "abc") == Ok("")

    def test_other_errors_are_err(self, client: GitHubClient, repo: MagicMock) -> None:
        repo.get_contents.side_effect = GithubException(500, {"message": "boom"}, None)

        outcome = client.get_file_content("owner/repo", "package.json", "abc")

        assert isinstance(outcome, Err)

    def test_repository_lookup_failure_is_err(self, client: GitHubClient) -> None:
        """Test a failing repository lookup does not escape the fetch."""
        client._gh.get_repo.side_effect = GithubException(502, {"message": "Bad Gateway"}, None)

        outcome = client.get_file_content("owner/repo", "requirements.txt", "base")

        assert isinstance(outcome, Err)
        assert isinstance(outcome.error, GithubException)

    def test_translated_repository_error_is_err(self, client: GitHubClient) -> None:
        client._gh.get_repo.side_effect = GithubException(404, {"message": "Not Found"}, None)

        outcome = client.get_file_content("owner/repo", "requirements.txt", "base")

        assert isinstance(outcome, Err)
        assert isinstance(outcome.error, GitHubNotFoundError)

    def test_byte_order_mark_dropped(self, client: GitHubClient, repo: MagicMock) -> None:
        """Test BOM-prefixed manifests still yield their first pin."""
        old, new = MagicMock(), MagicMock()
        old.decoded_content = "\ufefflangchain==0.2.0\n".encode("utf-8")
        new.decoded_content = "\ufefflangchain==1.0.0\n".encode("utf-8")
        repo.get_contents.side_effect = [old, new]

        old_text = client.get_file_content("owner/repo", "requirements.txt", "base").unwrap()
        new_text = client.get_file_content("owner/repo", "requirements.txt", "head").unwrap()

        assert old_text == "langchain==0.2.0\n"
        changes = parse_dependency_changes("requirements.txt", old_text, new_text)
        assert [(c.package, c.from_version, c.to_version) for c in changes] == [
            ("langchain", "0.2.0", "1.0.0")
        ]

    def test_get_pull_request(self, client: GitHubClient, repo: MagicMock) -> None:
        pr = MagicMock()
        pr.number = 7
        pr.title = "Bump langchain"
        pr.base.sha = "base-sha"
        pr.head.sha = "head-sha"
        pr.html_url = "https://github.com/owner/repo/pull/7"
        repo.get_pull.return_value = pr

        info = client.get_pull_request("owner/repo", 7)

        assert info == PullRequestInfo(
            number=7,
            title="Bump langchain",
            base_sha="base-sha",
            head_sha="head-sha",
            html_url="https://github.com/owner/repo/pull/7",
        )

    def test_missing_pull_request(self, client: GitHubClient, repo: MagicMock) -> None:
        repo.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(GitHubNotFoundError) as exc_info:
            client.get_pull_request("owner/repo", 99)

        assert "#99" in exc_info.value.message

    def test_bad_credentials(self, client: GitHubClient) -> None:
        client._gh.get_repo.side_effect = GithubException(401, {"message": "Bad credentials"}, None)

        with pytest.raises(GitHubAuthenticationError):
            client.get_repository("owner/repo")

    def test_find_bot_comment(self, client: GitHubClient, repo: MagicMock) -> None:
        first = MagicMock(id=1, body="LGTM")
        second = MagicMock(id=2, body=f"{DEFAULT_MARKER}\n## report")
        repo.get_issue.return_value.get_comments.return_value = [first, second]

        assert client.find_bot_comment("owner/repo", 5, DEFAULT_MARKER) == 2

    def test_find_bot_comment_none(self, client: GitHubClient, repo: MagicMock) -> None:
        repo.get_issue.return_value.get_comments.return_value = [MagicMock(id=1, body=None)]

        assert client.find_bot_comment("owner/repo", 5, DEFAULT_MARKER) is None

    def test_post_and_update_comment(self, client: GitHubClient, repo: MagicMock) -> None:
        repo.get_issue.return_value.create_comment.return_value = MagicMock(id=11)

        assert client.post_pr_comment("owner/repo", 5, "body") == 11
        repo.get_issue.return_value.create_comment.assert_called_once_with("body")

        client.update_pr_comment("owner/repo", 11, "new body")
        repo.get_issue_comment.assert_called_once_with(11)
        repo.get_issue_comment.return_value.edit.assert_called_once_with("new body")


def _github_client(
    files: list[PullRequestFile],
    contents: dict[tuple[str, str], object],
) -> MagicMock:
    """Mock GitHubClient serving file contents keyed by (path, ref)."""
    client = MagicMock(spec=GitHubClient)
    client.get_pull_request.return_value = PullRequestInfo(
        number=5, title="Bump deps", base_sha="base", head_sha="head"
    )
    client.get_pr_files.return_value = files

    def get_file_content(repo: str, path: str, ref: str) -> object:
        return contents.get((path, ref), Ok(""))

    client.get_file_content.side_effect = get_file_content
    client.find_bot_comment.return_value = None
    client.post_pr_comment.return_value = 101
    return client


def _diff_route(breaking: dict[str, list]) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        package = request.url.params["package"]
        return httpx.Response(200, json={"breaking_changes": breaking.get(package, [])})

    return handler


class TestPullRequestAnalyzer:
    """Tests for the analysis orchestrator."""

    @pytest.mark.asyncio
    async def test_no_manifest_files(self, make_catalog: Callable[..., CatalogClient]) -> None:
        """Test PRs without manifests are skipped without catalog calls."""
        github = _github_client([PullRequestFile("README.md", "modified")], {})
        analyzer = PullRequestAnalyzer(github, catalog_client=make_catalog({}))

        result = await analyzer.analyze_pr("owner/repo", 5)

        assert result.changes == []
        assert result.comment_body is None
        github.get_file_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_version_changes(
        self,
        make_catalog: Callable[..., CatalogClient],
        catalog_requests: list[httpx.Request],
    ) -> None:
        """Test manifest edits without version deltas stop before the catalog."""
        github = _github_client(
            [PullRequestFile("requirements.txt", "modified")],
            {
                ("requirements.txt", "base"): Ok("requests==2.31.0\n"),
                ("requirements.txt", "head"): Ok("requests==2.31.0\nhttpx==0.27.0\n"),
            },
        )
        analyzer = PullRequestAnalyzer(github, catalog_client=make_catalog({}))

        result = await analyzer.analyze_pr("owner/repo", 5)

        assert result.changes == []
        assert result.manifest_files == ["requirements.txt"]
        assert catalog_requests == []

    @pytest.mark.asyncio
    async def test_changes_resolved_and_comment_rendered(
        self,
        make_catalog: Callable[..., CatalogClient],
    ) -> None:
        """Test changes from several manifests flow through to the comment."""
        github = _github_client(
            [
                PullRequestFile("requirements.txt", "modified"),
                PullRequestFile("web/package.json", "modified"),
                PullRequestFile("docs/index.md", "modified"),
            ],
            {
                ("requirements.txt", "base"): Ok("langchain==0.2.0\n"),
                ("requirements.txt", "head"): Ok("langchain==1.0.0\n"),
                ("web/package.json", "base"): Ok(json.dumps({"dependencies": {"react": "^17.0.2"}})),
                ("web/package.json", "head"): Ok(json.dumps({"dependencies": {"react": "^18.2.0"}})),
            },
        )
        catalog = make_catalog(
            {"/diff": _diff_route({"langchain": [{"change": "ChatOpenAI moved", "fix": "Update import"}]})}
        )
        analyzer = PullRequestAnalyzer(github, catalog_client=catalog)

        result = await analyzer.analyze_pr("owner/repo", 5)

        assert [c.package for c in result.changes] == ["langchain", "react"]
        assert [r.package for r in result.results] == ["langchain", "react"]
        assert result.breaking_count == 1
        assert result.comment_body is not None
        assert "### langchain: 0.2.0 → 1.0.0" in result.comment_body
        assert "### react" not in result.comment_body
        assert result.should_fail is False

    @pytest.mark.asyncio
    async def test_fetch_failure_treated_as_empty(
        self,
        make_catalog: Callable[..., CatalogClient],
    ) -> None:
        """Test an unreadable base snapshot means nothing to compare against."""
        github = _github_client(
            [PullRequestFile("requirements.txt", "modified")],
            {
                ("requirements.txt", "base"): Err(GithubException(500, {}, None)),
                ("requirements.txt", "head"): Ok("langchain==1.0.0\n"),
            },
        )
        analyzer = PullRequestAnalyzer(github, catalog_client=make_catalog({}))

        result = await analyzer.analyze_pr("owner/repo", 5)

        assert result.changes == []

    @pytest.mark.asyncio
    async def test_renamed_manifest_reads_previous_path(
        self,
        make_catalog: Callable[..., CatalogClient],
    ) -> None:
        """Test the base snapshot of a moved manifest comes from its old path."""
        github = _github_client(
            [PullRequestFile("api/requirements.txt", "renamed", previous_filename="requirements.txt")],
            {
                ("requirements.txt", "base"): Ok("fastapi==0.100.0\n"),
                ("api/requirements.txt", "head"): Ok("fastapi==0.110.0\n"),
            },
        )
        analyzer = PullRequestAnalyzer(
            github, catalog_client=make_catalog({"/diff": (200, {"breaking_changes": []})})
        )

        result = await analyzer.analyze_pr("owner/repo", 5)

        assert [(c.package, c.from_version, c.to_version) for c in result.changes] == [
            ("fastapi", "0.100.0", "0.110.0")
        ]
        assert result.comment_body is None

    @pytest.mark.asyncio
    async def test_fail_on_breaking(self, make_catalog: Callable[..., CatalogClient]) -> None:
        """Test should_fail is set only when configured and breaking changes exist."""
        github = _github_client(
            [PullRequestFile("requirements.txt", "modified")],
            {
                ("requirements.txt", "base"): Ok("pydantic==1.10.0\n"),
                ("requirements.txt", "head"): Ok("pydantic==2.0.0\n"),
            },
        )
        catalog = make_catalog({"/diff": _diff_route({"pydantic": ["v1 API removed"]})})
        analyzer = PullRequestAnalyzer(
            github, PRAnalysisConfig(fail_on_breaking=True), catalog_client=catalog
        )

        result = await analyzer.analyze_pr("owner/repo", 5)

        assert result.should_fail is True


class TestApplyAnalysisResult:
    """Tests for comment upserts."""

    @pytest.mark.asyncio
    async def test_creates_comment(self, make_catalog: Callable[..., CatalogClient]) -> None:
        github = _github_client([], {})
        analyzer = PullRequestAnalyzer(github, catalog_client=make_catalog({}))
        result = PRAnalysisResult(comment_body=f"{DEFAULT_MARKER}\nbody")

        await analyzer.apply_analysis_result("owner/repo", 5, result)

        github.find_bot_comment.assert_called_once_with("owner/repo", 5, DEFAULT_MARKER)
        github.post_pr_comment.assert_called_once_with("owner/repo", 5, result.comment_body)
        assert result.comment_action == "created"
        assert result.comment_id == 101

    @pytest.mark.asyncio
    async def test_updates_existing_comment(self, make_catalog: Callable[..., CatalogClient]) -> None:
        github = _github_client([], {})
        github.find_bot_comment.return_value = 77
        analyzer = PullRequestAnalyzer(github, catalog_client=make_catalog({}))
        result = PRAnalysisResult(comment_body=f"{DEFAULT_MARKER}\nbody")

        await analyzer.apply_analysis_result("owner/repo", 5, result)

        github.update_pr_comment.assert_called_once_with("owner/repo", 77, result.comment_body)
        github.post_pr_comment.assert_not_called()
        assert result.comment_action == "updated"

    @pytest.mark.asyncio
    async def test_nothing_posted_without_body(self, make_catalog: Callable[..., CatalogClient]) -> None:
        github = _github_client([], {})
        analyzer = PullRequestAnalyzer(github, catalog_client=make_catalog({}))

        await analyzer.apply_analysis_result("owner/repo", 5, PRAnalysisResult())

        github.find_bot_comment.assert_not_called()
        github.post_pr_comment.assert_not_called()

    @pytest.mark.asyncio
    async def test_posting_disabled(self, make_catalog: Callable[..., CatalogClient]) -> None:
        github = _github_client([], {})
        analyzer = PullRequestAnalyzer(
            github, PRAnalysisConfig(post_comment=False), catalog_client=make_catalog({})
        )

        await analyzer.apply_analysis_result(
            "owner/repo", 5, PRAnalysisResult(comment_body="body")
        )

        github.post_pr_comment.assert_not_called()
