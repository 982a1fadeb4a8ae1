"""GitHub pull request analyzer orchestrating the breakcheck pipeline."""

from dataclasses import dataclass, field
from typing import Optional

from breakcheck.catalog.client import CATALOG_API_BASE_URL, CatalogClient
from breakcheck.catalog.resolver import BreakingChangeResolver
from breakcheck.catalog.sources import DEFAULT_GUIDES_URL
from breakcheck.config import BreakcheckConfig
from breakcheck.core.models import BreakingResult, DependencyChange
from breakcheck.core.outcome import capture
from breakcheck.git.comment_generator import CommentConfig, CommentGenerator
from breakcheck.git.github_client import GitHubClient, PullRequestFile
from breakcheck.manifests import is_manifest_file, parse_dependency_changes
from breakcheck.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PRAnalysisConfig:
    """Configuration for PR analysis."""

    # Whether to post or update the comment
    post_comment: bool = True

    # Whether detected breaking changes fail the run
    fail_on_breaking: bool = False

    # Catalog access
    catalog_url: str = CATALOG_API_BASE_URL
    guides_url: str = DEFAULT_GUIDES_URL
    service_key: Optional[str] = None
    timeout: float = 30.0

    comment: CommentConfig = field(default_factory=CommentConfig)

    @classmethod
    def from_config(cls, config: BreakcheckConfig) -> "PRAnalysisConfig":
        """Build analysis settings from the loaded configuration."""
        return cls(
            post_comment=config.analysis.post_comment,
            fail_on_breaking=config.analysis.fail_on_breaking,
            catalog_url=config.catalog.api_url,
            guides_url=config.catalog.guides_url,
            service_key=config.catalog.service_key,
            timeout=config.catalog.timeout,
            comment=CommentConfig(
                marker=config.comment.marker,
                table_threshold=config.comment.table_threshold,
            ),
        )


@dataclass
class PRAnalysisResult:
    """Result of PR analysis."""

    changes: list[DependencyChange] = field(default_factory=list)
    results: list[BreakingResult] = field(default_factory=list)
    manifest_files: list[str] = field(default_factory=list)
    comment_body: Optional[str] = None
    should_fail: bool = False
    comment_id: Optional[int] = None
    comment_action: Optional[str] = None  # created, updated

    @property
    def breaking_count(self) -> int:
        return sum(len(r.breaking_changes) for r in self.results)


class PullRequestAnalyzer:
    """Orchestrates breaking-change analysis of GitHub pull requests."""

    def __init__(
        self,
        github_client: GitHubClient,
        config: Optional[PRAnalysisConfig] = None,
        catalog_client: Optional[CatalogClient] = None,
    ):
        """Initialize the PR analyzer.

        Args:
            github_client: GitHub client instance.
            config: Optional analysis configuration.
            catalog_client: Catalog client; built from ``config`` if omitted.
        """
        self._client = github_client
        self._config = config or PRAnalysisConfig()
        self._catalog = catalog_client or CatalogClient(
            base_url=self._config.catalog_url,
            service_key=self._config.service_key,
            timeout=self._config.timeout,
        )
        self._comment_generator = CommentGenerator(self._config.comment)

    async def analyze_pr(
        self,
        repo_full_name: str,
        pr_number: int,
    ) -> PRAnalysisResult:
        """Analyze a pull request.

        Args:
            repo_full_name: Repository full name (owner/repo).
            pr_number: Pull request number.

        Returns:
            Analysis result.
        """
        logger.info("Analyzing PR #%d for dependency changes...", pr_number)

        pr_info = self._client.get_pull_request(repo_full_name, pr_number)
        files = self._client.get_pr_files(repo_full_name, pr_number)

        manifests = [f for f in files if is_manifest_file(f.filename)]
        if not manifests:
            logger.info("No dependency files changed")
            return PRAnalysisResult()

        logger.info("Found %d dependency file(s) changed", len(manifests))

        changes: list[DependencyChange] = []
        for manifest in manifests:
            changes.extend(
                self._collect_changes(
                    repo_full_name, manifest, pr_info.base_sha, pr_info.head_sha
                )
            )

        result = PRAnalysisResult(
            changes=changes,
            manifest_files=[m.filename for m in manifests],
        )

        if not changes:
            logger.info("No dependency version changes detected")
            return result

        logger.info(
            "Found %d dependency change(s), checking for breaking changes...",
            len(changes),
        )

        async with self._catalog as catalog:
            resolver = BreakingChangeResolver(catalog, self._config.guides_url)
            result.results = await resolver.resolve(changes)

        result.comment_body = self._comment_generator.generate(result.results)
        result.should_fail = self._config.fail_on_breaking and any(
            r.has_breaking_changes for r in result.results
        )

        return result

    def _collect_changes(
        self,
        repo_full_name: str,
        manifest: PullRequestFile,
        base_sha: str,
        head_sha: str,
    ) -> list[DependencyChange]:
        """Diff one manifest between the base and head revisions."""
        old_path = manifest.previous_filename or manifest.filename
        old_content = self._fetch_content(repo_full_name, old_path, base_sha)
        new_content = self._fetch_content(repo_full_name, manifest.filename, head_sha)

        def skip_file(error: Exception) -> list[DependencyChange]:
            logger.warning("Failed to parse %s: %s", manifest.filename, error)
            return []

        return capture(
            parse_dependency_changes, manifest.filename, old_content, new_content
        ).unwrap_or_else(skip_file)

    def _fetch_content(self, repo_full_name: str, path: str, ref: str) -> str:
        def as_empty(error: Exception) -> str:
            logger.debug("Could not fetch %s at %s, treating as empty: %s", path, ref, error)
            return ""

        return self._client.get_file_content(repo_full_name, path, ref).unwrap_or_else(as_empty)

    async def apply_analysis_result(
        self,
        repo_full_name: str,
        pr_number: int,
        result: PRAnalysisResult,
    ) -> None:
        """Post or update the analysis comment on the PR.

        The previous comment is found by its hidden marker, so re-runs edit
        it in place instead of adding another one.

        Args:
            repo_full_name: Repository full name.
            pr_number: Pull request number.
            result: Analysis result to apply.
        """
        if not result.comment_body or not self._config.post_comment:
            return

        existing_comment = self._client.find_bot_comment(
            repo_full_name, pr_number, self._comment_generator.marker
        )

        if existing_comment:
            self._client.update_pr_comment(
                repo_full_name, existing_comment, result.comment_body
            )
            result.comment_id = existing_comment
            result.comment_action = "updated"
            logger.info("Updated existing comment")
        else:
            result.comment_id = self._client.post_pr_comment(
                repo_full_name, pr_number, result.comment_body
            )
            result.comment_action = "created"
            logger.info("Posted new comment")


async def analyze_and_comment(
    github_client: GitHubClient,
    repo_full_name: str,
    pr_number: int,
    config: Optional[PRAnalysisConfig] = None,
) -> PRAnalysisResult:
    """Convenience function running the whole pipeline for one PR.

    Args:
        github_client: GitHub client instance.
        repo_full_name: Repository full name.
        pr_number: Pull request number.
        config: Optional analysis configuration.

    Returns:
        Analysis result with comment details filled in.
    """
    analyzer = PullRequestAnalyzer(github_client, config)
    result = await analyzer.analyze_pr(repo_full_name, pr_number)
    await analyzer.apply_analysis_result(repo_full_name, pr_number, result)
    return result
