"""GitHub integration for breakcheck.

Components:
- github_client: GitHub API client for PR files, contents and comments
- comment_generator: Markdown rendering of breaking-change results
- pr_analyzer: pull request analysis orchestrator
"""

from breakcheck.git.comment_generator import (
    CommentConfig,
    CommentGenerator,
    generate_comment,
)
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
    analyze_and_comment,
)

__all__ = [
    "CommentConfig",
    "CommentGenerator",
    "GitHubClient",
    "GitHubConfig",
    "PRAnalysisConfig",
    "PRAnalysisResult",
    "PullRequestAnalyzer",
    "PullRequestFile",
    "PullRequestInfo",
    "analyze_and_comment",
    "generate_comment",
]
