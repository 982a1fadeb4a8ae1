"""Configuration management for breakcheck."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from breakcheck.catalog.client import CATALOG_API_BASE_URL
from breakcheck.catalog.sources import DEFAULT_GUIDES_URL
from breakcheck.utils.actions import get_bool_input, get_input

CONFIG_FILE_NAMES = (".breakcheck.yml", ".breakcheck.yaml")


class CatalogConfig(BaseModel):
    """Configuration for the breaking-change catalog."""

    api_url: str = Field(
        default=CATALOG_API_BASE_URL,
        description="Catalog API base URL",
    )
    guides_url: str = Field(
        default=DEFAULT_GUIDES_URL,
        description="Base URL for migration guide links",
    )
    service_key: str | None = Field(
        default=None,
        description="Optional catalog service key (prefer CHANGE8_SERVICE_KEY env var)",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )

    @field_validator("api_url", "guides_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL without trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")


class GitHubConfig(BaseModel):
    """Configuration for GitHub integration."""

    api_url: str = Field(
        default="https://api.github.com",
        description="GitHub API URL",
    )
    token: str | None = Field(
        default=None,
        description="GitHub token (prefer the github-token input or GITHUB_TOKEN)",
    )


class AnalysisConfig(BaseModel):
    """Configuration for pull request analysis."""

    fail_on_breaking: bool = Field(
        default=False,
        description="Fail the run when breaking changes are detected",
    )
    post_comment: bool = Field(
        default=True,
        description="Post or update the analysis comment on the PR",
    )


class CommentSettings(BaseModel):
    """Configuration for the rendered PR comment."""

    marker: str = Field(
        default="<!-- change8-action -->",
        description="Hidden marker used to find the previous comment",
    )
    table_threshold: int = Field(
        default=3,
        ge=0,
        description="Render a table only for packages with at most this many changes",
    )

    @field_validator("marker")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """Require an HTML comment so the marker stays hidden."""
        if not (v.startswith("<!--") and v.endswith("-->")):
            raise ValueError("marker must be an HTML comment")
        return v


class BreakcheckConfig(BaseModel):
    """Complete breakcheck configuration."""

    version: int = Field(default=1, description="Configuration file version")
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    comment: CommentSettings = Field(default_factory=CommentSettings)


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find the nearest .breakcheck.yml configuration file.

    Searches from start_path up to the root directory.

    Args:
        start_path: Starting directory for search (defaults to cwd).

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return config_path
        current = current.parent

    return None


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def load_config(config_path: Path | None = None) -> BreakcheckConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Action inputs and environment variables
    2. Config file
    3. Defaults

    Args:
        config_path: Path to config file (searches if not provided).

    Returns:
        Loaded configuration.
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file()

    if config_path and config_path.exists():
        with open(config_path) as f:
            file_data = yaml.safe_load(f)
            if file_data:
                config_data = file_data

    # An empty section in YAML ("github:") loads as None
    for section in ("catalog", "github", "analysis", "comment"):
        if section in config_data and config_data[section] is None:
            del config_data[section]

    github_token = get_input("github-token") or _first_env("GITHUB_TOKEN")
    if github_token:
        config_data.setdefault("github", {})["token"] = github_token

    github_api_url = _first_env("GITHUB_API_URL")
    if github_api_url:
        config_data.setdefault("github", {})["api_url"] = github_api_url

    service_key = get_input("service-key") or _first_env("CHANGE8_SERVICE_KEY")
    if service_key:
        config_data.setdefault("catalog", {})["service_key"] = service_key

    if get_input("fail-on-breaking"):
        config_data.setdefault("analysis", {})["fail_on_breaking"] = get_bool_input(
            "fail-on-breaking"
        )

    return BreakcheckConfig(**config_data)


def generate_example_config() -> str:
    """Generate an example configuration file.

    Returns:
        YAML string of example configuration.
    """
    example = """# breakcheck configuration

version: 1

# Breaking-change catalog (service key via CHANGE8_SERVICE_KEY env var)
catalog:
  api_url: https://api.change8.dev/api/v1
  guides_url: https://www.change8.dev/guides
  # Per-request timeout in seconds
  timeout: 30

# GitHub configuration (token via the github-token input or GITHUB_TOKEN)
github:
  api_url: https://api.github.com

# Pull request analysis
analysis:
  # Fail the run when breaking changes are detected
  fail_on_breaking: false
  # Post or update the analysis comment
  post_comment: true

# Rendered comment
comment:
  marker: "<!-- change8-action -->"
  # Show the issue/fix table only for packages with this many changes or fewer
  table_threshold: 3
"""
    return example
