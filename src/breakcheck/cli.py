"""Command-line interface for breakcheck."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from breakcheck import __version__
from breakcheck.utils.logging import configure_logging, get_logger

if TYPE_CHECKING:
    from breakcheck.core.models import BreakingResult, DependencyChange
    from breakcheck.git.pr_analyzer import PRAnalysisResult


app = typer.Typer(
    name="breakcheck",
    help="Flag breaking dependency upgrades in pull requests and link the migration guides.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    name="config",
    help="Configuration management.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = Console()
logger = get_logger(__name__)

_state: dict[str, Path | None] = {"config": None}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"breakcheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """breakcheck - know which dependency upgrades break before you merge."""
    log_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    configure_logging(level=log_level)

    _state["config"] = config
    if config:
        logger.debug("Using configuration file: %s", config)


def _handle_cli_error(error: Exception) -> None:
    """Handle exceptions and display user-friendly error messages.

    Args:
        error: The exception to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    from breakcheck.errors import BreakcheckError
    from breakcheck.utils.actions import set_failed

    if isinstance(error, BreakcheckError):
        console.print(f"[bold red]Error:[/bold red] {error.message}")
        if error.hint:
            console.print(f"[yellow]Hint:[/yellow] {error.hint}")
        set_failed(error.message)
    else:
        console.print(f"[red]Error: {error}[/red]")
        logger.exception("Command failed")
        set_failed(str(error))

    raise typer.Exit(code=1)


@app.command()
def analyze(
    repo: Annotated[
        str | None,
        typer.Option(
            "--repo",
            help="GitHub repository (owner/repo). Defaults to the Actions context.",
        ),
    ] = None,
    pr: Annotated[
        int | None,
        typer.Option(
            "--pr",
            help="Pull request number. Defaults to the Actions event payload.",
        ),
    ] = None,
    fail_on_breaking: Annotated[
        bool | None,
        typer.Option(
            "--fail-on-breaking/--no-fail-on-breaking",
            help="Exit with code 1 when breaking changes are detected.",
        ),
    ] = None,
    comment: Annotated[
        bool,
        typer.Option(
            "--comment/--no-comment",
            help="Post or update the analysis comment on the PR.",
        ),
    ] = True,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write a JSON report to file.",
        ),
    ] = None,
) -> None:
    """Analyze a pull request's dependency changes for breaking upgrades."""
    from breakcheck.config import load_config
    from breakcheck.errors import MissingTokenError
    from breakcheck.git.github_client import GitHubClient, GitHubConfig
    from breakcheck.git.pr_analyzer import PRAnalysisConfig, PullRequestAnalyzer
    from breakcheck.utils.actions import (
        load_event_context,
        set_failed,
        write_output,
        write_step_summary,
    )

    try:
        config = load_config(_state["config"])

        if repo is None or pr is None:
            context = load_event_context()
            repo = repo or context.repository
            if pr is None:
                if not context.is_pull_request:
                    console.print("Not a pull request, skipping")
                    return
                pr = context.pr_number

        if not repo or pr is None:
            console.print(
                "[bold red]Error:[/bold red] Must specify --repo and --pr outside GitHub Actions",
                style="red",
            )
            raise typer.Exit(code=1)

        if not config.github.token:
            raise MissingTokenError("github-token")

        analysis_config = PRAnalysisConfig.from_config(config)
        analysis_config.post_comment = comment and config.analysis.post_comment
        if fail_on_breaking is not None:
            analysis_config.fail_on_breaking = fail_on_breaking

        github_client = GitHubClient(
            GitHubConfig(token=config.github.token, base_url=config.github.api_url)
        )
        analyzer = PullRequestAnalyzer(github_client, analysis_config)

        console.print(f"Analyzing GitHub PR #{pr} in {repo}...")

        async def run() -> PRAnalysisResult:
            result = await analyzer.analyze_pr(repo, pr)
            await analyzer.apply_analysis_result(repo, pr, result)
            return result

        result = asyncio.run(run())

        _print_results(result.changes, result.results)

        if result.comment_action:
            console.print(f"[green]Analysis comment {result.comment_action}[/green]")

        write_output("breaking-changes", str(result.breaking_count))
        write_output("packages-changed", str(len(result.changes)))
        if result.comment_body:
            write_step_summary(result.comment_body)

        if output:
            output.write_text(json.dumps(_report_data(repo, pr, result), indent=2))
            console.print(f"\nReport written to: {output}")

        if result.should_fail:
            set_failed("Breaking changes detected in dependencies")
            raise typer.Exit(code=1)

    except typer.Exit:
        raise
    except Exception as e:
        _handle_cli_error(e)


@app.command()
def diff(
    filename: Annotated[
        str,
        typer.Argument(help="Manifest name used to pick the parser, e.g. requirements.txt."),
    ],
    old_file: Annotated[
        Path | None,
        typer.Argument(
            help="Manifest at the base revision (omit for a new file).",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    new_file: Annotated[
        Path | None,
        typer.Argument(
            help="Manifest at the head revision (omit for a deleted file).",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    resolve: Annotated[
        bool,
        typer.Option(
            "--resolve/--no-resolve",
            help="Look up breaking changes and print the rendered comment.",
        ),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the detected changes as JSON.",
        ),
    ] = None,
) -> None:
    """Show dependency version changes between two local manifest files."""
    from breakcheck.catalog.resolver import get_breaking_changes
    from breakcheck.config import load_config
    from breakcheck.git.comment_generator import CommentConfig, CommentGenerator
    from breakcheck.manifests import is_manifest_file, parse_dependency_changes

    if not is_manifest_file(filename):
        console.print(
            f"[yellow]{filename} is not a supported manifest "
            "(requirements.txt, package.json, pyproject.toml)[/yellow]"
        )
        raise typer.Exit(code=1)

    try:
        old_content = old_file.read_text(encoding="utf-8") if old_file else ""
        new_content = new_file.read_text(encoding="utf-8") if new_file else ""

        changes = parse_dependency_changes(filename, old_content, new_content)

        if not changes:
            console.print("No dependency version changes detected")
            return

        results: list[BreakingResult] = []
        if resolve:
            config = load_config(_state["config"])
            results = asyncio.run(
                get_breaking_changes(
                    changes,
                    service_key=config.catalog.service_key,
                    api_url=config.catalog.api_url,
                    guides_url=config.catalog.guides_url,
                    timeout=config.catalog.timeout,
                )
            )

        _print_results(changes, results)

        if resolve:
            generator = CommentGenerator(
                CommentConfig(
                    marker=config.comment.marker,
                    table_threshold=config.comment.table_threshold,
                )
            )
            console.print(f"\n{generator.summarize(results)}")
            body = generator.generate(results)
            if body:
                console.print()
                console.print(body, markup=False, highlight=False)

        if output:
            output.write_text(
                json.dumps([c.model_dump(mode="json") for c in changes], indent=2)
            )
            console.print(f"\nChanges written to: {output}")

    except Exception as e:
        _handle_cli_error(e)


def _print_results(
    changes: list[DependencyChange],
    results: list[BreakingResult],
) -> None:
    """Print detected changes and their lookup results as a table."""
    if not changes:
        console.print("No dependency version changes detected")
        return

    by_key = {(r.package, r.from_version, r.to_version): r for r in results}

    table = Table(title="Dependency Changes")
    table.add_column("Package", style="cyan")
    table.add_column("Ecosystem")
    table.add_column("From")
    table.add_column("To")
    if results:
        table.add_column("Breaking", justify="right")
        table.add_column("Migration Guide")

    for change in changes:
        row = [
            change.package,
            change.ecosystem.value,
            change.from_version,
            change.to_version,
        ]
        if results:
            result = by_key.get((change.package, change.from_version, change.to_version))
            count = len(result.breaking_changes) if result else 0
            row.append(f"[red]{count}[/red]" if count else "0")
            row.append(result.migration_url if result else "")
        table.add_row(*row)

    console.print(table)


def _report_data(repo: str, pr: int, result: PRAnalysisResult) -> dict:
    """Build the JSON report for ``analyze --output``."""
    return {
        "repository": repo,
        "pull_request_number": pr,
        "manifest_files": result.manifest_files,
        "changes": [c.model_dump(mode="json") for c in result.changes],
        "results": [r.model_dump(mode="json") for r in result.results],
        "breaking_changes": result.breaking_count,
        "comment_action": result.comment_action,
        "should_fail": result.should_fail,
    }


@config_app.command("init")
def config_init(
    path: Annotated[
        Path,
        typer.Argument(help="Where to write the configuration file."),
    ] = Path(".breakcheck.yml"),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing file.",
        ),
    ] = False,
) -> None:
    """Create an example configuration file."""
    from breakcheck.config import generate_example_config

    if path.exists() and not force:
        console.print(f"[red]Error: {path} already exists. Use --force to overwrite.[/red]")
        raise typer.Exit(code=1)

    path.write_text(generate_example_config())
    console.print(f"[green]Created configuration file: {path}[/green]")


@config_app.command("validate")
def config_validate(
    path: Annotated[
        Path | None,
        typer.Argument(help="Configuration file to validate (searches if omitted)."),
    ] = None,
) -> None:
    """Validate a configuration file."""
    import yaml

    from breakcheck.config import find_config_file, load_config

    config_path = path or find_config_file()
    if config_path is None:
        console.print("[yellow]No configuration file found[/yellow]")
        raise typer.Exit(code=1)

    if not config_path.exists():
        console.print(f"[red]Error: {config_path} does not exist[/red]")
        raise typer.Exit(code=1)

    try:
        config = load_config(config_path)
    except (ValidationError, yaml.YAMLError, TypeError) as e:
        console.print(f"[red]Invalid configuration in {config_path}:[/red]")
        console.print(str(e), markup=False)
        raise typer.Exit(code=1)

    console.print(f"[green]Configuration is valid: {config_path}[/green]")
    console.print(f"  Catalog: {config.catalog.api_url}")
    console.print(f"  Fail on breaking: {config.analysis.fail_on_breaking}")
    console.print(f"  Post comment: {config.analysis.post_comment}")


if __name__ == "__main__":
    app()
