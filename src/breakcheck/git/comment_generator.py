"""Breaking-change comment generator for pull requests."""

from dataclasses import dataclass
from typing import Optional

from breakcheck.core.models import BreakingChangeEntry, BreakingResult

DEFAULT_MARKER = "<!-- change8-action -->"


@dataclass
class CommentConfig:
    """Configuration for comment generation."""

    # Marker to identify bot comments
    marker: str = DEFAULT_MARKER

    # Render the issue/fix table only up to this many breaking changes
    table_threshold: int = 3

    # Truncation widths for table cells
    change_width: int = 80
    fix_width: int = 60


def truncate(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` characters, appending ``...`` when cut."""
    if len(text) > width:
        return text[:width] + "..."
    return text


def _table_cell(text: str) -> str:
    return " ".join(text.split()).replace("|", "\\|")


class CommentGenerator:
    """Generates the breaking-change summary comment."""

    def __init__(self, config: Optional[CommentConfig] = None):
        """Initialize the comment generator.

        Args:
            config: Optional comment configuration.
        """
        self._config = config or CommentConfig()

    @property
    def marker(self) -> str:
        return self._config.marker

    def generate(self, results: list[BreakingResult]) -> Optional[str]:
        """Render the comment body.

        Args:
            results: Resolver results in pipeline order.

        Returns:
            Markdown body, or None when no package has breaking changes.
        """
        with_breaking = [r for r in results if r.has_breaking_changes]
        if not with_breaking:
            return None

        sections: list[str] = [
            self._config.marker,
            "## 🔄 Change8 Dependency Analysis",
            "",
        ]

        for result in with_breaking:
            sections.append(self._generate_package_section(result))

        sections.append(self._generate_footer())

        return "\n".join(sections)

    def _generate_package_section(self, result: BreakingResult) -> str:
        """Generate the section for one upgraded package."""
        count = len(result.breaking_changes)
        lines: list[str] = [
            f"### {result.package}: {result.from_version} → {result.to_version}",
            "",
            f"⚠️ **{count} breaking change(s) detected**",
            "",
        ]

        if count <= self._config.table_threshold:
            lines.append(self._generate_table(result.breaking_changes))
            lines.append("")

        lines.append(f"📖 **[Full Migration Guide →]({result.migration_url})**")
        lines.append("")
        lines.append("---")
        lines.append("")

        return "\n".join(lines)

    def _generate_table(self, changes: list[BreakingChangeEntry]) -> str:
        """Generate the issue/fix table."""
        lines = ["| Issue | Fix |", "|-------|-----|"]

        for entry in changes:
            change = _table_cell(truncate(entry.change, self._config.change_width))
            fix = (
                _table_cell(truncate(entry.fix, self._config.fix_width))
                if entry.fix
                else "-"
            )
            lines.append(f"| {change} | {fix} |")

        return "\n".join(lines)

    def _generate_footer(self) -> str:
        """Generate comment footer."""
        return "<sub>Powered by [Change8](https://change8.dev) - AI-powered changelog analysis</sub>"

    def summarize(self, results: list[BreakingResult]) -> str:
        """Generate a one-line plain summary.

        Args:
            results: Resolver results.

        Returns:
            Summary text for console output.
        """
        breaking = [r for r in results if r.has_breaking_changes]
        total = sum(len(r.breaking_changes) for r in breaking)

        if not breaking:
            return f"No breaking changes found in {len(results)} dependency update(s)"

        return (
            f"{total} breaking change(s) in {len(breaking)} of "
            f"{len(results)} dependency update(s)"
        )


def generate_comment(
    results: list[BreakingResult],
    config: Optional[CommentConfig] = None,
) -> Optional[str]:
    """Convenience function to generate the breaking-change comment.

    Args:
        results: Resolver results.
        config: Optional comment configuration.

    Returns:
        Markdown body, or None when there is nothing to report.
    """
    return CommentGenerator(config).generate(results)
