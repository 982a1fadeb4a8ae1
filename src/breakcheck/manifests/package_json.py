"""Differ for npm ``package.json`` manifests."""

import json
from typing import Any, ClassVar

from breakcheck.core.models import Ecosystem
from breakcheck.core.outcome import Err, Ok, Outcome
from breakcheck.errors import ManifestParseError
from breakcheck.manifests.base import ManifestDiffer
from breakcheck.utils.logging import get_logger

logger = get_logger(__name__)

RANGE_QUALIFIERS = ("^", "~")


def load_document(content: str) -> Outcome[dict[str, Any]]:
    """Parse a package.json snapshot.

    Args:
        content: JSON text; empty text is an empty document.

    Returns:
        ``Ok`` with the decoded object, or ``Err(ManifestParseError)``.
    """
    if not content.strip():
        return Ok({})

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        return Err(ManifestParseError("package.json", f"Invalid JSON in package.json: {e}"))

    if not isinstance(data, dict):
        return Err(ManifestParseError("package.json", "package.json is not a JSON object"))

    return Ok(data)


class PackageJsonDiffer(ManifestDiffer):
    """Differ for ``dependencies`` and ``devDependencies`` in package.json."""

    manifest_names: ClassVar[list[str]] = ["package.json"]

    @property
    def ecosystem(self) -> Ecosystem:
        """Return the npm ecosystem."""
        return Ecosystem.NPM

    def extract(self, content: str) -> dict[str, str]:
        """Merge runtime and development dependency maps.

        A snapshot that fails to parse counts as having no dependencies.
        Development entries win when a package appears in both maps.

        Args:
            content: package.json text.

        Returns:
            Mapping of lowercase package name to the declared range.
        """
        document = load_document(content).unwrap_or_else(self._log_parse_error)

        deps: dict[str, str] = {}
        for section in ("dependencies", "devDependencies"):
            entries = document.get(section)
            if not isinstance(entries, dict):
                continue
            for name, version in entries.items():
                deps[str(name).lower()] = str(version)

        return deps

    def normalize_version(self, version: str) -> str:
        """Strip a single leading ``^`` or ``~``."""
        if version.startswith(RANGE_QUALIFIERS):
            return version[1:]
        return version

    @staticmethod
    def _log_parse_error(error: Exception) -> dict[str, Any]:
        logger.debug("Treating unparseable snapshot as empty: %s", error)
        return {}
