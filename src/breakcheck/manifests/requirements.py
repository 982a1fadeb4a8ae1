"""Differ for pip requirements files."""

import re
from typing import ClassVar

from breakcheck.core.models import Ecosystem
from breakcheck.manifests.base import ManifestDiffer

# name, one or more comparison characters, numeric dotted version
REQUIREMENT_PATTERN = re.compile(r"^([a-zA-Z0-9_-]+)\s*([=~<>!]+)\s*([0-9.]+)")


class RequirementsDiffer(ManifestDiffer):
    """Differ for ``requirements.txt`` pins such as ``requests==2.31.0``."""

    manifest_names: ClassVar[list[str]] = ["requirements.txt"]

    @property
    def ecosystem(self) -> Ecosystem:
        """Return the PyPI ecosystem."""
        return Ecosystem.PYPI

    def extract(self, content: str) -> dict[str, str]:
        """Extract requirement pins.

        Blank lines, comments and option lines (``-r``, ``-e``, ``--hash``)
        are skipped, as is anything that does not look like
        ``name<op>version``.

        Args:
            content: requirements.txt text.

        Returns:
            Mapping of lowercase package name to version.
        """
        deps: dict[str, str] = {}

        for line in content.split("\n"):
            line = line.strip()
            if not line or line.startswith("#") or line.startswith("-"):
                continue

            match = REQUIREMENT_PATTERN.match(line)
            if match:
                deps[match.group(1).lower()] = match.group(3)

        return deps
