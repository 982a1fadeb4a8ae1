"""Differ for ``pyproject.toml`` dependency strings."""

import re
from typing import ClassVar

from breakcheck.core.models import Ecosystem
from breakcheck.manifests.base import ManifestDiffer

# "package>=1.0.0" or 'package==1.0.0' anywhere in the file
CONSTRAINT_PATTERN = re.compile(r"[\"']([a-zA-Z0-9_-]+)\s*([><=~!]+)\s*([0-9.]+)")


class PyprojectDiffer(ManifestDiffer):
    """Differ for quoted version constraints in pyproject.toml.

    The file is not parsed as TOML; every quoted ``name<op>version`` string
    is collected regardless of which table it sits in.
    """

    manifest_names: ClassVar[list[str]] = ["pyproject.toml"]

    @property
    def ecosystem(self) -> Ecosystem:
        """Return the PyPI ecosystem."""
        return Ecosystem.PYPI

    def extract(self, content: str) -> dict[str, str]:
        """Collect constraints, keeping the last occurrence of each name.

        Args:
            content: pyproject.toml text.

        Returns:
            Mapping of lowercase package name to version.
        """
        deps: dict[str, str] = {}
        for match in CONSTRAINT_PATTERN.finditer(content):
            deps[match.group(1).lower()] = match.group(3)
        return deps
