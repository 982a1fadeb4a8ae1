"""Manifest differs extracting dependency version changes.

Supported manifests:
- requirements.txt (pypi)
- package.json (npm)
- pyproject.toml (pypi)
"""

from breakcheck.core.models import DependencyChange
from breakcheck.manifests.base import DifferRegistry, ManifestDiffer
from breakcheck.manifests.package_json import PackageJsonDiffer
from breakcheck.manifests.pyproject import PyprojectDiffer
from breakcheck.manifests.requirements import RequirementsDiffer

DifferRegistry.register(RequirementsDiffer())
DifferRegistry.register(PackageJsonDiffer())
DifferRegistry.register(PyprojectDiffer())


def is_manifest_file(filename: str) -> bool:
    """Check whether a changed file is a supported manifest."""
    return DifferRegistry.get_for_file(filename) is not None


def parse_dependency_changes(
    filename: str,
    old_content: str,
    new_content: str,
) -> list[DependencyChange]:
    """Extract dependency version changes from two snapshots of a file.

    Args:
        filename: Repository-relative path, used to pick the differ.
        old_content: File text at the base revision ("" if added).
        new_content: File text at the head revision ("" if deleted).

    Returns:
        Version changes; empty for unsupported files.
    """
    differ = DifferRegistry.get_for_file(filename)
    if differ is None:
        return []
    return differ.diff(old_content, new_content)


__all__ = [
    "DifferRegistry",
    "ManifestDiffer",
    "PackageJsonDiffer",
    "PyprojectDiffer",
    "RequirementsDiffer",
    "is_manifest_file",
    "parse_dependency_changes",
]
