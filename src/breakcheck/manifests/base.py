"""Base differ interface for dependency manifests."""

from abc import ABC, abstractmethod
from typing import ClassVar

from breakcheck.core.models import DependencyChange, Ecosystem


class ManifestDiffer(ABC):
    """Abstract base class for manifest differs.

    A differ turns one snapshot of a manifest into a mapping of lowercase
    package name to version string. ``diff`` compares two such mappings.
    """

    manifest_names: ClassVar[list[str]] = []
    """File names this differ handles (matched exactly or as a path suffix)."""

    @property
    @abstractmethod
    def ecosystem(self) -> Ecosystem:
        """Return the ecosystem tagged on emitted changes."""
        ...

    @abstractmethod
    def extract(self, content: str) -> dict[str, str]:
        """Extract pinned versions from one manifest snapshot.

        Args:
            content: Raw manifest text; empty for a missing file.

        Returns:
            Mapping of lowercase package name to version.
        """
        ...

    def normalize_version(self, version: str) -> str:
        """Hook for differs that compare a cleaned-up version string."""
        return version

    def can_parse(self, filename: str) -> bool:
        """Check if this differ handles the given repository path.

        Args:
            filename: Repository-relative path of the changed file.

        Returns:
            True if the path names one of ``manifest_names``.
        """
        for name in self.manifest_names:
            if filename == name or filename.endswith(f"/{name}"):
                return True
        return False

    def diff(self, old_content: str, new_content: str) -> list[DependencyChange]:
        """Compute version changes between two snapshots.

        Packages only present in the new snapshot are additions and are
        not reported. Changes follow the order of the new snapshot.

        Args:
            old_content: Manifest text at the base revision.
            new_content: Manifest text at the head revision.

        Returns:
            One change per package whose version differs.
        """
        old_deps = self.extract(old_content)
        new_deps = self.extract(new_content)

        changes: list[DependencyChange] = []

        for package, raw_new in new_deps.items():
            raw_old = old_deps.get(package)
            if not raw_old or raw_old == raw_new:
                continue

            from_version = self.normalize_version(raw_old)
            to_version = self.normalize_version(raw_new)
            if from_version == to_version:
                continue

            changes.append(
                DependencyChange(
                    package=package,
                    from_version=from_version,
                    to_version=to_version,
                    ecosystem=self.ecosystem,
                )
            )

        return changes


class DifferRegistry:
    """Registry for differ instances."""

    _differs: ClassVar[list[ManifestDiffer]] = []

    @classmethod
    def register(cls, differ: ManifestDiffer) -> None:
        """Register a differ instance.

        Args:
            differ: Differ to register.
        """
        cls._differs.append(differ)

    @classmethod
    def get_all(cls) -> list[ManifestDiffer]:
        """Get all registered differs."""
        return cls._differs.copy()

    @classmethod
    def get_for_file(cls, filename: str) -> ManifestDiffer | None:
        """Get the differ that handles a specific file.

        Args:
            filename: Repository-relative path.

        Returns:
            Matching differ or None.
        """
        for differ in cls._differs:
            if differ.can_parse(filename):
                return differ
        return None

    @classmethod
    def clear(cls) -> None:
        """Clear all registered differs."""
        cls._differs.clear()
