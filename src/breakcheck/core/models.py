"""Core data models for breakcheck."""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Ecosystem(str, Enum):
    """Supported package ecosystems."""

    NPM = "npm"
    PYPI = "pypi"


class DependencyChange(BaseModel):
    """A version change of one package between two manifest snapshots."""

    model_config = ConfigDict(frozen=True)

    package: str = Field(..., description="Lowercased package name")
    from_version: str = Field(..., description="Version in the base snapshot")
    to_version: str = Field(..., description="Version in the head snapshot")
    ecosystem: Ecosystem


class BreakingChangeEntry(BaseModel):
    """A single breaking change reported by the catalog."""

    change: str
    fix: str | None = None

    @classmethod
    def from_catalog(cls, raw: Any) -> "BreakingChangeEntry":
        """Normalize a catalog entry.

        Entries are either plain strings or objects carrying ``change`` or
        ``description`` and an optional ``fix``. Objects with neither text
        field fall back to their JSON serialization.

        Args:
            raw: Entry as decoded from the catalog response.

        Returns:
            Normalized entry.
        """
        if isinstance(raw, str):
            return cls(change=raw)

        if isinstance(raw, dict):
            text = raw.get("change") or raw.get("description")
            if not text:
                text = json.dumps(raw, separators=(",", ":"), ensure_ascii=False)
            fix = raw.get("fix")
            return cls(change=str(text), fix=str(fix) if fix else None)

        return cls(change=json.dumps(raw, separators=(",", ":"), ensure_ascii=False))


class BreakingResult(BaseModel):
    """Catalog lookup result for one dependency change."""

    package: str
    from_version: str
    to_version: str
    breaking_changes: list[BreakingChangeEntry] = Field(default_factory=list)
    migration_url: str

    @property
    def has_breaking_changes(self) -> bool:
        """Whether the catalog reported anything for this upgrade."""
        return bool(self.breaking_changes)
