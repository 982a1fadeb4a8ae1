"""Breaking-change catalog lookups.

Components:
- client: HTTP client for the catalog ``/diff`` and ``/releases`` endpoints
- sources: package name aliases, release tag matching, guide URLs
- resolver: per-change lookup with release-listing fallback
"""

from breakcheck.catalog.client import (
    CATALOG_API_BASE_URL,
    CatalogClient,
    normalize_breaking_changes,
)
from breakcheck.catalog.resolver import BreakingChangeResolver, get_breaking_changes
from breakcheck.catalog.sources import (
    DEFAULT_GUIDES_URL,
    build_migration_url,
    find_release,
    map_package_to_source_id,
)

__all__ = [
    "CATALOG_API_BASE_URL",
    "DEFAULT_GUIDES_URL",
    "BreakingChangeResolver",
    "CatalogClient",
    "build_migration_url",
    "find_release",
    "get_breaking_changes",
    "map_package_to_source_id",
    "normalize_breaking_changes",
]
