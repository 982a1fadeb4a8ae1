"""Resolve dependency changes to catalog breaking-change results."""

from typing import Optional

from breakcheck.catalog.client import CatalogClient, normalize_breaking_changes
from breakcheck.catalog.sources import (
    DEFAULT_GUIDES_URL,
    build_migration_url,
    find_release,
    map_package_to_source_id,
)
from breakcheck.core.models import BreakingChangeEntry, BreakingResult, DependencyChange
from breakcheck.core.outcome import Err, Ok, Outcome, first_ok
from breakcheck.errors import ReleaseNotFoundError
from breakcheck.utils.logging import get_logger

logger = get_logger(__name__)


class BreakingChangeResolver:
    """Looks up breaking changes for dependency upgrades one at a time.

    For every change the ``/diff`` endpoint is tried first. If it fails the
    release listing is searched for the target version. If that fails as
    well the result carries no breaking changes, but still links to the
    migration guide.
    """

    def __init__(
        self,
        client: CatalogClient,
        guides_url: str = DEFAULT_GUIDES_URL,
    ) -> None:
        """Initialize the resolver.

        Args:
            client: Entered catalog client.
            guides_url: Base URL for migration guide links.
        """
        self._client = client
        self._guides_url = guides_url

    async def resolve(self, changes: list[DependencyChange]) -> list[BreakingResult]:
        """Resolve every change, sequentially and in input order.

        Args:
            changes: Dependency changes from the manifest differs.

        Returns:
            One result per change.
        """
        results: list[BreakingResult] = []
        for change in changes:
            results.append(await self.resolve_one(change))
        return results

    async def resolve_one(self, change: DependencyChange) -> BreakingResult:
        """Resolve a single dependency change.

        Args:
            change: Dependency change.

        Returns:
            Result for the change; never raises for catalog failures.
        """
        source_id = map_package_to_source_id(change.package)

        outcome = await first_ok(
            lambda: self._client.get_diff(source_id, change.from_version, change.to_version),
            lambda: self._lookup_release(source_id, change.to_version),
        )

        def degrade(error: Exception) -> list[BreakingChangeEntry]:
            logger.warning(
                "Failed to get breaking changes for %s: %s", change.package, error
            )
            return []

        return BreakingResult(
            package=change.package,
            from_version=change.from_version,
            to_version=change.to_version,
            breaking_changes=outcome.unwrap_or_else(degrade),
            migration_url=build_migration_url(source_id, change.to_version, self._guides_url),
        )

    async def _lookup_release(
        self,
        source_id: str,
        to_version: str,
    ) -> Outcome[list[BreakingChangeEntry]]:
        logger.debug("Diff lookup failed for %s, searching releases", source_id)

        listing = await self._client.get_releases(source_id)
        if not listing.is_ok:
            return listing

        release = find_release(listing.unwrap(), to_version)
        if release is None:
            return Err(ReleaseNotFoundError(source_id, to_version))

        return Ok(normalize_breaking_changes(release.get("breaking_changes")))


async def get_breaking_changes(
    changes: list[DependencyChange],
    service_key: Optional[str] = None,
    api_url: Optional[str] = None,
    guides_url: str = DEFAULT_GUIDES_URL,
    timeout: Optional[float] = None,
) -> list[BreakingResult]:
    """Convenience function resolving a batch with a fresh client.

    Args:
        changes: Dependency changes.
        service_key: Optional catalog bearer credential.
        api_url: Catalog API base URL override.
        guides_url: Base URL for migration guide links.
        timeout: Per-request timeout in seconds.

    Returns:
        One result per change.
    """
    kwargs: dict = {"service_key": service_key}
    if api_url:
        kwargs["base_url"] = api_url
    if timeout:
        kwargs["timeout"] = timeout

    async with CatalogClient(**kwargs) as client:
        return await BreakingChangeResolver(client, guides_url).resolve(changes)
