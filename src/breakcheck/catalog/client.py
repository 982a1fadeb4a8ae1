"""Client for the Change8 breaking-change catalog API."""

from typing import Any, Optional

import httpx

from breakcheck.core.models import BreakingChangeEntry
from breakcheck.core.outcome import Err, Ok, Outcome
from breakcheck.errors import CatalogError
from breakcheck.utils.http import AsyncHttpClient, bearer_headers
from breakcheck.utils.logging import get_logger

logger = get_logger(__name__)

CATALOG_API_BASE_URL = "https://api.change8.dev/api/v1"
RELEASES_LIMIT = 50


def normalize_breaking_changes(raw_entries: Any) -> list[BreakingChangeEntry]:
    """Normalize a catalog ``breaking_changes`` array.

    Strings and objects are kept; nulls, numbers and booleans are dropped.

    Args:
        raw_entries: Decoded ``breaking_changes`` value (may be missing).

    Returns:
        Normalized entries in catalog order.
    """
    if not isinstance(raw_entries, list):
        return []

    return [
        BreakingChangeEntry.from_catalog(entry)
        for entry in raw_entries
        if isinstance(entry, (str, dict, list))
    ]


class CatalogClient:
    """Client for the catalog's ``/diff`` and ``/releases`` endpoints.

    The client is used as an async context manager so that one connection
    pool serves a whole batch of lookups.
    """

    def __init__(
        self,
        base_url: str = CATALOG_API_BASE_URL,
        service_key: Optional[str] = None,
        timeout: float = AsyncHttpClient.DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the catalog client.

        Args:
            base_url: Catalog API base URL.
            service_key: Optional bearer credential sent with every call.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self._http = AsyncHttpClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=bearer_headers(service_key),
            transport=transport,
        )

    async def __aenter__(self) -> "CatalogClient":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self._http.__aexit__(exc_type, exc_val, exc_tb)

    async def _get_json(self, path: str, params: dict[str, Any]) -> Outcome[Any]:
        try:
            return Ok(await self._http.get_json(path, params=params))
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            return Err(CatalogError(f"Catalog API error: {status}", status_code=status))
        except httpx.HTTPError as e:
            return Err(CatalogError(f"Catalog request failed: {e}"))
        except ValueError as e:
            return Err(CatalogError(f"Catalog returned invalid JSON: {e}"))

    async def get_diff(
        self,
        package: str,
        from_version: str,
        to_version: str,
    ) -> Outcome[list[BreakingChangeEntry]]:
        """Fetch breaking changes between two versions of a source.

        Args:
            package: Catalog source id.
            from_version: Current version.
            to_version: Target version.

        Returns:
            ``Ok`` with normalized entries, or ``Err(CatalogError)``.
        """
        outcome = await self._get_json(
            "/diff",
            {"package": package, "from": from_version, "to": to_version},
        )
        if not outcome.is_ok:
            return outcome

        data = outcome.unwrap()
        if not isinstance(data, dict):
            return Err(CatalogError("Catalog diff response is not an object"))

        return Ok(normalize_breaking_changes(data.get("breaking_changes")))

    async def get_releases(
        self,
        source: str,
        limit: int = RELEASES_LIMIT,
    ) -> Outcome[list[dict[str, Any]]]:
        """Fetch the most recent releases of a source.

        Args:
            source: Catalog source id.
            limit: Maximum number of releases.

        Returns:
            ``Ok`` with the release list, or ``Err(CatalogError)``.
        """
        outcome = await self._get_json("/releases", {"source": source, "limit": limit})
        if not outcome.is_ok:
            return outcome

        data = outcome.unwrap()
        if not isinstance(data, list):
            return Err(CatalogError("Catalog releases response is not a list"))

        return Ok(data)
