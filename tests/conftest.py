"""Pytest configuration and fixtures for breakcheck tests."""

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest

from breakcheck.catalog.client import CatalogClient


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_requirements_old() -> str:
    """requirements.txt at the base revision."""
    return """# Production dependencies
requests==2.31.0
pydantic>=2.5.0
langchain==0.2.0

-e git+https://github.com/example/repo.git#egg=example
--hash=sha256:abc
"""


@pytest.fixture
def sample_requirements_new() -> str:
    """requirements.txt at the head revision."""
    return """# Production dependencies
requests==2.31.0
pydantic>=2.7.1
langchain==1.0.0
httpx==0.27.0

-e git+https://github.com/example/repo.git#egg=example
--hash=sha256:abc
"""


@pytest.fixture
def sample_package_json_old() -> str:
    """package.json at the base revision."""
    return json.dumps(
        {
            "name": "sample-project",
            "version": "1.0.0",
            "dependencies": {"react": "^17.0.2", "lodash": "^4.17.21"},
            "devDependencies": {"typescript": "~4.9.5", "vite": "4.5.0"},
        }
    )


@pytest.fixture
def sample_package_json_new() -> str:
    """package.json at the head revision."""
    return json.dumps(
        {
            "name": "sample-project",
            "version": "1.1.0",
            "dependencies": {"react": "^18.2.0", "lodash": "4.17.21", "axios": "^1.6.0"},
            "devDependencies": {"typescript": "~5.3.3", "vite": "4.5.0"},
        }
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables read by breakcheck."""
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_API_URL",
        "GITHUB_REPOSITORY",
        "GITHUB_EVENT_PATH",
        "GITHUB_OUTPUT",
        "GITHUB_STEP_SUMMARY",
        "CHANGE8_SERVICE_KEY",
        "INPUT_GITHUB-TOKEN",
        "INPUT_SERVICE-KEY",
        "INPUT_FAIL-ON-BREAKING",
    ):
        monkeypatch.delenv(name, raising=False)


CatalogHandler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def catalog_requests() -> list[httpx.Request]:
    """Requests seen by the mocked catalog, in order."""
    return []


@pytest.fixture
def make_catalog(
    catalog_requests: list[httpx.Request],
) -> Callable[..., CatalogClient]:
    """Build a CatalogClient backed by an httpx.MockTransport.

    ``routes`` maps an endpoint path (``/diff`` or ``/releases``) to either a
    ``(status, json_body)`` tuple or a handler callable. Unknown paths 404.
    """

    def factory(
        routes: dict[str, Any],
        service_key: str | None = None,
    ) -> CatalogClient:
        def handler(request: httpx.Request) -> httpx.Response:
            catalog_requests.append(request)
            path = request.url.path.removeprefix("/api/v1")
            route = routes.get(path)
            if route is None:
                return httpx.Response(404, json={"detail": "not found"})
            if callable(route):
                return route(request)
            status, body = route
            return httpx.Response(status, json=body)

        return CatalogClient(
            service_key=service_key,
            transport=httpx.MockTransport(handler),
        )

    return factory
