"""Catalog source identifiers, release matching and guide URLs."""

from typing import Any, Optional

DEFAULT_GUIDES_URL = "https://www.change8.dev/guides"

# Package names whose catalog source id differs from the package name.
SOURCE_ID_ALIASES: dict[str, str] = {
    "langchain": "langchain",
    "langchain-core": "langchain",
    "langchain-openai": "langchain",
    "langchain-community": "langchain",
    "next": "next-js",
    "react": "react",
    "pydantic": "pydantic",
    "fastapi": "fastapi",
    "pytorch": "pytorch",
    "torch": "pytorch",
    "transformers": "transformers",
    "openai": "openai-python-sdk",
    "typescript": "typescript",
    "vite": "vite",
    "prisma": "prisma",
    "tailwindcss": "tailwind-css",
}


def strip_version_prefix(version: str) -> str:
    """Drop a single leading ``v`` from a version or tag."""
    return version[1:] if version.startswith("v") else version


def map_package_to_source_id(package_name: str) -> str:
    """Map a manifest package name to its catalog source id.

    Args:
        package_name: Package name as it appears in the manifest.

    Returns:
        The aliased source id, or the lowercased name.
    """
    name = package_name.lower()
    return SOURCE_ID_ALIASES.get(name, name)


def build_migration_url(
    source_id: str,
    version: str,
    guides_url: str = DEFAULT_GUIDES_URL,
) -> str:
    """Build the migration guide link for an upgrade target.

    Args:
        source_id: Catalog source id.
        version: Target version, with or without a ``v`` prefix.
        guides_url: Base URL of the guides site.

    Returns:
        Guide URL such as ``.../guides/langchain/migrating-to-1.0.0``.
    """
    return f"{guides_url.rstrip('/')}/{source_id}/migrating-to-{strip_version_prefix(version)}"


def release_tag_version(tag: str) -> str:
    """Extract the version part of a release tag.

    Tags are either ``package==1.2.3`` or ``1.2.3`` / ``v1.2.3``.
    """
    if "==" in tag:
        return tag.split("==")[1]
    return strip_version_prefix(tag)


def find_release(
    releases: list[dict[str, Any]],
    to_version: str,
) -> Optional[dict[str, Any]]:
    """Find the release entry for a target version.

    Args:
        releases: Release listing from the catalog.
        to_version: Version the dependency was upgraded to.

    Returns:
        The first matching release, or None.
    """
    for release in releases:
        if not isinstance(release, dict):
            continue
        tag = release.get("tag")
        if not isinstance(tag, str):
            continue
        tag_version = release_tag_version(tag)
        if tag_version == to_version or tag_version == f"v{to_version}":
            return release
    return None
