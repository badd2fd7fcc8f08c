"""
Version resolution — requested version string → concrete ReleaseVersion.
"""

from __future__ import annotations

import logging

from godot_installer.core.errors import NoReleaseFoundError
from godot_installer.core.models.release import ReleaseVersion
from godot_installer.core.services.release_index import ReleaseIndexClient

logger = logging.getLogger(__name__)


class VersionResolver:
    """Pick the version to install.

    An explicit version is only checked for format; whether it was ever
    published is found out later, when its assets are looked up.
    """

    def __init__(self, client: ReleaseIndexClient):
        self._client = client

    def resolve(self, requested: str | None = None) -> ReleaseVersion:
        if requested:
            return ReleaseVersion.parse(requested)

        release = self._client.latest_release()
        if release is None:
            raise NoReleaseFoundError("Could not determine the latest Godot release")

        version = release.version
        if version is None:
            raise NoReleaseFoundError(
                f"Latest release tag '{release.tag_name}' does not contain a version"
            )

        logger.info("Latest Godot release is %s", version)
        return version


def list_published_versions(client: ReleaseIndexClient) -> list[ReleaseVersion]:
    """Every version found in the published release tags, newest first.

    Prerelease tags of the same version (``4.4-rc1``, ``4.4-stable``)
    collapse into one entry.

    Raises:
        NoReleaseFoundError: If the index is unreachable or empty.
    """
    seen: dict[str, ReleaseVersion] = {}
    for release in client.list_releases():
        version = release.version
        if version is not None:
            seen.setdefault(version.text, version)

    if not seen:
        raise NoReleaseFoundError("No published Godot releases found")

    return sorted(seen.values(), key=lambda v: v.sort_key, reverse=True)
