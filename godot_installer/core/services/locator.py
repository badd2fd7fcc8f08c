"""
Release location — find the archive for a (version, architecture) pair.

The first asset whose download URL contains the expected filename wins,
in the order the index returns them.  When nothing matches, 32-bit
architectures get one retry with their 64-bit counterpart; there is no
further chaining.
"""

from __future__ import annotations

import logging

from godot_installer.core.errors import AssetNotFoundError
from godot_installer.core.models.release import (
    Architecture,
    ReleaseAsset,
    ReleaseVersion,
    asset_filename,
)
from godot_installer.core.services.release_index import ReleaseIndexClient

logger = logging.getLogger(__name__)


class ReleaseLocator:
    def __init__(self, client: ReleaseIndexClient):
        self._client = client

    def locate(self, version: ReleaseVersion, arch: Architecture) -> ReleaseAsset:
        asset = self._find(version, arch)
        if asset is not None:
            return asset

        fallback = arch.fallback
        if fallback is not None:
            logger.info("No %s build of Godot %s; trying %s", arch, version, fallback)
            asset = self._find(version, fallback)
            if asset is not None:
                return asset

        raise AssetNotFoundError(version.text, arch.value)

    def _find(self, version: ReleaseVersion, arch: Architecture) -> ReleaseAsset | None:
        release = self._client.release_by_tag(version.tag)
        if release is None:
            logger.debug("Release %s is not available", version.tag)
            return None

        filename = asset_filename(version, arch)
        for record in release.assets:
            if filename in record.browser_download_url:
                logger.debug("Matched asset %s", record.browser_download_url)
                return ReleaseAsset(
                    version=version,
                    architecture=arch,
                    download_url=record.browser_download_url,
                    filename=filename,
                )
        return None
