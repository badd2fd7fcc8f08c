"""
Domain models for the installer.

All models are re-exported here for convenient access:

    from godot_installer.core.models import Architecture, ReleaseVersion, ReleaseAsset
"""

from godot_installer.core.models.install import InstalledVersion
from godot_installer.core.models.release import (
    Architecture,
    Release,
    ReleaseAsset,
    ReleaseAssetRecord,
    ReleaseVersion,
    asset_filename,
)

__all__ = [
    # release.py
    "Architecture",
    # install.py
    "InstalledVersion",
    "Release",
    "ReleaseAsset",
    "ReleaseAssetRecord",
    "ReleaseVersion",
    "asset_filename",
]
