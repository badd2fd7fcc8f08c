"""
Maintenance — uninstall and clean.

Both operations are destructive and best-effort: a failure halfway
through leaves whatever was already deleted deleted.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from pathlib import Path

from godot_installer.core.config.loader import Settings
from godot_installer.core.errors import VersionNotInstalledError
from godot_installer.core.services.desktop import DesktopIntegration

logger = logging.getLogger(__name__)

_VERSION_SEGMENT = re.compile(r"^[0-9.]+$")


def current_version(settings: Settings) -> str | None:
    """Version the active link points into, or None.

    Resolves the link and takes the path segment directly below the
    version-store root, if it looks like a version.
    """
    link = settings.active_link
    if not link.is_symlink():
        return None

    target = Path(os.path.realpath(link))
    root = Path(os.path.realpath(settings.versions_root))
    try:
        relative = target.relative_to(root)
    except ValueError:
        return None

    if len(relative.parts) < 2:
        return None
    segment = relative.parts[0]
    return segment if _VERSION_SEGMENT.match(segment) else None


def uninstall(settings: Settings, version: str | None = None) -> None:
    """Remove installed versions and integration files.

    Args:
        settings: Installer settings.
        version: Only remove this version. None removes every version.

    Raises:
        VersionNotInstalledError: ``version`` is not installed.
    """
    root = settings.versions_root
    link = settings.active_link

    if not version:
        logger.info("Uninstalling all Godot versions...")
        if root.is_dir():
            shutil.rmtree(root)
            logger.info("Removed all Godot installations from %s", root)
    else:
        logger.info("Uninstalling Godot version: %s...", version)
        directory = root / version
        if not directory.is_dir():
            raise VersionNotInstalledError(version, str(directory))

        linked = current_version(settings)
        shutil.rmtree(directory)
        logger.info("Removed Godot version %s", version)

        if linked == version:
            logger.info("The uninstalled version was the currently linked 'godot' executable.")
            logger.info("Removing the symlink %s. You may need to link a new version manually.", link)
            link.unlink(missing_ok=True)

    if link.is_symlink() and not root.is_dir():
        logger.info("Removing symlink %s (no other Godot versions found).", link)
        link.unlink()

    installer_path = settings.installer_path
    if installer_path.is_file():
        logger.info("Removing installer launcher: %s", installer_path)
        installer_path.unlink()

    DesktopIntegration(settings).remove()

    logger.info("Godot uninstallation process completed.")
    logger.info("Note: Your Godot projects and user data have not been removed.")


def clean(settings: Settings) -> list[str]:
    """Remove every installed version except the linked one.

    Returns:
        The removed version names. Empty when no version is linked.
    """
    current = current_version(settings)
    if current is None:
        logger.info("No active Godot version linked; nothing to clean")
        return []

    logger.info("Current version: %s", current)
    removed: list[str] = []
    root = settings.versions_root
    if not root.is_dir():
        return removed

    for entry in sorted(root.iterdir()):
        if entry.is_dir() and not entry.is_symlink() and entry.name != current:
            logger.info("Removing old version: %s", entry.name)
            shutil.rmtree(entry)
            removed.append(entry.name)
    return removed
