"""
Installer — unpack a verified archive and repoint the active link.

Layout::

    {versions_root}/{version}/Godot_v4.4.1-stable_linux.x86_64   ← payload
    {bin_home}/godot  →  the payload of the active version

The payload is the executable whose name starts with ``Godot``.  When an
archive holds several, the lexically first one wins and a warning is
logged; archives are not otherwise disambiguated.
"""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from pathlib import Path

from godot_installer.core.config.loader import Settings
from godot_installer.core.errors import ExtractionError, PayloadNotFoundError
from godot_installer.core.models.install import InstalledVersion
from godot_installer.core.models.release import ReleaseAsset

logger = logging.getLogger(__name__)

PAYLOAD_PREFIX = "Godot"


def extract_zip(archive: Path, dest: Path) -> None:
    """Unpack ``archive`` into ``dest``, applying stored unix permissions.

    Raises:
        ExtractionError: Corrupt archive, or an entry pointing outside ``dest``.
    """
    dest.mkdir(parents=True, exist_ok=True)
    dest_root = dest.resolve()

    try:
        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                if not (dest_root / info.filename).resolve().is_relative_to(dest_root):
                    raise ExtractionError(
                        f"Archive entry escapes extraction directory: {info.filename}"
                    )
                extracted = Path(zf.extract(info, dest))
                mode = (info.external_attr >> 16) & 0o777
                if mode and not info.is_dir():
                    extracted.chmod(mode)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError) as e:
        raise ExtractionError(f"Cannot extract {archive.name}: {e}") from e


def find_payloads(root: Path) -> list[Path]:
    """Executable regular files named ``Godot*`` under ``root``, sorted."""
    return sorted(
        p
        for p in root.rglob(f"{PAYLOAD_PREFIX}*")
        if p.is_file() and not p.is_symlink() and os.access(p, os.X_OK)
    )


class Installer:
    def __init__(self, settings: Settings):
        self._settings = settings

    def version_dir(self, version: str) -> Path:
        return self._settings.versions_root / version

    def find_installed(self, version: str) -> InstalledVersion | None:
        """The existing install of ``version``, if it holds a usable payload."""
        directory = self.version_dir(version)
        if not directory.is_dir():
            return None
        payloads = find_payloads(directory)
        if not payloads:
            logger.debug("%s exists but holds no payload", directory)
            return None
        return InstalledVersion(version=version, directory=directory, executable=payloads[0])

    def install(self, asset: ReleaseAsset, archive: Path) -> InstalledVersion:
        """Extract ``archive`` into the version directory and activate it.

        Extraction happens next to the archive, which lives in a scratch
        directory owned by the run.
        """
        version = asset.version.text
        directory = self.version_dir(version)
        created = not directory.exists()
        directory.mkdir(parents=True, exist_ok=True)

        try:
            staging = Path(archive).parent / "extracted"
            extract_zip(Path(archive), staging)

            payloads = find_payloads(staging)
            if not payloads:
                raise PayloadNotFoundError(
                    f"No executable '{PAYLOAD_PREFIX}*' found in {Path(archive).name}"
                )
            if len(payloads) > 1:
                logger.warning(
                    "Archive holds %d candidate executables; using %s",
                    len(payloads),
                    payloads[0].name,
                )
            payload = payloads[0]

            target = directory / payload.name
            shutil.move(str(payload), str(target))
            target.chmod(0o755)
        except Exception:
            if created:
                shutil.rmtree(directory, ignore_errors=True)
            raise

        installed = InstalledVersion(version=version, directory=directory, executable=target)
        self.activate(installed)
        return installed

    def activate(self, installed: InstalledVersion) -> Path:
        """Point the active link at ``installed`` (remove, then link)."""
        link = self._settings.active_link
        link.parent.mkdir(parents=True, exist_ok=True)
        if link.is_symlink() or link.exists():
            link.unlink()
        link.symlink_to(installed.executable)
        logger.info("Linked %s → %s", link, installed.executable)
        return link
