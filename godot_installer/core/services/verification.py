"""
Integrity verification — SHA-512 against the published manifest.

The manifest (``SHA512-SUMS.txt``) has one ``<hex-digest>  <filename>``
line per asset.  The first line containing the downloaded file's name
supplies the expected digest; comparison is an exact, case-sensitive
string match of the hex digests.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from godot_installer.core.errors import ChecksumMismatchError, ChecksumNotFoundError
from godot_installer.core.models.release import Architecture, ReleaseVersion
from godot_installer.core.services.release_index import ReleaseIndexClient

logger = logging.getLogger(__name__)


def sha512_of(path: Path) -> str:
    """Hex SHA-512 digest of a file, read in chunks."""
    h = hashlib.sha512()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def expected_digest(manifest: str, filename: str) -> str | None:
    """Digest of the first manifest line mentioning ``filename``."""
    for line in manifest.splitlines():
        if filename in line:
            fields = line.split()
            if fields:
                return fields[0]
    return None


def manifest_filenames(manifest: str) -> list[str]:
    """Filenames listed in a manifest, sorted."""
    names = []
    for line in manifest.splitlines():
        fields = line.split(maxsplit=1)
        if len(fields) == 2:
            names.append(fields[1].strip())
    return sorted(names)


class IntegrityVerifier:
    def __init__(self, client: ReleaseIndexClient):
        self._client = client

    def verify(self, path: Path, version: ReleaseVersion, arch: Architecture) -> None:
        """Raise unless ``path`` matches its published SHA-512 digest.

        Raises:
            ChecksumNotFoundError: Manifest unavailable or no line for the file.
            ChecksumMismatchError: Digests differ.
        """
        path = Path(path)
        filename = path.name
        logger.info("Verifying download: %s (version: %s, %s)", filename, version, arch)

        manifest = self._client.checksum_manifest(version)
        if manifest is None:
            logger.error("Could not fetch the checksum manifest for %s", version.tag)
            raise ChecksumNotFoundError(filename)

        expected = expected_digest(manifest, filename)
        if expected is None:
            available = manifest_filenames(manifest)
            logger.error("Could not find hash for %s", filename)
            logger.error("Available files in checksum:")
            for name in available:
                logger.error("  %s", name)
            raise ChecksumNotFoundError(filename, available)

        logger.info("Computing hash of downloaded file...")
        actual = sha512_of(path)

        if expected != actual:
            logger.error("Hash verification failed!")
            logger.error("Expected: %s", expected)
            logger.error("Got:      %s", actual)
            raise ChecksumMismatchError(str(path), expected, actual)

        logger.info("SHA512 verification passed")
