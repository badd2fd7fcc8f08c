"""
Release models — versions, architectures and downloadable assets.

``Release`` and ``ReleaseAssetRecord`` mirror the JSON returned by the
release index; everything else is derived by the pipeline and never
changes once resolved.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field

from godot_installer.core.errors import InvalidVersionFormatError

VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+(\.[0-9]+)?")

# Unanchored form, used to pull a version out of a tag like "4.4.1-stable"
VERSION_IN_TAG = re.compile(r"[0-9]+\.[0-9]+(\.[0-9]+)?")

ASSET_FILENAME = "Godot_v{version}-stable_linux.{arch}.zip"


class Architecture(StrEnum):
    """Release-asset architecture tags."""

    X86_64 = "x86_64"
    ARM64 = "arm64"
    ARM32 = "arm32"
    X86_32 = "x86_32"

    @property
    def fallback(self) -> Architecture | None:
        """The architecture whose assets are tried when this one has none."""
        return _FALLBACKS.get(self)


_FALLBACKS = {
    Architecture.ARM32: Architecture.ARM64,
    Architecture.X86_32: Architecture.X86_64,
}


@dataclass(frozen=True)
class ReleaseVersion:
    """A ``major.minor[.patch]`` version.

    The text is kept exactly as given: it names the install directory
    and the ``{version}-stable`` release tag.
    """

    text: str

    @classmethod
    def parse(cls, raw: str) -> ReleaseVersion:
        if not VERSION_PATTERN.fullmatch(raw):
            raise InvalidVersionFormatError(raw)
        return cls(raw)

    @classmethod
    def from_tag(cls, tag: str) -> ReleaseVersion | None:
        """Extract the first version substring from a release tag."""
        match = VERSION_IN_TAG.search(tag)
        return cls(match.group(0)) if match else None

    @property
    def tag(self) -> str:
        return f"{self.text}-stable"

    @property
    def sort_key(self) -> tuple[int, ...]:
        return tuple(int(part) for part in self.text.split("."))

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ReleaseAsset:
    """The archive selected for a (version, architecture) pair."""

    version: ReleaseVersion
    architecture: Architecture
    download_url: str
    filename: str


def asset_filename(version: ReleaseVersion, arch: Architecture) -> str:
    """Published archive name for a version and architecture."""
    return ASSET_FILENAME.format(version=version.text, arch=arch.value)


# ── Release index records ───────────────────────────────────────


class ReleaseAssetRecord(BaseModel):
    """One entry of a release's ``assets`` array."""

    name: str = ""
    browser_download_url: str = ""


class Release(BaseModel):
    """A published release as returned by the release index."""

    tag_name: str = ""
    assets: list[ReleaseAssetRecord] = Field(default_factory=list)

    @property
    def version(self) -> ReleaseVersion | None:
        return ReleaseVersion.from_tag(self.tag_name)
