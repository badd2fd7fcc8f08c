"""
Shared test fixtures and fakes.

No test touches the network: the release index and the downloader are
replaced by the in-memory fakes below, and transport-level tests
monkeypatch ``urlopen``.
"""

import hashlib
import io
import shutil
import textwrap
import zipfile
from pathlib import Path

import pytest

from godot_installer.core.config.loader import Settings
from godot_installer.core.models.release import Release, ReleaseAssetRecord, ReleaseVersion

DOWNLOAD_BASE = "https://github.com/godotengine/godot/releases/download"


# ── Builders ────────────────────────────────────────────────────


def write_zip(path: Path, members: dict[str, tuple[bytes, int]]) -> Path:
    """Write a zip whose members carry unix permission bits."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, (data, mode) in members.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, data)
    return path


def godot_zip(path: Path, version: str, arch: str) -> Path:
    """A release archive holding a single executable payload."""
    payload = f"Godot_v{version}-stable_linux.{arch}"
    return write_zip(path, {payload: (b"\x7fELF fake godot " + version.encode(), 0o755)})


def make_release(tag: str, *names: str) -> Release:
    return Release(
        tag_name=tag,
        assets=[
            ReleaseAssetRecord(name=n, browser_download_url=f"{DOWNLOAD_BASE}/{tag}/{n}")
            for n in names
        ],
    )


def sha512_hex(path: Path) -> str:
    return hashlib.sha512(path.read_bytes()).hexdigest()


def install_fake_version(settings: Settings, version: str, arch: str = "x86_64") -> Path:
    """Lay out an installed version directory; return its executable."""
    directory = settings.versions_root / version
    directory.mkdir(parents=True, exist_ok=True)
    exe = directory / f"Godot_v{version}-stable_linux.{arch}"
    exe.write_bytes(b"fake")
    exe.chmod(0o755)
    return exe


def link_active(settings: Settings, exe: Path) -> None:
    settings.active_link.parent.mkdir(parents=True, exist_ok=True)
    settings.active_link.unlink(missing_ok=True)
    settings.active_link.symlink_to(exe)


# ── Fakes ───────────────────────────────────────────────────────


class FakeReleaseIndex:
    """In-memory stand-in for ReleaseIndexClient."""

    def __init__(
        self,
        releases: list[Release] | None = None,
        latest: str | None = None,
        manifests: dict[str, str] | None = None,
    ):
        self.releases = {r.tag_name: r for r in releases or []}
        self.order = [r.tag_name for r in releases or []]
        self.latest = latest
        self.manifests = manifests or {}
        self.calls: list[tuple[str, ...]] = []

    def latest_release(self) -> Release | None:
        self.calls.append(("latest",))
        return self.releases.get(self.latest) if self.latest else None

    def release_by_tag(self, tag: str) -> Release | None:
        self.calls.append(("tag", tag))
        return self.releases.get(tag)

    def list_releases(self) -> list[Release]:
        self.calls.append(("list",))
        return [self.releases[t] for t in self.order]

    def checksum_manifest(self, version: ReleaseVersion) -> str | None:
        self.calls.append(("checksums", version.text))
        return self.manifests.get(version.text)

    def count(self, kind: str) -> int:
        return sum(1 for c in self.calls if c[0] == kind)


class FakeDownloader:
    """Serves local files in place of URLs."""

    def __init__(self, files: dict[str, Path] | None = None):
        self.files = files or {}
        self.fetched: list[str] = []
        self.icons: list[str] = []
        self.attempts = 3

    def fetch(self, url: str, destination_dir: Path) -> Path:
        self.fetched.append(url)
        target = Path(destination_dir) / url.rsplit("/", 1)[-1]
        shutil.copyfile(self.files[url], target)
        return target

    def fetch_to(self, url: str, target: Path) -> Path:
        self.icons.append(url)
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("<svg/>")
        return target


class FakeResponse(io.BytesIO):
    """Minimal ``urlopen`` response."""

    def __init__(self, data: bytes = b"", status: int = 200):
        super().__init__(data)
        self.status = status


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temp directory, with no retry delay."""
    return Settings(
        data_home=tmp_path / "data",
        bin_home=tmp_path / "bin",
        cache_home=tmp_path / "cache",
        lock_file=tmp_path / "installer.lock",
        retry_delay=0,
    )


@pytest.fixture
def published(tmp_path: Path):
    """A published 4.4.1 release with a matching archive and manifest.

    Returns ``(index, downloader, archive)``.
    """
    version, arch = "4.4.1", "x86_64"
    filename = f"Godot_v{version}-stable_linux.{arch}.zip"
    archive = godot_zip(tmp_path / "published" / filename, version, arch)
    tag = f"{version}-stable"

    release = make_release(tag, filename, f"Godot_v{version}-stable_linux.arm64.zip", "SHA512-SUMS.txt")
    zeros = "0" * 128
    manifest = textwrap.dedent(f"""\
        {zeros}  Godot_v{version}-stable_linux.arm64.zip
        {sha512_hex(archive)}  {filename}
    """)

    index = FakeReleaseIndex([release], latest=tag, manifests={version: manifest})
    downloader = FakeDownloader({f"{DOWNLOAD_BASE}/{tag}/{filename}": archive})
    return index, downloader, archive


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch) -> Settings:
    """Point the CLI at temp directories and a temp lock file."""
    config = tmp_path / "config.yml"
    config.write_text(
        f"lock_file: {tmp_path / 'installer.lock'}\nretry_delay: 0\n", encoding="utf-8"
    )
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_BIN_HOME", str(tmp_path / "bin"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("GODOT_INSTALLER_CONFIG", str(config))
    monkeypatch.delenv("GODOT_INSTALLER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("GODOT_INSTALLER_LOG_FILE", raising=False)
    return Settings(
        data_home=tmp_path / "data",
        bin_home=tmp_path / "bin",
        cache_home=tmp_path / "cache",
        lock_file=tmp_path / "installer.lock",
        retry_delay=0,
    )
