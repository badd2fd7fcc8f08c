"""
Install use case — the verified-install pipeline.

    architecture ─┐
                  ├─► installed? ──yes──► relink
    version ──────┘        │
                           no
                           ▼
             locate ─► download ─► verify ─► install ─► relink

Every stage either returns its output or raises an ``InstallerError``;
the first failure aborts the run.  Scratch files live in directories
registered with the RunContext, so they are removed on every exit path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from godot_installer.core.config.loader import Settings
from godot_installer.core.context import RunContext
from godot_installer.core.models.install import InstalledVersion
from godot_installer.core.models.release import Architecture, ReleaseAsset
from godot_installer.core.services.architecture import ArchitectureResolver
from godot_installer.core.services.desktop import DesktopIntegration
from godot_installer.core.services.download import Downloader
from godot_installer.core.services.installer import Installer
from godot_installer.core.services.locator import ReleaseLocator
from godot_installer.core.services.release_index import ReleaseIndexClient
from godot_installer.core.services.verification import IntegrityVerifier
from godot_installer.core.services.versions import VersionResolver

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Outcome of a successful install run."""

    installed: InstalledVersion
    architecture: Architecture
    reused: bool = False
    asset: ReleaseAsset | None = None


class InstallPipeline:
    """All stages of an install, wired together.

    Every collaborator can be replaced; the defaults are built from
    ``settings``.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client: ReleaseIndexClient | None = None,
        architectures: ArchitectureResolver | None = None,
        downloader: Downloader | None = None,
        installer: Installer | None = None,
        desktop: DesktopIntegration | None = None,
    ):
        client = client or ReleaseIndexClient(settings)
        self.downloader = downloader or Downloader(
            timeout=settings.timeout,
            attempts=settings.download_attempts,
            delay=settings.retry_delay,
        )
        self.architectures = architectures or ArchitectureResolver()
        self.versions = VersionResolver(client)
        self.locator = ReleaseLocator(client)
        self.verifier = IntegrityVerifier(client)
        self.installer = installer or Installer(settings)
        self.desktop = desktop or DesktopIntegration(settings, self.downloader)

    def run(self, run: RunContext, requested: str | None = None) -> InstallResult:
        arch = self.architectures.resolve()
        version = self.versions.resolve(requested)
        logger.info("Setting up Godot %s for %s...", version, arch)

        existing = self.installer.find_installed(version.text)
        if existing is not None:
            logger.info("Godot %s is already installed", version)
            logger.info("Creating symlink to existing installation")
            self.installer.activate(existing)
            self.desktop.update(version.text)
            logger.info("Godot %s linked successfully", version)
            return InstallResult(installed=existing, architecture=arch, reused=True)

        asset = self.locator.locate(version, arch)
        logger.info("Installing Godot %s...", version)

        scratch = run.make_temp_dir("download-")
        archive = run.register(self.downloader.fetch(asset.download_url, scratch))

        self.verifier.verify(archive, version, asset.architecture)

        installed = self.installer.install(asset, archive)
        self.desktop.update(version.text)

        logger.info("Godot %s installed successfully", version)
        return InstallResult(installed=installed, architecture=arch, asset=asset)


def install_godot(
    run: RunContext,
    requested: str | None = None,
    pipeline: InstallPipeline | None = None,
) -> InstallResult:
    """Install (or relink) a Godot version inside an open RunContext."""
    pipeline = pipeline or InstallPipeline(run.settings)
    return pipeline.run(run, requested)
