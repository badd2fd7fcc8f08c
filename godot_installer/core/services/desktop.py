"""
Desktop integration — application-menu entry and icon.

Rewritten after every successful install or relink so the menu entry
names the active version.
"""

from __future__ import annotations

import logging
import textwrap

from godot_installer.core.config.loader import Settings
from godot_installer.core.services.download import Downloader

logger = logging.getLogger(__name__)

DOCS_URL = "https://docs.godotengine.org/"


def render_desktop_entry(settings: Settings, version: str) -> str:
    return textwrap.dedent(f"""\
        [Desktop Entry]
        Comment=An open source game engine
        Exec={settings.active_link}
        Icon={settings.icon_path}
        Name=Godot Engine - {version}
        Type=Application
        Categories=Development;Game;
        MimeType=application/x-godot-project;
        Actions=update_godot;open_docs;

        [Desktop Action update_godot]
        Name=Update Godot
        Exec={settings.installer_path} install

        [Desktop Action open_docs]
        Name=Open Documentation
        Exec=xdg-open {DOCS_URL}
    """)


class DesktopIntegration:
    def __init__(self, settings: Settings, downloader: Downloader | None = None):
        self._settings = settings
        self._downloader = downloader

    def update(self, version: str) -> None:
        """Rewrite the menu entry for ``version`` and refresh the icon."""
        entry = self._settings.desktop_file
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.unlink(missing_ok=True)
        entry.write_text(render_desktop_entry(self._settings, version), encoding="utf-8")
        logger.debug("Wrote desktop entry %s", entry)

        if self._downloader is None:
            return
        self._downloader.fetch_to(self._settings.icon_url, self._settings.icon_path)

    def remove(self) -> None:
        for path, label in (
            (self._settings.desktop_file, "desktop entry"),
            (self._settings.icon_path, "icon"),
        ):
            if path.is_file():
                logger.info("Removing %s: %s", label, path)
                path.unlink()
