"""
Tests for desktop integration — menu entry and icon.
"""

from conftest import FakeDownloader
from godot_installer.core.services.desktop import DesktopIntegration, render_desktop_entry


class TestRenderDesktopEntry:
    def test_names_version_and_paths(self, settings):
        entry = render_desktop_entry(settings, "4.4.1")
        assert entry.startswith("[Desktop Entry]\n")
        assert "Name=Godot Engine - 4.4.1\n" in entry
        assert f"Exec={settings.active_link}\n" in entry
        assert f"Icon={settings.icon_path}\n" in entry
        assert "MimeType=application/x-godot-project;" in entry

    def test_update_action_runs_installer(self, settings):
        entry = render_desktop_entry(settings, "4.4.1")
        assert "[Desktop Action update_godot]" in entry
        assert f"Exec={settings.installer_path} install\n" in entry

    def test_docs_action(self, settings):
        assert "Exec=xdg-open https://docs.godotengine.org/" in render_desktop_entry(settings, "4.3")


class TestDesktopIntegration:
    def test_update_writes_entry_and_icon(self, settings):
        downloader = FakeDownloader()
        DesktopIntegration(settings, downloader).update("4.4.1")

        assert "Name=Godot Engine - 4.4.1" in settings.desktop_file.read_text()
        assert settings.icon_path.is_file()
        assert downloader.icons == [settings.icon_url]

    def test_update_replaces_previous_entry(self, settings):
        desktop = DesktopIntegration(settings, FakeDownloader())
        desktop.update("4.3")
        desktop.update("4.4.1")
        text = settings.desktop_file.read_text()
        assert "4.4.1" in text
        assert "Name=Godot Engine - 4.3" not in text

    def test_update_without_downloader_skips_icon(self, settings):
        DesktopIntegration(settings).update("4.4.1")
        assert settings.desktop_file.is_file()
        assert not settings.icon_path.exists()

    def test_remove(self, settings):
        desktop = DesktopIntegration(settings, FakeDownloader())
        desktop.update("4.4.1")
        desktop.remove()
        assert not settings.desktop_file.exists()
        assert not settings.icon_path.exists()

    def test_remove_when_absent(self, settings):
        DesktopIntegration(settings).remove()
