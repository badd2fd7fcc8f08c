"""Installer configuration."""

from godot_installer.core.config.loader import Settings, load_settings

__all__ = ["Settings", "load_settings"]
