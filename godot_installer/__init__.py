"""Godot Installer — fetch, verify and manage Godot Engine releases."""

__version__ = "1.1.0"
