"""
Configuration loader — resolves installer settings.

Settings come from three layers, later ones winning:

    built-in defaults  <  XDG_* environment variables  <  config.yml

The YAML file is optional.  It is read from ``--config``, then
``$GODOT_INSTALLER_CONFIG``, then ``$XDG_CONFIG_HOME/godot-installer/config.yml``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError

from godot_installer.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV = "GODOT_INSTALLER_CONFIG"
CONFIG_FILE = "config.yml"
APP_DIR = "godot-installer"

# XDG variable → (settings field, default relative to $HOME)
_XDG_DIRS = {
    "XDG_DATA_HOME": ("data_home", ".local/share"),
    "XDG_BIN_HOME": ("bin_home", ".local/bin"),
    "XDG_CACHE_HOME": ("cache_home", ".cache"),
}


class Settings(BaseModel):
    """Everything the installer needs to know about its environment."""

    data_home: Path
    bin_home: Path
    cache_home: Path

    # ── Release index ───────────────────────────────────────────
    github_repo: str = "godotengine/godot"
    api_url: str = "https://api.github.com"
    download_url: str = "https://github.com"
    icon_url: str = "https://raw.githubusercontent.com/godotengine/godot/master/icon.svg"

    # ── Transport ───────────────────────────────────────────────
    timeout: float = Field(default=15.0, gt=0)
    download_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=5.0, ge=0)

    lock_file: Path = Path("/tmp/godot_installer.lock")

    # ── Derived layout ──────────────────────────────────────────

    @property
    def versions_root(self) -> Path:
        """One subdirectory per installed version."""
        return self.data_home / "godot"

    @property
    def active_link(self) -> Path:
        return self.bin_home / "godot"

    @property
    def installer_path(self) -> Path:
        return self.bin_home / APP_DIR

    @property
    def desktop_file(self) -> Path:
        return self.data_home / "applications" / "godot.desktop"

    @property
    def icon_path(self) -> Path:
        return self.data_home / "icons" / "godot.svg"

    @property
    def scratch_root(self) -> Path:
        return self.cache_home / APP_DIR

    @property
    def repo_api(self) -> str:
        return f"{self.api_url.rstrip('/')}/repos/{self.github_repo}"

    def checksum_url(self, tag: str) -> str:
        """URL of the SHA-512 manifest published with a release."""
        return f"{self.download_url.rstrip('/')}/{self.github_repo}/releases/download/{tag}/SHA512-SUMS.txt"


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Where the optional config file lives when not given explicitly."""
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV)
    if explicit:
        return Path(explicit).expanduser()
    config_home = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home).expanduser() / APP_DIR / CONFIG_FILE


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build validated settings from defaults, environment and YAML.

    Args:
        path: Explicit config file. Must exist when given.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If the file is unreadable, malformed or invalid.
    """
    env = os.environ if environ is None else environ

    data: dict = {}
    for var, (field, default) in _XDG_DIRS.items():
        value = env.get(var)
        data[field] = Path(value).expanduser() if value else Path.home() / default

    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data.update(_read_yaml(path))
    else:
        candidate = default_config_path(env)
        if candidate.is_file():
            data.update(_read_yaml(candidate))

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    logger.debug(
        "Settings: data=%s bin=%s cache=%s",
        settings.data_home,
        settings.bin_home,
        settings.cache_home,
    )
    return settings


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Paths in the file may use ~
    for key in ("data_home", "bin_home", "cache_home", "lock_file"):
        if isinstance(data.get(key), str):
            data[key] = Path(data[key]).expanduser()

    return data
