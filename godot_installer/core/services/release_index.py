"""
Release index client — typed access to GitHub Releases.

Responses are deserialized into ``Release`` records instead of being
scraped as text.  Transport and decode failures are logged at debug
level and returned as ``None`` (or an empty list): whether a missing
release means "no release found" or "no asset found" is the caller's
decision.
"""

from __future__ import annotations

import http.client
import json
import logging
from urllib.error import URLError
from urllib.request import Request, urlopen

from pydantic import TypeAdapter, ValidationError

from godot_installer import __version__
from godot_installer.core.config.loader import Settings
from godot_installer.core.models.release import Release, ReleaseVersion

logger = logging.getLogger(__name__)

USER_AGENT = f"godot-installer/{__version__}"

_RELEASE_LIST = TypeAdapter(list[Release])


class ReleaseIndexClient:
    """Read-only client for one repository's releases."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._base = settings.repo_api
        self._timeout = settings.timeout

    def latest_release(self) -> Release | None:
        """The release GitHub marks as latest."""
        data = self._get_json(f"{self._base}/releases/latest")
        return self._parse_release(data)

    def release_by_tag(self, tag: str) -> Release | None:
        data = self._get_json(f"{self._base}/releases/tags/{tag}")
        return self._parse_release(data)

    def list_releases(self) -> list[Release]:
        """Published releases, newest first as returned by the index."""
        data = self._get_json(f"{self._base}/releases?per_page=100")
        if not isinstance(data, list):
            return []
        try:
            return _RELEASE_LIST.validate_python(data)
        except ValidationError as e:
            logger.debug("Unexpected release list payload: %s", e)
            return []

    def checksum_manifest(self, version: ReleaseVersion) -> str | None:
        """Plain-text ``SHA512-SUMS.txt`` published with a release."""
        raw = self._get(self._settings.checksum_url(version.tag), accept="text/plain")
        if raw is None:
            return None
        return raw.decode("utf-8", errors="replace")

    # ── Transport ───────────────────────────────────────────────

    def _get(self, url: str, *, accept: str = "application/vnd.github.v3+json") -> bytes | None:
        req = Request(url, headers={"Accept": accept, "User-Agent": USER_AGENT})
        try:
            with urlopen(req, timeout=self._timeout) as resp:  # nosec - HTTPS release index
                return resp.read()
        except (URLError, OSError, http.client.HTTPException) as e:
            logger.debug("Request to %s failed: %s", url, e)
            return None

    def _get_json(self, url: str) -> object | None:
        raw = self._get(url)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug("Invalid JSON from %s: %s", url, e)
            return None

    def _parse_release(self, data: object | None) -> Release | None:
        if not isinstance(data, dict):
            return None
        try:
            return Release.model_validate(data)
        except ValidationError as e:
            logger.debug("Unexpected release payload: %s", e)
            return None
