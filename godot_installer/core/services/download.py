"""
Downloader — fetch an asset to local storage with bounded retries.

Each attempt streams the response into the target file, overwriting
whatever a previous failed attempt left behind (no resume).  Any
transport failure (HTTP error status, timeout, refused connection)
counts as a failed attempt, and so does a body cut short mid-transfer.
"""

from __future__ import annotations

import http.client
import logging
import shutil
import time
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlsplit
from urllib.request import Request, urlopen

from godot_installer import __version__
from godot_installer.core.errors import DownloadFailedError
from godot_installer.core.reliability.retry import RetryExhausted, RetryPolicy

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class TransportError(OSError):
    """Response arrived with a non-2xx status."""


def filename_from_url(url: str) -> str:
    """Final path segment of ``url``."""
    name = unquote(urlsplit(url).path.rsplit("/", 1)[-1])
    if not name:
        raise ValueError(f"URL has no filename: {url}")
    return name


class Downloader:
    """Retrieve URLs into files.

    Args:
        timeout: Per-attempt transport timeout in seconds.
        attempts: Total attempts before giving up.
        delay: Fixed pause between attempts.
        sleep: Sleep function (injectable for tests).
    """

    def __init__(
        self,
        timeout: float = 15.0,
        attempts: int = 3,
        delay: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._timeout = timeout
        self._policy = RetryPolicy(
            max_attempts=attempts,
            delay=delay,
            retry_on=(OSError, http.client.HTTPException),
            sleep=sleep,
        )

    @property
    def attempts(self) -> int:
        return self._policy.max_attempts

    def fetch(self, url: str, destination_dir: Path) -> Path:
        """Download ``url`` into ``destination_dir`` under its own filename."""
        return self.fetch_to(url, Path(destination_dir) / filename_from_url(url))

    def fetch_to(self, url: str, target: Path) -> Path:
        """Download ``url`` to exactly ``target``."""
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading %s", url)

        try:
            self._policy.run(lambda: self._attempt(url, target), label="Download")
        except RetryExhausted as e:
            raise DownloadFailedError(url, e.attempts, str(e.last_error)) from e

        logger.debug("Saved %s (%d bytes)", target, target.stat().st_size)
        return target

    def _attempt(self, url: str, target: Path) -> None:
        req = Request(url, headers={"User-Agent": f"godot-installer/{__version__}"})
        with urlopen(req, timeout=self._timeout) as resp:  # nosec - HTTPS release assets
            status = getattr(resp, "status", None) or 200
            if not 200 <= status < 300:
                raise TransportError(f"HTTP {status} for {url}")
            with open(target, "wb") as f:
                shutil.copyfileobj(resp, f, _CHUNK_SIZE)
