"""
Run context — the resources one installer invocation owns.

A RunContext holds the instance lock and a cleanup registry of every
temporary directory or file created during the run.  It is opened once
by the CLI and passed to each pipeline stage; closing it (normally via
``with``) removes every registered path and releases the lock, whatever
the exit path.

    with RunContext(settings) as run:
        scratch = run.make_temp_dir("download-")
        ...

While open, SIGTERM is turned into ``SystemExit`` so the cleanup block
still runs.  SIGKILL cannot be intercepted; leftovers from a killed run
live under the cache directory and are harmless.
"""

from __future__ import annotations

import logging
import shutil
import signal
import tempfile
import threading
from pathlib import Path
from types import FrameType

from godot_installer.core.config.loader import Settings
from godot_installer.core.reliability.instance_lock import InstanceLock

logger = logging.getLogger(__name__)


class RunContext:
    """Lock + cleanup registry for a single invocation.

    Args:
        settings: Resolved installer settings.
        lock: Take the instance lock on enter (state-mutating commands).
    """

    def __init__(self, settings: Settings, *, lock: bool = True):
        self.settings = settings
        self.lock = InstanceLock(settings.lock_file) if lock else None
        self._cleanup: list[Path] = []
        self._previous_sigterm: object = None

    # ── Lifecycle ───────────────────────────────────────────────

    def __enter__(self) -> RunContext:
        if self.lock is not None:
            self.lock.acquire()
        self._install_sigterm_handler()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Remove registered paths (newest first) and release the lock."""
        try:
            while self._cleanup:
                path = self._cleanup.pop()
                _remove(path)
        finally:
            self._restore_sigterm_handler()
            if self.lock is not None:
                self.lock.release()

    # ── Cleanup registry ────────────────────────────────────────

    def register(self, path: Path) -> Path:
        """Schedule ``path`` for removal when the run ends."""
        self._cleanup.append(Path(path))
        return path

    def make_temp_dir(self, prefix: str = "run-") -> Path:
        """Create a registered scratch directory under the cache root."""
        root = self.settings.scratch_root
        root.mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix=prefix, dir=root))
        logger.debug("Created scratch directory %s", path)
        return self.register(path)

    @property
    def registered(self) -> list[Path]:
        return list(self._cleanup)

    # ── Signals ─────────────────────────────────────────────────

    def _install_sigterm_handler(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        self._previous_sigterm = signal.signal(signal.SIGTERM, _exit_on_sigterm)

    def _restore_sigterm_handler(self) -> None:
        if self._previous_sigterm is None:
            return
        signal.signal(signal.SIGTERM, self._previous_sigterm)  # type: ignore[arg-type]
        self._previous_sigterm = None


def _exit_on_sigterm(signum: int, frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


def _remove(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        else:
            return
        logger.debug("Cleaned up %s", path)
    except OSError as e:
        logger.warning("Could not remove temporary path %s: %s", path, e)
