"""
Instance lock — one installer run at a time, across processes.

Uses a non-blocking ``fcntl.flock()`` on a well-known file.  A second
process fails immediately instead of waiting.  The OS drops the lock
when the holding process dies, so a crash never leaves it stuck;
``release()`` exists for tidy shutdown and for tests.
"""

from __future__ import annotations

import fcntl
import logging
import os
from pathlib import Path

from godot_installer.core.errors import InstanceAlreadyRunningError

logger = logging.getLogger(__name__)


class InstanceLock:
    """Advisory lock on ``path``.

    Usable as a context manager::

        with InstanceLock(settings.lock_file):
            ...
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._fd: int | None = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        """Take the lock or raise ``InstanceAlreadyRunningError``."""
        if self._fd is not None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(str(self.path), os.O_CREAT | os.O_RDWR, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            os.close(fd)
            raise InstanceAlreadyRunningError(str(self.path)) from e
        except OSError:
            os.close(fd)
            raise

        # Owner PID, for diagnostics only
        os.ftruncate(fd, 0)
        os.write(fd, str(os.getpid()).encode())
        self._fd = fd
        logger.debug("Acquired instance lock %s", self.path)

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None
        logger.debug("Released instance lock %s", self.path)

    def __enter__(self) -> InstanceLock:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
