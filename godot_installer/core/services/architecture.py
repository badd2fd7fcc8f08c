"""
Architecture resolution — host machine type → release-asset tag.
"""

from __future__ import annotations

import fnmatch
import logging
import platform

from godot_installer.core.errors import UnsupportedArchitectureError
from godot_installer.core.models.release import Architecture

logger = logging.getLogger(__name__)

# Glob patterns for ``uname -m`` values, checked in order
_ALIASES: tuple[tuple[str, Architecture], ...] = (
    ("x86_64", Architecture.X86_64),
    ("amd64", Architecture.X86_64),
    ("aarch64", Architecture.ARM64),
    ("arm64", Architecture.ARM64),
    ("armv7*", Architecture.ARM32),
    ("armv8l", Architecture.ARM32),
    ("i386", Architecture.X86_32),
    ("i686", Architecture.X86_32),
)


class ArchitectureResolver:
    """Map the host architecture to one of the published asset tags.

    Args:
        machine: Machine string to resolve. Defaults to ``platform.machine()``.
    """

    def __init__(self, machine: str | None = None):
        self._machine = machine

    def resolve(self) -> Architecture:
        machine = self._machine if self._machine is not None else platform.machine()
        for pattern, arch in _ALIASES:
            if fnmatch.fnmatchcase(machine, pattern):
                logger.debug("Machine %s resolves to %s", machine, arch)
                return arch
        raise UnsupportedArchitectureError(machine)
