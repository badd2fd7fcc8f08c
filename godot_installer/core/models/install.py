"""
InstalledVersion — a version directory on disk with its payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InstalledVersion:
    """A versioned install directory holding one executable payload."""

    version: str
    directory: Path
    executable: Path
