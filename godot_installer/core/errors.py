"""
Error taxonomy — every failure the installer can report.

All errors derive from ``InstallerError`` so the CLI can catch one type,
log it with a timestamp and exit non-zero.  None of them is recovered
locally: each one is fatal to the current invocation.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for all installer failures."""


class ConfigError(InstallerError):
    """Raised when the installer configuration is invalid or unreadable."""


class UnsupportedArchitectureError(InstallerError):
    def __init__(self, machine: str):
        self.machine = machine
        super().__init__(f"Unsupported architecture: {machine}")


class InvalidVersionFormatError(InstallerError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Invalid version format: {version} (expected X.Y[.Z])")


class NoReleaseFoundError(InstallerError):
    """Raised when the release index is unreachable or lists nothing usable."""


class AssetNotFoundError(InstallerError):
    def __init__(self, version: str, arch: str):
        self.version = version
        self.arch = arch
        super().__init__(f"No download found for version {version} and architecture {arch}")


class DownloadFailedError(InstallerError):
    def __init__(self, url: str, attempts: int, last_error: str = ""):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        message = f"Download failed after {attempts} attempts: {url}"
        if last_error:
            message += f" ({last_error})"
        super().__init__(message)


class ChecksumNotFoundError(InstallerError):
    """Raised when no published SHA-512 digest exists for a file.

    ``available`` lists the filenames the manifest did contain, empty when
    the manifest itself could not be fetched.
    """

    def __init__(self, filename: str, available: list[str] | None = None):
        self.filename = filename
        self.available = available or []
        super().__init__(f"Could not find SHA512 hash for {filename}")


class ChecksumMismatchError(InstallerError):
    def __init__(self, path: str, expected: str, actual: str):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"SHA512 verification failed for {path}")


class ExtractionError(InstallerError):
    """Raised when a downloaded archive cannot be unpacked."""


class PayloadNotFoundError(InstallerError):
    """Raised when an archive holds no executable matching the payload name."""


class InstanceAlreadyRunningError(InstallerError):
    def __init__(self, lock_path: str):
        self.lock_path = lock_path
        super().__init__("Another instance of the installer is running")


class VersionNotInstalledError(InstallerError):
    def __init__(self, version: str, path: str):
        self.version = version
        self.path = path
        super().__init__(f"Godot version {version} not found at {path}")
