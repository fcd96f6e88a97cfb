"""
Installer error taxonomy — one flat error kind per pipeline stage.

Calling code branches on the class; the message is for humans and
carries the URL, path or digests needed for diagnosis.
"""

from __future__ import annotations

from pathlib import Path


class InstallerError(Exception):
    """Base class for every classified installer failure."""

    stage: str = "install"
    label: str = "installation failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class PlatformError(InstallerError):
    """Unsupported OS or architecture. Terminal, never retried."""

    stage = "detect"
    label = "platform detection failed"


class VersionResolutionError(InstallerError):
    """Release index unreachable, malformed, or without releases."""

    stage = "resolve"
    label = "version resolution failed"


class DownloadError(InstallerError):
    """Network/HTTP failure, or an integrity failure of the archive.

    ``integrity`` is True for a missing checksum entry or a digest
    mismatch; both abort installation the same way.
    """

    stage = "download"
    label = "download failed"

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        integrity: bool = False,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.integrity = integrity
        self.expected = expected
        self.actual = actual


class ExtractionError(InstallerError):
    """Corrupt archive, or the binary entry is missing or duplicated."""

    stage = "extract"
    label = "extraction failed"


class InstallationError(InstallerError):
    """Filesystem write, permission or rename failure."""

    stage = "install"
    label = "installation failed"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
