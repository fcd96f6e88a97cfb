"""
Domain models for the installer.

    from centy_installer.core.models import Platform, ReleaseAsset, PipelineResult
"""

from centy_installer.core.models.platform import Arch, ArchiveKind, OSName, Platform
from centy_installer.core.models.receipt import PipelineResult, StageReceipt
from centy_installer.core.models.release import (
    ChecksumManifest,
    DownloadedArtifact,
    ExtractedBinary,
    InstalledBinary,
    ReleaseAsset,
)

__all__ = [
    # platform.py
    "Arch",
    "ArchiveKind",
    "OSName",
    "Platform",
    # receipt.py
    "PipelineResult",
    "StageReceipt",
    # release.py
    "ChecksumManifest",
    "DownloadedArtifact",
    "ExtractedBinary",
    "InstalledBinary",
    "ReleaseAsset",
]
