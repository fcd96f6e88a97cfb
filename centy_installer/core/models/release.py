"""
Release models — what gets fetched, verified, extracted and installed.

``ReleaseAsset`` and ``ChecksumManifest`` are pydantic models (they
describe remote data).  The byte-carrying entities are plain frozen
dataclasses: they only live for the duration of one pipeline run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from centy_installer.core.models.platform import ArchiveKind


class ReleaseAsset(BaseModel):
    """The downloadable archive for one (target, tag) pair."""

    tag: str
    target: str
    archive_kind: ArchiveKind
    archive_name: str
    archive_url: str
    manifest_url: str


class ChecksumManifest(BaseModel):
    """Expected SHA-256 digests, keyed by asset file name."""

    entries: dict[str, str] = Field(default_factory=dict)
    source_url: str = ""

    def get(self, filename: str) -> str | None:
        return self.entries.get(filename)

    def __contains__(self, filename: object) -> bool:
        return filename in self.entries

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class DownloadedArtifact:
    """Raw archive bytes and where they came from."""

    data: bytes
    url: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ExtractedBinary:
    """The single executable pulled out of the archive."""

    name: str
    data: bytes
    mode: int | None = None  # as recorded in the archive, informational only


@dataclass(frozen=True)
class InstalledBinary:
    """The binary on disk after a successful install."""

    path: Path
    mode: int
    size: int
