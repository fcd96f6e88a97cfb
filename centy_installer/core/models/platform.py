"""
Platform model — the resolved OS + architecture pair of the host.

The target triple, archive kind and binary file name are all pure
functions of the pair, so they live here as properties.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from centy_installer.core.data.constants import (
    DEFAULT_BINARY_NAME,
    SUPPORTED_TARGETS,
)


class OSName(str, Enum):
    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"


class Arch(str, Enum):
    X86_64 = "x86_64"
    AARCH64 = "aarch64"


class ArchiveKind(str, Enum):
    """Archive format of a release asset."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"

    @property
    def extension(self) -> str:
        return self.value


class Platform(BaseModel):
    """A supported (os, arch) pair.

    Usually built by ``detection.platform.detect``.  Building one by
    hand with an unsupported pair (e.g. windows/aarch64) fails
    validation.
    """

    model_config = ConfigDict(frozen=True)

    os: OSName
    arch: Arch

    @model_validator(mode="after")
    def _check_supported(self) -> Platform:
        if (self.os.value, self.arch.value) not in SUPPORTED_TARGETS:
            raise ValueError(f"unsupported platform: {self.os.value}-{self.arch.value}")
        return self

    @property
    def target_triple(self) -> str:
        return SUPPORTED_TARGETS[(self.os.value, self.arch.value)]

    @property
    def archive_kind(self) -> ArchiveKind:
        if self.os is OSName.WINDOWS:
            return ArchiveKind.ZIP
        return ArchiveKind.TAR_GZ

    def binary_name(self, base: str = DEFAULT_BINARY_NAME) -> str:
        """Platform-qualified executable name (``.exe`` on Windows)."""
        if self.os is OSName.WINDOWS and not base.lower().endswith(".exe"):
            return f"{base}.exe"
        return base

    def __str__(self) -> str:
        return f"{self.os.value}-{self.arch.value}"
