"""
L3 Detection — Host platform.

Maps the running OS/CPU onto one of the supported (os, arch) pairs.
Read-only: the only inputs are ``platform.system()`` and
``platform.machine()``.
"""

from __future__ import annotations

import logging
import platform as _platform

from centy_installer.core.data.constants import (
    ARCH_ALIASES,
    OS_ALIASES,
    SUPPORTED_TARGETS,
    WINDOWS_SYSTEM_PREFIXES,
)
from centy_installer.core.errors import PlatformError
from centy_installer.core.models.platform import Arch, OSName, Platform

logger = logging.getLogger(__name__)


def normalize_os(system: str) -> str | None:
    """``"Darwin"`` → ``"macos"``, ``"MINGW64_NT-10.0"`` → ``"windows"``."""
    key = system.strip().lower()
    if key in OS_ALIASES:
        return OS_ALIASES[key]
    if key.startswith(WINDOWS_SYSTEM_PREFIXES):
        return "windows"
    return None


def normalize_arch(machine: str) -> str | None:
    """``"amd64"`` → ``"x86_64"``, ``"arm64"`` → ``"aarch64"``."""
    return ARCH_ALIASES.get(machine.strip().lower())


def detect(system: str | None = None, machine: str | None = None) -> Platform:
    """Resolve the host (or the given) OS/arch to a supported Platform.

    Args:
        system: OS identifier; defaults to ``platform.system()``.
        machine: CPU identifier; defaults to ``platform.machine()``.

    Raises:
        PlatformError: The OS, the architecture, or the pair is not
            supported.  There is no fallback binary.
    """
    raw_os = system if system is not None else _platform.system()
    raw_arch = machine if machine is not None else _platform.machine()

    os_name = normalize_os(raw_os)
    arch = normalize_arch(raw_arch)

    if os_name is None or arch is None or (os_name, arch) not in SUPPORTED_TARGETS:
        raise PlatformError(f"unsupported platform: {raw_os or '?'}-{raw_arch or '?'}")

    result = Platform(os=OSName(os_name), arch=Arch(arch))
    logger.debug("Detected platform %s (%s/%s) → %s", result, raw_os, raw_arch, result.target_triple)
    return result


def check_supported(platform: Platform) -> Platform:
    """Accept a caller-supplied Platform only if its pair is supported.

    ``Platform`` validates on construction, but ``model_construct``
    skips validation, so the pair is checked again here.

    Raises:
        PlatformError: The pair has no published target.
    """
    pair = (getattr(platform.os, "value", platform.os), getattr(platform.arch, "value", platform.arch))
    if pair not in SUPPORTED_TARGETS:
        raise PlatformError(f"unsupported platform: {pair[0]}-{pair[1]}")
    logger.debug("Using supplied platform %s → %s", platform, SUPPORTED_TARGETS[pair])
    return platform
