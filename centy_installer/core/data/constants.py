"""
Installer constants — module-level data for the install pipeline.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

DEFAULT_REPO = "centy-io/centy-daemon"
DEFAULT_API_BASE = "https://api.github.com"
DEFAULT_BINARY_NAME = "centy-daemon"

# Asset naming.  Placeholders: {binary} {tag} {target} {ext}
DEFAULT_ASSET_TEMPLATE = "{binary}-{target}.{ext}"
CHECKSUMS_NAME = "checksums-sha256.txt"

DEFAULT_TIMEOUT = 30  # seconds, per HTTP request

# Install location, relative to the user's home directory.
INSTALL_SUBDIR: tuple[str, ...] = (".centy", "bin")
DAEMON_PID_FILE: tuple[str, ...] = (".centy", "daemon.pid")
CONFIG_FILE: tuple[str, ...] = (".centy", "installer.yml")

# OS name normalization (platform.system() and common spellings).
OS_ALIASES: dict[str, str] = {
    "darwin": "macos",
    "macos": "macos",
    "macosx": "macos",
    "mac": "macos",
    "osx": "macos",
    "linux": "linux",
    "windows": "windows",
    "win32": "windows",
    "win64": "windows",
}

# Windows shells report e.g. "CYGWIN_NT-10.0" or "MINGW64_NT-10.0".
WINDOWS_SYSTEM_PREFIXES: tuple[str, ...] = ("cygwin_nt", "mingw", "msys")

# Architecture normalization (platform.machine() and common spellings).
ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",     # Windows / BSD
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",    # macOS (Darwin reports arm64)
    "armv8": "aarch64",
    "armv8l": "aarch64",
}

# Explicitly supported (os, arch) pairs → target triple.
SUPPORTED_TARGETS: dict[tuple[str, str], str] = {
    ("macos", "aarch64"): "aarch64-apple-darwin",
    ("macos", "x86_64"): "x86_64-apple-darwin",
    ("linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("linux", "x86_64"): "x86_64-unknown-linux-gnu",
    ("windows", "x86_64"): "x86_64-pc-windows-msvc",
}

# Daemon restart timings.
DAEMON_STOP_POLL_INTERVAL = 0.5  # seconds
DAEMON_STOP_POLL_ATTEMPTS = 10   # → 5 s graceful window
