"""
L4 Execution — Atomic binary install.

Write discipline: temp file in the destination directory → fsync →
chmod 0o755 → ``os.replace`` onto the destination.  The destination
is therefore always either the previous complete binary or the new
complete binary, whatever the interleaving of concurrent installs.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from centy_installer.core.data.constants import INSTALL_SUBDIR
from centy_installer.core.errors import InstallationError
from centy_installer.core.models.release import ExtractedBinary, InstalledBinary

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


def default_install_path(binary_name: str, home: Path | None = None) -> Path:
    """``<home>/.centy/bin/<binary_name>`` — independent of version."""
    return (home or Path.home()).joinpath(*INSTALL_SUBDIR, binary_name)


def install(binary: ExtractedBinary, destination: Path) -> InstalledBinary:
    """Atomically place ``binary`` at ``destination`` with mode 0o755.

    Missing parent directories are created.  Archive mode bits are
    ignored: the executable bits are always set explicitly.

    Raises:
        InstallationError: Any filesystem failure.  The temp file is
            removed and an existing destination is left untouched.
    """
    destination = Path(destination)
    parent = destination.parent

    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallationError(f"failed to create {parent}: {e}", path=destination) from e

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
        )
    except OSError as e:
        raise InstallationError(f"failed to create temp file in {parent}: {e}", path=destination) from e

    tmp = Path(tmp_path)
    try:
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(binary.data)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp, EXECUTABLE_MODE)
            os.replace(tmp, destination)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        raise InstallationError(
            f"failed to write binary to {destination}: {e}", path=destination,
        ) from e

    logger.info("Installed %s (%d bytes)", destination, len(binary.data))
    return InstalledBinary(path=destination, mode=EXECUTABLE_MODE, size=len(binary.data))
