"""
L1 Domain — Checksum manifest parsing and archive verification (pure).

Manifest format, one entry per line, as written by ``sha256sum``::

    <64 hex chars>  <filename>
    <64 hex chars> *<filename>      (binary-mode marker)

No I/O: the manifest text and archive bytes are handed in.
"""

from __future__ import annotations

import hashlib
import logging
import re

from centy_installer.core.errors import DownloadError
from centy_installer.core.models.release import ChecksumManifest, DownloadedArtifact

logger = logging.getLogger(__name__)

_SHA256_RE = re.compile(r"^[0-9a-fA-F]{64}$")


def sha256_hex(data: bytes) -> str:
    """Lower-case hex SHA-256 digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


def parse_manifest(text: str, source_url: str = "") -> ChecksumManifest:
    """Parse a ``checksums-sha256.txt`` body into a filename → digest map.

    Blank lines and ``#`` comments are ignored, as are lines without a
    filename.  Digests are stored as written; ``verify`` checks their
    shape.  The first entry for a filename wins.
    """
    entries: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        parts = stripped.split(None, 1)
        if len(parts) != 2:
            continue
        digest, filename = parts[0], parts[1].strip()
        if filename.startswith("*"):
            filename = filename[1:]
        if filename and filename not in entries:
            entries[filename] = digest
    return ChecksumManifest(entries=entries, source_url=source_url)


def verify(
    artifact: DownloadedArtifact,
    manifest: ChecksumManifest,
    archive_filename: str,
) -> str:
    """Check ``artifact`` against the manifest entry for ``archive_filename``.

    Comparison is exact after lower-casing both digests.

    Returns:
        The verified digest (lower-case hex).

    Raises:
        DownloadError: ``integrity=True`` when the entry is missing,
            malformed, or does not match.
    """
    expected = manifest.get(archive_filename)
    if expected is None:
        raise DownloadError(
            f"checksum not found for {archive_filename} in checksums file",
            url=artifact.url,
            integrity=True,
        )

    expected = expected.strip()
    if not _SHA256_RE.match(expected):
        raise DownloadError(
            f"checksum entry for {archive_filename} is not a SHA-256 digest: {expected!r}",
            url=artifact.url,
            integrity=True,
            expected=expected,
        )

    actual = sha256_hex(artifact.data)
    if actual != expected.lower():
        raise DownloadError(
            f"checksum mismatch for {archive_filename}: expected {expected.lower()}, got {actual}",
            url=artifact.url,
            integrity=True,
            expected=expected.lower(),
            actual=actual,
        )

    logger.debug("Checksum OK for %s (%s)", archive_filename, actual)
    return actual
