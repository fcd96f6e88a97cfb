"""
L4 Execution — Binary extraction.

One contract over two archive kinds: gzip-compressed tar (Unix
targets) and zip (Windows).  Each kind only has to list its regular
file entries; matching and the exactly-one rule are shared.

Tar archives are read in streaming mode, so only the matching entry
is ever held in memory.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zipfile
import zlib

from centy_installer.core.errors import ExtractionError
from centy_installer.core.models.platform import ArchiveKind
from centy_installer.core.models.release import DownloadedArtifact, ExtractedBinary

logger = logging.getLogger(__name__)


def entry_basename(name: str) -> str:
    """Last path component of an archive entry name (``/`` or ``\\``)."""
    return name.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


def extract(
    artifact: DownloadedArtifact,
    archive_kind: ArchiveKind,
    binary_name: str,
) -> ExtractedBinary:
    """Pull the single entry named ``binary_name`` out of the archive.

    An entry matches when it is a regular file whose base name equals
    ``binary_name`` exactly (it may sit in a subdirectory).

    Raises:
        ExtractionError: Corrupt archive, or zero / several matches.
    """
    logger.info("Extracting %s from %s archive", binary_name, archive_kind.value)
    if archive_kind is ArchiveKind.TAR_GZ:
        found = _extract_tar_gz(artifact.data, binary_name)
    elif archive_kind is ArchiveKind.ZIP:
        found = _extract_zip(artifact.data, binary_name)
    else:  # pragma: no cover - enum is closed
        raise ExtractionError(f"unsupported archive format: {archive_kind}")

    logger.debug("Extracted %s (%d bytes)", binary_name, len(found.data))
    return found


def _single(matches: list[str], binary_name: str, kind: str) -> None:
    if not matches:
        raise ExtractionError(f"{binary_name} binary not found in {kind} archive")
    if len(matches) > 1:
        raise ExtractionError(
            f"{binary_name} found {len(matches)} times in {kind} archive: {', '.join(matches)}"
        )


def _extract_tar_gz(data: bytes, binary_name: str) -> ExtractedBinary:
    matches: list[str] = []
    payload: bytes | None = None
    mode: int | None = None
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r|gz") as tar:
            for member in tar:
                if not member.isfile() or entry_basename(member.name) != binary_name:
                    continue
                matches.append(member.name)
                if len(matches) > 1:
                    continue
                source = tar.extractfile(member)
                if source is None:
                    raise ExtractionError(f"failed to read {member.name} from tar.gz archive")
                payload = source.read()
                mode = member.mode
    except (tarfile.TarError, zlib.error, EOFError, OSError, ValueError) as exc:
        raise ExtractionError(f"failed to read tar.gz archive: {exc}") from exc

    _single(matches, binary_name, "tar.gz")
    if payload is None:
        raise ExtractionError(f"failed to read {binary_name} from tar.gz archive")
    return ExtractedBinary(name=binary_name, data=payload, mode=mode)


def _extract_zip(data: bytes, binary_name: str) -> ExtractedBinary:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            members = [
                info
                for info in archive.infolist()
                if not info.is_dir() and entry_basename(info.filename) == binary_name
            ]
            _single([m.filename for m in members], binary_name, "zip")
            member = members[0]
            payload = archive.read(member)
    except ExtractionError:
        raise
    except (
        zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError, OSError, ValueError,
    ) as exc:
        raise ExtractionError(f"failed to read zip archive: {exc}") from exc

    # Unix mode bits live in the high word of external_attr, when recorded
    mode = (member.external_attr >> 16) & 0o7777 or None
    return ExtractedBinary(name=binary_name, data=payload, mode=mode)
