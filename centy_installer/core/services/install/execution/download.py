"""
L4 Execution — Release download.

Fetches the archive and its checksum manifest for one ReleaseAsset.
Both must succeed; if the manifest cannot be fetched the archive
bytes are dropped, never returned.
"""

from __future__ import annotations

import logging

from centy_installer.core.config.loader import InstallerConfig
from centy_installer.core.errors import DownloadError
from centy_installer.core.models.release import ChecksumManifest, DownloadedArtifact, ReleaseAsset
from centy_installer.core.services.install.domain.checksum import parse_manifest
from centy_installer.core.services.install.execution.http import FetchError, Opener, http_get

logger = logging.getLogger(__name__)


def fetch(
    asset: ReleaseAsset,
    *,
    config: InstallerConfig,
    opener: Opener | None = None,
) -> tuple[DownloadedArtifact, ChecksumManifest]:
    """Download the archive and the checksum manifest.

    Raises:
        DownloadError: Network failure, non-2xx status, empty body,
            or an undecodable manifest.  Carries the failing URL.
    """
    logger.info("Downloading %s", asset.archive_url)
    archive = _get(asset.archive_url, what="asset", config=config, opener=opener)
    logger.debug("Downloaded %s (%d bytes)", asset.archive_name, len(archive))

    logger.info("Downloading checksums %s", asset.manifest_url)
    raw_manifest = _get(asset.manifest_url, what="checksums", config=config, opener=opener)

    try:
        text = raw_manifest.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DownloadError(
            f"failed to decode checksums from {asset.manifest_url}: {exc}",
            url=asset.manifest_url,
        ) from exc

    manifest = parse_manifest(text, source_url=asset.manifest_url)
    logger.debug("Checksum manifest lists %d assets", len(manifest))
    return DownloadedArtifact(data=archive, url=asset.archive_url), manifest


def _get(url: str, *, what: str, config: InstallerConfig, opener: Opener | None) -> bytes:
    try:
        body = http_get(url, config=config, opener=opener)
    except FetchError as exc:
        raise DownloadError(f"failed to download {what} from {url}: {exc.reason}", url=url) from exc
    if not body:
        raise DownloadError(f"failed to download {what} from {url}: empty response body", url=url)
    return body
