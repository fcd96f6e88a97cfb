"""
L1 Domain — Release asset naming (pure).

Archive and manifest URLs are a deterministic function of
(platform, tag, config); nothing is looked up remotely.
"""

from __future__ import annotations

from centy_installer.core.config.loader import InstallerConfig
from centy_installer.core.models.platform import Platform
from centy_installer.core.models.release import ReleaseAsset


def archive_filename(platform: Platform, tag: str, *, config: InstallerConfig) -> str:
    """``centy-daemon-x86_64-unknown-linux-gnu.tar.gz`` with the default template."""
    return config.asset_template.format(
        binary=config.binary_name,
        tag=tag,
        target=platform.target_triple,
        ext=platform.archive_kind.extension,
    )


def build_release_asset(platform: Platform, tag: str, *, config: InstallerConfig) -> ReleaseAsset:
    """Build the archive and checksum-manifest URLs for one release."""
    name = archive_filename(platform, tag, config=config)
    base = f"{config.resolved_download_base}/{tag}"
    return ReleaseAsset(
        tag=tag,
        target=platform.target_triple,
        archive_kind=platform.archive_kind,
        archive_name=name,
        archive_url=f"{base}/{name}",
        manifest_url=f"{base}/{config.checksums_name}",
    )
