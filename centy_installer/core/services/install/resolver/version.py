"""
L2 Resolver — Version tags.

A pinned version is only normalised (leading ``v``); it is never
checked against the remote release list, so a non-existent pin
surfaces later as a download failure.  No version means "latest":
the first entry of the GitHub release index, in the index's own
order, pre-releases included.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from centy_installer.core.config.loader import InstallerConfig
from centy_installer.core.errors import VersionResolutionError
from centy_installer.core.services.install.execution.http import FetchError, Opener, http_get

logger = logging.getLogger(__name__)

LATEST = "latest"
_GITHUB_JSON = "application/vnd.github+json"


def is_latest_request(requested: str | None) -> bool:
    """True for ``None``, blank strings and the ``"latest"`` sentinel."""
    if requested is None:
        return True
    cleaned = requested.strip()
    return not cleaned or cleaned.lower() == LATEST


def normalize_version(raw: str) -> str:
    """``"0.1.0"`` and ``"V0.1.0"`` → ``"v0.1.0"``; ``"v0.1.0"`` is unchanged."""
    cleaned = raw.strip()
    if cleaned[:1] in ("v", "V"):
        cleaned = cleaned[1:]
    return f"v{cleaned}"


def resolve(
    requested: str | None,
    *,
    config: InstallerConfig,
    opener: Opener | None = None,
) -> str:
    """Return the normalised tag to install.

    Raises:
        VersionResolutionError: The release index is unreachable,
            malformed, or lists no eligible release.
    """
    if requested is not None and not is_latest_request(requested):
        tag = normalize_version(requested)
        logger.info("Using requested version %s", tag)
        return tag

    url = config.releases_url
    logger.info("Resolving latest release from %s", url)
    try:
        body = http_get(url, config=config, accept=_GITHUB_JSON, opener=opener)
    except FetchError as exc:
        raise VersionResolutionError(f"failed to fetch releases from {url}: {exc.reason}") from exc

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise VersionResolutionError(f"failed to parse releases JSON from {url}: {exc}") from exc

    tag = select_latest_tag(payload, include_prereleases=config.include_prereleases)
    if tag is None:
        raise VersionResolutionError(f"no releases found at {url}")

    tag = normalize_version(tag)
    logger.info("Latest release is %s", tag)
    return tag


def select_latest_tag(payload: Any, *, include_prereleases: bool = True) -> str | None:
    """Pick the most recently published tag from a release-index payload.

    The index is already newest-first; it is never re-sorted.  Drafts
    are skipped, and so are pre-releases when ``include_prereleases``
    is off.  A single release object (``/releases/latest`` shape) is
    accepted too.
    """
    if isinstance(payload, dict):
        releases: list = [payload]
    elif isinstance(payload, list):
        releases = payload
    else:
        return None

    for release in releases:
        if not isinstance(release, dict):
            continue
        tag = release.get("tag_name")
        if not isinstance(tag, str) or not tag.strip():
            continue
        if release.get("draft"):
            logger.debug("Skipping draft release %s", tag)
            continue
        if release.get("prerelease") and not include_prereleases:
            logger.debug("Skipping pre-release %s", tag)
            continue
        return tag.strip()
    return None
