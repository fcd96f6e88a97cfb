"""
L5 Orchestration — The install pipeline.

Detect → Resolve → Download → Verify → Extract → Install, strictly in
order.  Each stage yields a StageReceipt; the first failed receipt
ends the run and its classified error is carried on the
PipelineResult.  Nothing is written to disk before Verify and
Extract have both succeeded, so an aborted run leaves the previous
install untouched.  No retries: callers re-run the whole pipeline.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable, TypeVar

from centy_installer.core.config.loader import ConfigError, InstallerConfig, load_config
from centy_installer.core.errors import (
    DownloadError,
    ExtractionError,
    InstallationError,
    InstallerError,
    PlatformError,
    VersionResolutionError,
)
from centy_installer.core.models.platform import Platform
from centy_installer.core.models.receipt import PipelineResult, StageReceipt
from centy_installer.core.services.install.detection.platform import check_supported, detect
from centy_installer.core.services.install.domain.checksum import verify
from centy_installer.core.services.install.domain.naming import build_release_asset
from centy_installer.core.services.install.execution import daemon
from centy_installer.core.services.install.execution.download import fetch
from centy_installer.core.services.install.execution.extract import extract
from centy_installer.core.services.install.execution.http import Opener
from centy_installer.core.services.install.execution.installer import install as install_binary
from centy_installer.core.services.install.resolver.version import resolve

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Error kind used when a stage fails with something unclassified.
_STAGE_ERRORS: dict[str, type[InstallerError]] = {
    "config": ConfigError,
    "detect": PlatformError,
    "resolve": VersionResolutionError,
    "download": DownloadError,
    "verify": DownloadError,
    "extract": ExtractionError,
    "install": InstallationError,
}


def run_pipeline(
    version: str | None = None,
    *,
    config: InstallerConfig | None = None,
    platform: Platform | None = None,
    home: Path | None = None,
    opener: Opener | None = None,
    restart_daemon: bool | None = None,
) -> PipelineResult:
    """Install the requested (or latest) release of the daemon binary.

    Never raises installer errors: inspect ``result.ok``,
    ``result.error`` and ``result.failed_stage``.  When ``config`` is
    not given it is loaded first, as a ``config`` stage, so a broken
    config file fails the run before any network I/O.

    Args:
        version: Version to install (``"1.2.3"`` or ``"v1.2.3"``);
            None, blank or ``"latest"`` resolves the newest release.
        config: Installer configuration (default: ``load_config()``).
        platform: Use this platform instead of probing the host; it
            is still checked against the supported targets.
        home: Home directory the install location derives from.
        opener: ``urlopen`` replacement for all HTTP requests.
        restart_daemon: Override ``config.restart_daemon``.
    """
    result = PipelineResult()

    if config is None:
        config = _stage(result, "config", load_config, home=home)
        if result.error:
            return result

    # ── 1. Detect ──
    if platform is None:
        platform = _stage(result, "detect", detect)
    else:
        platform = _stage(result, "detect", check_supported, platform)
    if result.error:
        return result
    result.target = platform.target_triple
    logger.info("Installing for %s", result.target)

    # ── 2. Resolve ──
    tag = _stage(result, "resolve", resolve, version, config=config, opener=opener)
    if result.error:
        return result
    result.version = tag

    # ── 3. Download ──
    asset = build_release_asset(platform, tag, config=config)
    fetched = _stage(result, "download", fetch, asset, config=config, opener=opener)
    if result.error:
        return result
    artifact, manifest = fetched

    # ── 4. Verify ──
    digest = _stage(result, "verify", verify, artifact, manifest, asset.archive_name)
    if result.error:
        return result
    result.digest = digest

    # ── 5. Extract ──
    binary_name = platform.binary_name(config.binary_name)
    binary = _stage(result, "extract", extract, artifact, asset.archive_kind, binary_name)
    if result.error:
        return result

    # ── 6. Install ──
    destination = config.install_dir(home) / binary_name
    installed = _stage(result, "install", install_binary, binary, destination)
    if result.error:
        return result
    result.path = installed.path

    # ── Post-install: daemon restart ──
    wants_restart = config.restart_daemon if restart_daemon is None else restart_daemon
    if wants_restart:
        _restart_daemon(result, installed.path, home=home, binary_name=config.binary_name)
    else:
        result.receipts.append(StageReceipt.skip("restart", "daemon restart not requested"))

    logger.info("Installed %s %s to %s", config.binary_name, tag, installed.path)
    return result


def install(version: str | None = None, **kwargs: Any) -> Path:
    """Install the daemon binary and return its path.

    Same arguments as ``run_pipeline``.

    Raises:
        InstallerError: The classified error of the failed stage.
    """
    result = run_pipeline(version, **kwargs)
    if result.error is not None:
        raise result.error
    if result.path is None:
        raise InstallationError("pipeline finished without installing a binary")
    return result.path


# ── Helpers ─────────────────────────────────────────────────────


def _stage(
    result: PipelineResult,
    name: str,
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run one stage, append its receipt, and record a failure on ``result``.

    On failure ``result.error`` is set and the return value must not
    be used; callers check ``result.error`` right after the call.
    """
    start = time.monotonic()
    receipt_start = datetime.now(UTC).isoformat()
    logger.debug("Stage %s started", name)

    try:
        value = func(*args, **kwargs)
    except InstallerError as err:
        error = err
    except Exception as exc:
        logger.exception("Unexpected failure in stage %s", name)
        error = _STAGE_ERRORS[name](f"unexpected error: {exc}")
        error.__cause__ = exc
    else:
        result.receipts.append(
            StageReceipt.success(name, started_at=receipt_start, duration_ms=_elapsed_ms(start)),
        )
        logger.debug("Stage %s ok (%d ms)", name, _elapsed_ms(start))
        return value

    result.error = error
    result.receipts.append(
        StageReceipt.failure(name, error, started_at=receipt_start, duration_ms=_elapsed_ms(start)),
    )
    logger.error("Stage %s failed: %s", name, error)
    return None  # type: ignore[return-value]


def _restart_daemon(
    result: PipelineResult,
    binary_path: Path,
    *,
    home: Path | None,
    binary_name: str,
) -> None:
    start = time.monotonic()
    try:
        restarted = daemon.restart_if_running(binary_path, home=home, binary_name=binary_name)
    except daemon.DaemonRestartError as exc:
        logger.warning("Installed binary, but daemon restart failed: %s", exc)
        result.restart_error = str(exc)
        result.receipts.append(StageReceipt(
            stage="restart",
            status="failed",
            error=str(exc),
            error_kind=type(exc).__name__,
            duration_ms=_elapsed_ms(start),
        ))
        return

    result.daemon_restarted = restarted
    result.receipts.append(StageReceipt.success(
        "restart",
        duration_ms=_elapsed_ms(start),
        detail={"restarted": restarted},
    ))


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
