"""
Tests for the install pipeline — stage order, receipts and error classification.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from centy_installer.core.config.loader import ConfigError, InstallerConfig
from centy_installer.core.errors import (
    DownloadError,
    ExtractionError,
    InstallationError,
    InstallerError,
    PlatformError,
    VersionResolutionError,
)
from centy_installer.core.models.platform import Arch, OSName, Platform
from centy_installer.core.models.receipt import PipelineResult
from centy_installer.core.services.install.execution.daemon import DaemonRestartError
from centy_installer.core.services.install.orchestration import pipeline
from centy_installer.core.services.install.orchestration.pipeline import install, run_pipeline
from tests.helpers import FakeOpener, make_tar_gz, release_routes

LINUX = Platform(os=OSName.LINUX, arch=Arch.X86_64)
ARCHIVE = "centy-daemon-x86_64-unknown-linux-gnu.tar.gz"
STAGES = ["detect", "resolve", "download", "verify", "extract", "install", "restart"]


def _stages(result) -> list[tuple[str, str]]:
    return [(r.stage, r.status) for r in result.receipts]


@pytest.fixture
def routes():
    return release_routes("v1.0.0", ARCHIVE, make_tar_gz({"centy-daemon": b"daemon v1"}))


class TestHappyPath:
    def test_all_stages_in_order(self, config, fake_home: Path, routes):
        result = run_pipeline(
            "1.0.0", config=config, platform=LINUX, home=fake_home, opener=FakeOpener(routes),
        )

        assert result.ok, result.error
        assert [s for s, _ in _stages(result)] == STAGES
        assert _stages(result)[0] == ("detect", "ok")
        assert _stages(result)[-1] == ("restart", "skipped")
        assert all(status == "ok" for _, status in _stages(result)[:-1])

        assert result.path == fake_home / ".centy" / "bin" / "centy-daemon"
        assert result.path.read_bytes() == b"daemon v1"
        assert result.version == "v1.0.0"
        assert result.target == "x86_64-unknown-linux-gnu"
        assert result.digest is not None

    def test_detects_host_when_platform_not_given(self, config, fake_home, routes):
        with patch.object(pipeline, "detect", return_value=LINUX) as detect:
            result = run_pipeline("1.0.0", config=config, home=fake_home, opener=FakeOpener(routes))
        detect.assert_called_once_with()
        assert _stages(result)[0] == ("detect", "ok")

    def test_install_returns_path(self, config, fake_home, routes):
        path = install("v1.0.0", config=config, platform=LINUX, home=fake_home, opener=FakeOpener(routes))
        assert path.read_bytes() == b"daemon v1"

    def test_request_order(self, config, fake_home, routes):
        opener = FakeOpener(routes)
        run_pipeline(None, config=config, platform=LINUX, home=fake_home, opener=opener)
        assert [u.rsplit("/", 1)[-1] for u in opener.urls] == [
            "releases", ARCHIVE, "checksums-sha256.txt",
        ]


class TestShortCircuit:
    def test_resolve_failure_stops_everything(self, config, fake_home):
        opener = FakeOpener()
        result = run_pipeline(None, config=config, platform=LINUX, home=fake_home, opener=opener)

        assert isinstance(result.error, VersionResolutionError)
        assert result.failed_stage == "resolve"
        assert [s for s, _ in _stages(result)] == ["detect", "resolve"]
        assert len(opener.requests) == 1
        assert not (fake_home / ".centy").exists()

    def test_verify_failure_writes_nothing(self, config, fake_home):
        archive = make_tar_gz({"centy-daemon": b"evil"})
        routes = release_routes("v1.0.0", ARCHIVE, archive, manifest=f"{'0' * 64}  {ARCHIVE}\n")
        result = run_pipeline("1.0.0", config=config, platform=LINUX, home=fake_home, opener=FakeOpener(routes))

        assert isinstance(result.error, DownloadError)
        assert result.error.integrity
        assert result.failed_stage == "verify"
        assert not (fake_home / ".centy" / "bin" / "centy-daemon").exists()

    def test_extract_failure(self, config, fake_home):
        routes = release_routes("v1.0.0", ARCHIVE, make_tar_gz({"other": b"x"}))
        result = run_pipeline("1.0.0", config=config, platform=LINUX, home=fake_home, opener=FakeOpener(routes))

        assert isinstance(result.error, ExtractionError)
        assert result.failed_stage == "extract"
        assert result.path is None

    def test_install_raises_classified_error(self, config, fake_home):
        with pytest.raises(VersionResolutionError):
            install(None, config=config, platform=LINUX, home=fake_home, opener=FakeOpener())

    def test_unexpected_exception_is_classified(self, config, fake_home, routes):
        with patch.object(pipeline, "install_binary", side_effect=RuntimeError("disk gremlin")):
            result = run_pipeline("1.0.0", config=config, platform=LINUX, home=fake_home, opener=FakeOpener(routes))

        assert isinstance(result.error, InstallationError)
        assert isinstance(result.error.__cause__, RuntimeError)
        assert "disk gremlin" in str(result.error)
        assert result.failed_stage == "install"

    def test_failure_receipt_details(self, config, fake_home):
        result = run_pipeline(None, config=config, platform=LINUX, home=fake_home, opener=FakeOpener())
        receipt = result.receipts[-1]
        assert receipt.failed
        assert receipt.error_kind == "VersionResolutionError"
        assert receipt.error.startswith("version resolution failed:")


class TestConfigLoading:
    def test_loads_config_when_not_given(self, fake_home, routes, monkeypatch, clean_env):
        monkeypatch.setenv("CENTY_INSTALLER_API_BASE", "https://api.test")
        monkeypatch.setenv("CENTY_INSTALLER_DOWNLOAD_BASE", "https://dl.test/releases/download")
        result = run_pipeline("1.0.0", platform=LINUX, home=fake_home, opener=FakeOpener(routes))
        assert result.ok, result.error

    def test_loaded_config_gets_a_receipt(self, fake_home, routes, monkeypatch, clean_env):
        monkeypatch.setenv("CENTY_INSTALLER_API_BASE", "https://api.test")
        monkeypatch.setenv("CENTY_INSTALLER_DOWNLOAD_BASE", "https://dl.test/releases/download")
        result = run_pipeline("1.0.0", platform=LINUX, home=fake_home, opener=FakeOpener(routes))
        assert _stages(result)[0] == ("config", "ok")

    def test_invalid_config_fails_before_any_stage(self, fake_home, clean_env, monkeypatch):
        monkeypatch.setenv("CENTY_INSTALLER_REPO", "not-a-repo")
        opener = FakeOpener()
        result = run_pipeline(platform=LINUX, home=fake_home, opener=opener)

        assert isinstance(result.error, ConfigError)
        assert result.failed_stage == "config"
        assert [s for s, _ in _stages(result)] == ["config"]
        assert opener.requests == []

    def test_install_raises_classified_config_error(self, fake_home, clean_env, monkeypatch):
        """A bad override surfaces through the installer error taxonomy."""
        monkeypatch.setenv("CENTY_INSTALLER_TIMEOUT", "soon")
        with pytest.raises(InstallerError) as exc_info:
            install("1.0.0", platform=LINUX, home=fake_home, opener=FakeOpener())
        assert isinstance(exc_info.value, ConfigError)
        assert str(exc_info.value).startswith("invalid configuration:")


class TestDaemonRestart:
    def test_restart_requested(self, config, fake_home, routes):
        with patch.object(pipeline.daemon, "restart_if_running", return_value=True) as restart:
            result = run_pipeline(
                "1.0.0", config=config, platform=LINUX, home=fake_home,
                opener=FakeOpener(routes), restart_daemon=True,
            )
        restart.assert_called_once_with(result.path, home=fake_home, binary_name="centy-daemon")
        assert result.daemon_restarted is True
        assert _stages(result)[-1] == ("restart", "ok")

    def test_restart_from_config(self, config: InstallerConfig, fake_home, routes):
        config = config.model_copy(update={"restart_daemon": True})
        with patch.object(pipeline.daemon, "restart_if_running", return_value=False):
            result = run_pipeline("1.0.0", config=config, platform=LINUX, home=fake_home, opener=FakeOpener(routes))
        assert result.daemon_restarted is False
        assert result.receipts[-1].detail == {"restarted": False}

    def test_restart_failure_keeps_install(self, config, fake_home, routes):
        with patch.object(
            pipeline.daemon, "restart_if_running", side_effect=DaemonRestartError("failed to start daemon"),
        ):
            result = run_pipeline(
                "1.0.0", config=config, platform=LINUX, home=fake_home,
                opener=FakeOpener(routes), restart_daemon=True,
            )
        assert result.ok
        assert result.error is None
        assert result.restart_error == "failed to start daemon"
        assert result.path.read_bytes() == b"daemon v1"
        assert _stages(result)[-1] == ("restart", "failed")


class TestSuppliedPlatform:
    """A caller-supplied platform is checked like a detected one."""

    def test_unsupported_pair_fails_detect_stage(self, config, fake_home):
        unsupported = Platform.model_construct(os=OSName.WINDOWS, arch=Arch.AARCH64)
        opener = FakeOpener()

        result = run_pipeline("1.0.0", config=config, platform=unsupported, home=fake_home, opener=opener)

        assert isinstance(result.error, PlatformError)
        assert result.failed_stage == "detect"
        assert result.target is None
        assert _stages(result) == [("detect", "failed")]
        assert opener.requests == []

    def test_install_raises_platform_error(self, config, fake_home):
        unsupported = Platform.model_construct(os=OSName.LINUX, arch="riscv64")
        with pytest.raises(PlatformError, match="unsupported platform: linux-riscv64"):
            install("1.0.0", config=config, platform=unsupported, home=fake_home, opener=FakeOpener())


class TestInstallWrapper:
    def test_result_without_path_is_an_installation_error(self):
        with patch.object(pipeline, "run_pipeline", return_value=PipelineResult()):
            with pytest.raises(InstallationError, match="without installing"):
                install("1.0.0")
