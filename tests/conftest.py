"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from centy_installer.core.config.loader import InstallerConfig
from tests.helpers import API_BASE, DOWNLOAD_BASE


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fake_home(tmp_path: Path) -> Path:
    """Return a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def config() -> InstallerConfig:
    """Installer config pointed at fake endpoints."""
    return InstallerConfig(api_base=API_BASE, download_base=DOWNLOAD_BASE, timeout=5)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove installer env vars so tests see defaults."""
    for var in (
        "CENTY_INSTALLER_CONFIG",
        "CENTY_INSTALLER_REPO",
        "CENTY_INSTALLER_API_BASE",
        "CENTY_INSTALLER_DOWNLOAD_BASE",
        "CENTY_INSTALL_DIR",
        "CENTY_INSTALLER_TIMEOUT",
        "CENTY_INSTALLER_PRERELEASES",
        "CENTY_INSTALLER_RESTART_DAEMON",
        "CENTY_LOG_LEVEL",
        "CENTY_LOG_FILE",
        "CENTY_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
