"""
Configuration loader — reads installer.yml into an InstallerConfig.

The file is optional.  When present it is parsed as YAML, validated
against the Pydantic schema, and then environment overrides are
applied on top.  With no file and no env vars, the defaults install
the latest centy-daemon release from GitHub.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from centy_installer import __version__
from centy_installer.core.data.constants import (
    CHECKSUMS_NAME,
    CONFIG_FILE,
    DEFAULT_API_BASE,
    DEFAULT_ASSET_TEMPLATE,
    DEFAULT_BINARY_NAME,
    DEFAULT_REPO,
    DEFAULT_TIMEOUT,
    INSTALL_SUBDIR,
)
from centy_installer.core.errors import InstallerError

logger = logging.getLogger(__name__)

CONFIG_ENV = "CENTY_INSTALLER_CONFIG"

# env var → config field
_ENV_OVERRIDES: dict[str, str] = {
    "CENTY_INSTALLER_REPO": "repo",
    "CENTY_INSTALLER_API_BASE": "api_base",
    "CENTY_INSTALLER_DOWNLOAD_BASE": "download_base",
    "CENTY_INSTALL_DIR": "install_root",
    "CENTY_INSTALLER_TIMEOUT": "timeout",
    "CENTY_INSTALLER_PRERELEASES": "include_prereleases",
    "CENTY_INSTALLER_RESTART_DAEMON": "restart_daemon",
}


class ConfigError(InstallerError):
    """Raised when installer configuration is invalid or unreadable."""

    stage = "config"
    label = "invalid configuration"


class InstallerConfig(BaseModel):
    """Where releases come from and where the binary goes."""

    repo: str = DEFAULT_REPO
    api_base: str = DEFAULT_API_BASE
    download_base: str | None = None    # None → github.com/{repo}/releases/download

    binary_name: str = DEFAULT_BINARY_NAME
    asset_template: str = DEFAULT_ASSET_TEMPLATE
    checksums_name: str = CHECKSUMS_NAME

    install_root: Path | None = None    # None → <home>/.centy/bin
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    user_agent: str = f"centy-installer/{__version__}"

    include_prereleases: bool = True
    restart_daemon: bool = False

    @field_validator("api_base", "download_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/")

    @field_validator("repo")
    @classmethod
    def _check_repo(cls, value: str) -> str:
        if value.count("/") != 1 or value.startswith("/") or value.endswith("/"):
            raise ValueError(f"repo must look like 'owner/name', got {value!r}")
        return value

    @field_validator("asset_template")
    @classmethod
    def _check_template(cls, value: str) -> str:
        try:
            value.format(binary="b", tag="t", target="x", ext="e")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"asset_template may only use {{binary}} {{tag}} {{target}} {{ext}}: {e}"
            ) from e
        return value

    @property
    def releases_url(self) -> str:
        """Release index endpoint (most recently published first)."""
        return f"{self.api_base}/repos/{self.repo}/releases"

    @property
    def resolved_download_base(self) -> str:
        if self.download_base:
            return self.download_base
        return f"https://github.com/{self.repo}/releases/download"

    def install_dir(self, home: Path | None = None) -> Path:
        """Directory the binary is installed into."""
        if self.install_root is not None:
            return Path(self.install_root).expanduser()
        return (home or Path.home()).joinpath(*INSTALL_SUBDIR)


def default_config_path(home: Path | None = None) -> Path:
    """Get the default config file path (``<home>/.centy/installer.yml``)."""
    return (home or Path.home()).joinpath(*CONFIG_FILE)


def load_config(
    path: Path | None = None,
    *,
    home: Path | None = None,
    environ: dict[str, str] | None = None,
) -> InstallerConfig:
    """Load and validate installer configuration.

    Args:
        path: Explicit path to a YAML config file.  If None, uses
            ``$CENTY_INSTALLER_CONFIG`` and then the default location;
            a missing default file is not an error.
        home: Home directory used to find the default file.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Validated InstallerConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file or
            override is invalid.
    """
    env = os.environ if environ is None else environ

    explicit = path is not None
    if path is None and env.get(CONFIG_ENV):
        path = Path(env[CONFIG_ENV]).expanduser()
        explicit = True
    if path is None:
        path = default_config_path(home)

    data: dict = {}
    if path.is_file():
        data = _read_yaml(path)
    elif explicit:
        raise ConfigError(f"Config file not found: {path}")

    for var, key in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value is not None and value != "":
            logger.debug("Config override %s=%s from %s", key, value, var)
            data[key] = value

    try:
        config = InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    logger.debug("Installer config: repo=%s api_base=%s", config.repo, config.api_base)
    return config


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The file may wrap everything under an "installer" key or be flat
    if isinstance(data.get("installer"), dict):
        data = data["installer"]
    return dict(data)
