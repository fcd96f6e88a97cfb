"""
centy-installer — download, verify and install the centy-daemon binary.

    from centy_installer import install
    path = install()            # latest release (pre-releases included)
    path = install("0.1.6")     # pinned release, normalised to v0.1.6
"""

__version__ = "0.1.0"

from centy_installer.core.config.loader import ConfigError  # noqa: E402
from centy_installer.core.errors import (  # noqa: E402
    DownloadError,
    ExtractionError,
    InstallationError,
    InstallerError,
    PlatformError,
    VersionResolutionError,
)
from centy_installer.core.services.install import install, run_pipeline  # noqa: E402

__all__ = [
    "ConfigError",
    "DownloadError",
    "ExtractionError",
    "InstallationError",
    "InstallerError",
    "PlatformError",
    "VersionResolutionError",
    "__version__",
    "install",
    "run_pipeline",
]
