"""
Static data for the installer — naming conventions, alias maps and
the supported target table.

    from centy_installer.core.data import SUPPORTED_TARGETS
"""

from centy_installer.core.data.constants import (  # noqa: F401
    ARCH_ALIASES,
    CHECKSUMS_NAME,
    CONFIG_FILE,
    DAEMON_PID_FILE,
    DEFAULT_API_BASE,
    DEFAULT_ASSET_TEMPLATE,
    DEFAULT_BINARY_NAME,
    DEFAULT_REPO,
    DEFAULT_TIMEOUT,
    INSTALL_SUBDIR,
    OS_ALIASES,
    SUPPORTED_TARGETS,
)
