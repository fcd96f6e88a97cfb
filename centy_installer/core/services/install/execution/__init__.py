"""
L4 Execution — network, archive and filesystem side effects.
"""

from centy_installer.core.services.install.execution.daemon import (  # noqa: F401
    DaemonRestartError,
    restart_if_running,
)
from centy_installer.core.services.install.execution.download import fetch  # noqa: F401
from centy_installer.core.services.install.execution.extract import extract  # noqa: F401
from centy_installer.core.services.install.execution.http import FetchError, http_get  # noqa: F401
from centy_installer.core.services.install.execution.installer import (  # noqa: F401
    default_install_path,
    install,
)
