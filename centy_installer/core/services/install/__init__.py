"""
Binary install service — package re-exports.

    from centy_installer.core.services.install import run_pipeline

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (domain → resolver → detection → execution →
orchestration); static data sits in ``centy_installer.core.data``.
"""

# ── L1: Domain ──
from centy_installer.core.services.install.domain.checksum import (  # noqa: F401
    parse_manifest,
    sha256_hex,
    verify,
)
from centy_installer.core.services.install.domain.naming import (  # noqa: F401
    archive_filename,
    build_release_asset,
)

# ── L2: Resolver ──
from centy_installer.core.services.install.resolver.version import (  # noqa: F401
    normalize_version,
    resolve,
)

# ── L3: Detection ──
from centy_installer.core.services.install.detection.platform import (  # noqa: F401
    detect,
)

# ── L4: Execution ──
from centy_installer.core.services.install.execution.daemon import (  # noqa: F401
    restart_if_running,
)
from centy_installer.core.services.install.execution.download import (  # noqa: F401
    fetch,
)
from centy_installer.core.services.install.execution.extract import (  # noqa: F401
    extract,
)
from centy_installer.core.services.install.execution.installer import (  # noqa: F401
    default_install_path,
)

# ── L5: Orchestration ──
from centy_installer.core.services.install.orchestration.pipeline import (  # noqa: F401
    install,
    run_pipeline,
)
