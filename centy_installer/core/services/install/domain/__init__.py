"""
L1 Domain — pure logic (no I/O, no subprocess).
"""

from centy_installer.core.services.install.domain.checksum import (  # noqa: F401
    parse_manifest,
    sha256_hex,
    verify,
)
from centy_installer.core.services.install.domain.naming import (  # noqa: F401
    archive_filename,
    build_release_asset,
)
