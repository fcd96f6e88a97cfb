"""
L2 Resolver — turn a requested version into a concrete release tag.
"""

from centy_installer.core.services.install.resolver.version import (  # noqa: F401
    is_latest_request,
    normalize_version,
    resolve,
    select_latest_tag,
)
