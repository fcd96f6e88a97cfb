"""
L3 Detection — read-only host probes.
"""

from centy_installer.core.services.install.detection.platform import (  # noqa: F401
    check_supported,
    detect,
)
