"""
Auto-mark all tests in this directory as integration tests.

These run the whole pipeline end to end against a fake release host;
the live-network test additionally needs CENTY_E2E=1.

Run ONLY integration tests:
    pytest tests/integration/ -m integration

Run ONLY unit tests:
    pytest -m "not integration"
"""

import pytest


def pytest_collection_modifyitems(items):
    """Auto-apply the 'integration' marker to every test in this directory."""
    for item in items:
        if "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
