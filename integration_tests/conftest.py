"""Pytest configuration for integration tests."""

import pytest

from irontrack.config import Settings


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def supabase_settings():
    """Settings for a real Supabase project, or skip when none is configured."""
    settings = Settings.from_env()
    if not (settings.supabase_url and settings.supabase_key):
        pytest.skip("SUPABASE_URL / SUPABASE_ANON_KEY not set")
    return settings
