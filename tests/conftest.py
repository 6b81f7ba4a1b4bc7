"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import pytest

from splitsync.core import config as config_module


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for tests that exercise file-backed stores."""
    return tmp_path


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables and a fresh global config."""
    # Ensure tests don't use production data
    monkeypatch.setenv("SPLITSYNC_ENV", "test")
    monkeypatch.setenv("SPLITSYNC_DATA_DIR", str(tmp_path / "data"))

    # Mock credentials
    monkeypatch.setenv("YNAB_API_TOKEN", "test-token")
    monkeypatch.setenv("YNAB_BUDGET_ID", "budget-123")
    monkeypatch.setenv("SPLITWISE_API_KEY", "test-key")
    monkeypatch.setenv("SPLITWISE_GROUP_ID", "42")

    for name in ("SYNC_COMMIT_POLICY", "SYNC_CATEGORY_MAP_FILE", "SYNC_MINOR_UNIT_SCALE", "SYNC_CATEGORY_GROUP"):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "cache: Tests for the response cache")
    config.addinivalue_line("markers", "ynab: Tests for YNAB integration")
    config.addinivalue_line("markers", "splitwise: Tests for Splitwise integration")
