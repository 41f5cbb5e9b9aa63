"""Pytest configuration for the API tests."""

from typing import Any

pytest_plugins = [
    "pytest_databases.docker.postgres",
]

# ==============================================================================
# PYTEST CONFIGURATION
# ==============================================================================


def pytest_configure(config: Any) -> None:
    """Register custom markers for test organization."""
    # Domain markers
    config.addinivalue_line("markers", "domain_auth: Tests for auth domain")
    config.addinivalue_line("markers", "domain_quests: Tests for quests domain")
    config.addinivalue_line("markers", "domain_daily: Tests for daily reset domain")
    config.addinivalue_line("markers", "domain_rewards: Tests for rewards domain")
    config.addinivalue_line("markers", "domain_skills: Tests for skills domain")
    config.addinivalue_line("markers", "domain_shop: Tests for shop domain")
    config.addinivalue_line("markers", "domain_users: Tests for users domain")
    config.addinivalue_line("markers", "domain_utilities: Tests for utilities domain")
