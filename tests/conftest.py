"""Pytest configuration and shared fixtures for the structcompare test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from structcompare.options import DiffOptions

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "security: Tests of input limits and unsafe content handling")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def user_original() -> dict:
    """Provide the original side of a typical API payload comparison.

    Returns
    -------
    dict
        A user record with nested settings and a tag list.

    """
    return {
        "id": 17,
        "name": "Ada",
        "email": "ada@example.com",
        "tags": ["admin", "beta"],
        "settings": {"theme": "dark", "notifications": True},
        "updatedAt": "2024-01-01T00:00:00Z",
    }


@pytest.fixture
def user_modified() -> dict:
    """Provide the modified side of a typical API payload comparison.

    Returns
    -------
    dict
        The same user with one changed, one removed and one added value.

    """
    return {
        "id": 17,
        "name": "Ada Lovelace",
        "tags": ["beta", "admin"],
        "settings": {"theme": "dark", "notifications": True, "language": "en"},
        "updatedAt": "2024-02-01T00:00:00Z",
    }


@pytest.fixture
def api_options() -> DiffOptions:
    """Provide the options of the ``api`` preset."""
    return DiffOptions.from_preset("api")


@pytest.fixture
def write_file(tmp_path):
    """Return a helper that writes text to a file under ``tmp_path``."""

    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
