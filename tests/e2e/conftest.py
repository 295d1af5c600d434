"""Pytest configuration for e2e tests.

Runs the generated map page in headless Chromium via pytest-playwright.
"""

from __future__ import annotations

import pytest


@pytest.fixture(scope="session")
def browser_type_launch_args() -> dict:
    """Configure browser launch arguments."""
    return {
        "headless": True,
        "args": ["--no-sandbox"],  # Required for CI environments
    }


@pytest.fixture(scope="session")
def browser_context_args() -> dict:
    """Wide enough for the split list/map layout."""
    return {
        "viewport": {"width": 1400, "height": 900},
        "ignore_https_errors": True,
    }
