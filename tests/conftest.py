"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database and HTTP client fixtures are in tests/integration/conftest.py.
"""

import os

# Set APP_ENV before any app imports
os.environ.setdefault("APP_ENV", "testing")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Generator

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.frontdoor.core.config import get_settings
from src.frontdoor.core.logging import clear_request_context

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()

# Settings that change routing or reach external APIs; tests opt in explicitly
_ISOLATED_ENV_VARS = (
    "PLATFORM_BASE_DOMAIN",
    "CUSTOM_DOMAIN",
    "ADMIN_SUBDOMAIN",
    "BUILDER_SUBDOMAIN",
    "REGISTRY_BACKEND",
    "CLOUDFLARE_ZONE_ID",
    "CLOUDFLARE_API_TOKEN",
    "DISPATCH_GATEWAY_URL",
    "METRICS_API_KEY",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Run every test against default settings unless it sets env vars itself."""
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def zone_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    """Configure the custom hostname zone credentials."""
    monkeypatch.setenv("CLOUDFLARE_ZONE_ID", "zone-123")
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "zone-token")
    get_settings.cache_clear()


@pytest.fixture
def capturing_logger() -> Generator[CapturingLogger]:
    """Route structlog output into a capturing logger."""
    cap_logger = CapturingLogger()

    # Save original configuration to restore later
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)
