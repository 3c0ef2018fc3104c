# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Strips every recognized config variable from the environment so the
#   host machine's settings never leak into a test
# - Builds a throwaway static/views tree per test
# - Provides app fixtures wired to in-memory MongoDB/Redis fakes
# =============================================================================

from pathlib import Path

import pytest

from app.config import Settings, get_settings
from app.main import create_app
from tests.fakes import FakeDatabaseHandle, FakeRedis, connector_returning

PROJECT_ROOT = Path(__file__).resolve().parent.parent

CONFIG_VARIABLES = list(Settings.model_fields)

FAVICON_BYTES = b"\x89PNG\r\n\x1a\nfake-icon"
STYLESHEET = "body { color: #222; }\n"
INDEX_TEMPLATE = (
    "<p>{{ environment }}</p>"
    "{% if visits is not none %}<p>visits={{ visits }}</p>"
    "{% else %}<p>no sessions</p>{% endif %}"
)


# =============================================================================
# Environment
# =============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove config variables from os.environ and reset the settings cache."""
    for name in CONFIG_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Files
# =============================================================================

@pytest.fixture
def static_dir(tmp_path):
    """Static asset folder with a favicon and a stylesheet."""
    root = tmp_path / "static"
    (root / "img").mkdir(parents=True)
    (root / "css").mkdir()
    (root / "img" / "favicon.png").write_bytes(FAVICON_BYTES)
    (root / "css" / "style.css").write_text(STYLESHEET)
    return root


@pytest.fixture
def views_dir(tmp_path):
    """Template folder with a minimal index.html."""
    root = tmp_path / "views"
    root.mkdir()
    (root / "index.html").write_text(INDEX_TEMPLATE)
    return root


@pytest.fixture
def settings(static_dir, views_dir):
    """Default settings, pointed at the throwaway asset folders."""
    return Settings(
        _env_file=None,
        STATIC_ASSETS_PATH=str(static_dir),
        VIEWS_PATH=str(views_dir),
    )


# =============================================================================
# App
# =============================================================================

@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def fake_database():
    return FakeDatabaseHandle()


@pytest.fixture
def make_app(settings, fake_database, fake_redis):
    """
    Factory for apps wired to the fakes.

    Keyword arguments override the create_app() defaults.
    """
    def _make(**kwargs):
        kwargs.setdefault("database_connector", connector_returning(fake_database))
        kwargs.setdefault("cache_connector", connector_returning(fake_redis))
        return create_app(kwargs.pop("settings", settings), **kwargs)

    return _make
