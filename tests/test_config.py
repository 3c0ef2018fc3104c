# =============================================================================
# tests/test_config.py - Settings Tests
# =============================================================================
# Settings come from the environment when a variable is set and non-empty,
# and from the development defaults otherwise.
# =============================================================================

import pytest
from pydantic import ValidationError

from app.config import PROJECT_ROOT, STATIC_ASSETS_PATHS, Settings, get_settings

DEFAULTS = {
    "ENVIRONMENT": "development",
    "DEBUG": False,
    "HOST": "0.0.0.0",
    "PORT": 3000,
    "MONGODB_URI": "mongodb://localhost/ConfigExample",
    "DB_CONNECT_TIMEOUT_MS": 5000,
    "REDISCLOUD_URL": "redis://localhost:6379",
    "CACHE_REQUIRED": False,
    "SECRET": "Config Example Secret",
    "SESSION_TTL_SECONDS": 86400,
    "STATIC_ASSETS_PATH": "client_dev/",
    "VIEWS_PATH": str(PROJECT_ROOT / "views"),
}

OVERRIDES = {
    "ENVIRONMENT": "production",
    "DEBUG": "true",
    "HOST": "127.0.0.1",
    "PORT": "8080",
    "MONGODB_URI": "mongodb://db.internal:27017/prod",
    "DB_CONNECT_TIMEOUT_MS": "250",
    "REDISCLOUD_URL": "redis://:pw@cache.internal:6380/2",
    "CACHE_REQUIRED": "true",
    "SECRET": "s3cr3t",
    "SESSION_TTL_SECONDS": "60",
    "STATIC_ASSETS_PATH": "/srv/assets/",
    "VIEWS_PATH": "/srv/views",
}


def load() -> Settings:
    return Settings(_env_file=None)


class TestDefaults:
    """No variables set."""

    def test_defaults_when_environment_is_empty(self):
        settings = load()
        assert settings.model_dump() == DEFAULTS

    def test_every_field_has_a_value(self):
        settings = load()
        for name, value in settings.model_dump().items():
            assert value not in (None, ""), name

    def test_empty_variable_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("PORT", "")
        monkeypatch.setenv("SECRET", "")
        settings = load()
        assert settings.PORT == 3000
        assert settings.SECRET == "Config Example Secret"

    def test_production_uses_production_assets(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        settings = load()
        assert settings.STATIC_ASSETS_PATH == STATIC_ASSETS_PATHS["production"]
        assert settings.is_production
        assert not settings.is_development


class TestOverrides:
    """Variables set in the environment."""

    def test_all_variables_set(self, monkeypatch):
        for name, value in OVERRIDES.items():
            monkeypatch.setenv(name, value)

        settings = load()

        assert settings.ENVIRONMENT == "production"
        assert settings.DEBUG is True
        assert settings.HOST == "127.0.0.1"
        assert settings.PORT == 8080
        assert settings.MONGODB_URI == OVERRIDES["MONGODB_URI"]
        assert settings.DB_CONNECT_TIMEOUT_MS == 250
        assert settings.REDISCLOUD_URL == OVERRIDES["REDISCLOUD_URL"]
        assert settings.CACHE_REQUIRED is True
        assert settings.SECRET == "s3cr3t"
        assert settings.SESSION_TTL_SECONDS == 60
        assert settings.STATIC_ASSETS_PATH == "/srv/assets/"
        assert settings.VIEWS_PATH == "/srv/views"

    def test_explicit_static_path_wins_over_environment_default(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("STATIC_ASSETS_PATH", "client_dev/")
        assert load().STATIC_ASSETS_PATH == "client_dev/"

    def test_dotenv_file_is_read(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("PORT=4242\nSECRET=from-dotenv\n")
        settings = Settings(_env_file=env_file)
        assert settings.PORT == 4242
        assert settings.SECRET == "from-dotenv"

    def test_process_environment_beats_dotenv(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("PORT=4242\n")
        monkeypatch.setenv("PORT", "5000")
        assert Settings(_env_file=env_file).PORT == 5000


class TestValidation:
    """Bad values are rejected with the variable's name."""

    @pytest.mark.parametrize("port", ["0", "70000", "http"])
    def test_invalid_port(self, monkeypatch, port):
        monkeypatch.setenv("PORT", port)
        with pytest.raises(ValidationError) as exc_info:
            load()
        assert exc_info.value.errors()[0]["loc"] == ("PORT",)

    def test_unknown_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")
        with pytest.raises(ValidationError) as exc_info:
            load()
        assert exc_info.value.errors()[0]["loc"] == ("ENVIRONMENT",)

    def test_settings_are_frozen(self):
        settings = load()
        with pytest.raises(ValidationError):
            settings.PORT = 9999


class TestHelpers:

    def test_views_default_does_not_depend_on_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        views = load().VIEWS_PATH
        assert views == str(PROJECT_ROOT / "views")
        assert (PROJECT_ROOT / "views" / "index.html").is_file()

    def test_static_default_follows_environment_override(self):
        settings = Settings(_env_file=None, ENVIRONMENT="production")
        assert settings.STATIC_ASSETS_PATH == "client/"

    def test_favicon_path(self):
        settings = Settings(_env_file=None, STATIC_ASSETS_PATH="client/")
        assert settings.favicon_path == "client/img/favicon.png"

    def test_favicon_path_without_trailing_slash(self):
        settings = Settings(_env_file=None, STATIC_ASSETS_PATH="/srv/assets")
        assert settings.favicon_path == "/srv/assets/img/favicon.png"

    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.setenv("PORT", "4000")
        first = get_settings()
        monkeypatch.setenv("PORT", "5000")
        assert get_settings() is first
        assert first.PORT == 4000
